import bleach
from rest_framework import serializers

from core.models import Medication, Prescription


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    dosage = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    frequency = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    duration = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    instructions = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_instructions(self, v):
        return bleach.clean(v.strip(), tags=[], strip=True) if v else ''


class PrescriptionCreateSerializer(serializers.Serializer):
    visitId = serializers.IntegerField(min_value=1)
    additionalNotes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    medications = MedicationSerializer(many=True, required=False, default=list)

    def validate_additionalNotes(self, v):
        return bleach.clean(v.strip(), tags=[], strip=True) if v else v


class PrescriptionUpdateSerializer(serializers.Serializer):
    """PUT body; a provided ``medications`` list replaces the existing one."""
    additionalNotes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    medications = MedicationSerializer(many=True, required=False)

    def validate_additionalNotes(self, v):
        return bleach.clean(v.strip(), tags=[], strip=True) if v else v


def serialize_medication(med: Medication) -> dict:
    return {
        'id': med.id,
        'prescriptionId': med.prescription_id,
        'name': med.name,
        'dosage': med.dosage,
        'frequency': med.frequency,
        'duration': med.duration,
        'instructions': med.instructions,
    }


def serialize_prescription(prescription: Prescription, *, with_medications: bool = True) -> dict:
    data = {
        'id': prescription.id,
        'visitId': prescription.visit_id,
        'additionalNotes': prescription.additional_notes,
        'createdAt': prescription.created_at.isoformat() if prescription.created_at else None,
        'updatedAt': prescription.updated_at.isoformat() if prescription.updated_at else None,
    }
    if with_medications:
        data['medications'] = [serialize_medication(m) for m in prescription.medications.all()]
    return data
