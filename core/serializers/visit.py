import bleach
from rest_framework import serializers

from core.models import Visit
from core.serializers.patient import serialize_patient
from core.serializers.prescription import serialize_prescription

VISIT_STATUSES = [s for s, _ in Visit.STATUS_CHOICES]


class VisitUpdateSerializer(serializers.Serializer):
    chiefComplaint = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    status = serializers.ChoiceField(choices=VISIT_STATUSES, required=False, allow_null=True, allow_blank=True)

    def _clean(self, v):
        return bleach.clean(v.strip(), tags=[], strip=True) if v else v

    validate_chiefComplaint = _clean
    validate_diagnosis = _clean
    validate_notes = _clean


def serialize_visit(visit: Visit) -> dict:
    return {
        'id': visit.id,
        'patientId': visit.patient_id,
        'doctorUsername': visit.doctor_username,
        'status': visit.status,
        'chiefComplaint': visit.chief_complaint,
        'diagnosis': visit.diagnosis,
        'notes': visit.notes,
        'visitType': visit.visit_type,
        'visitDate': visit.visit_date.isoformat() if visit.visit_date else None,
    }


def serialize_visit_row(visit: Visit) -> dict:
    """List row: the visit plus the patient's name and phone."""
    data = serialize_visit(visit)
    data['patient'] = {'name': visit.patient.name, 'phone': visit.patient.phone}
    return data


def serialize_visit_detail(visit: Visit) -> dict:
    data = serialize_visit(visit)
    data['patient'] = serialize_patient(visit.patient)
    data['prescriptions'] = [serialize_prescription(p) for p in visit.prescriptions.all()]
    return data
