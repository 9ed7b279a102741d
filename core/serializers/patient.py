import bleach
from rest_framework import serializers

from core.models import Patient

GENDERS = {g for g, _ in Patient.GENDER_CHOICES}
BLOOD_TYPES = [bt for bt, _ in Patient.BLOOD_TYPE_CHOICES]


class PatientCreateSerializer(serializers.Serializer):
    """Patient body for POST /patients; PUT uses it with ``partial=True``.

    ``age`` is not part of the schema, it is parsed separately by
    :func:`core.services.patients.parse_age` so that string input is
    accepted as well.
    """
    name = serializers.CharField(
        min_length=3, max_length=100,
        error_messages={
            'min_length': 'Name must be at least 3 characters',
            'required': 'Name is required',
        },
    )
    gender = serializers.CharField(required=False, allow_null=True, max_length=10)
    phone = serializers.RegexField(
        r'^01[0-9]{9}$',
        error_messages={
            'invalid': 'Phone must be a valid Egyptian mobile number (01xxxxxxxxx)',
            'required': 'Phone is required',
        },
    )
    address = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=200)
    email = serializers.EmailField(required=False, allow_null=True)
    bloodType = serializers.ChoiceField(choices=BLOOD_TYPES, required=False, allow_null=True, source='blood_type')
    nationalID = serializers.RegexField(
        r'^[0-9]{14}$', required=False, allow_null=True, source='national_id',
        error_messages={'invalid': 'National ID must be a 14-digit number'},
    )

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), tags=[], strip=True)
        if len(v) < 3:
            raise serializers.ValidationError('Name must be at least 3 characters')
        return v

    def validate_gender(self, v):
        if v is None:
            return v
        if v.lower() not in GENDERS:
            raise serializers.ValidationError('Gender must be male, female or other')
        return v

    def validate_address(self, v):
        return bleach.clean(v.strip(), tags=[], strip=True) if v else v


def serialize_patient(patient: Patient) -> dict:
    return {
        'id': patient.id,
        'name': patient.name,
        'age': patient.age,
        'gender': patient.gender,
        'phone': patient.phone,
        'address': patient.address,
        'email': patient.email,
        'bloodType': patient.blood_type,
        'nationalID': patient.national_id,
        'createdAt': patient.created_at.isoformat() if patient.created_at else None,
    }


def serialize_patient_summary(patient: Patient) -> dict:
    """Compact patient block embedded in queue listings."""
    return {
        'id': patient.id,
        'name': patient.name,
        'phone': patient.phone,
        'age': patient.age,
        'gender': patient.gender,
        'nationalID': patient.national_id,
    }
