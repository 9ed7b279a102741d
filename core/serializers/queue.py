import bleach
from rest_framework import serializers

from core.models import QueueEntry, Visit
from core.serializers.patient import serialize_patient_summary

PRIORITIES = [p for p, _ in QueueEntry.PRIORITY_CHOICES]
VISIT_TYPES = [t for t, _ in Visit.VISIT_TYPE_CHOICES]


class AddToQueueSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(
        min_value=1, error_messages={'required': 'patientId is required', 'null': 'patientId is required'},
    )
    reason = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=500)
    priority = serializers.ChoiceField(
        choices=PRIORITIES, required=False, default='normal',
        error_messages={'invalid_choice': 'Invalid priority'},
    )
    visitType = serializers.ChoiceField(
        choices=VISIT_TYPES, required=False, default='examination',
        error_messages={'invalid_choice': 'Invalid visitType'},
    )

    def validate_reason(self, v):
        v = bleach.clean(v.strip(), tags=[], strip=True) if v else v
        return v or None


def serialize_queue_entry(entry: QueueEntry, *, with_patient: bool = False) -> dict:
    data = {
        'id': entry.id,
        'patientId': entry.patient_id,
        'visitId': entry.visit_id,
        'position': entry.position,
        'reason': entry.reason,
        'priority': entry.priority,
        'status': entry.status,
        'createdAt': entry.created_at.isoformat() if entry.created_at else None,
        'startedAt': entry.started_at.isoformat() if entry.started_at else None,
        'completedAt': entry.completed_at.isoformat() if entry.completed_at else None,
    }
    if with_patient:
        data['patient'] = serialize_patient_summary(entry.patient)
    return data
