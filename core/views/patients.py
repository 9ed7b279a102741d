"""
Patient record views.

``POST``/``GET /patients`` and ``GET``/``PUT``/``DELETE /patients/<id>``.
Any authenticated staff member may manage patients.  The age field is
checked before the serializer runs so that a bad age is reported as
``Invalid age value`` even when other fields are also wrong.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import Patient
from core.pagination import paginate
from core.serializers.patient import PatientCreateSerializer, serialize_patient
from core.serializers.queue import serialize_queue_entry
from core.serializers.visit import serialize_visit
from core.services import patients as patient_service


def _fields_from(request, *, partial: bool) -> dict:
    fields = {}
    if not partial or 'age' in request.data:
        fields['age'] = patient_service.parse_age(request.data.get('age'))
    s = PatientCreateSerializer(data=request.data, partial=partial)
    s.is_valid(raise_exception=True)
    fields.update(s.validated_data)
    return fields


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients_list(request):
    if request.method == 'GET':
        qs = Patient.objects.order_by('-created_at', '-id')
        return Response(paginate(qs, request.query_params, serialize_patient))
    # POST
    patient = patient_service.create_patient(**_fields_from(request, partial=False))
    return Response(serialize_patient(patient), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    if request.method == 'GET':
        patient = patient_service.get_patient_or_404(pk, with_history=True)
        data = serialize_patient(patient)
        data['visits'] = [
            serialize_visit(v) for v in sorted(patient.visits.all(), key=lambda v: (v.visit_date, v.id), reverse=True)
        ]
        data['queues'] = [
            serialize_queue_entry(q) for q in sorted(patient.queues.all(), key=lambda q: (q.created_at, q.id), reverse=True)
        ]
        return Response(data)
    if request.method == 'PUT':
        patient = patient_service.update_patient(pk, **_fields_from(request, partial=True))
        return Response(serialize_patient(patient))
    # DELETE
    patient_service.delete_patient(pk)
    return Response({'message': 'Patient deleted'})
