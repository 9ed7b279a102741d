"""
Prescription views.

Reads are open to any authenticated staff member; writing a
prescription requires a doctor (or admin) account.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.pagination import paginate
from core.permissions import IsDoctorOrAdmin
from core.serializers.prescription import (
    PrescriptionCreateSerializer,
    PrescriptionUpdateSerializer,
    serialize_prescription,
)
from core.services import prescriptions as prescription_service


@api_view(['GET', 'POST'])
@permission_classes([IsDoctorOrAdmin])
def prescriptions_list(request):
    if request.method == 'GET':
        qs = prescription_service.list_prescriptions()
        return Response(paginate(qs, request.query_params, serialize_prescription))
    # POST
    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    prescription = prescription_service.create_prescription(
        visit_id=vd['visitId'],
        additional_notes=vd.get('additionalNotes'),
        medications=vd.get('medications'),
    )
    return Response(serialize_prescription(prescription), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsDoctorOrAdmin])
def prescription_detail(request, pk: int):
    if request.method == 'GET':
        return Response(serialize_prescription(prescription_service.get_prescription_or_404(pk)))
    if request.method == 'PUT':
        s = PrescriptionUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        changes = {}
        if 'additionalNotes' in vd:
            changes['additional_notes'] = vd['additionalNotes']
        if 'medications' in vd:
            changes['medications'] = vd['medications']
        prescription = prescription_service.update_prescription(pk, **changes)
        return Response(serialize_prescription(prescription))
    # DELETE
    prescription_service.delete_prescription(pk)
    return Response({'message': 'Prescription deleted'})
