"""
Queue views.

Thin HTTP layer over :mod:`core.services.queues`; every state change
(join, start, complete, remove) is carried out there so the queue
entry, visit and prescription stay consistent.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.serializers.prescription import serialize_prescription
from core.serializers.queue import AddToQueueSerializer, serialize_queue_entry
from core.serializers.visit import serialize_visit
from core.services import queues as queue_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def queues_list(request):
    if request.method == 'GET':
        return Response([serialize_queue_entry(e, with_patient=True) for e in queue_service.list_active_queue()])
    # POST
    s = AddToQueueSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    entry, visit, prescription = queue_service.add_to_queue(
        patient_id=vd['patientId'],
        reason=vd.get('reason'),
        priority=vd['priority'],
        visit_type=vd['visitType'],
    )
    return Response(
        {
            'message': 'Patient added to queue, visit and empty prescription created',
            'queue': serialize_queue_entry(entry),
            'visit': serialize_visit(visit),
            'prescription': serialize_prescription(prescription, with_medications=False),
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def queue_start(request, pk: int):
    entry = queue_service.start_entry(pk)
    return Response(serialize_queue_entry(entry))


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def queue_complete(request, pk: int):
    entry, visit = queue_service.complete_entry(pk)
    return Response({
        'message': 'Queue and visit completed successfully',
        'queue': serialize_queue_entry(entry),
        'visit': serialize_visit(visit) if visit else None,
    })


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def queue_remove(request, pk: int):
    visit = queue_service.remove_entry(pk)
    return Response({
        'message': 'Patient removed from queue, prescription deleted, and visit cancelled',
        'cancelledVisit': serialize_visit(visit) if visit else None,
    })
