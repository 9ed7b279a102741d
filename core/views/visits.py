from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.pagination import paginate
from core.serializers.visit import VisitUpdateSerializer, serialize_visit_detail, serialize_visit_row
from core.services import visits as visit_service

_FIELD_MAP = {
    'chiefComplaint': 'chief_complaint',
    'diagnosis': 'diagnosis',
    'notes': 'notes',
}


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def visits_list(request):
    return Response(paginate(visit_service.list_visits(), request.query_params, serialize_visit_row))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def visit_detail(request, pk: int):
    if request.method == 'GET':
        return Response(serialize_visit_detail(visit_service.get_visit_or_404(pk)))
    if request.method == 'PUT':
        s = VisitUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        fields = {model_field: vd[key] for key, model_field in _FIELD_MAP.items() if key in vd}
        visit = visit_service.update_visit(pk, status=vd.get('status'), **fields)
        return Response(serialize_visit_detail(visit))
    # DELETE
    visit_service.delete_visit(pk)
    return Response({'message': 'Visit deleted'})
