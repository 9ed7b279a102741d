import logging
from typing import Optional

from django.db import DatabaseError, transaction
from django.db.models import Prefetch, QuerySet
from rest_framework.exceptions import NotFound

from core.exceptions import PersistenceError
from core.models import Prescription, Visit

logger = logging.getLogger(__name__)


def list_visits() -> QuerySet:
    return Visit.objects.select_related('patient').order_by('-visit_date', '-id')


def get_visit_or_404(visit_id: int) -> Visit:
    visit = (
        Visit.objects.select_related('patient')
        .prefetch_related(
            Prefetch('prescriptions', queryset=Prescription.objects.prefetch_related('medications').order_by('id'))
        )
        .filter(pk=visit_id)
        .first()
    )
    if visit is None:
        raise NotFound('Visit not found')
    return visit


def update_visit(
    visit_id: int,
    *,
    status: Optional[str] = None,
    **fields,
) -> Visit:
    """Update the clinical fields of a visit.

    Only the fields passed in are touched, except ``status``: when the
    caller leaves it out the visit is closed as ``completed``.
    """
    try:
        with transaction.atomic():
            visit = Visit.objects.select_for_update().filter(pk=visit_id).first()
            if visit is None:
                raise NotFound('Visit not found')
            for field, value in fields.items():
                setattr(visit, field, value)
            visit.status = status or 'completed'
            visit.save(update_fields=[*fields, 'status'])
    except DatabaseError as exc:
        logger.exception('update_visit failed for visit %s', visit_id)
        raise PersistenceError('Failed to update visit') from exc
    return get_visit_or_404(visit_id)


def delete_visit(visit_id: int) -> None:
    """Hard delete.  Queue entries pointing at the visit keep their state."""
    visit = Visit.objects.filter(pk=visit_id).first()
    if visit is None:
        raise NotFound('Visit not found')
    try:
        visit.delete()
    except DatabaseError as exc:
        logger.exception('delete_visit failed for visit %s', visit_id)
        raise PersistenceError('Failed to delete visit') from exc
    logger.info('Visit %s deleted', visit_id)
