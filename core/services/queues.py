"""
Queue manager.

A queue entry moves ``waiting -> in_progress -> completed``; removing an
entry deletes it and cancels its visit.  Joining the queue opens a
``pending`` visit with an empty prescription in the same transaction,
and completing or removing the entry closes that visit again, so the
three records never disagree.

Service order is priority (urgent, high, normal) then position.
Positions are handed out as ``1 + max(position)`` over the active
entries only, so they restart at 1 whenever the queue drains.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Case, IntegerField, QuerySet, Value, When
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from core.exceptions import PersistenceError
from core.models import Patient, Prescription, QueueEntry, Visit
from core.services.notifications import QueueNotifier, get_queue_notifier

logger = logging.getLogger(__name__)

PRIORITY_RANK = {'normal': 0, 'high': 1, 'urgent': 2}


def _priority_rank() -> Case:
    return Case(
        *[When(priority=p, then=Value(rank)) for p, rank in PRIORITY_RANK.items()],
        default=Value(0),
        output_field=IntegerField(),
    )


def _next_position() -> int:
    """Next position in the active queue; must run inside a transaction."""
    positions = (
        QueueEntry.objects.select_for_update()
        .filter(status__in=QueueEntry.ACTIVE_STATUSES)
        .values_list('position', flat=True)
    )
    return max(positions, default=0) + 1


def _get_entry_for_update(entry_id: int) -> QueueEntry:
    entry = (
        QueueEntry.objects.select_for_update()
        .select_related('patient')
        .filter(pk=entry_id)
        .first()
    )
    if entry is None:
        raise NotFound('Queue entry not found')
    return entry


def _open_visit_for(entry: QueueEntry, statuses: Iterable[str]) -> Optional[Visit]:
    """Return the visit the entry belongs to if it is still in ``statuses``.

    Entries created by :func:`add_to_queue` carry their visit.  Entries
    without one (the visit was deleted, or the row predates the link)
    fall back to the patient's most recent visit in ``statuses``.
    """
    statuses = tuple(statuses)
    if entry.visit_id is not None:
        visit = Visit.objects.select_for_update().filter(pk=entry.visit_id).first()
        return visit if visit is not None and visit.status in statuses else None
    return (
        Visit.objects.select_for_update()
        .filter(patient_id=entry.patient_id, status__in=statuses)
        .order_by('-visit_date', '-id')
        .first()
    )


def _notify(notifier: QueueNotifier, **detail) -> None:
    try:
        notifier.queue_updated(**detail)
    except Exception:
        logger.warning('Queue notifier %r failed', notifier, exc_info=True)


def add_to_queue(
    *,
    patient_id: int,
    reason: Optional[str] = None,
    priority: str = 'normal',
    visit_type: str = 'examination',
    doctor_username: Optional[str] = None,
    notifier: Optional[QueueNotifier] = None,
) -> tuple[QueueEntry, Visit, Prescription]:
    """Put a patient in the queue with a pending visit and an empty prescription.

    The three rows are written in one transaction.  Listeners are told
    about the change only once it has committed.
    """
    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise NotFound('Patient not found')
    doctor_username = doctor_username or settings.CLINIC_DEFAULT_DOCTOR
    notifier = notifier or get_queue_notifier()

    try:
        with transaction.atomic():
            position = _next_position()
            entry = QueueEntry.objects.create(
                patient=patient,
                position=position,
                reason=reason or None,
                priority=priority,
                status='waiting',
            )
            visit = Visit.objects.create(
                patient=patient,
                doctor_username=doctor_username,
                status='pending',
                chief_complaint=reason or None,
                visit_type=visit_type,
            )
            entry.visit = visit
            entry.save(update_fields=['visit'])
            prescription = Prescription.objects.create(visit=visit, additional_notes=None)
            transaction.on_commit(
                lambda: _notify(notifier, action='added', queueId=entry.id, patientId=patient_id)
            )
    except DatabaseError as exc:
        logger.exception('add_to_queue failed for patient %s', patient_id)
        raise PersistenceError('Failed to add to queue') from exc

    logger.info(
        'Patient %s queued at position %s (%s), visit %s', patient_id, position, priority, visit.id
    )
    return entry, visit, prescription


def list_active_queue() -> QuerySet:
    return (
        QueueEntry.objects.filter(status__in=QueueEntry.ACTIVE_STATUSES)
        .select_related('patient')
        .annotate(priority_rank=_priority_rank())
        .order_by('-priority_rank', 'position')
    )


def start_entry(entry_id: int) -> QueueEntry:
    """Mark an entry as being served.  Repeating the call is harmless."""
    try:
        with transaction.atomic():
            entry = _get_entry_for_update(entry_id)
            if entry.status == 'completed':
                raise ValidationError('Queue entry is already completed')
            entry.status = 'in_progress'
            if entry.started_at is None:
                entry.started_at = timezone.now()
            entry.save(update_fields=['status', 'started_at'])
    except DatabaseError as exc:
        logger.exception('start_entry failed for queue entry %s', entry_id)
        raise PersistenceError('Failed to start queue entry') from exc
    logger.info('Queue entry %s in progress', entry_id)
    return entry


def complete_entry(entry_id: int) -> tuple[QueueEntry, Optional[Visit]]:
    """Complete an entry and its pending visit.

    A missing pending visit is not an error; the entry still completes
    and the visit comes back as ``None``.
    """
    try:
        with transaction.atomic():
            entry = _get_entry_for_update(entry_id)
            entry.status = 'completed'
            if entry.completed_at is None:
                entry.completed_at = timezone.now()
            entry.save(update_fields=['status', 'completed_at'])

            visit = _open_visit_for(entry, ('pending',))
            if visit is not None:
                visit.status = 'completed'
                visit.save(update_fields=['status'])
    except DatabaseError as exc:
        logger.exception('complete_entry failed for queue entry %s', entry_id)
        raise PersistenceError('Failed to complete queue and visit') from exc
    logger.info('Queue entry %s completed, visit %s', entry_id, visit.id if visit else None)
    return entry, visit


def remove_entry(entry_id: int) -> Optional[Visit]:
    """Take an entry out of the queue and cancel its open visit.

    The visit's prescriptions are deleted, the visit itself is kept as
    ``cancelled``.  Returns the cancelled visit, or ``None``.
    """
    try:
        with transaction.atomic():
            entry = _get_entry_for_update(entry_id)
            entry.delete()

            visit = _open_visit_for(entry, ('pending', 'in_progress'))
            if visit is not None:
                Prescription.objects.filter(visit=visit).delete()
                visit.status = 'cancelled'
                visit.save(update_fields=['status'])
    except DatabaseError as exc:
        logger.exception('remove_entry failed for queue entry %s', entry_id)
        raise PersistenceError('Failed to remove from queue') from exc
    logger.info('Queue entry %s removed, cancelled visit %s', entry_id, visit.id if visit else None)
    return visit
