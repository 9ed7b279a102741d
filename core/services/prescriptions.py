import logging
from typing import Optional

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from core.exceptions import PersistenceError
from core.models import Medication, Prescription, Visit

logger = logging.getLogger(__name__)

_MEDICATION_FIELDS = ('name', 'dosage', 'frequency', 'duration', 'instructions')


def _add_medications(prescription: Prescription, medications: list[dict]) -> None:
    Medication.objects.bulk_create([
        Medication(prescription=prescription, **{k: m.get(k, '') for k in _MEDICATION_FIELDS})
        for m in medications
    ])


def list_prescriptions() -> QuerySet:
    return Prescription.objects.prefetch_related('medications').order_by('-created_at', '-id')


def get_prescription_or_404(prescription_id: int) -> Prescription:
    prescription = (
        Prescription.objects.prefetch_related('medications').filter(pk=prescription_id).first()
    )
    if prescription is None:
        raise NotFound('Prescription not found')
    return prescription


def create_prescription(
    *, visit_id: int, additional_notes: Optional[str] = None, medications: Optional[list[dict]] = None
) -> Prescription:
    if not Visit.objects.filter(pk=visit_id).exists():
        raise NotFound('Visit not found')
    try:
        with transaction.atomic():
            prescription = Prescription.objects.create(visit_id=visit_id, additional_notes=additional_notes)
            _add_medications(prescription, medications or [])
    except DatabaseError as exc:
        logger.exception('create_prescription failed for visit %s', visit_id)
        raise PersistenceError('Failed to create prescription') from exc
    logger.info('Prescription %s created for visit %s', prescription.id, visit_id)
    return get_prescription_or_404(prescription.id)


def update_prescription(prescription_id: int, **changes) -> Prescription:
    """Apply ``additional_notes`` and/or replace the ``medications`` list."""
    try:
        with transaction.atomic():
            prescription = Prescription.objects.select_for_update().filter(pk=prescription_id).first()
            if prescription is None:
                raise NotFound('Prescription not found')
            if 'additional_notes' in changes:
                prescription.additional_notes = changes['additional_notes']
            # bumps updated_at even when only the medications change
            prescription.save()
            if changes.get('medications') is not None:
                prescription.medications.all().delete()
                _add_medications(prescription, changes['medications'])
    except DatabaseError as exc:
        logger.exception('update_prescription failed for prescription %s', prescription_id)
        raise PersistenceError('Failed to update prescription') from exc
    return get_prescription_or_404(prescription_id)


def delete_prescription(prescription_id: int) -> None:
    prescription = Prescription.objects.filter(pk=prescription_id).first()
    if prescription is None:
        raise NotFound('Prescription not found')
    try:
        prescription.delete()
    except DatabaseError as exc:
        logger.exception('delete_prescription failed for prescription %s', prescription_id)
        raise PersistenceError('Failed to delete prescription') from exc
    logger.info('Prescription %s deleted', prescription_id)
