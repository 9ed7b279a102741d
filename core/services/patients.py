import logging
from typing import Any, Optional

from django.db import DatabaseError, IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from core.exceptions import PersistenceError
from core.models import Patient

logger = logging.getLogger(__name__)

MIN_AGE = 0
MAX_AGE = 120


def parse_age(raw: Any) -> Optional[int]:
    """Accept an age given as a number or a numeric string.

    ``None``/empty means unknown.  Anything that is not a whole number
    between 0 and 120 raises a 400.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, bool):
        raise ValidationError('Invalid age value')
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError('Invalid age value')
        raw = int(raw)
    try:
        age = int(str(raw).strip())
    except ValueError:
        raise ValidationError('Invalid age value')
    if age < MIN_AGE or age > MAX_AGE:
        raise ValidationError('Invalid age value')
    return age


def _duplicate_national_id() -> ValidationError:
    # national_id is the only unique column a client can collide on
    return ValidationError({'nationalID': ['National ID already registered']})


def get_patient_or_404(patient_id: int, *, with_history: bool = False) -> Patient:
    qs = Patient.objects.all()
    if with_history:
        qs = qs.prefetch_related('visits', 'queues')
    patient = qs.filter(pk=patient_id).first()
    if patient is None:
        raise NotFound('Patient not found')
    return patient


def create_patient(**fields) -> Patient:
    try:
        with transaction.atomic():
            patient = Patient.objects.create(**fields)
    except IntegrityError:
        raise _duplicate_national_id()
    except DatabaseError as exc:
        logger.exception('create_patient failed')
        raise PersistenceError('Failed to create patient') from exc
    logger.info('Patient %s created', patient.id)
    return patient


def update_patient(patient_id: int, **fields) -> Patient:
    try:
        with transaction.atomic():
            patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
            if patient is None:
                raise NotFound('Patient not found')
            for field, value in fields.items():
                setattr(patient, field, value)
            if fields:
                patient.save(update_fields=list(fields))
    except IntegrityError:
        raise _duplicate_national_id()
    except DatabaseError as exc:
        logger.exception('update_patient failed for patient %s', patient_id)
        raise PersistenceError('Failed to update patient') from exc
    return patient


def delete_patient(patient_id: int) -> None:
    """Hard delete; visits, prescriptions and queue entries cascade."""
    patient = get_patient_or_404(patient_id)
    try:
        patient.delete()
    except DatabaseError as exc:
        logger.exception('delete_patient failed for patient %s', patient_id)
        raise PersistenceError('Failed to delete patient') from exc
    logger.info('Patient %s deleted', patient_id)
