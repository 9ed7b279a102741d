"""
Database models for the clinic backend.

These models capture the clinic's working data: staff users, patients,
the visit queue, clinical visits and prescriptions with their
medication lines.  Field names follow Django conventions; the JSON
layer exposes them in camelCase (see ``core.serializers``).
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Staff account with a clinic role.

    Roles: 'admin', 'doctor' and 'receptionist'.  Only doctors and
    administrators may write prescriptions.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('doctor', 'Doctor'),
        ('receptionist', 'Receptionist'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='receptionist')

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Patient(models.Model):
    """Identity and demographic record of a clinic patient."""
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]
    BLOOD_TYPE_CHOICES = [
        (bt, bt) for bt in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')
    ]
    name = models.CharField(max_length=100)
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    # Stored as submitted; the API accepts any casing of GENDER_CHOICES
    gender = models.CharField(max_length=10, null=True, blank=True)
    # Egyptian mobile number, 01xxxxxxxxx
    phone = models.CharField(max_length=11, db_index=True)
    address = models.CharField(max_length=200, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, null=True, blank=True)
    national_id = models.CharField(max_length=14, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.phone})"


class Visit(models.Model):
    """A clinical encounter between the doctor and a patient.

    Visits are normally opened in ``pending`` state when the patient joins
    the queue and closed by the queue: ``completed`` when the entry is
    served, ``cancelled`` when it is removed before service.
    """
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_progress', 'In progress'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]
    VISIT_TYPE_CHOICES = [
        ('consultation', 'Consultation'),
        ('examination', 'Examination'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='visits')
    doctor_username = models.CharField(max_length=150)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    chief_complaint = models.TextField(null=True, blank=True)
    diagnosis = models.TextField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    visit_type = models.CharField(max_length=20, choices=VISIT_TYPE_CHOICES, default='examination')
    visit_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            # "latest pending visit of this patient" lookups
            models.Index(fields=['patient', 'status', 'visit_date'], name='visit_patient_status_date_idx'),
        ]

    def __str__(self) -> str:
        return f"Visit #{self.pk} of {self.patient_id} ({self.status})"


class QueueEntry(models.Model):
    """A patient's place in the clinic's waiting list."""
    STATUS_CHOICES = [
        ('waiting', 'Waiting'),
        ('in_progress', 'In progress'),
        ('completed', 'Completed'),
    ]
    PRIORITY_CHOICES = [
        ('normal', 'Normal'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]
    ACTIVE_STATUSES = ('waiting', 'in_progress')

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='queues')
    # Visit opened together with this entry; null for entries whose visit was deleted
    visit = models.ForeignKey(
        Visit, null=True, blank=True, on_delete=models.SET_NULL, related_name='queue_entries'
    )
    position = models.PositiveIntegerField()
    reason = models.TextField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal', db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='waiting', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = 'queue entries'

    def __str__(self) -> str:
        return f"#{self.position} {self.patient_id} ({self.status}, {self.priority})"


class Prescription(models.Model):
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name='prescriptions')
    additional_notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Prescription #{self.pk} for visit {self.visit_id}"


class Medication(models.Model):
    """One line item of a prescription."""
    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='medications')
    name = models.CharField(max_length=200)
    dosage = models.CharField(max_length=100, blank=True)
    frequency = models.CharField(max_length=100, blank=True)
    duration = models.CharField(max_length=100, blank=True)
    instructions = models.TextField(blank=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.name} {self.dosage}".strip()
