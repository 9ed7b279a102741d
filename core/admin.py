"""
Django admin registrations for the core models.

Lets superusers inspect patients, the queue and clinical records via
``/admin/``, mostly useful for checking what the queue operations
wrote.
"""

from django.contrib import admin

from .models import (
    User,
    Patient,
    QueueEntry,
    Visit,
    Prescription,
    Medication,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'age', 'gender', 'phone', 'national_id', 'created_at')
    list_filter = ('blood_type',)
    search_fields = ('name', 'phone', 'national_id')


@admin.register(QueueEntry)
class QueueEntryAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'position', 'priority', 'status', 'visit', 'created_at')
    list_filter = ('status', 'priority')
    search_fields = ('id', 'patient__name', 'patient__phone')


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor_username', 'status', 'visit_type', 'visit_date')
    list_filter = ('status', 'visit_type')
    search_fields = ('id', 'patient__name', 'doctor_username')


class MedicationInline(admin.TabularInline):
    model = Medication
    extra = 0


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'visit', 'created_at', 'updated_at')
    search_fields = ('id', 'visit__patient__name')
    inlines = [MedicationInline]
