"""
Management command to populate the database with demo data.
"""
from django.core.management.base import BaseCommand
import random
from core.models import Patient, QueueEntry
from core.services.notifications import NullQueueNotifier
from core.services.queues import add_to_queue


PATIENTS = [
    {'name': 'Mohamed Ali', 'gender': 'male', 'blood_type': 'A+', 'address': 'Nasr City, Cairo'},
    {'name': 'Fatma Ibrahim', 'gender': 'female', 'blood_type': 'O+', 'address': 'Heliopolis, Cairo'},
    {'name': 'Omar Khaled', 'gender': 'male', 'blood_type': 'B-', 'address': 'Dokki, Giza'},
    {'name': 'Mona Samir', 'gender': 'female', 'blood_type': 'AB+', 'address': 'Smouha, Alexandria'},
    {'name': 'Youssef Adel', 'gender': 'male', 'blood_type': 'O-', 'address': 'Maadi, Cairo'},
    {'name': 'Nour El-Din Hassan', 'gender': 'male', 'blood_type': 'A-', 'address': 'Mansoura'},
]

REASONS = ['Headache', 'Fever', 'Cough', 'Chest pain', 'Abdominal pain', 'Follow-up']


class Command(BaseCommand):
    help = 'Populate database with demo patients and queue some of them'

    def add_arguments(self, parser):
        parser.add_argument('--queue', type=int, default=3, help='How many patients to put in the queue')

    def handle(self, *args, **options):
        self.stdout.write('Creating demo data...')

        patients = self.create_patients()
        self.create_queue(patients[:options['queue']])

        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_patients(self):
        patients = []
        for i, data in enumerate(PATIENTS):
            phone = f'010{i:08d}'
            patient, created = Patient.objects.get_or_create(
                phone=phone,
                defaults={
                    **data,
                    'age': random.randint(18, 80),
                    'email': f"{data['name'].split()[0].lower()}{i}@example.com",
                },
            )
            patients.append(patient)
            self.stdout.write(f"{'Created' if created else 'Found'} patient: {patient.name}")
        return patients

    def create_queue(self, patients):
        queued = set(
            QueueEntry.objects.filter(status__in=QueueEntry.ACTIVE_STATUSES).values_list('patient_id', flat=True)
        )
        for patient in patients:
            if patient.id in queued:
                continue
            entry, visit, _ = add_to_queue(
                patient_id=patient.id,
                reason=random.choice(REASONS),
                priority=random.choice(['normal', 'normal', 'high', 'urgent']),
                notifier=NullQueueNotifier(),
            )
            self.stdout.write(f'Queued {patient.name} at position {entry.position} (visit {visit.id})')
