"""
Visit and prescription endpoints, including the doctor-only writes on
prescriptions.
"""
import pytest
from rest_framework.test import APIClient

from core.models import Medication, Patient, Prescription, QueueEntry, User, Visit

pytestmark = pytest.mark.django_db


def _client_for(role):
    c = APIClient()
    user = User.objects.create_user(username=f'{role}1', password='pass12345', role=role)
    c.force_authenticate(user)
    return c


@pytest.fixture
def doctor():
    return _client_for('doctor')


@pytest.fixture
def receptionist():
    return _client_for('receptionist')


@pytest.fixture
def patient():
    return Patient.objects.create(name='Mohamed Ali', phone='01000000001', age=40)


@pytest.fixture
def visit(patient):
    return Visit.objects.create(patient=patient, doctor_username='Dr. Ahmed Hassan', chief_complaint='Fever')


MEDICATIONS = [
    {'name': 'Paracetamol', 'dosage': '500mg', 'frequency': '3x daily', 'duration': '5 days',
     'instructions': 'After meals'},
    {'name': 'Vitamin C'},
]


# -- visits ----------------------------------------------------------------

def test_visit_list_is_paginated_with_patient_contact(receptionist, patient):
    for _ in range(3):
        Visit.objects.create(patient=patient, doctor_username='Dr. Ahmed Hassan')
    r = receptionist.get('/visits', {'limit': 20})
    assert r.status_code == 200
    assert r.data['pagination']['total'] == 3
    assert r.data['pagination']['limit'] == 20
    row = r.data['data'][0]
    assert row['patient'] == {'name': 'Mohamed Ali', 'phone': '01000000001'}
    assert [v['id'] for v in r.data['data']] == sorted((v['id'] for v in r.data['data']), reverse=True)


def test_visit_detail_includes_patient_and_prescriptions(receptionist, visit):
    prescription = Prescription.objects.create(visit=visit, additional_notes='Rest')
    Medication.objects.create(prescription=prescription, name='Paracetamol', dosage='500mg')

    r = receptionist.get(f'/visits/{visit.id}')
    assert r.status_code == 200
    assert r.data['patient']['name'] == 'Mohamed Ali'
    assert r.data['chiefComplaint'] == 'Fever'
    assert len(r.data['prescriptions']) == 1
    assert r.data['prescriptions'][0]['additionalNotes'] == 'Rest'
    assert r.data['prescriptions'][0]['medications'][0]['name'] == 'Paracetamol'


def test_visit_missing_is_404(receptionist):
    r = receptionist.get('/visits/999')
    assert r.status_code == 404
    assert r.data == {'error': 'Visit not found'}


def test_visit_update_defaults_status_to_completed(doctor, visit):
    r = doctor.put(f'/visits/{visit.id}', {'diagnosis': 'Influenza', 'notes': 'Fluids'}, format='json')
    assert r.status_code == 200
    assert r.data['status'] == 'completed'
    assert r.data['diagnosis'] == 'Influenza'
    assert r.data['notes'] == 'Fluids'
    # fields not sent are left alone
    assert r.data['chiefComplaint'] == 'Fever'


def test_visit_update_with_explicit_status(doctor, visit):
    r = doctor.put(f'/visits/{visit.id}', {'status': 'in_progress'}, format='json')
    assert r.status_code == 200
    visit.refresh_from_db()
    assert visit.status == 'in_progress'


def test_visit_update_rejects_unknown_status(doctor, visit):
    r = doctor.put(f'/visits/{visit.id}', {'status': 'archived'}, format='json')
    assert r.status_code == 400
    visit.refresh_from_db()
    assert visit.status == 'pending'


def test_visit_update_missing_is_404(doctor):
    r = doctor.put('/visits/999', {'diagnosis': 'x'}, format='json')
    assert r.status_code == 404


def test_visit_delete_leaves_queue_entry_in_place(doctor, patient):
    created = doctor.post('/queues', {'patientId': patient.id}, format='json').data
    r = doctor.delete(f"/visits/{created['visit']['id']}")
    assert r.status_code == 200
    assert not Visit.objects.exists()
    entry = QueueEntry.objects.get()
    assert entry.status == 'waiting'
    assert entry.visit_id is None


# -- prescriptions ---------------------------------------------------------

def test_doctor_creates_prescription_with_medications(doctor, visit):
    r = doctor.post('/prescriptions', {
        'visitId': visit.id, 'additionalNotes': 'Drink water', 'medications': MEDICATIONS,
    }, format='json')
    assert r.status_code == 201
    assert r.data['visitId'] == visit.id
    assert r.data['additionalNotes'] == 'Drink water'
    assert [m['name'] for m in r.data['medications']] == ['Paracetamol', 'Vitamin C']
    assert r.data['medications'][1]['dosage'] == ''
    assert Medication.objects.count() == 2


def test_prescription_for_missing_visit_is_404(doctor):
    r = doctor.post('/prescriptions', {'visitId': 999, 'medications': []}, format='json')
    assert r.status_code == 404
    assert r.data == {'error': 'Visit not found'}
    assert not Prescription.objects.exists()


def test_prescription_medication_needs_name(doctor, visit):
    r = doctor.post('/prescriptions', {'visitId': visit.id, 'medications': [{'dosage': '1g'}]}, format='json')
    assert r.status_code == 400
    assert not Prescription.objects.exists()


def test_receptionist_cannot_write_prescriptions(receptionist, visit):
    prescription = Prescription.objects.create(visit=visit)

    r = receptionist.post('/prescriptions', {'visitId': visit.id}, format='json')
    assert r.status_code == 403
    assert 'error' in r.data
    assert receptionist.put(f'/prescriptions/{prescription.id}', {'additionalNotes': 'x'}, format='json').status_code == 403
    assert receptionist.delete(f'/prescriptions/{prescription.id}').status_code == 403
    assert Prescription.objects.count() == 1


def test_admin_can_write_prescriptions(visit):
    admin = _client_for('admin')
    r = admin.post('/prescriptions', {'visitId': visit.id}, format='json')
    assert r.status_code == 201


def test_receptionist_can_read_prescriptions(receptionist, visit):
    prescription = Prescription.objects.create(visit=visit)
    Medication.objects.create(prescription=prescription, name='Ibuprofen')

    r = receptionist.get('/prescriptions')
    assert r.status_code == 200
    assert r.data['pagination']['total'] == 1
    assert r.data['data'][0]['medications'][0]['name'] == 'Ibuprofen'

    r = receptionist.get(f'/prescriptions/{prescription.id}')
    assert r.status_code == 200
    assert r.data['id'] == prescription.id


def test_prescriptions_require_authentication(visit):
    r = APIClient().get('/prescriptions')
    assert r.status_code == 401


def test_prescription_missing_is_404(doctor):
    r = doctor.get('/prescriptions/999')
    assert r.status_code == 404
    assert r.data == {'error': 'Prescription not found'}


def test_update_replaces_medications(doctor, visit):
    created = doctor.post('/prescriptions', {'visitId': visit.id, 'medications': MEDICATIONS}, format='json').data

    r = doctor.put(f"/prescriptions/{created['id']}", {
        'medications': [{'name': 'Amoxicillin', 'dosage': '1g'}],
    }, format='json')
    assert r.status_code == 200
    assert [m['name'] for m in r.data['medications']] == ['Amoxicillin']
    assert Medication.objects.count() == 1


def test_update_notes_only_keeps_medications(doctor, visit):
    created = doctor.post('/prescriptions', {'visitId': visit.id, 'medications': MEDICATIONS}, format='json').data

    r = doctor.put(f"/prescriptions/{created['id']}", {'additionalNotes': 'Review in a week'}, format='json')
    assert r.status_code == 200
    assert r.data['additionalNotes'] == 'Review in a week'
    assert len(r.data['medications']) == 2


def test_delete_prescription_removes_medications(doctor, visit):
    created = doctor.post('/prescriptions', {'visitId': visit.id, 'medications': MEDICATIONS}, format='json').data

    r = doctor.delete(f"/prescriptions/{created['id']}")
    assert r.status_code == 200
    assert r.data == {'message': 'Prescription deleted'}
    assert not Prescription.objects.exists()
    assert not Medication.objects.exists()
    assert doctor.delete(f"/prescriptions/{created['id']}").status_code == 404
