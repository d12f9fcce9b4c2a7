"""
Shared fixtures.

``FakeCaseRepository`` and ``FakePatientLookup`` keep unsaved model
instances in memory, so ``CaseService`` can be exercised without a database.
Reads hand out copies, like rows fetched from a real table.
"""
import copy
from datetime import timedelta

import pytest
from django.utils import timezone

from cases.exceptions import ConcurrentModification
from cases.models import Case
from patients.models import Patient


class FakeCaseRepository:

    def __init__(self):
        self.rows = {}
        self.transitions = []
        self._clock = timezone.now() - timedelta(days=1)

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock

    def find_by_id(self, case_id):
        row = self.rows.get(case_id)
        return copy.deepcopy(row) if row is not None else None

    def find_all(self, *, status=None, priority=None, patient_id=None, source=None):
        out = []
        for row in self.rows.values():
            if status and row.status != status:
                continue
            if priority and row.priority != priority:
                continue
            if patient_id and row.patient_id != patient_id:
                continue
            if source and row.source != source:
                continue
            out.append(copy.deepcopy(row))
        return out

    def create(self, **fields):
        case = Case(**fields)
        case.created_at = case.updated_at = self._tick()
        self.rows[case.id] = copy.deepcopy(case)
        return case

    def update(self, case, fields):
        stored = self.rows[case.id]
        if stored.version != case.version:
            raise ConcurrentModification("Case was modified concurrently; reload and retry")
        case.version += 1
        case.updated_at = self._tick()
        self.rows[case.id] = copy.deepcopy(case)
        return case

    def record_transition(self, case, from_status, to_status, extra=None):
        self.transitions.append((case.id, str(from_status), str(to_status)))


class FakePatientLookup:

    def __init__(self, *patients):
        self.patients = {p.id: p for p in patients}

    def get_by_id(self, patient_id):
        return self.patients.get(patient_id)


def make_patient(**overrides) -> Patient:
    fields = {
        "id": "pat_test0001",
        "full_name": "Asha Verma",
        "age": 42,
        "gender": "F",
        "phone": "9876543210",
        "district": "Pune",
        "state": "Maharashtra",
        "prakriti": "PITTA",
    }
    fields.update(overrides)
    return Patient(**fields)


@pytest.fixture
def patient():
    return make_patient()


@pytest.fixture
def case_repo():
    return FakeCaseRepository()


@pytest.fixture
def service(case_repo, patient):
    from cases.services.case_service import CaseService
    return CaseService(case_repo, FakePatientLookup(patient))


@pytest.fixture
def new_case(service, patient):
    """Factory: submit a case through the service and return its data."""
    def _make(chief_complaint="Mild stomach discomfort after meals", **extra):
        payload = {"patientId": patient.id, "chiefComplaint": chief_complaint, **extra}
        result = service.submit_case(payload)
        assert result.success, result.to_dict()
        return result.data
    return _make


@pytest.fixture
def db_patient(db):
    p = make_patient(id="pat_db000001")
    p.save()
    return p


@pytest.fixture
def doctor(db, django_user_model):
    return django_user_model.objects.create_user(
        email="doctor@example.com", password="pass12345", role="DOCTOR", first_name="Meera", last_name="Rao",
    )


@pytest.fixture
def intake_user(db, django_user_model):
    return django_user_model.objects.create_user(email="intake@example.com", password="pass12345", role="INTAKE")
