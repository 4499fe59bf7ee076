from datetime import datetime, timedelta

import pytest

from companion.core.database import init_db, make_engine, make_session_factory
from companion.services.patient_service import PatientService
from companion.services.patient_store import PatientStore


class FakeClock:
    def __init__(self, start=datetime(2025, 12, 26, 1, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds=1):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def engine(tmp_path):
    # file-backed so separate sessions really run separate transactions
    eng = make_engine(f"sqlite:///{tmp_path / 'patients.db'}", echo=False)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(session_factory, clock):
    return PatientStore(session_factory, clock=clock)


@pytest.fixture
def service(store):
    return PatientService(store)


def _record_fields(patient):
    return {
        "id": patient.id,
        "name": patient.name,
        "email": patient.email,
        "hospital_name": patient.hospital_name,
        "room_number": patient.room_number,
        "created_at": patient.created_at,
        "updated_at": patient.updated_at,
    }


@pytest.fixture
def record_fields():
    return _record_fields
