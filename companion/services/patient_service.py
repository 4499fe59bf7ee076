"""
Patient lifecycle: registration, lookup, partial update and removal.

This is the only layer that knows the business rules. It holds no state
of its own beyond a reference to the store, so one instance can serve any
number of concurrent requests.
"""
import logging
import uuid
from typing import List

from companion.core.exceptions import ConstraintViolation, DuplicateEmail, NotFound
from companion.models.patient_model import Patient
from companion.schemas.patient import Payload, normalize_email, validate_create, validate_update
from companion.services.patient_store import PatientStore

logger = logging.getLogger(__name__)


def _as_uuid(patient_id):
    if isinstance(patient_id, uuid.UUID):
        return patient_id
    try:
        return uuid.UUID(str(patient_id))
    except ValueError:
        return None


class PatientService:
    def __init__(self, store: PatientStore):
        self.store = store

    def create(self, data: Payload) -> Patient:
        """
        Register a new patient.

        The ``exists_by_email`` check only gives a friendly error in the
        common case. Two concurrent registrations can both pass it; the
        store's unique constraint then rejects the second insert, which is
        reported the same way.
        """
        payload = validate_create(data)
        if self.store.exists_by_email(payload.email):
            raise DuplicateEmail(payload.email)

        record = Patient(
            name=payload.name,
            email=payload.email,
            hospital_name=payload.hospital_name,
            room_number=payload.room_number,
        )
        try:
            created = self.store.save(record)
        except ConstraintViolation as e:
            raise DuplicateEmail(payload.email) from e
        logger.info("Registered patient %s", created.id)
        return created

    def get_by_id(self, patient_id) -> Patient:
        key = _as_uuid(patient_id)
        patient = self.store.find_by_id(key) if key is not None else None
        if patient is None:
            raise NotFound("Patient", patient_id)
        return patient

    def get_by_email(self, email: str) -> Patient:
        if not isinstance(email, str):
            raise NotFound("Patient", email)
        patient = self.store.find_by_email(normalize_email(email))
        if patient is None:
            raise NotFound("Patient", email)
        return patient

    def list_all(self) -> List[Patient]:
        # store order; callers needing a stable order must sort
        return self.store.find_all()

    def update(self, patient_id, data: Payload) -> Patient:
        """Overwrite the fields present in ``data``; email never changes."""
        changes = validate_update(data).changes()
        patient = self.get_by_id(patient_id)
        for field, value in changes.items():
            setattr(patient, field, value)
        updated = self.store.save(patient)
        logger.info("Updated patient %s (%s)", updated.id, ", ".join(sorted(changes)) or "no fields")
        return updated

    def delete(self, patient_id) -> None:
        # not atomic with the delete itself; a concurrent delete just makes this a no-op
        key = _as_uuid(patient_id)
        if key is None or not self.store.exists_by_id(key):
            raise NotFound("Patient", patient_id)
        self.store.delete_by_id(key)
