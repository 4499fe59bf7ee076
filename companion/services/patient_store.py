"""
Durable storage for patient records.

Every public method runs in its own session and transaction; the
transaction commits when the method returns and rolls back on any error.
Records handed back are detached copies, safe to read after the call.

The store enforces only structural rules. Email uniqueness is a database
constraint, so it holds even when two writers race past the service's
pre-check. Business rules (duplicate-email messages, not-found on delete)
belong to :mod:`companion.services.patient_service`.
"""
import logging
import uuid
from contextlib import contextmanager
from datetime import timedelta
from typing import Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from companion.core.exceptions import ConstraintViolation, NotFound, StoreUnavailable
from companion.models.patient_model import Patient, utcnow

logger = logging.getLogger(__name__)

# columns a save may overwrite on an existing row
_MUTABLE_COLUMNS = ("name", "email", "hospital_name", "room_number")

_TICK = timedelta(microseconds=1)


class PatientStore:
    def __init__(self, session_factory: sessionmaker, clock: Callable = utcnow):
        self.session_factory = session_factory
        self.clock = clock

    @contextmanager
    def _transaction(self):
        try:
            with self.session_factory.begin() as s:
                yield s
        except IntegrityError as e:
            # driver text can echo bound values (emails); keep it on __cause__ only
            logger.warning("Write rejected by constraint (%s)", type(e.orig).__name__)
            raise ConstraintViolation("Write rejected by a storage constraint") from e
        except SQLAlchemyError as e:
            logger.error("Patient store operation failed (%s)", type(e).__name__)
            raise StoreUnavailable(f"Patient store operation failed ({type(e).__name__})") from e

    def save(self, record: Patient) -> Patient:
        """Insert when ``record.id`` is unset, otherwise update the stored row."""
        with self._transaction() as s:
            if record.id is None:
                saved = self._insert(s, record)
            else:
                saved = self._update(s, record)
            s.flush()
        return saved

    def _insert(self, s: Session, record: Patient) -> Patient:
        now = self.clock()
        row = Patient(
            id=uuid.uuid4(),
            created_at=now,
            updated_at=now,
            **{col: getattr(record, col) for col in _MUTABLE_COLUMNS},
        )
        s.add(row)
        logger.info("Inserting patient %s", row.id)
        return row

    def _update(self, s: Session, record: Patient) -> Patient:
        row = s.get(Patient, record.id)
        if row is None:
            # deleted since it was loaded; ids are never reissued
            raise NotFound("Patient", record.id)
        for col in _MUTABLE_COLUMNS:
            setattr(row, col, getattr(record, col))
        now = self.clock()
        if now <= row.updated_at:
            now = row.updated_at + _TICK
        row.updated_at = now
        logger.info("Updating patient %s", row.id)
        return row

    def find_by_id(self, patient_id) -> Optional[Patient]:
        logger.debug("Looking up patient %s", patient_id)
        with self._transaction() as s:
            return s.get(Patient, patient_id)

    def find_by_email(self, email: str) -> Optional[Patient]:
        with self._transaction() as s:
            return s.scalars(select(Patient).where(Patient.email == email)).first()

    def exists_by_email(self, email: str) -> bool:
        with self._transaction() as s:
            q = select(func.count(Patient.id)).where(Patient.email == email)
            return (s.scalar(q) or 0) > 0

    def exists_by_id(self, patient_id) -> bool:
        with self._transaction() as s:
            q = select(func.count(Patient.id)).where(Patient.id == patient_id)
            return (s.scalar(q) or 0) > 0

    def delete_by_id(self, patient_id) -> None:
        """Remove the row if present; absent ids are ignored."""
        with self._transaction() as s:
            row = s.get(Patient, patient_id)
            if row is not None:
                s.delete(row)
                logger.info("Deleted patient %s", patient_id)

    def find_all(self) -> List[Patient]:
        with self._transaction() as s:
            return list(s.scalars(select(Patient)).all())

    def count(self) -> int:
        with self._transaction() as s:
            return s.scalar(select(func.count(Patient.id))) or 0
