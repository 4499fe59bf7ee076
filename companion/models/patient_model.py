# companion/models/patient_model.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Uuid

from companion.core.database import Base


def utcnow():
    # naive UTC so values compare equal before and after a round trip through SQLite
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    hospital_name = Column(String)
    room_number = Column(String)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Patient id={self.id} name={self.name!r}>"
