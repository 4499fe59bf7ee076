"""
Request and response shapes for patient records.

Structural validation runs here, before the store is ever touched:
``validate_create`` and ``validate_update`` turn raw input into checked
models or raise :class:`ValidationFailure` listing every bad field.
"""
from datetime import datetime
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from companion.core.exceptions import ValidationFailure


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class _PatientSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatientCreate(_PatientSchema):
    name: str
    email: EmailStr
    hospital_name: Optional[str] = None
    room_number: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v)

    @field_validator("email", mode="before")
    @classmethod
    def email_not_blank(cls, v):
        if isinstance(v, str):
            return _not_blank(v)
        return v

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v):
        return normalize_email(v)


class PatientUpdate(_PatientSchema):
    # email is deliberately absent; unknown keys are dropped
    name: Optional[str] = None
    hospital_name: Optional[str] = None
    room_number: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return _not_blank(v)

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return {field: getattr(self, field) for field in self.model_fields_set}


class PatientRead(_PatientSchema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    email: str
    hospital_name: Optional[str]
    room_number: Optional[str]
    created_at: datetime
    updated_at: datetime


Payload = Union[Mapping[str, Any], BaseModel]


def _as_dict(data: Payload) -> Mapping[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return data


def validate_create(data: Payload) -> PatientCreate:
    if isinstance(data, PatientCreate):
        return data
    try:
        return PatientCreate.model_validate(_as_dict(data))
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc


def validate_update(data: Payload) -> PatientUpdate:
    if isinstance(data, PatientUpdate):
        return data
    try:
        return PatientUpdate.model_validate(_as_dict(data))
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc
