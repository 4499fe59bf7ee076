"""
Error kinds raised by the patient core.

``ValidationFailure``, ``DuplicateEmail`` and ``NotFound`` are final:
retrying the same call yields the same answer. ``StoreUnavailable`` is an
infrastructure failure the caller may retry.
"""
from dataclasses import dataclass
from typing import List


class CompanionError(Exception):
    pass


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


class ValidationFailure(CompanionError):
    def __init__(self, violations: List[FieldViolation]):
        self.violations = list(violations)
        detail = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        super().__init__(f"Invalid patient data ({detail})")

    @classmethod
    def from_pydantic(cls, exc):
        violations = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "__root__"
            violations.append(FieldViolation(field=field, message=err["msg"]))
        return cls(violations)


class DuplicateEmail(CompanionError):
    def __init__(self, email: str):
        self.email = email
        super().__init__("Patient with email already exists")


class NotFound(CompanionError):
    def __init__(self, resource: str, key):
        self.resource = resource
        self.key = key
        super().__init__(f"{resource} not found")


class ConstraintViolation(CompanionError):
    """The store rejected a write on a uniqueness or not-null constraint."""


class StoreUnavailable(CompanionError):
    """The store could not complete the operation; safe to retry."""
