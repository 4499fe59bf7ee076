from typing import List

from fastapi import APIRouter, Body, Depends, Response, status

from companion.core.database import SessionLocal
from companion.schemas.patient import PatientRead
from companion.services.patient_service import PatientService
from companion.services.patient_store import PatientStore

router = APIRouter()


def get_patient_service() -> PatientService:
    return PatientService(PatientStore(SessionLocal))


@router.post("/", response_model=PatientRead, status_code=status.HTTP_201_CREATED)
def create_patient(payload: dict = Body(...), service: PatientService = Depends(get_patient_service)):
    return service.create(payload)


@router.get("/", response_model=List[PatientRead])
def list_patients(service: PatientService = Depends(get_patient_service)):
    return service.list_all()


@router.get("/by-email/{email}", response_model=PatientRead)
def get_patient_by_email(email: str, service: PatientService = Depends(get_patient_service)):
    return service.get_by_email(email)


@router.get("/{patient_id}", response_model=PatientRead)
def get_patient(patient_id: str, service: PatientService = Depends(get_patient_service)):
    return service.get_by_id(patient_id)


@router.put("/{patient_id}", response_model=PatientRead)
def update_patient(
    patient_id: str,
    payload: dict = Body(...),
    service: PatientService = Depends(get_patient_service),
):
    # partial: only the keys present in the body are applied
    return service.update(patient_id, payload)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(patient_id: str, service: PatientService = Depends(get_patient_service)):
    service.delete(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
