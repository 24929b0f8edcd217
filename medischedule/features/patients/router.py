# Patient Management Feature - Router

from fastapi import APIRouter, Depends, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, require_roles
from medischedule.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
    PatientListResponse,
)
from medischedule.features.patients.service import PatientService
from medischedule.shared.exceptions import raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


router = APIRouter(prefix="/patients", tags=["Patients"])


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    request: CreatePatientRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Register a new patient.
    
    Requires admin role.
    """
    result = raise_for_result(await PatientService.create_patient(store, actor, request))
    patient = await PatientService.get_patient(store, result.id)
    return PatientService.patient_to_response(patient)


@router.get("", response_model=PatientListResponse)
async def list_patients(
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """
    List all patients.
    
    Doctors need the list to file surgery requests.
    """
    patients = await PatientService.list_patients(store)
    return PatientListResponse(
        patients=[PatientService.patient_to_response(p) for p in patients],
        total=len(patients)
    )


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get a specific patient."""
    patient = await PatientService.get_patient(store, patient_id)
    return PatientService.patient_to_response(patient)


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: str,
    request: UpdatePatientRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Update a patient's information.
    
    Requires admin role.
    """
    raise_for_result(await PatientService.update_patient(store, actor, patient_id, request))
    patient = await PatientService.get_patient(store, patient_id)
    return PatientService.patient_to_response(patient)


@router.delete("/{patient_id}", response_model=MutationResult)
async def delete_patient(
    patient_id: str,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Delete a patient.
    
    Schedules referencing the patient are not touched.
    """
    return raise_for_result(await PatientService.delete_patient(store, actor, patient_id))
