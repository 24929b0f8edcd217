# Patient Management Feature - Service

from typing import List
from medischedule.features.patients.models import Patient
from medischedule.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
)
from medischedule.core.logging import logger
from medischedule.shared.exceptions import NotFoundException
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


class PatientService:
    """Service class for patient management operations. Admins only."""
    
    @staticmethod
    async def create_patient(store: DocumentStore, actor: Actor, request: CreatePatientRequest) -> MutationResult:
        """Register a new patient."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can add patients")
        
        return await store.create("patients", {**request.model_dump(), "created_by": actor.id}, actor)
    
    @staticmethod
    async def list_patients(store: DocumentStore) -> List[Patient]:
        """Get all patients, most recently admitted first."""
        return await store.find("patients", sort=[("admitted_on", -1), ("name", 1)])
    
    @staticmethod
    async def get_patient(store: DocumentStore, patient_id: str) -> Patient:
        """Get a patient by id."""
        patient = await store.get("patients", patient_id)
        if not patient:
            raise NotFoundException("Patient not found")
        return patient
    
    @staticmethod
    async def update_patient(
        store: DocumentStore,
        actor: Actor,
        patient_id: str,
        request: UpdatePatientRequest
    ) -> MutationResult:
        """Update patient information with the fields provided."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can edit patients")
        
        update_dict = request.model_dump(exclude_unset=True)
        if not update_dict:
            return MutationResult.failure("validation", "No fields to update", id=patient_id)
        
        return await store.update("patients", patient_id, update_dict, actor)
    
    @staticmethod
    async def delete_patient(store: DocumentStore, actor: Actor, patient_id: str) -> MutationResult:
        """
        Delete a patient record.
        
        Operation schedules and surgery requests that reference the patient
        are left in place; views render them with a fallback name.
        """
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can delete patients")
        
        result = await store.delete("patients", patient_id, actor)
        if result.ok:
            logger.info(f"Patient {patient_id} deleted, dependent schedules kept")
        return result
    
    @staticmethod
    def patient_to_response(patient: Patient) -> PatientResponse:
        """Convert patient document to response schema."""
        return PatientResponse(
            id=patient.id,
            name=patient.name,
            age=patient.age,
            gender=patient.gender,
            contact=patient.contact,
            admitted_on=patient.admitted_on,
            case_description=patient.case_description,
            created_by=patient.created_by,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )
