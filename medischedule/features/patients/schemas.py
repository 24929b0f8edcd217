# Patient Management Feature - Schemas

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field
from medischedule.features.patients.models import ISO_DATE_PATTERN


# ============== Create Patient ==============

class CreatePatientRequest(BaseModel):
    """Request schema for creating a new patient."""
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=0, le=150)
    gender: Literal["Male", "Female", "Other"]
    contact: str = Field("", max_length=50)
    admitted_on: str = Field(..., pattern=ISO_DATE_PATTERN)
    case_description: str = Field("", max_length=2000)


# ============== Update Patient ==============

class UpdatePatientRequest(BaseModel):
    """Request schema for updating patient information."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    contact: Optional[str] = Field(None, max_length=50)
    admitted_on: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    case_description: Optional[str] = Field(None, max_length=2000)


# ============== Patient Response ==============

class PatientResponse(BaseModel):
    """Response schema for patient data."""
    id: str
    name: str
    age: int
    gender: str
    contact: str
    admitted_on: str
    case_description: str
    created_by: str
    created_at: datetime
    updated_at: datetime


class PatientListResponse(BaseModel):
    """Response schema for list of patients."""
    patients: List[PatientResponse]
    total: int
