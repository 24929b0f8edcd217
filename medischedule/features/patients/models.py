# Patient Management Feature - Models

from typing import Literal
from pydantic import Field
from medischedule.shared.models import StoreDocument, TimestampMixin


ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class Patient(StoreDocument, TimestampMixin):
    """Patient admitted for surgery."""
    
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=150)
    gender: Literal["Male", "Female", "Other"]
    contact: str = ""
    admitted_on: str = Field(..., pattern=ISO_DATE_PATTERN)
    case_description: str = ""
    
    # Admin who registered the patient
    created_by: str
    
    class Settings:
        name = "patients"
        use_state_management = True
    
    class Config:
        json_schema_extra = {
            "example": {
                "name": "Kwame Boateng",
                "age": 54,
                "gender": "Male",
                "contact": "+233201234567",
                "admitted_on": "2024-03-02",
                "case_description": "Symptomatic gallstones",
            }
        }
