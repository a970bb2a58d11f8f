"""Pydantic models for patient records stored in Firestore (``patients``).

Field names match the Firestore documents (camelCase) so records written by
the web frontend and by this API are interchangeable.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

Gender = Literal["Male", "Female", "Other"]
DoshaType = Literal["Vata", "Pitta", "Kapha", "Mixed"]


class EmergencyContact(BaseModel):
    name: str
    phone: str
    relationship: str


class PatientIn(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=130)
    gender: Gender
    code: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergencyContact: Optional[EmergencyContact] = None
    dietaryHabits: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)
    medicalHistory: Optional[str] = None
    currentMedications: Optional[str] = None
    doshaType: Optional[DoshaType] = None
    hospitalId: Optional[str] = None
    dietitianId: Optional[str] = None
    registrationDate: Optional[datetime] = None


class PatientUpdate(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[Gender] = None
    code: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergencyContact: Optional[EmergencyContact] = None
    dietaryHabits: Optional[str] = None
    allergies: Optional[List[str]] = None
    medicalHistory: Optional[str] = None
    currentMedications: Optional[str] = None
    doshaType: Optional[DoshaType] = None
    hospitalId: Optional[str] = None
    dietitianId: Optional[str] = None
