"""Pydantic models for user profiles, hospitals and auth payloads."""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

Role = Literal["patient", "dietitian", "hospital-admin"]


class UserIn(BaseModel):
    uid: str
    email: EmailStr
    displayName: str
    role: Role
    hospitalId: Optional[str] = None
    patientId: Optional[str] = None


class UserUpdate(BaseModel):
    displayName: Optional[str] = None
    role: Optional[Role] = None
    hospitalId: Optional[str] = None
    patientId: Optional[str] = None


class HospitalIn(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = ""
    phone: str = ""
    email: Optional[EmailStr] = None
    # Defaults to the calling admin
    adminId: Optional[str] = None


class HospitalUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    adminId: Optional[str] = None


class PatientDetailsIn(BaseModel):
    """Registration details for the patient record created at sign-up."""

    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergencyContact: Optional[Dict[str, str]] = None
    dietaryHabits: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)


class SignUpIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    displayName: Optional[str] = None
    role: Role = "patient"
    # Staff only; patients are linked to the record created for them
    hospitalId: Optional[str] = None
    patient: Optional[PatientDetailsIn] = None


class SignInIn(BaseModel):
    email: EmailStr
    password: str


class PasswordResetIn(BaseModel):
    email: EmailStr


class ProfileUpdateIn(BaseModel):
    displayName: Optional[str] = None
    photoURL: Optional[str] = None
