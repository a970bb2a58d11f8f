"""Pydantic models for vitals readings (``vitals`` collection)."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BloodPressure(BaseModel):
    systolic: int = Field(..., gt=0)
    diastolic: int = Field(..., gt=0)


class BloodSugar(BaseModel):
    fasting: float
    postPrandial: Optional[float] = None


class Thyroid(BaseModel):
    tsh: float
    t3: Optional[float] = None
    t4: Optional[float] = None


class Cholesterol(BaseModel):
    total: float
    hdl: float
    ldl: float
    triglycerides: float


class VitalsIn(BaseModel):
    patientId: str
    # nurse/doctor uid; defaults to the caller
    recordedBy: Optional[str] = None
    date: Optional[datetime] = None
    bloodPressure: BloodPressure
    bloodSugar: Optional[BloodSugar] = None
    thyroid: Optional[Thyroid] = None
    cholesterol: Optional[Cholesterol] = None
    weight: float = Field(..., gt=0, description="kg")
    height: float = Field(..., gt=0, description="cm")
    bmi: Optional[float] = None
    temperature: Optional[float] = None
    pulse: Optional[int] = None
    notes: Optional[str] = None


class VitalsUpdate(BaseModel):
    date: Optional[datetime] = None
    bloodPressure: Optional[BloodPressure] = None
    bloodSugar: Optional[BloodSugar] = None
    thyroid: Optional[Thyroid] = None
    cholesterol: Optional[Cholesterol] = None
    weight: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    bmi: Optional[float] = None
    temperature: Optional[float] = None
    pulse: Optional[int] = None
    notes: Optional[str] = None
