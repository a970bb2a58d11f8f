from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Digestion = Literal["excellent", "good", "fair", "poor", "very_poor"]
OverallFeeling = Literal["much_better", "better", "same", "worse", "much_worse"]


class MealAdherence(BaseModel):
    breakfast: bool
    lunch: bool
    dinner: bool
    snacks: bool


class PatientFeedbackIn(BaseModel):
    patientId: str
    dietPlanId: str
    date: Optional[datetime] = None
    mealAdherence: MealAdherence
    symptoms: List[str] = Field(default_factory=list)
    energyLevel: int = Field(..., ge=1, le=5)
    digestion: Digestion
    waterIntake: int = Field(..., ge=0, description="glasses per day")
    sleepQuality: int = Field(..., ge=1, le=5)
    overallFeeling: OverallFeeling
    additionalNotes: Optional[str] = None


class PatientFeedbackUpdate(BaseModel):
    mealAdherence: Optional[MealAdherence] = None
    symptoms: Optional[List[str]] = None
    energyLevel: Optional[int] = Field(None, ge=1, le=5)
    digestion: Optional[Digestion] = None
    waterIntake: Optional[int] = Field(None, ge=0)
    sleepQuality: Optional[int] = Field(None, ge=1, le=5)
    overallFeeling: Optional[OverallFeeling] = None
    additionalNotes: Optional[str] = None
