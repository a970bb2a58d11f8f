"""Meal tracking records (``mealTracking`` collection).

Status progression: scheduled -> given -> eaten | skipped. ``modified`` is a
valid stored value but nothing in the API produces it.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

MealType = Literal["breakfast", "lunch", "dinner", "snacks"]
MealStatus = Literal["scheduled", "given", "eaten", "skipped", "modified"]
EatenBy = Literal["patient", "family", "not_eaten"]
Quantity = Literal["full", "half", "quarter", "none"]


class MealTrackingIn(BaseModel):
    patientId: str
    dietPlanId: str
    # References a specific meal in the diet plan
    mealId: str
    mealType: MealType
    scheduledDate: datetime
    notes: Optional[str] = None
    status: MealStatus = "scheduled"


class MealTrackingUpdate(BaseModel):
    mealType: Optional[MealType] = None
    scheduledDate: Optional[datetime] = None
    givenBy: Optional[str] = None
    givenAt: Optional[datetime] = None
    eatenBy: Optional[EatenBy] = None
    eatenAt: Optional[datetime] = None
    quantity: Optional[Quantity] = None
    notes: Optional[str] = None
    status: Optional[MealStatus] = None


class MarkGivenIn(BaseModel):
    notes: Optional[str] = None


class MarkEatenIn(BaseModel):
    eatenBy: Literal["patient", "family"] = "patient"
    quantity: Quantity = "full"
    notes: Optional[str] = None
