from typing import List, Optional

from pydantic import BaseModel, Field


class Meal(BaseModel):
    time: str
    name: str
    items: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class DietDay(BaseModel):
    day: str
    meals: List[Meal] = Field(default_factory=list)


class DietPlanIn(BaseModel):
    patientId: str
    # Defaults to the calling dietitian's uid
    dietitianId: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = ""
    dietDays: List[DietDay] = Field(default_factory=list)
    isActive: bool = True


class DietPlanUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    dietDays: Optional[List[DietDay]] = None
    isActive: Optional[bool] = None


class GenerateDietPlanIn(BaseModel):
    patientId: str
    ayurvedicPrinciples: Optional[str] = None
    # Persist the generated chart as a new (inactive) diet plan
    save: bool = False
    title: Optional[str] = None


class OptimizeDietPlanIn(BaseModel):
    availableFoods: Optional[str] = None
    save: bool = False
