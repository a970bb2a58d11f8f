from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .food import AyurvedicProperties, NutritionalData


class MessMenuItem(BaseModel):
    foodId: Optional[str] = None
    name: str
    quantity: Optional[str] = None  # "100g", "1 cup"
    portion: Optional[str] = None  # small / medium / large
    isAvailable: bool = True
    nutritionalData: Optional[NutritionalData] = None
    ayurvedicProperties: Optional[AyurvedicProperties] = None
    notes: Optional[str] = None


class MessMeals(BaseModel):
    breakfast: List[MessMenuItem] = Field(default_factory=list)
    lunch: List[MessMenuItem] = Field(default_factory=list)
    dinner: List[MessMenuItem] = Field(default_factory=list)
    snacks: List[MessMenuItem] = Field(default_factory=list)


class MessMenuIn(BaseModel):
    # Defaults to the caller's hospital
    hospitalId: Optional[str] = None
    date: Optional[datetime] = None
    meals: MessMeals
    isActive: bool = True


class MessMenuUpdate(BaseModel):
    date: Optional[datetime] = None
    meals: Optional[MessMeals] = None
    isActive: Optional[bool] = None
