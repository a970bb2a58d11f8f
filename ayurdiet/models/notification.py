from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .meal_tracking import MealType

NotificationType = Literal[
    "meal_reminder",
    "water_intake",
    "diet_notes",
    "diet_plan_delivery",
    "diet_plan_activation",
    "general",
]
Priority = Literal["low", "medium", "high"]


class NotificationIn(BaseModel):
    userId: str
    type: NotificationType = "general"
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    scheduledFor: Optional[datetime] = None
    priority: Priority = "medium"


class ReminderTimes(BaseModel):
    breakfast: str = "08:00"
    lunch: str = "13:00"
    dinner: str = "19:00"
    snacks: List[str] = Field(default_factory=lambda: ["10:00", "16:00"])


class NotificationSettingsIn(BaseModel):
    mealReminders: Optional[bool] = None
    waterReminders: Optional[bool] = None
    dietNotes: Optional[bool] = None
    pushNotifications: Optional[bool] = None
    emailNotifications: Optional[bool] = None
    reminderTimes: Optional[ReminderTimes] = None
    waterReminderInterval: Optional[int] = Field(None, gt=0, description="minutes")


class MealReminderIn(BaseModel):
    userId: str
    mealType: MealType
    scheduledFor: datetime


class WaterReminderIn(BaseModel):
    userId: str
    targetGlasses: Optional[int] = Field(None, gt=0)
    scheduledFor: datetime


class DietNotesIn(BaseModel):
    userId: str
    notes: str
    dietPlanId: Optional[str] = None
    patientId: Optional[str] = None


class ScheduleMealRemindersIn(BaseModel):
    userId: str
    # Date the reminders are for (today when omitted)
    date: Optional[datetime] = None
