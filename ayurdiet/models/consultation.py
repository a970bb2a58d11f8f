from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

ConsultationStatus = Literal["scheduled", "completed", "cancelled"]


class ConsultationIn(BaseModel):
    patientId: str
    dietitianId: Optional[str] = None
    date: datetime
    notes: str = ""
    recommendations: str = ""
    followUpDate: Optional[datetime] = None
    status: ConsultationStatus = "scheduled"


class ConsultationUpdate(BaseModel):
    date: Optional[datetime] = None
    notes: Optional[str] = None
    recommendations: Optional[str] = None
    followUpDate: Optional[datetime] = None
    status: Optional[ConsultationStatus] = None
