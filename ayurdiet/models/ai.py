"""Input/output schemas of the Gemini prompt flows."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .diet_plan import DietDay

DataAccessLevel = Literal["personal", "patient-group", "hospital-wide"]


class PolicyCompliance(BaseModel):
    checkedPolicies: str
    complianceLevel: str
    notes: str = ""


class DietChartOutput(BaseModel):
    dietChart: str
    dietDays: List[DietDay] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    policyCompliance: Optional[PolicyCompliance] = None


class OptimizedPlanOutput(BaseModel):
    optimizedDietPlan: str
    rationale: str
    dietDays: List[DietDay] = Field(default_factory=list)


class ChatbotAnswer(BaseModel):
    answer: str


class AssessmentEvaluation(BaseModel):
    evaluation: str


class ChatContext(BaseModel):
    hasActiveDietPlan: Optional[bool] = None
    recentVitals: Optional[Any] = None
    patientList: Optional[Any] = None
    systemStats: Optional[Any] = None


class RoleChatOutput(BaseModel):
    response: str
    suggestedActions: List[str] = Field(default_factory=list)
    dataAccessLevel: DataAccessLevel
    requiresHumanReview: bool = False


class DoshaAnalysis(BaseModel):
    primaryDosha: Literal["Vata", "Pitta", "Kapha"]
    secondaryDosha: Optional[Literal["Vata", "Pitta", "Kapha"]] = None
    imbalanceScore: int = Field(..., ge=1, le=10)
    recommendations: List[str] = Field(default_factory=list)


class FoodAlternative(BaseModel):
    name: str
    reason: str
    ayurvedicBenefit: str = ""


class AlternativeSuggestions(BaseModel):
    alternatives: List[FoodAlternative] = Field(default_factory=list)


class MealSlot(BaseModel):
    meal: str
    time: str
    notes: str = ""


class MealTimings(BaseModel):
    schedule: List[MealSlot] = Field(default_factory=list)
    rationale: str = ""


# Request bodies
class PersonalChatIn(BaseModel):
    question: str = Field(..., min_length=1)
    patientId: Optional[str] = None


class RoleChatIn(BaseModel):
    query: str = Field(..., min_length=1)
    context: Optional[ChatContext] = None


class AssessmentIn(BaseModel):
    # Questions and the patient's answers
    answers: List[Dict[str, Any]]
    patientId: Optional[str] = None


class DoshaAnalysisIn(BaseModel):
    symptoms: List[str] = Field(default_factory=list)
    characteristics: List[str] = Field(default_factory=list)
    preferences: List[str] = Field(default_factory=list)


class AlternativesIn(BaseModel):
    foodName: str
    reason: str


class MealTimingsIn(BaseModel):
    doshaType: str
    dailyRoutine: str

