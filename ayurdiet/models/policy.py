"""AYUSH policy and guideline documents (``policies`` collection)."""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

PolicyCategory = Literal[
    "dietary_guidelines",
    "treatment_protocols",
    "seasonal_recommendations",
    "dosha_management",
    "food_combinations",
    "lifestyle_guidance",
    "preventive_care",
    "therapeutic_diets",
]
PolicySource = Literal[
    "ministry_of_ayush",
    "ccras",
    "nimbu",
    "classical_texts",
    "research_studies",
    "expert_consensus",
]
PolicySeason = Literal["spring", "summer", "monsoon", "autumn", "winter"]
PolicyDosha = Literal["vata", "pitta", "kapha"]
Audience = Literal["dietitians", "doctors", "patients", "hospital_staff"]


class PolicyIn(BaseModel):
    title: str = Field(..., min_length=1)
    category: PolicyCategory
    source: PolicySource
    referenceNumber: Optional[str] = None
    summary: str
    fullContent: str = ""
    keyPrinciples: List[str] = Field(default_factory=list)
    applicableConditions: List[str] = Field(default_factory=list)
    targetAudience: List[Audience] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    doshaRelevance: Dict[PolicyDosha, bool] = Field(default_factory=dict)
    seasonalRelevance: List[PolicySeason] = Field(default_factory=list)
    effectiveDate: Optional[datetime] = None
    lastReviewed: Optional[datetime] = None
    isActive: bool = True


class PolicyUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[PolicyCategory] = None
    source: Optional[PolicySource] = None
    referenceNumber: Optional[str] = None
    summary: Optional[str] = None
    fullContent: Optional[str] = None
    keyPrinciples: Optional[List[str]] = None
    applicableConditions: Optional[List[str]] = None
    targetAudience: Optional[List[Audience]] = None
    tags: Optional[List[str]] = None
    doshaRelevance: Optional[Dict[PolicyDosha, bool]] = None
    seasonalRelevance: Optional[List[PolicySeason]] = None
    lastReviewed: Optional[datetime] = None
    isActive: Optional[bool] = None


class PolicySearchRequest(BaseModel):
    query: Optional[str] = None
    category: Optional[PolicyCategory] = None
    source: Optional[PolicySource] = None
    tags: List[str] = Field(default_factory=list)
    doshaType: Optional[PolicyDosha] = None
    season: Optional[PolicySeason] = None
    conditions: List[str] = Field(default_factory=list)
    limit: int = Field(50, gt=0, le=500)
