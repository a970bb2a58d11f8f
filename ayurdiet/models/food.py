"""Ayurvedic food database entries (``foodDatabase`` collection)."""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

Rasa = Literal["Sweet", "Sour", "Salty", "Bitter", "Pungent", "Astringent"]
Virya = Literal["Hot", "Cold"]
Guna = Literal[
    "Heavy", "Light", "Oily", "Dry", "Sharp", "Dull",
    "Static", "Mobile", "Soft", "Hard", "Clear", "Sticky",
]
Vipaka = Literal["Sweet", "Sour", "Pungent"]
DoshaEffect = Literal[
    "Vata-pacifying", "Vata-aggravating",
    "Pitta-pacifying", "Pitta-aggravating",
    "Kapha-pacifying", "Kapha-aggravating",
    "Tridoshic",
]
Season = Literal["Spring", "Summer", "Monsoon", "Autumn", "Winter"]
FoodCategory = Literal[
    "Vegetable", "Fruit", "Grain", "Dairy", "Meat", "Spice",
    "Oil", "Sweetener", "Beverage", "Other",
]
Dosha = Literal["Vata", "Pitta", "Kapha"]


class NutritionalData(BaseModel):
    calories: float = 0
    protein: float = 0  # grams
    carbohydrates: float = 0  # grams
    fat: float = 0  # grams
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None  # mg
    potassium: Optional[float] = None
    calcium: Optional[float] = None
    iron: Optional[float] = None
    vitaminC: Optional[float] = None
    vitaminA: Optional[float] = None  # IU


class AyurvedicProperties(BaseModel):
    rasa: List[Rasa] = Field(default_factory=list)
    virya: Virya
    guna: List[Guna] = Field(default_factory=list)
    vipaka: Vipaka
    doshaEffect: List[DoshaEffect] = Field(default_factory=list)
    digestibility: Literal["Easy", "Moderate", "Difficult"] = "Moderate"
    seasonalSuitability: Optional[List[Season]] = None
    potency: Optional[Literal["Mild", "Moderate", "Strong"]] = None


class FoodItemIn(BaseModel):
    name: str = Field(..., min_length=1)
    category: FoodCategory
    nutritionalData: NutritionalData
    ayurvedicProperties: AyurvedicProperties
    # Suitability flags queried by dosha ({"Vata": true, ...})
    doshaSuitability: Dict[Dosha, bool] = Field(default_factory=dict)
    commonAlternatives: List[str] = Field(default_factory=list)
    regionalVariations: List[str] = Field(default_factory=list)


class FoodItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[FoodCategory] = None
    nutritionalData: Optional[NutritionalData] = None
    ayurvedicProperties: Optional[AyurvedicProperties] = None
    doshaSuitability: Optional[Dict[Dosha, bool]] = None
    commonAlternatives: Optional[List[str]] = None
    regionalVariations: Optional[List[str]] = None
