# ayurdiet/services/ai_flows.py
"""
Gemini prompt flows.

Each flow fills a fixed prompt template, asks the model for STRICT JSON and
validates the reply against a pydantic schema. No retries, streaming or
caching: any failure (missing key, API error, unparseable or invalid JSON)
surfaces as AIFlowError.
"""
import json
import sqlite3
from typing import Any, Dict, List, Optional, Type

import google.generativeai as genai
from pydantic import BaseModel

from ayurdiet.core.config import settings
from ayurdiet.models.ai import (
    AlternativeSuggestions,
    AssessmentEvaluation,
    ChatbotAnswer,
    DietChartOutput,
    DoshaAnalysis,
    MealTimings,
    OptimizedPlanOutput,
    RoleChatOutput,
)
from ayurdiet.services import (
    diet_plan_service,
    ifct_service,
    patient_service,
    policy_service,
    user_service,
    vitals_service,
)
from ayurdiet.services.logger import get_logger, log_debug
from ayurdiet.services.time_utils import current_season

logger = get_logger(__name__)

ACCESS_LEVELS = {
    "patient": "personal",
    "dietitian": "patient-group",
    "hospital-admin": "hospital-wide",
}

SENSITIVE_KEYWORDS = (
    "emergency", "severe pain", "allergic reaction", "medication",
    "diagnosis", "treatment", "surgery", "hospitalization",
    "critical", "life-threatening", "overdose", "poisoning",
)

NO_POLICIES = "No specific AYUSH policies found for this patient profile."
POLICIES_UNAVAILABLE = "Policy integration temporarily unavailable. Follow standard Ayurvedic principles."

_model = None


class AIFlowError(Exception):
    """Raised when a prompt flow cannot produce a valid answer."""


def _get_model():
    global _model
    if _model is None:
        api_key = settings.gemini_key
        if not api_key:
            raise AIFlowError(
                "Gemini API key not found. Set GEMINI_API_KEY (or GOOGLE_API_KEY) in .env "
                "or as an environment variable."
            )
        genai.configure(api_key=api_key)
        _model = genai.GenerativeModel(settings.GEMINI_MODEL)
    return _model


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


def _clean(text: str) -> str:
    return (text or "").strip().replace("```json", "").replace("```", "").strip()


def _run(flow: str, prompt: str, schema: Type[BaseModel]) -> Dict[str, Any]:
    log_debug(f"{flow}_prompt", {"prompt": prompt})
    try:
        response = _get_model().generate_content(prompt)
        text = _clean(response.text)
        result = schema.model_validate(json.loads(text))
    except AIFlowError:
        raise
    except Exception as exc:
        logger.error("AI flow %s failed: %s", flow, exc)
        raise AIFlowError(f"{flow} failed: {exc}") from exc

    output = result.model_dump()
    log_debug(f"{flow}_output", output)
    return output


# -------------------------
# Diet charts
# -------------------------
def relevant_policies_text(profile: Dict[str, Any]) -> str:
    """AYUSH guidelines matching the patient's dosha, allergies and the season."""
    dosha = (profile.get("doshaType") or "").lower()
    try:
        policies = policy_service.search(
            dosha_type=dosha if dosha in ("vata", "pitta", "kapha") else None,
            conditions=profile.get("allergies") or None,
            season=current_season(),
            limit=5,
        )
    except Exception as exc:
        logger.warning("Failed to fetch relevant policies: %s", exc)
        return POLICIES_UNAVAILABLE

    if not policies:
        return NO_POLICIES

    text = "\n".join(
        f"**{p.get('title')}**\n{p.get('summary')}\nKey Principles: {', '.join(p.get('keyPrinciples') or [])}\n"
        for p in policies
    )
    return (
        f"RELEVANT AYUSH POLICIES AND GUIDELINES:\n\n{text}\n\n"
        "Ensure the diet plan complies with these official guidelines."
    )


def generate_initial_diet_chart(
    user_profile: Dict[str, Any],
    vitals: Any,
    mess_menu: Any,
    ayurvedic_principles: Optional[str] = None,
) -> Dict[str, Any]:
    policies = relevant_policies_text(user_profile)

    prompt = f"""
You are an expert Ayurvedic dietitian certified by the Ministry of AYUSH. Generate a
personalized diet chart based on the following information.

AYURVEDIC PRINCIPLES:
- Vata: Cold, light, dry qualities - needs warm, moist, grounding foods
- Pitta: Hot, sharp, oily qualities - needs cooling, mild foods
- Kapha: Heavy, cold, oily qualities - needs light, warm, stimulating foods

### User Profile:
{_dump(user_profile)}

### Vitals:
{_dump(vitals)}

### Mess Menu (foods actually available):
{_dump(mess_menu)}

### Ayurvedic Principles To Apply:
{ayurvedic_principles or "Balance the patient's dominant dosha."}

### {policies}

### TASK:
Consider nutritional balance, Ayurvedic guidelines and food availability. Suggest meal
timings, portion sizes and alternative foods. Prefer foods from the mess menu.
Return STRICT JSON ONLY:

{{
  "dietChart": "markdown formatted diet chart",
  "dietDays": [
    {{"day": "Day 1", "meals": [{{"time": "08:00", "name": "Breakfast", "items": ["..."], "notes": "..."}}]}}
  ],
  "recommendations": ["..."],
  "warnings": ["..."]
}}
"""
    result = _run("generate_initial_diet_chart", prompt, DietChartOutput)
    result["policyCompliance"] = {
        "checkedPolicies": "Relevant policies reviewed" if policies.startswith("RELEVANT") else "Standard principles applied",
        "complianceLevel": "High",
        "notes": "Diet plan generated with AYUSH guideline compliance verification",
    }
    result["nutritionalData"] = chart_nutrition(result)
    return result


def chart_nutrition(chart: Dict[str, Any]) -> List[Dict[str, Any]]:
    """IFCT nutrients for the foods named in the chart; empty when the table is unavailable."""
    names: List[str] = []
    for day in chart.get("dietDays") or []:
        for meal in day.get("meals") or []:
            for item in meal.get("items") or []:
                if item not in names:
                    names.append(item)
    try:
        return ifct_service.nutrition_for(names)
    except (ifct_service.IFCTUnavailable, sqlite3.Error) as exc:
        logger.warning("Skipping IFCT nutrition lookup: %s", exc)
        return []


def optimize_diet_plan(
    original_diet_plan: Any,
    patient_feedback: Any,
    available_foods: Any,
    patient_profile: Dict[str, Any],
) -> Dict[str, Any]:
    prompt = f"""
You are a registered dietician specializing in Ayurvedic nutrition. Based on the patient's
feedback, profile and available foods, optimize the diet plan provided. Explain the
rationale behind your changes.

### Patient Profile:
{_dump(patient_profile)}

### Original Diet Plan:
{_dump(original_diet_plan)}

### Patient Feedback:
{_dump(patient_feedback)}

### Available Foods:
{_dump(available_foods)}

Return STRICT JSON ONLY:

{{
  "optimizedDietPlan": "markdown formatted optimized plan",
  "rationale": "why each change was made",
  "dietDays": [
    {{"day": "Day 1", "meals": [{{"time": "08:00", "name": "Breakfast", "items": ["..."], "notes": "..."}}]}}
  ]
}}
"""
    return _run("optimize_diet_plan", prompt, OptimizedPlanOutput)


# -------------------------
# Chat
# -------------------------
def personal_diet_chatbot(patient_name: str, care_plan_details: Any, question: str) -> Dict[str, Any]:
    prompt = f"""
You are a helpful chatbot assisting patients with questions about their Ayurvedic diet care plan.

Patient Name: {patient_name}

Care Plan Details:
{_dump(care_plan_details)}

Based on the provided care plan, answer the following question from the patient.

Question: {question}

Return STRICT JSON ONLY: {{"answer": "..."}}
"""
    return _run("personal_diet_chatbot", prompt, ChatbotAnswer)


def evaluate_patient_assessment(assessment_data: Any) -> Dict[str, Any]:
    prompt = f"""
You are an expert Ayurvedic practitioner. Evaluate the following self-assessment to determine
the patient's dominant dosha(s) (Prakriti).

Assessment Data:
{_dump(assessment_data)}

Based on the answers, analyze the Vata, Pitta and Kapha scores. Determine the primary and
secondary doshas. Provide a summary of the dominant dosha's characteristics and offer general
diet and lifestyle recommendations based on their Prakriti. Structure the evaluation clearly
with markdown headings.

Return STRICT JSON ONLY: {{"evaluation": "markdown text"}}
"""
    return _run("evaluate_patient_assessment", prompt, AssessmentEvaluation)


def _patient_prompt(ctx: Dict[str, Any]) -> str:
    context = ctx.get("context") or {}
    return f"""
You are a helpful AI assistant for patients in an Ayurvedic healthcare system.

Patient Information:
- Name: {ctx.get("userName")}
- Patient ID: {ctx.get("patientId") or "Not available"}
- Has Active Diet Plan: {"Yes" if context.get("hasActiveDietPlan") else "No"}
{f"- Recent Vitals: {_dump(context['recentVitals'])}" if context.get("recentVitals") else ""}

You help patients understand their health data, diet plans and wellness journey.
Use simple, encouraging language. Direct complex medical questions and symptoms to their
healthcare provider. Never provide medical diagnoses or treatment recommendations.

Patient Query: {ctx.get("query")}
"""


def _dietitian_prompt(ctx: Dict[str, Any]) -> str:
    context = ctx.get("context") or {}
    patients = context.get("patientList")
    vitals = context.get("recentVitals")
    return f"""
You are a clinical AI assistant for dietitians in an Ayurvedic healthcare system.

Dietitian Information:
- Name: {ctx.get("userName")}
- Hospital ID: {ctx.get("hospitalId") or "Not available"}
- Patient Access: {"Has access to patient data" if patients else "Limited patient access"}

Clinical Query: {ctx.get("query")}

Available Context:
{f"- Patient List: {_dump(patients)}" if patients else "- No specific patient data provided"}
{f"- Recent Vitals Data: {_dump(vitals)}" if vitals else "- No vitals data provided"}

Focus on nutritional and dietary aspects, reference Ayurvedic principles when relevant,
flag unusual patterns and recommend consultation with physicians for medical concerns.
Use professional, clinical language.
"""


def _admin_prompt(ctx: Dict[str, Any]) -> str:
    context = ctx.get("context") or {}
    stats = context.get("systemStats")
    return f"""
You are an administrative AI assistant for hospital administrators in an Ayurvedic healthcare system.

Administrator Information:
- Name: {ctx.get("userName")}
- Hospital ID: {ctx.get("hospitalId") or "Not available"}
- Access Level: Hospital-wide administrative access

Administrative Query: {ctx.get("query")}

Available Context:
{f"- System Statistics: {_dump(stats)}" if stats else "- No system statistics provided"}

Provide data-driven insights on operations, staffing and quality. Highlight trends,
suggest process improvements and flag compliance concerns. Use executive-level summaries.
"""


def requires_human_review(query: str) -> bool:
    lowered = query.lower()
    return any(keyword in lowered for keyword in SENSITIVE_KEYWORDS)


def build_role_context(
    user_role: str,
    hospital_id: Optional[str] = None,
    patient_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Data the role prompt may see: the patient's own plan status and vitals,
    the dietitian's hospital patients, or hospital-wide counts for admins.
    A failed lookup leaves the context partial instead of failing the chat.
    """
    context: Dict[str, Any] = {}
    try:
        if user_role == "patient" and patient_id:
            plans = diet_plan_service.get_by_patient(patient_id)
            context["hasActiveDietPlan"] = any(p.get("isActive") for p in plans)
            latest = vitals_service.get_latest(patient_id)
            if latest:
                context["recentVitals"] = latest
        elif user_role == "dietitian" and hospital_id:
            context["patientList"] = [
                {"id": p["id"], "name": p.get("name"), "doshaType": p.get("doshaType")}
                for p in patient_service.get_by_hospital(hospital_id)
            ]
        elif user_role == "hospital-admin":
            patients = patient_service.get_by_hospital(hospital_id) if hospital_id else patient_service.list_patients()
            dietitians = [u for u in user_service.get_by_role("dietitian")
                          if not hospital_id or u.get("hospitalId") == hospital_id]
            active_plans = [p for p in diet_plan_service.list_plans() if p.get("isActive")]
            context["systemStats"] = {
                "totalPatients": len(patients),
                "totalDietitians": len(dietitians),
                "activeDietPlans": len(active_plans),
            }
    except Exception as exc:
        logger.error("Error creating role-based context: %s", exc)
    return context


ROLE_PROMPTS = {
    "patient": _patient_prompt,
    "dietitian": _dietitian_prompt,
    "hospital-admin": _admin_prompt,
}

ROLE_CHAT_FORMAT = """
Return STRICT JSON ONLY:

{
  "response": "your answer",
  "suggestedActions": ["short follow-up action"],
  "requiresHumanReview": false
}
"""


def role_based_chatbot(
    user_role: str,
    user_id: str,
    user_name: str,
    query: str,
    hospital_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Route the query to the prompt for the caller's role."""
    build_prompt = ROLE_PROMPTS.get(user_role)
    if build_prompt is None:
        return {
            "response": (
                "I'm sorry, I don't recognize your role in the system. "
                "Please contact your system administrator for assistance."
            ),
            "suggestedActions": ["Contact system administrator"],
            "dataAccessLevel": "personal",
            "requiresHumanReview": False,
        }

    ctx = {
        "userId": user_id,
        "userName": user_name,
        "hospitalId": hospital_id,
        "patientId": patient_id,
        "query": query,
        "context": context or {},
    }
    prompt = build_prompt(ctx) + ROLE_CHAT_FORMAT
    access_level = ACCESS_LEVELS[user_role]

    log_debug("role_based_chatbot_prompt", {"prompt": prompt, "userId": user_id})
    try:
        response = _get_model().generate_content(prompt)
        data = json.loads(_clean(response.text))
        # Access level follows the role, never the model
        data["dataAccessLevel"] = access_level
        data["requiresHumanReview"] = bool(data.get("requiresHumanReview")) or requires_human_review(query)
        result = RoleChatOutput.model_validate(data)
    except AIFlowError:
        raise
    except Exception as exc:
        logger.error("AI flow role_based_chatbot failed: %s", exc)
        raise AIFlowError(f"role_based_chatbot failed: {exc}") from exc

    output = result.model_dump()
    log_debug("role_based_chatbot_output", output)
    return output


# -------------------------
# Advisory helpers
# -------------------------
def analyze_dosha(symptoms: List[str], characteristics: List[str], preferences: List[str]) -> Dict[str, Any]:
    prompt = f"""
You are an Ayurvedic practitioner specializing in dosha analysis. Analyze the patient's
symptoms and characteristics to determine their dosha imbalance.

DOSHA CHARACTERISTICS:
- VATA: Anxiety, dry skin, constipation, irregular digestion, cold hands/feet, insomnia, weight loss
- PITTA: Acid reflux, skin rashes, irritability, excessive hunger, hot flashes, sharp digestion
- KAPHA: Weight gain, congestion, lethargy, slow digestion, water retention, depression

PATIENT SYMPTOMS: {", ".join(symptoms)}
CHARACTERISTICS: {", ".join(characteristics)}
FOOD PREFERENCES: {", ".join(preferences)}

Return STRICT JSON ONLY:

{{
  "primaryDosha": "Vata | Pitta | Kapha",
  "secondaryDosha": "Vata | Pitta | Kapha or null",
  "imbalanceScore": 1,
  "recommendations": ["..."]
}}
"""
    return _run("analyze_dosha", prompt, DoshaAnalysis)


def suggest_alternatives(food_name: str, reason: str) -> Dict[str, Any]:
    prompt = f"""
You are an Ayurvedic nutrition expert. Suggest suitable food alternatives based on
Ayurvedic principles: Rasa (taste), Virya (potency), Guna (qualities) and Vipaka
(post-digestive effect).

FOOD TO REPLACE: {food_name}
REASON FOR REPLACEMENT: {reason}

Suggest 3-5 suitable Ayurvedic alternatives. Return STRICT JSON ONLY:

{{"alternatives": [{{"name": "...", "reason": "...", "ayurvedicBenefit": "..."}}]}}
"""
    return _run("suggest_alternatives", prompt, AlternativeSuggestions)


def generate_meal_timings(dosha_type: str, daily_routine: str) -> Dict[str, Any]:
    prompt = f"""
You are an Ayurvedic time management expert. Create optimal meal timings based on dosha and
daily routine.

DOSHA TIMING PREFERENCES:
- Vata: Regular, grounding routine (6-10 AM breakfast, 12-2 PM lunch, 6-8 PM dinner)
- Pitta: Avoid peak heat times, regular intervals
- Kapha: Early meals, avoid heavy evening meals

DOSHA TYPE: {dosha_type}
DAILY ROUTINE: {daily_routine}

Return STRICT JSON ONLY:

{{"schedule": [{{"meal": "Breakfast", "time": "07:30", "notes": "..."}}], "rationale": "..."}}
"""
    return _run("generate_meal_timings", prompt, MealTimings)
