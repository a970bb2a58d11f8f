"""AI advisory routes (Gemini prompt flows) and current-weather lookups."""

from fastapi import APIRouter, Depends, HTTPException, Query

from ayurdiet.api.deps import (
    display_name,
    ensure_patient_access,
    get_current_profile,
    get_current_user,
    require_permission,
)
from ayurdiet.models.ai import (
    AlternativesIn,
    AssessmentIn,
    DoshaAnalysisIn,
    MealTimingsIn,
    PersonalChatIn,
    RoleChatIn,
)
from ayurdiet.services import ai_flows, diet_plan_service, patient_service, weather_service

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/chat")
def role_chat(
    data: RoleChatIn,
    user=Depends(require_permission("canAccessChatbot")),
    profile=Depends(get_current_profile),
):
    profile = profile or {}
    context = ai_flows.build_role_context(user["role"], profile.get("hospitalId"), profile.get("patientId"))
    if data.context:
        context.update(data.context.model_dump(exclude_none=True))

    return ai_flows.role_based_chatbot(
        user_role=user["role"],
        user_id=user["uid"],
        user_name=profile.get("displayName") or display_name(user) or "User",
        query=data.query,
        hospital_id=profile.get("hospitalId"),
        patient_id=profile.get("patientId"),
        context=context,
    )


@router.post("/personal-chat")
def personal_chat(
    data: PersonalChatIn,
    user=Depends(require_permission("canAccessChatbot")),
    profile=Depends(get_current_profile),
):
    patient_id = data.patientId or (profile or {}).get("patientId")
    if not patient_id:
        raise HTTPException(status_code=400, detail="patientId is required")
    ensure_patient_access(user, patient_id)

    patient = patient_service.get_patient(patient_id)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")

    care_plan = {
        "activeDietPlans": diet_plan_service.get_active_for_patient(patient_id),
        "doshaType": patient.get("doshaType"),
        "allergies": patient.get("allergies", []),
        "dietaryHabits": patient.get("dietaryHabits"),
    }
    return ai_flows.personal_diet_chatbot(patient.get("name", "Patient"), care_plan, data.question)


@router.post("/assessment")
def evaluate_assessment(data: AssessmentIn, user=Depends(require_permission("canAccessChatbot"))):
    if data.patientId:
        ensure_patient_access(user, data.patientId)
    return ai_flows.evaluate_patient_assessment(data.answers)


@router.post("/dosha-analysis")
def dosha_analysis(data: DoshaAnalysisIn, user=Depends(require_permission("canAccessChatbot"))):
    return ai_flows.analyze_dosha(data.symptoms, data.characteristics, data.preferences)


@router.post("/alternatives")
def food_alternatives(data: AlternativesIn, user=Depends(require_permission("canAccessChatbot"))):
    return ai_flows.suggest_alternatives(data.foodName, data.reason)


@router.post("/meal-timings")
def meal_timings(data: MealTimingsIn, user=Depends(require_permission("canAccessChatbot"))):
    return ai_flows.generate_meal_timings(data.doshaType, data.dailyRoutine)


@router.get("/weather")
def weather(lat: float, lon: float, user=Depends(get_current_user)):
    try:
        return weather_service.by_coordinates(lat, lon)
    except weather_service.WeatherError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get("/weather/city")
def weather_by_city(city: str = Query(..., min_length=1), user=Depends(get_current_user)):
    try:
        return weather_service.by_city(city)
    except weather_service.WeatherError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
