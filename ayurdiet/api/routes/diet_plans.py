from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from ayurdiet.api.deps import display_name, ensure_patient_access, get_current_user, require_permission
from ayurdiet.models.diet_plan import DietPlanIn, DietPlanUpdate, GenerateDietPlanIn, OptimizeDietPlanIn
from ayurdiet.services import (
    ai_flows,
    diet_plan_service,
    feedback_service,
    food_service,
    mess_menu_service,
    patient_service,
    vitals_service,
)
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/diet-plans", tags=["diet_plans"])


def _get_or_404(plan_id: str):
    plan = diet_plan_service.get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Diet plan not found")
    return plan


@router.get("/")
def list_diet_plans(
    patientId: Optional[str] = None,
    dietitianId: Optional[str] = None,
    user=Depends(get_current_user),
):
    if patientId:
        ensure_patient_access(user, patientId)
        return {"items": diet_plan_service.get_by_patient(patientId)}

    if user["role"] == "patient":
        raise HTTPException(status_code=400, detail="patientId is required")
    if dietitianId:
        return {"items": diet_plan_service.get_by_dietitian(dietitianId)}
    if user["role"] == "dietitian":
        return {"items": diet_plan_service.get_by_dietitian(user["uid"])}
    return {"items": diet_plan_service.list_plans()}


@router.get("/active/{patient_id}")
def active_plans(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    return {"items": diet_plan_service.get_active_for_patient(patient_id)}


@router.get("/{plan_id}")
def get_diet_plan(plan_id: str, user=Depends(get_current_user)):
    plan = _get_or_404(plan_id)
    ensure_patient_access(user, plan.get("patientId"))
    return plan


@router.post("/", status_code=201)
def create_diet_plan(data: DietPlanIn, user=Depends(require_permission("canEditDietPlans"))):
    payload = data.model_dump(exclude_none=True)
    payload["dietitianId"] = payload.get("dietitianId") or user["uid"]
    return diet_plan_service.create_plan(payload, dietitian_name=display_name(user))


@router.put("/{plan_id}")
def update_diet_plan(
    plan_id: str,
    data: DietPlanUpdate,
    user=Depends(require_permission("canEditDietPlans")),
):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    _get_or_404(plan_id)
    return diet_plan_service.update_plan(plan_id, updates, dietitian_name=display_name(user))


@router.post("/{plan_id}/activate")
def activate_diet_plan(plan_id: str, user=Depends(require_permission("canEditDietPlans"))):
    _get_or_404(plan_id)
    diet_plan_service.activate_plan(plan_id, dietitian_name=display_name(user))
    return {"message": "Diet plan activated"}


@router.post("/{plan_id}/deactivate")
def deactivate_diet_plan(plan_id: str, user=Depends(require_permission("canEditDietPlans"))):
    _get_or_404(plan_id)
    diet_plan_service.deactivate_plan(plan_id)
    return {"message": "Diet plan deactivated"}


@router.post("/{plan_id}/duplicate", status_code=201)
def duplicate_diet_plan(
    plan_id: str,
    patientId: Optional[str] = Body(None, embed=True),
    user=Depends(require_permission("canEditDietPlans")),
):
    _get_or_404(plan_id)
    return diet_plan_service.duplicate_plan(plan_id, patient_id=patientId, dietitian_id=user["uid"])


@router.delete("/{plan_id}")
def delete_diet_plan(plan_id: str, user=Depends(require_permission("canEditDietPlans"))):
    _get_or_404(plan_id)
    diet_plan_service.delete_plan(plan_id)
    return {"message": "Diet plan deleted"}


# -------------------------
# AI generation
# -------------------------
@router.post("/generate")
def generate_diet_plan(data: GenerateDietPlanIn, user=Depends(require_permission("canEditDietPlans"))):
    # 1. Load patient context
    patient = patient_service.get_patient(data.patientId)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")

    vitals = vitals_service.get_latest(data.patientId)
    menus = mess_menu_service.get_today_menus(patient["hospitalId"]) if patient.get("hospitalId") else []

    # 2. Ask the model
    try:
        chart = ai_flows.generate_initial_diet_chart(
            patient, vitals or {}, menus[0]["meals"] if menus else {}, data.ayurvedicPrinciples
        )
    except ai_flows.AIFlowError as e:
        raise HTTPException(status_code=500, detail=f"Diet chart generation failed: {e}")

    if not data.save:
        return chart

    # 3. Persist as a draft the dietitian activates after review
    plan = diet_plan_service.create_plan(
        {
            "patientId": data.patientId,
            "dietitianId": user["uid"],
            "title": data.title or f"Ayurvedic diet plan for {patient.get('name', 'patient')}",
            "description": chart["dietChart"],
            "dietDays": chart["dietDays"],
            "recommendations": chart["recommendations"],
            "warnings": chart["warnings"],
            "isActive": False,
            "generatedByAI": True,
        },
        dietitian_name=display_name(user),
    )
    return {**chart, "dietPlan": plan}


@router.post("/{plan_id}/optimize")
def optimize_diet_plan(
    plan_id: str,
    data: OptimizeDietPlanIn,
    user=Depends(require_permission("canEditDietPlans")),
):
    plan = _get_or_404(plan_id)
    patient = patient_service.get_patient(plan["patientId"]) or {}
    feedback = feedback_service.get_by_diet_plan(plan_id)
    available = data.availableFoods or [f.get("name") for f in food_service.list_foods()]

    try:
        result = ai_flows.optimize_diet_plan(plan, feedback, available, patient)
    except ai_flows.AIFlowError as e:
        raise HTTPException(status_code=500, detail=f"Diet plan optimization failed: {e}")

    if data.save and result.get("dietDays"):
        diet_plan_service.update_plan(plan_id, {
            "dietDays": result["dietDays"],
            "optimizationRationale": result["rationale"],
        })
    return result
