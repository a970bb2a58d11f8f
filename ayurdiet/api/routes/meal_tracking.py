from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import ensure_patient_access, get_current_user, require_permission
from ayurdiet.models.meal_tracking import MarkEatenIn, MarkGivenIn, MealTrackingIn, MealTrackingUpdate
from ayurdiet.services import meal_tracking_service, patient_service

router = APIRouter(prefix="/meal-tracking", tags=["meal_tracking"])


def _get_or_404(record_id: str):
    record = meal_tracking_service.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Meal tracking record not found")
    return record


@router.get("/patient/{patient_id}")
def tracking_for_patient(
    patient_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user=Depends(get_current_user),
):
    ensure_patient_access(user, patient_id)
    if start and end:
        if end < start:
            raise HTTPException(status_code=400, detail="end must not be before start")
        return {"items": meal_tracking_service.get_by_date_range(patient_id, start, end)}
    return {"items": meal_tracking_service.get_by_patient(patient_id)}


@router.get("/patient/{patient_id}/today")
def todays_meals(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    return {"items": meal_tracking_service.get_today(patient_id)}


@router.get("/diet-plan/{diet_plan_id}")
def tracking_for_plan(diet_plan_id: str, user=Depends(require_permission("canViewPatients"))):
    return {"items": meal_tracking_service.get_by_diet_plan(diet_plan_id)}


@router.get("/stats/today")
def todays_adherence(user=Depends(require_permission("canViewAnalytics"))):
    if user["role"] == "dietitian":
        patients = patient_service.get_by_dietitian(user["uid"])
    else:
        patients = patient_service.list_patients()
    return meal_tracking_service.daily_adherence_stats(patients)


@router.get("/{record_id}")
def get_record(record_id: str, user=Depends(get_current_user)):
    record = _get_or_404(record_id)
    ensure_patient_access(user, record.get("patientId"))
    return record


@router.post("/", status_code=201)
def schedule_meal(data: MealTrackingIn, user=Depends(require_permission("canEditDietPlans"))):
    return meal_tracking_service.create_record(data.model_dump(exclude_none=True))


@router.put("/{record_id}")
def update_record(
    record_id: str,
    data: MealTrackingUpdate,
    user=Depends(require_permission("canEditDietPlans")),
):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return meal_tracking_service.update_record(record_id, updates)


@router.post("/{record_id}/given")
def mark_given(
    record_id: str,
    data: MarkGivenIn,
    user=Depends(require_permission("canEditPatients")),
):
    _get_or_404(record_id)
    return meal_tracking_service.mark_as_given(record_id, user["uid"], data.notes)


@router.post("/{record_id}/eaten")
def mark_eaten(record_id: str, data: MarkEatenIn, user=Depends(get_current_user)):
    record = _get_or_404(record_id)
    ensure_patient_access(user, record.get("patientId"))
    return meal_tracking_service.mark_as_eaten(record_id, data.eatenBy, data.quantity, data.notes)


@router.delete("/{record_id}")
def delete_record(record_id: str, user=Depends(require_permission("canEditDietPlans"))):
    _get_or_404(record_id)
    meal_tracking_service.delete_record(record_id)
    return {"message": "Meal tracking record deleted"}
