from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import ensure_patient_access, get_current_user
from ayurdiet.models.feedback import PatientFeedbackIn, PatientFeedbackUpdate
from ayurdiet.services import feedback_service

router = APIRouter(prefix="/patient-feedback", tags=["patient_feedback"])


def _get_or_404(feedback_id: str, user):
    feedback = feedback_service.get_feedback(feedback_id)
    if feedback is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    ensure_patient_access(user, feedback.get("patientId"))
    return feedback


@router.get("/patient/{patient_id}")
def feedback_for_patient(
    patient_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user=Depends(get_current_user),
):
    ensure_patient_access(user, patient_id)
    if start and end:
        if end < start:
            raise HTTPException(status_code=400, detail="end must not be before start")
        return {"items": feedback_service.get_by_date_range(patient_id, start, end)}
    return {"items": feedback_service.get_by_patient(patient_id)}


@router.get("/patient/{patient_id}/today")
def todays_feedback(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    return {"items": feedback_service.get_today(patient_id)}


@router.get("/patient/{patient_id}/summary")
def feedback_summary(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    return feedback_service.adherence_summary(feedback_service.get_by_patient(patient_id))


@router.get("/diet-plan/{diet_plan_id}")
def feedback_for_plan(diet_plan_id: str, user=Depends(get_current_user)):
    if user["role"] == "patient":
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return {"items": feedback_service.get_by_diet_plan(diet_plan_id)}


@router.get("/{feedback_id}")
def get_feedback(feedback_id: str, user=Depends(get_current_user)):
    return _get_or_404(feedback_id, user)


@router.post("/", status_code=201)
def submit_feedback(data: PatientFeedbackIn, user=Depends(get_current_user)):
    ensure_patient_access(user, data.patientId)
    payload = data.model_dump(exclude_none=True)
    payload["submittedBy"] = user["uid"]
    return feedback_service.create_feedback(payload)


@router.put("/{feedback_id}")
def update_feedback(feedback_id: str, data: PatientFeedbackUpdate, user=Depends(get_current_user)):
    _get_or_404(feedback_id, user)
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return feedback_service.update_feedback(feedback_id, updates)


@router.delete("/{feedback_id}")
def delete_feedback(feedback_id: str, user=Depends(get_current_user)):
    _get_or_404(feedback_id, user)
    feedback_service.delete_feedback(feedback_id)
    return {"message": "Feedback deleted"}
