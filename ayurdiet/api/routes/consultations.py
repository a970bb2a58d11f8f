from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import ensure_patient_access, get_current_user, require_permission
from ayurdiet.models.consultation import ConsultationIn, ConsultationUpdate
from ayurdiet.services import consultation_service

router = APIRouter(prefix="/consultations", tags=["consultations"])


@router.get("/")
def list_consultations(
    patientId: Optional[str] = None,
    user=Depends(get_current_user),
):
    if patientId:
        ensure_patient_access(user, patientId)
        return {"items": consultation_service.get_by_patient(patientId)}
    if user["role"] == "dietitian":
        return {"items": consultation_service.get_by_dietitian(user["uid"])}
    if user["role"] == "hospital-admin":
        return {"items": consultation_service.list_consultations()}
    raise HTTPException(status_code=400, detail="patientId is required")


@router.get("/{consultation_id}")
def get_consultation(consultation_id: str, user=Depends(get_current_user)):
    consultation = consultation_service.get_consultation(consultation_id)
    if consultation is None:
        raise HTTPException(status_code=404, detail="Consultation not found")
    ensure_patient_access(user, consultation.get("patientId"))
    return consultation


@router.post("/", status_code=201)
def create_consultation(data: ConsultationIn, user=Depends(require_permission("canEditPatients"))):
    payload = data.model_dump(exclude_none=True)
    payload["dietitianId"] = payload.get("dietitianId") or user["uid"]
    return consultation_service.create_consultation(payload)


@router.put("/{consultation_id}")
def update_consultation(
    consultation_id: str,
    data: ConsultationUpdate,
    user=Depends(require_permission("canEditPatients")),
):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return consultation_service.update_consultation(consultation_id, updates)


@router.delete("/{consultation_id}")
def delete_consultation(consultation_id: str, user=Depends(require_permission("canEditPatients"))):
    if consultation_service.get_consultation(consultation_id) is None:
        raise HTTPException(status_code=404, detail="Consultation not found")
    consultation_service.delete_consultation(consultation_id)
    return {"message": "Consultation deleted"}
