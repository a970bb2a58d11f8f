from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import ensure_patient_access, get_current_user, require_permission
from ayurdiet.models.vitals import VitalsIn, VitalsUpdate
from ayurdiet.services import vitals_service

router = APIRouter(prefix="/vitals", tags=["vitals"])


@router.get("/patient/{patient_id}")
def vitals_for_patient(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    return {"items": vitals_service.get_by_patient(patient_id)}


@router.get("/patient/{patient_id}/latest")
def latest_vitals(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    latest = vitals_service.get_latest(patient_id)
    if latest is None:
        raise HTTPException(status_code=404, detail="No vitals recorded")
    return latest


@router.get("/{vitals_id}")
def get_vitals(vitals_id: str, user=Depends(get_current_user)):
    record = vitals_service.get_vitals(vitals_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Vitals record not found")
    ensure_patient_access(user, record.get("patientId"))
    return record


@router.post("/", status_code=201)
def record_vitals(data: VitalsIn, user=Depends(require_permission("canEditPatients"))):
    payload = data.model_dump(exclude_none=True)
    payload["recordedBy"] = payload.get("recordedBy") or user["uid"]
    return vitals_service.create_vitals(payload)


@router.put("/{vitals_id}")
def update_vitals(vitals_id: str, data: VitalsUpdate, user=Depends(require_permission("canEditPatients"))):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return vitals_service.update_vitals(vitals_id, updates)


@router.delete("/{vitals_id}")
def delete_vitals(vitals_id: str, user=Depends(require_permission("canEditPatients"))):
    if vitals_service.get_vitals(vitals_id) is None:
        raise HTTPException(status_code=404, detail="Vitals record not found")
    vitals_service.delete_vitals(vitals_id)
    return {"message": "Vitals record deleted"}
