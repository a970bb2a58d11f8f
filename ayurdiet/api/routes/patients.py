"""Patient-related API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import ensure_patient_access, get_current_user, require_permission
from ayurdiet.core.permissions import has_permission
from ayurdiet.models.patient import PatientIn, PatientUpdate
from ayurdiet.services import patient_service

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("/")
def list_patients(
    dietitianId: Optional[str] = None,
    hospitalId: Optional[str] = None,
    user=Depends(require_permission("canViewPatients")),
):
    """List patients.

    - Hospital admins see every patient (optionally by hospital/dietitian).
    - Dietitians see the patients assigned to them.
    """
    if has_permission(user["role"], "canViewAllPatients"):
        if hospitalId:
            items = patient_service.get_by_hospital(hospitalId)
        elif dietitianId:
            items = patient_service.get_by_dietitian(dietitianId)
        else:
            items = patient_service.list_patients()
    else:
        items = patient_service.get_by_dietitian(user["uid"])

    return {"items": items}


@router.get("/{patient_id}")
def get_patient(patient_id: str, user=Depends(get_current_user)):
    ensure_patient_access(user, patient_id)
    patient = patient_service.get_patient(patient_id)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.post("/", status_code=201)
def create_patient(data: PatientIn, user=Depends(require_permission("canEditPatients"))):
    payload = data.model_dump(exclude_none=True)
    payload.setdefault("dietitianId", user["uid"])
    return patient_service.create_patient(payload)


@router.put("/{patient_id}")
def update_patient(
    patient_id: str,
    data: PatientUpdate,
    user=Depends(require_permission("canEditPatients")),
):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    patient_service.update_patient(patient_id, updates)
    return {"message": "Patient updated", "id": patient_id}


@router.delete("/{patient_id}")
def delete_patient(patient_id: str, user=Depends(require_permission("canEditPatients"))):
    """Removes the patient document only; related records are left as they are."""
    if patient_service.get_patient(patient_id) is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    patient_service.delete_patient(patient_id)
    return {"message": "Patient deleted"}
