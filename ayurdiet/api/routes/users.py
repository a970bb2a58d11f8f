"""User profile and hospital administration routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import get_current_user, require_permission, require_role
from ayurdiet.models.user import HospitalIn, HospitalUpdate, UserIn, UserUpdate
from ayurdiet.services import auth_service, user_service

router = APIRouter(prefix="/users", tags=["users"])
hospitals_router = APIRouter(prefix="/hospitals", tags=["hospitals"])


@router.get("/")
def list_users(
    role: Optional[str] = None,
    hospitalId: Optional[str] = None,
    user=Depends(require_permission("canManageUsers")),
):
    if role:
        items = user_service.get_by_role(role)
    elif hospitalId:
        items = user_service.get_by_hospital(hospitalId)
    else:
        items = user_service.list_users()
    return {"items": items}


@router.get("/{uid}")
def get_user(uid: str, user=Depends(get_current_user)):
    if uid != user["uid"] and user["role"] != "hospital-admin":
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    profile = user_service.get_user(uid)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.post("/", status_code=201)
def create_user_profile(data: UserIn, user=Depends(require_permission("canManageUsers"))):
    return user_service.create_user(data.model_dump(exclude_none=True))


@router.put("/{uid}")
def update_user(uid: str, data: UserUpdate, user=Depends(require_permission("canManageUsers"))):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    role = updates.pop("role", None)
    if role:
        # Claim and profile must agree
        auth_service.set_role(uid, role)
    if updates:
        user_service.update_user(uid, updates)
    return {"message": "User updated", "uid": uid}


@router.delete("/{uid}")
def delete_user(uid: str, user=Depends(require_permission("canManageUsers"))):
    if user_service.get_user(uid) is None:
        raise HTTPException(status_code=404, detail="User not found")
    user_service.delete_user(uid)
    return {"message": "User deleted"}


# -------------------------
# Hospitals
# -------------------------
@hospitals_router.get("/")
def list_hospitals(adminId: Optional[str] = None, user=Depends(get_current_user)):
    if adminId:
        return {"items": user_service.get_hospitals_by_admin(adminId)}
    return {"items": user_service.list_hospitals()}


@hospitals_router.get("/{hospital_id}")
def get_hospital(hospital_id: str, user=Depends(get_current_user)):
    hospital = user_service.get_hospital(hospital_id)
    if hospital is None:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return hospital


@hospitals_router.post("/", status_code=201)
def create_hospital(data: HospitalIn, user=Depends(require_role(["hospital-admin"]))):
    payload = data.model_dump(exclude_none=True)
    payload["adminId"] = payload.get("adminId") or user["uid"]
    return user_service.create_hospital(payload)


@hospitals_router.put("/{hospital_id}")
def update_hospital(
    hospital_id: str,
    data: HospitalUpdate,
    user=Depends(require_permission("canManageHospital")),
):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return user_service.update_hospital(hospital_id, updates)


@hospitals_router.delete("/{hospital_id}")
def delete_hospital(hospital_id: str, user=Depends(require_permission("canManageHospital"))):
    if user_service.get_hospital(hospital_id) is None:
        raise HTTPException(status_code=404, detail="Hospital not found")
    user_service.delete_hospital(hospital_id)
    return {"message": "Hospital deleted"}
