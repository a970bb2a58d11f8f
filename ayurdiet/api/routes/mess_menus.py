from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import (
    ensure_hospital_access,
    get_current_profile,
    get_current_user,
    require_permission,
    user_hospital,
)
from ayurdiet.models.mess_menu import MessMenuIn, MessMenuUpdate
from ayurdiet.services import mess_menu_service

router = APIRouter(prefix="/mess-menus", tags=["mess_menus"])


def _hospital_of(profile: Optional[dict], explicit: Optional[str]) -> str:
    hospital_id = explicit or (profile or {}).get("hospitalId")
    if not hospital_id:
        raise HTTPException(status_code=400, detail="hospitalId is required")
    return hospital_id


def _readable_hospital(user: dict, explicit: Optional[str]) -> str:
    """The caller's own hospital; an explicit id must match it."""
    if explicit:
        ensure_hospital_access(user, explicit)
        return explicit
    hospital_id = user_hospital(user)
    if not hospital_id:
        raise HTTPException(status_code=400, detail="hospitalId is required")
    return hospital_id


@router.get("/")
def list_menus(hospitalId: Optional[str] = None, user=Depends(get_current_user)):
    return {"items": mess_menu_service.get_by_hospital(_readable_hospital(user, hospitalId))}


@router.get("/today")
def todays_menus(hospitalId: Optional[str] = None, user=Depends(get_current_user)):
    return {"items": mess_menu_service.get_today_menus(_readable_hospital(user, hospitalId))}


@router.get("/{menu_id}")
def get_menu(menu_id: str, user=Depends(get_current_user)):
    menu = mess_menu_service.get_menu(menu_id)
    if menu is None:
        raise HTTPException(status_code=404, detail="Mess menu not found")
    return menu


@router.post("/", status_code=201)
def create_menu(
    data: MessMenuIn,
    user=Depends(require_permission("canEditHospitalData")),
    profile=Depends(get_current_profile),
):
    payload = data.model_dump(exclude_none=True)
    payload["hospitalId"] = _hospital_of(profile, data.hospitalId)
    return mess_menu_service.create_menu(payload, created_by=user["uid"])


@router.put("/{menu_id}")
def update_menu(
    menu_id: str,
    data: MessMenuUpdate,
    user=Depends(require_permission("canEditHospitalData")),
):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return mess_menu_service.update_menu(menu_id, updates)


@router.post("/{menu_id}/activate")
def activate_menu(menu_id: str, user=Depends(require_permission("canEditHospitalData"))):
    menu = mess_menu_service.get_menu(menu_id)
    if menu is None:
        raise HTTPException(status_code=404, detail="Mess menu not found")
    mess_menu_service.set_active_menu(menu["hospitalId"], menu_id)
    return {"message": "Mess menu activated"}


@router.delete("/{menu_id}")
def delete_menu(menu_id: str, user=Depends(require_permission("canEditHospitalData"))):
    if mess_menu_service.get_menu(menu_id) is None:
        raise HTTPException(status_code=404, detail="Mess menu not found")
    mess_menu_service.delete_menu(menu_id)
    return {"message": "Mess menu deleted"}
