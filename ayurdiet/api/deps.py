"""
API dependencies (Firebase auth verification, role and permission checks).

The caller's role comes from the ``role`` custom claim on the Firebase ID
token. Accounts created before claims were set fall back to the ``role``
stored on their ``users/{uid}`` profile, and finally to ``patient``.
"""

from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth

from ayurdiet.core.permissions import ROLES, has_permission, user_role
from ayurdiet.services import patient_service, user_service
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

security = HTTPBearer(auto_error=True)


def verify_token(id_token: str) -> Dict[str, Any]:
    """Decode an ID token and attach the resolved ``role``. Raises 401."""
    try:
        decoded = auth.verify_id_token(id_token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail="Invalid ID token") from exc

    role = user_role(decoded)
    if role not in ROLES:
        try:
            profile = user_service.get_user(decoded["uid"]) or {}
        except Exception as exc:
            logger.warning("Could not load profile for %s: %s", decoded.get("uid"), exc)
            profile = {}
        role = profile.get("role") if profile.get("role") in ROLES else "patient"

    return {**decoded, "role": role}


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
):
    """
    Verify Firebase ID token from Authorization header.

    Expects:
        Authorization: Bearer <id_token>
    """
    return verify_token(credentials.credentials)


def get_current_profile(user=Depends(get_current_user)) -> Optional[Dict[str, Any]]:
    return user_service.get_user(user["uid"])


def require_role(allowed: List[str]) -> Callable:
    """
    Return a FastAPI dependency that enforces a user's role.

    Example:
        user=Depends(require_role(["dietitian", "hospital-admin"]))
    """

    def _checker(user=Depends(get_current_user)):
        if user.get("role") not in allowed:
            raise HTTPException(
                status_code=403,
                detail="Insufficient permissions",
            )
        return user

    return _checker


def require_permission(permission: str) -> Callable:
    """Same as require_role but checks one capability flag of the role table."""

    def _checker(user=Depends(get_current_user)):
        if not has_permission(user.get("role"), permission):
            raise HTTPException(
                status_code=403,
                detail=f"Missing permission: {permission}",
            )
        return user

    return _checker


def display_name(user: Dict[str, Any]) -> Optional[str]:
    return user.get("name") or user.get("email")


def ensure_patient_access(user: Dict[str, Any], patient_id: str) -> None:
    """Staff may read any patient; a patient only the record linked to their profile."""
    if user.get("role") != "patient":
        return
    profile = user_service.get_user(user["uid"]) or {}
    if profile.get("patientId") != patient_id:
        raise HTTPException(status_code=403, detail="Patients can only access their own records")


def user_hospital(user: Dict[str, Any]) -> Optional[str]:
    """Hospital from the caller's profile; patients fall back to their linked patient record."""
    profile = user_service.get_user(user["uid"]) or {}
    if profile.get("hospitalId"):
        return profile["hospitalId"]
    if user.get("role") == "patient" and profile.get("patientId"):
        patient = patient_service.get_patient(profile["patientId"]) or {}
        return patient.get("hospitalId")
    return None


def ensure_hospital_access(user: Dict[str, Any], hospital_id: str) -> None:
    if user_hospital(user) != hospital_id:
        raise HTTPException(status_code=403, detail="Not a member of this hospital")
