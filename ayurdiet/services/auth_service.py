"""
Account operations on top of Firebase Authentication.

The Admin SDK covers user creation, profile updates, claims and token
revocation. Password sign-in and reset emails are only exposed by the
Identity Toolkit REST API, which needs the project's web API key.
"""
from typing import Any, Dict, Optional

import requests
from firebase_admin import auth

from ayurdiet.core.config import settings
from ayurdiet.core.permissions import ROLES, permissions_for
from ayurdiet.services import patient_service, user_service
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts:{action}?key={key}"
REQUEST_TIMEOUT = 15


class AuthError(Exception):
    """Raised when Firebase rejects an account operation."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def _identity_toolkit(action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    if not settings.FIREBASE_WEB_API_KEY:
        raise AuthError("FIREBASE_WEB_API_KEY is not configured", status_code=500)

    url = IDENTITY_TOOLKIT_URL.format(action=action, key=settings.FIREBASE_WEB_API_KEY)
    try:
        resp = requests.post(url, json=payload, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as exc:
        logger.error("Identity Toolkit %s request failed: %s", action, exc)
        raise AuthError("Authentication service unavailable", status_code=503) from exc

    data = resp.json() if resp.content else {}
    if resp.status_code != 200:
        message = (data.get("error") or {}).get("message", "UNKNOWN_ERROR")
        logger.info("Identity Toolkit %s rejected: %s", action, message)
        raise AuthError(message, status_code=401 if action == "signInWithPassword" else 400)
    return data


def sign_up(
    email: str,
    password: str,
    display_name: Optional[str] = None,
    role: str = "patient",
    hospital_id: Optional[str] = None,
    patient_details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create the auth account, its ``users`` profile and the role claim.

    A patient sign-up also creates a fresh ``patients`` record with a
    generated ``PAT`` code and links the profile to it; the new code is
    returned as ``patientCode``. Staff profiles carry ``hospitalId``.
    """
    if role not in ROLES:
        raise AuthError(f"Unknown role: {role}")

    try:
        record = auth.create_user(email=email, password=password, display_name=display_name)
    except auth.EmailAlreadyExistsError as exc:
        raise AuthError("EMAIL_EXISTS", status_code=409) from exc
    except Exception as exc:
        logger.error("Failed to create user %s: %s", email, exc)
        raise AuthError(str(exc)) from exc

    auth.set_custom_user_claims(record.uid, {"role": role})

    name = display_name or email.split("@")[0]
    profile = {
        "uid": record.uid,
        "email": email,
        "displayName": name,
        "role": role,
    }
    patient = None
    if role == "patient":
        details = {k: v for k, v in (patient_details or {}).items() if v is not None}
        patient = patient_service.create_patient({**details, "name": name, "email": email})
        profile["patientId"] = patient["id"]
    elif hospital_id:
        profile["hospitalId"] = hospital_id

    created = user_service.create_user(profile)
    logger.info("Signed up %s as %s", record.uid, role)
    if patient is not None:
        created["patientCode"] = patient["code"]
    return created


def sign_in(email: str, password: str) -> Dict[str, Any]:
    """Exchange email/password for an ID token and stamp ``lastLogin``."""
    data = _identity_toolkit(
        "signInWithPassword",
        {"email": email, "password": password, "returnSecureToken": True},
    )
    uid = data["localId"]
    try:
        user_service.touch_last_login(uid)
    except Exception as exc:
        logger.warning("Could not update lastLogin for %s: %s", uid, exc)

    return {
        "uid": uid,
        "idToken": data["idToken"],
        "refreshToken": data.get("refreshToken"),
        "expiresIn": data.get("expiresIn"),
        "profile": user_service.get_user(uid),
    }


def sign_out(uid: str) -> None:
    auth.revoke_refresh_tokens(uid)


def send_password_reset(email: str) -> None:
    _identity_toolkit("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})


def update_profile(uid: str, display_name: Optional[str] = None, photo_url: Optional[str] = None) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    if display_name is not None:
        changes["display_name"] = display_name
    if photo_url is not None:
        changes["photo_url"] = photo_url
    if not changes:
        return user_service.get_user(uid) or {}

    auth.update_user(uid, **changes)

    profile_changes = {}
    if display_name is not None:
        profile_changes["displayName"] = display_name
    if photo_url is not None:
        profile_changes["photoURL"] = photo_url
    user_service.update_user(uid, profile_changes)
    return {**(user_service.get_user(uid) or {}), **profile_changes}


def set_role(uid: str, role: str) -> None:
    """Set the ``role`` custom claim and mirror it on the profile document."""
    if role not in ROLES:
        raise AuthError(f"Unknown role: {role}")
    auth.set_custom_user_claims(uid, {"role": role})
    user_service.upsert_user(uid, {"role": role})


def current_user_view(uid: str, claims: Dict[str, Any]) -> Dict[str, Any]:
    """Profile plus resolved role and permission flags for ``GET /auth/me``."""
    profile = user_service.get_user(uid)
    role = claims.get("role") or (profile or {}).get("role") or "patient"
    return {
        "uid": uid,
        "email": claims.get("email") or (profile or {}).get("email"),
        "role": role,
        "profile": profile,
        "permissions": permissions_for(role),
    }
