"""Role capability table.

Three roles exist: ``patient``, ``dietitian`` and ``hospital-admin``. Each maps
to a fixed set of boolean capability flags. The API consults the table through
``require_permission``; frontends read it from ``GET /auth/me`` to show or hide
features.
"""
from typing import Dict, Optional

ROLES = ("patient", "dietitian", "hospital-admin")

PERMISSION_FLAGS = (
    "canViewPatients",
    "canEditPatients",
    "canViewDietPlans",
    "canEditDietPlans",
    "canViewHospitalData",
    "canEditHospitalData",
    "canAccessAdminPanel",
    "canViewAnalytics",
    "canManageUsers",
    "canViewPersonalData",
    "canEditPersonalData",
    "canAccessChatbot",
    "canViewAllPatients",
    "canManageHospital",
)

ROLE_PERMISSIONS: Dict[str, Dict[str, bool]] = {
    "patient": {
        "canViewPatients": False,
        "canEditPatients": False,
        "canViewDietPlans": True,
        "canEditDietPlans": False,
        "canViewHospitalData": False,
        "canEditHospitalData": False,
        "canAccessAdminPanel": False,
        "canViewAnalytics": False,
        "canManageUsers": False,
        "canViewPersonalData": True,
        "canEditPersonalData": True,
        "canAccessChatbot": True,
        "canViewAllPatients": False,
        "canManageHospital": False,
    },
    "dietitian": {
        "canViewPatients": True,
        "canEditPatients": True,
        "canViewDietPlans": True,
        "canEditDietPlans": True,
        "canViewHospitalData": False,
        "canEditHospitalData": False,
        "canAccessAdminPanel": False,
        "canViewAnalytics": True,
        "canManageUsers": False,
        "canViewPersonalData": False,
        "canEditPersonalData": False,
        "canAccessChatbot": True,
        "canViewAllPatients": False,
        "canManageHospital": False,
    },
    "hospital-admin": {
        "canViewPatients": True,
        "canEditPatients": True,
        "canViewDietPlans": True,
        "canEditDietPlans": True,
        "canViewHospitalData": True,
        "canEditHospitalData": True,
        "canAccessAdminPanel": True,
        "canViewAnalytics": True,
        "canManageUsers": True,
        "canViewPersonalData": False,
        "canEditPersonalData": False,
        "canAccessChatbot": True,
        "canViewAllPatients": True,
        "canManageHospital": True,
    },
}


def permissions_for(role: Optional[str]) -> Dict[str, bool]:
    # Unknown or missing roles get the most restrictive (patient) set
    return dict(ROLE_PERMISSIONS.get(role or "", ROLE_PERMISSIONS["patient"]))


def has_role(user: dict, role: str) -> bool:
    return user_role(user) == role


def has_permission(role: Optional[str], permission: str) -> bool:
    if permission not in PERMISSION_FLAGS:
        raise KeyError(f"Unknown permission: {permission}")
    return permissions_for(role).get(permission, False)


def user_role(user: dict) -> Optional[str]:
    """Role from a decoded token / profile (``role`` claim, or first of ``roles``)."""
    role = user.get("role") or user.get("roles")
    if isinstance(role, list):
        return next((r for r in role if r in ROLES), None)
    return role
