"""User profiles (``users``, keyed by auth uid) and hospitals."""
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.time_utils import utcnow

USERS = "users"
HOSPITALS = "hospitals"


# -------------------------
# Users
# -------------------------
def list_users() -> List[Dict[str, Any]]:
    return store.get_all(USERS)


def get_user(uid: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(USERS, uid)


def get_by_role(role: str) -> List[Dict[str, Any]]:
    return store.get_all(USERS, [("role", "==", role)])


def get_by_hospital(hospital_id: str) -> List[Dict[str, Any]]:
    return store.get_all(USERS, [("hospitalId", "==", hospital_id)])


def create_user(data: Dict[str, Any]) -> Dict[str, Any]:
    now = utcnow()
    payload = {k: v for k, v in data.items() if k != "uid"}
    payload.setdefault("createdAt", now)
    payload.setdefault("lastLogin", now)
    return store.set_document(USERS, data["uid"], payload)


def update_user(uid: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(USERS, uid, data)


def upsert_user(uid: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Merge fields into the profile, creating the document if needed."""
    return store.set_document(USERS, uid, data, merge=True)


def touch_last_login(uid: str) -> None:
    upsert_user(uid, {"lastLogin": utcnow()})


def delete_user(uid: str) -> None:
    store.delete(USERS, uid)


# -------------------------
# Hospitals
# -------------------------
def list_hospitals() -> List[Dict[str, Any]]:
    return store.get_all(HOSPITALS)


def get_hospital(hospital_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(HOSPITALS, hospital_id)


def get_hospitals_by_admin(admin_id: str) -> List[Dict[str, Any]]:
    return store.get_all(HOSPITALS, [("adminId", "==", admin_id)])


def create_hospital(data: Dict[str, Any]) -> Dict[str, Any]:
    return store.create(HOSPITALS, data)


def update_hospital(hospital_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(HOSPITALS, hospital_id, data)


def delete_hospital(hospital_id: str) -> None:
    store.delete(HOSPITALS, hospital_id)
