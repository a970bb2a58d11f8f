"""
Notifications and per-user notification settings.

Helpers build the fixed notification kinds (meal/water reminders, diet
notes, diet plan delivery/activation). Scheduled notifications carry
``scheduledFor`` and ``sentAt=None`` until the reminder worker sends them.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ayurdiet.core.config import settings
from ayurdiet.services import firestore_store as store
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import utcnow

logger = get_logger(__name__)

NOTIFICATIONS = "notifications"
SETTINGS = "notificationSettings"
NEWEST_FIRST = ("createdAt", store.DESCENDING)

DEFAULT_SETTINGS = {
    "mealReminders": True,
    "waterReminders": True,
    "dietNotes": True,
    "pushNotifications": False,
    "emailNotifications": False,
    "reminderTimes": {
        "breakfast": "08:00",
        "lunch": "13:00",
        "dinner": "19:00",
        "snacks": ["10:00", "16:00"],
    },
    "waterReminderInterval": 120,  # minutes
}
WATER_WINDOW = ("08:00", "20:00")


# -------------------------
# Notifications
# -------------------------
def get_for_user(user_id: str) -> List[Dict[str, Any]]:
    return store.get_all(NOTIFICATIONS, [("userId", "==", user_id)], order_by=NEWEST_FIRST)


def get_unread(user_id: str) -> List[Dict[str, Any]]:
    return store.get_all(
        NOTIFICATIONS,
        [("userId", "==", user_id), ("isRead", "==", False)],
        order_by=NEWEST_FIRST,
    )


def get_notification(notification_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(NOTIFICATIONS, notification_id)


def create_notification(data: Dict[str, Any]) -> Dict[str, Any]:
    payload = {
        "isRead": False,
        "priority": "medium",
        "sentAt": None,
        **data,
    }
    return store.create(NOTIFICATIONS, payload)


def delete_notification(notification_id: str) -> None:
    store.delete(NOTIFICATIONS, notification_id)


def mark_as_read(notification_id: str) -> Dict[str, Any]:
    return store.update(NOTIFICATIONS, notification_id, {"isRead": True, "readAt": utcnow()})


def mark_all_as_read(user_id: str) -> int:
    unread = get_unread(user_id)
    for notification in unread:
        mark_as_read(notification["id"])
    return len(unread)


def get_due(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Scheduled notifications whose time has come and that were not sent yet."""
    return store.get_all(
        NOTIFICATIONS,
        [("scheduledFor", "<=", now or utcnow()), ("sentAt", "==", None)],
    )


def mark_sent(notification_id: str) -> Dict[str, Any]:
    return store.update(NOTIFICATIONS, notification_id, {"sentAt": utcnow()})


# -------------------------
# Helpers per notification kind
# -------------------------
def create_meal_reminder(user_id: str, meal_type: str, scheduled_for: datetime) -> Dict[str, Any]:
    meal = "snack" if meal_type == "snacks" else meal_type
    return create_notification({
        "userId": user_id,
        "type": "meal_reminder",
        "title": f"{meal.capitalize()} Time",
        "message": f"It's time for your {meal} according to your diet plan.",
        "data": {"mealType": meal_type},
        "scheduledFor": scheduled_for,
        "priority": "low" if meal_type == "snacks" else "medium",
    })


def create_water_reminder(user_id: str, scheduled_for: datetime, target_glasses: Optional[int] = None) -> Dict[str, Any]:
    target = target_glasses or settings.DEFAULT_WATER_TARGET
    return create_notification({
        "userId": user_id,
        "type": "water_intake",
        "title": "Stay Hydrated",
        "message": f"Remember to drink water. Your daily target is {target} glasses.",
        "data": {"waterTarget": target},
        "scheduledFor": scheduled_for,
        "priority": "low",
    })


def create_diet_notes(
    user_id: str,
    notes: str,
    diet_plan_id: Optional[str] = None,
    patient_id: Optional[str] = None,
) -> Dict[str, Any]:
    return create_notification({
        "userId": user_id,
        "type": "diet_notes",
        "title": "Important Diet Notes",
        "message": notes,
        "data": {"dietPlanId": diet_plan_id, "patientId": patient_id},
        "priority": "high",
    })


def create_general(
    user_id: str,
    title: str,
    message: str,
    priority: str = "medium",
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return create_notification({
        "userId": user_id,
        "type": "general",
        "title": title,
        "message": message,
        "data": data,
        "priority": priority,
    })


def _by_dietitian(dietitian_name: Optional[str]) -> str:
    return f" by {dietitian_name}" if dietitian_name else ""


def create_diet_plan_delivery(
    user_id: str, diet_plan_id: str, title: str, dietitian_name: Optional[str] = None
) -> Dict[str, Any]:
    return create_notification({
        "userId": user_id,
        "type": "diet_plan_delivery",
        "title": "New Diet Plan Available",
        "message": (
            f'Your new diet plan "{title}" has been delivered{_by_dietitian(dietitian_name)}. '
            "Please review and start following it."
        ),
        "data": {"dietPlanId": diet_plan_id},
        "priority": "high",
    })


def create_diet_plan_activation(
    user_id: str, diet_plan_id: str, title: str, dietitian_name: Optional[str] = None
) -> Dict[str, Any]:
    return create_notification({
        "userId": user_id,
        "type": "diet_plan_activation",
        "title": "Diet Plan Activated",
        "message": (
            f'Your diet plan "{title}" has been activated{_by_dietitian(dietitian_name)}. '
            "You can now start following it."
        ),
        "data": {"dietPlanId": diet_plan_id},
        "priority": "high",
    })


# -------------------------
# Settings
# -------------------------
def get_settings(user_id: str) -> Optional[Dict[str, Any]]:
    items = store.get_all(SETTINGS, [("userId", "==", user_id)], limit=1)
    return items[0] if items else None


def upsert_settings(user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Update the user's settings, creating them from the defaults on first use."""
    existing = get_settings(user_id)
    if existing:
        store.update(SETTINGS, existing["id"], data)
        return {**existing, **data}
    return store.create(SETTINGS, {"userId": user_id, **DEFAULT_SETTINGS, **data})


def _at(day: datetime, hhmm: str) -> datetime:
    hours, minutes = hhmm.split(":")
    return day.replace(hour=int(hours), minute=int(minutes), second=0, microsecond=0)


def schedule_meal_reminders(
    user_id: str, day: Optional[datetime] = None, now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """
    Create ``day``'s meal reminders from the user's saved settings.

    Nothing is created for users without settings or with meal reminders
    switched off. Only times still ahead of ``now`` get a reminder.
    """
    user_settings = get_settings(user_id)
    if not user_settings or not user_settings.get("mealReminders"):
        return []

    now = now or utcnow()
    day = day or now
    times = {**DEFAULT_SETTINGS["reminderTimes"], **(user_settings.get("reminderTimes") or {})}
    created = []

    for meal_type in ("breakfast", "lunch", "dinner"):
        at = _at(day, times[meal_type])
        if at > now:
            created.append(create_meal_reminder(user_id, meal_type, at))
    for snack_time in times.get("snacks") or []:
        at = _at(day, snack_time)
        if at > now:
            created.append(create_meal_reminder(user_id, "snacks", at))
    return created


def schedule_water_reminders(
    user_id: str, day: Optional[datetime] = None, now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """Water reminders every ``waterReminderInterval`` minutes between 08:00 and 20:00."""
    user_settings = get_settings(user_id)
    if not user_settings or not user_settings.get("waterReminders"):
        return []

    now = now or utcnow()
    day = day or now
    interval = user_settings.get("waterReminderInterval") or DEFAULT_SETTINGS["waterReminderInterval"]
    current = _at(day, WATER_WINDOW[0])
    last = _at(day, WATER_WINDOW[1])
    created = []
    while current <= last:
        if current > now:
            created.append(create_water_reminder(user_id, current))
        current += timedelta(minutes=interval)
    return created


def schedule_reminders(
    user_id: str, day: Optional[datetime] = None, now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    now = now or utcnow()
    created = schedule_meal_reminders(user_id, day, now) + schedule_water_reminders(user_id, day, now)
    logger.info("Scheduled %d reminders for %s", len(created), user_id)
    return created
