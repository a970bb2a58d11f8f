from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import get_current_user, require_role
from ayurdiet.models.notification import (
    DietNotesIn,
    MealReminderIn,
    NotificationIn,
    NotificationSettingsIn,
    ScheduleMealRemindersIn,
    WaterReminderIn,
)
from ayurdiet.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])

STAFF = ["dietitian", "hospital-admin"]


def _own_or_404(notification_id: str, user):
    notification = notification_service.get_notification(notification_id)
    if notification is None or notification.get("userId") != user["uid"]:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.get("/")
def my_notifications(unread: bool = False, user=Depends(get_current_user)):
    if unread:
        return {"items": notification_service.get_unread(user["uid"])}
    return {"items": notification_service.get_for_user(user["uid"])}


@router.post("/{notification_id}/read")
def mark_read(notification_id: str, user=Depends(get_current_user)):
    _own_or_404(notification_id, user)
    notification_service.mark_as_read(notification_id)
    return {"message": "Notification marked as read"}


@router.post("/read-all")
def mark_all_read(user=Depends(get_current_user)):
    count = notification_service.mark_all_as_read(user["uid"])
    return {"message": "All notifications marked as read", "count": count}


@router.delete("/{notification_id}")
def delete_notification(notification_id: str, user=Depends(get_current_user)):
    _own_or_404(notification_id, user)
    notification_service.delete_notification(notification_id)
    return {"message": "Notification deleted"}


# -------------------------
# Sending (staff)
# -------------------------
@router.post("/", status_code=201)
def send_notification(data: NotificationIn, user=Depends(require_role(STAFF))):
    return notification_service.create_notification(data.model_dump(exclude_none=True))


@router.post("/meal-reminder", status_code=201)
def meal_reminder(data: MealReminderIn, user=Depends(require_role(STAFF))):
    return notification_service.create_meal_reminder(data.userId, data.mealType, data.scheduledFor)


@router.post("/water-reminder", status_code=201)
def water_reminder(data: WaterReminderIn, user=Depends(require_role(STAFF))):
    return notification_service.create_water_reminder(data.userId, data.scheduledFor, data.targetGlasses)


@router.post("/diet-notes", status_code=201)
def diet_notes(data: DietNotesIn, user=Depends(require_role(STAFF))):
    return notification_service.create_diet_notes(data.userId, data.notes, data.dietPlanId, data.patientId)


@router.post("/schedule-meal-reminders", status_code=201)
def schedule_meal_reminders(data: ScheduleMealRemindersIn, user=Depends(get_current_user)):
    if data.userId != user["uid"] and user["role"] not in STAFF:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    created = notification_service.schedule_reminders(data.userId, data.date)
    return {"message": f"Scheduled {len(created)} reminders", "items": created}


# -------------------------
# Settings
# -------------------------
@router.get("/settings")
def get_settings(user=Depends(get_current_user)):
    current = notification_service.get_settings(user["uid"])
    if current is None:
        return {"userId": user["uid"], **notification_service.DEFAULT_SETTINGS}
    return current


@router.put("/settings")
def update_settings(data: NotificationSettingsIn, user=Depends(get_current_user)):
    return notification_service.upsert_settings(user["uid"], data.model_dump(exclude_none=True))
