from fastapi import APIRouter

from ayurdiet.api.routes import (
    ai,
    auth,
    consultations,
    diet_plans,
    feedback,
    foods,
    ifct,
    meal_tracking,
    mess_menus,
    notifications,
    patients,
    policies,
    realtime,
    users,
    vitals,
)

api_router = APIRouter(prefix="/api")

# Accounts
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(users.hospitals_router)

# Clinical records
api_router.include_router(patients.router)
api_router.include_router(diet_plans.router)
api_router.include_router(vitals.router)
api_router.include_router(consultations.router)
api_router.include_router(meal_tracking.router)
api_router.include_router(feedback.router)

# Hospital kitchen and reference data
api_router.include_router(mess_menus.router)
api_router.include_router(foods.router)
api_router.include_router(ifct.router)
api_router.include_router(policies.router)

# Messaging, AI and live feeds
api_router.include_router(notifications.router)
api_router.include_router(ai.router)
api_router.include_router(realtime.router)
