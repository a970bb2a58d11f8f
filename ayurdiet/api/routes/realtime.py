"""
WebSocket bridges for the real-time subscriptions.

Clients connect with ``?token=<Firebase ID token>``. Every Firestore
snapshot is forwarded as ``{"type": "snapshot", "data": ...}``; the
listener is detached when the socket closes.
"""

import asyncio
import json
from typing import Any, Callable

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from ayurdiet.api.deps import ensure_hospital_access, ensure_patient_access, verify_token
from ayurdiet.core.permissions import has_permission
from ayurdiet.services import realtime
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])

POLICY_VIOLATION = 1008


async def _forward(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        message = await queue.get()
        await websocket.send_text(json.dumps(message, default=str))


async def _stream(websocket: WebSocket, token: str, subscribe: Callable[[dict, Callable, Callable], Callable]):
    """
    Authenticate, attach the listener and pump snapshots until disconnect.

    Token checks and listener setup run in the threadpool. Snapshot
    callbacks fire on Firestore's watch thread and hand messages to the
    event loop through ``call_soon_threadsafe``.
    """
    await websocket.accept()
    try:
        user = await run_in_threadpool(verify_token, token)
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        def _push(message: Any):
            loop.call_soon_threadsafe(queue.put_nowait, message)

        unsubscribe = await run_in_threadpool(
            subscribe,
            user,
            lambda data: _push({"type": "snapshot", "data": data}),
            lambda exc: _push({"type": "error", "message": str(exc)}),
        )
    except HTTPException as e:
        await websocket.close(code=POLICY_VIOLATION, reason=str(e.detail))
        return

    sender = asyncio.create_task(_forward(websocket, queue))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Realtime client %s disconnected", user.get("uid"))
    finally:
        sender.cancel()
        await run_in_threadpool(unsubscribe)


@router.websocket("/patients")
async def patients_feed(websocket: WebSocket, token: str = ""):
    def subscribe(user, on_data, on_error):
        if not has_permission(user["role"], "canViewPatients"):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        dietitian_id = None if has_permission(user["role"], "canViewAllPatients") else user["uid"]
        return realtime.patients(on_data, dietitian_id=dietitian_id, on_error=on_error)

    await _stream(websocket, token, subscribe)


@router.websocket("/patients/{patient_id}")
async def patient_feed(websocket: WebSocket, patient_id: str, token: str = ""):
    def subscribe(user, on_data, on_error):
        ensure_patient_access(user, patient_id)
        return realtime.patient(patient_id, on_data, on_error=on_error)

    await _stream(websocket, token, subscribe)


def _patient_scoped(feed: Callable):
    """Build a handler for a feed keyed by patient id."""

    async def handler(websocket: WebSocket, patient_id: str, token: str = ""):
        def subscribe(user, on_data, on_error):
            ensure_patient_access(user, patient_id)
            return feed(patient_id, on_data, on_error=on_error)

        await _stream(websocket, token, subscribe)

    return handler


router.add_api_websocket_route("/patients/{patient_id}/vitals", _patient_scoped(realtime.vitals))
router.add_api_websocket_route("/patients/{patient_id}/diet-plans", _patient_scoped(realtime.diet_plans))
router.add_api_websocket_route("/patients/{patient_id}/consultations", _patient_scoped(realtime.consultations))
router.add_api_websocket_route("/patients/{patient_id}/meal-tracking", _patient_scoped(realtime.meal_tracking))
router.add_api_websocket_route("/patients/{patient_id}/feedback", _patient_scoped(realtime.patient_feedback))


@router.websocket("/hospitals/{hospital_id}/mess-menus")
async def mess_menus_feed(websocket: WebSocket, hospital_id: str, token: str = ""):
    def subscribe(user, on_data, on_error):
        ensure_hospital_access(user, hospital_id)
        return realtime.mess_menus(hospital_id, on_data, on_error=on_error)

    await _stream(websocket, token, subscribe)


@router.websocket("/notifications")
async def notifications_feed(websocket: WebSocket, token: str = ""):
    def subscribe(user, on_data, on_error):
        return realtime.notifications(user["uid"], on_data, on_error=on_error)

    await _stream(websocket, token, subscribe)
