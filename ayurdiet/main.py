from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ayurdiet.api.routes.router import api_router
from ayurdiet.core.config import settings
from ayurdiet.core.firebase import init_firebase
from ayurdiet.services.ai_flows import AIFlowError
from ayurdiet.services.auth_service import AuthError
from ayurdiet.services.firestore_store import DocumentNotFound, MissingIndexError, StoreError
from ayurdiet.services.logger import get_logger
from ayurdiet.workers.reminder_worker import start_reminder_worker

logger = get_logger(__name__)

app = FastAPI(title="AyurDiet Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    """Initialize Firebase and, when enabled, the reminder dispatch thread."""
    init_firebase()

    if settings.REMINDER_WORKER_ENABLED:
        start_reminder_worker()


@app.exception_handler(DocumentNotFound)
async def not_found_handler(request: Request, exc: DocumentNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(MissingIndexError)
async def missing_index_handler(request: Request, exc: MissingIndexError):
    logger.warning("Query needs a Firestore index: %s", exc)
    return JSONResponse(
        status_code=409,
        content={"detail": "This view needs a Firestore index that is still being built. Try again shortly."},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(AIFlowError)
async def ai_error_handler(request: Request, exc: AIFlowError):
    return JSONResponse(status_code=500, content={"detail": f"AI request failed: {exc}"})


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"message": "AyurDiet Backend is running"}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


app.include_router(api_router)
