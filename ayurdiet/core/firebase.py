"""
Firebase admin initialization and helpers.

The frontend signs users in with Firebase Authentication and passes the
Firebase ID token to this API. The backend verifies those tokens with the
Firebase Admin SDK and reads/writes Firestore on the caller's behalf.
"""

import os

import firebase_admin
from firebase_admin import credentials, firestore

from ayurdiet.core.config import settings
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

# Global references to avoid re-initialization
_firebase_app = None
db = None


def init_firebase():
    """
    Initialize Firebase Admin SDK if not already initialized.

    Priority:
    1. FIREBASE_CREDENTIALS environment variable / .env entry
    2. Local dev file: ayurdiet/core/firebase_key.json
    """

    global _firebase_app, db

    # Prevent re-initialization (uvicorn --reload)
    if firebase_admin._apps:
        if db is None:
            db = firestore.client()
        return

    cred_path = os.environ.get("FIREBASE_CREDENTIALS", settings.FIREBASE_CREDENTIALS)

    if not os.path.exists(cred_path):
        raise RuntimeError(
            f"Firebase credentials not found at: {cred_path}\n"
            "Set FIREBASE_CREDENTIALS env var or place firebase_key.json correctly."
        )

    cred = credentials.Certificate(cred_path)
    _firebase_app = firebase_admin.initialize_app(cred)

    db = firestore.client()

    logger.info("Firebase Admin initialized successfully.")


def get_db():
    """Return the shared Firestore client (set by init_firebase or tests)."""
    return db
