"""
Firebase Admin SDK setup and ID token verification.
The SDK is initialized once at application startup (see app.main lifespan).
"""
import json
import os
import logging
from typing import Optional
import firebase_admin
from firebase_admin import credentials, auth, exceptions
from app.config import settings

logger = logging.getLogger(__name__)


_firebase_app: Optional[firebase_admin.App] = None


def _load_credentials(value: str) -> credentials.Certificate:
    """
    Build a service-account credential from FIREBASE_CREDENTIALS_JSON.

    The value is either a path (absolute, or relative to backend/) or the
    service-account JSON itself.
    """
    backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    candidates = [value] if os.path.isabs(value) else [
        os.path.join(backend_dir, value.lstrip('./')),
        value,
    ]
    for path in candidates:
        if os.path.exists(path):
            logger.info(f"Loaded Firebase credentials from file: {path}")
            return credentials.Certificate(path)

    try:
        return credentials.Certificate(json.loads(value))
    except json.JSONDecodeError:
        raise ValueError(
            "FIREBASE_CREDENTIALS_JSON must be a valid file path or JSON string. "
            f"Tried: {', '.join(candidates)}"
        )


def initialize_firebase() -> None:
    """
    Initialize Firebase Admin SDK.

    Falls back to application default credentials (gcloud) when
    FIREBASE_CREDENTIALS_JSON is not set.
    """
    global _firebase_app

    if _firebase_app is not None:
        return

    if not settings.firebase_project_id:
        raise ValueError("FIREBASE_PROJECT_ID must be set")

    if settings.firebase_credentials_json:
        cred = _load_credentials(settings.firebase_credentials_json)
    else:
        cred = credentials.ApplicationDefault()

    _firebase_app = firebase_admin.initialize_app(
        cred,
        {"projectId": settings.firebase_project_id}
    )
    logger.info(f"Firebase initialized for project {settings.firebase_project_id}")


def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token and return its decoded claims.

    Raises:
        RuntimeError: Firebase Admin SDK not initialized
        ValueError: token invalid, expired or revoked
    """
    if _firebase_app is None:
        raise RuntimeError("Firebase Admin SDK not initialized. Call initialize_firebase() first.")

    try:
        # Checks signature, expiry, issuer and audience
        return auth.verify_id_token(token, app=_firebase_app)
    except ValueError:
        raise
    except exceptions.FirebaseError as e:
        raise ValueError(f"Token verification failed: {e}")
