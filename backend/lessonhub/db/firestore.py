"""Firestore client factory and store-boundary helpers

Usage:
    from lessonhub.db.firestore import get_db, translate_store_errors

    db = get_db()
    with translate_store_errors("read coaches"):
        docs = list(db.collection("users").stream())
"""
import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore import SERVER_TIMESTAMP, Query  # noqa: F401 - re-exported for services
from google.cloud.firestore_v1.base_query import FieldFilter  # noqa: F401

from lessonhub.core.config import settings
from lessonhub.core.exceptions import (
    LessonHubError, NotFoundError, PermissionDeniedError, StoreUnavailableError
)
from lessonhub.core.metrics import store_errors_counter

logger = logging.getLogger(__name__)

# Singleton instance for the Firestore client
_firestore_client = None

PERMISSION_GUIDANCE = (
    "Check the Firestore security rules for this project, "
    "or sign out and sign in again to refresh your credentials."
)


def initialize_firebase() -> firebase_admin.App:
    """Initialize the default Firebase Admin app once per process"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    service_account = settings.service_account_info()

    if service_account:
        cred = credentials.Certificate(service_account)
    elif settings.GOOGLE_APPLICATION_CREDENTIALS:
        if not os.path.exists(settings.GOOGLE_APPLICATION_CREDENTIALS):
            raise RuntimeError(
                f"GOOGLE_APPLICATION_CREDENTIALS path does not exist: {settings.GOOGLE_APPLICATION_CREDENTIALS}"
            )
        cred = credentials.Certificate(settings.GOOGLE_APPLICATION_CREDENTIALS)
    else:
        logger.warning("Firebase service account not configured - falling back to application default credentials")
        cred = None

    app = firebase_admin.initialize_app(credential=cred, options=options)
    logger.info(f"Firebase Admin initialized for project {app.project_id or 'default'}")
    return app


def get_firestore_client():
    """Get or create the singleton Firestore client"""
    global _firestore_client
    if _firestore_client is None:
        _firestore_client = firestore.client(initialize_firebase())
    return _firestore_client


def get_db():
    """Dependency for FastAPI endpoints"""
    return get_firestore_client()


def is_permission_error(exc: BaseException) -> bool:
    """True when the store refused the call because of its security rules"""
    if isinstance(exc, (google_exceptions.PermissionDenied, google_exceptions.Forbidden,
                        google_exceptions.Unauthenticated, PermissionDeniedError)):
        return True
    message = str(exc).lower()
    return "permission" in message or "insufficient" in message


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Map Google API failures raised inside the block onto the domain taxonomy"""
    try:
        yield
    except LessonHubError:
        raise
    except google_exceptions.NotFound as e:
        store_errors_counter.labels(kind="not_found").inc()
        raise NotFoundError(f"Not found while trying to {operation}") from e
    except google_exceptions.GoogleAPIError as e:
        if is_permission_error(e):
            store_errors_counter.labels(kind="permission_denied").inc()
            logger.error(f"Permission denied while trying to {operation}: {e}")
            raise PermissionDeniedError(
                f"Permission denied: unable to {operation}. {PERMISSION_GUIDANCE}"
            ) from e
        store_errors_counter.labels(kind="transient_io").inc()
        logger.error(f"Store error while trying to {operation}: {e}")
        raise StoreUnavailableError(f"Failed to {operation}: {e}") from e


def document_to_dict(snapshot) -> Dict[str, Any]:
    """Flatten a document snapshot into ``{"id": ..., **fields}``"""
    data = snapshot.to_dict() or {}
    return {**data, "id": snapshot.id}


def get_document(collection: str, document_id: str, db) -> Optional[Dict[str, Any]]:
    """Fetch one document as a dict, or None when it does not exist"""
    snapshot = db.collection(collection).document(document_id).get()
    if not snapshot.exists:
        return None
    return document_to_dict(snapshot)
