"""User service - the caller's own user document"""
import logging
from typing import Any, Dict, Optional

from lessonhub.core.config import USERS_COLLECTION
from lessonhub.db.firestore import (
    SERVER_TIMESTAMP, get_document, is_permission_error, translate_store_errors
)
from lessonhub.schemas.auth import Principal

logger = logging.getLogger(__name__)


def get_user_document(user_id: str, db) -> Optional[Dict[str, Any]]:
    """Get a user document by id"""
    with translate_store_errors("read user profile"):
        return get_document(USERS_COLLECTION, user_id, db)


def is_admin_document(user: Optional[Dict[str, Any]]) -> bool:
    """Admin iff the stored flag is boolean True"""
    return bool(user) and user.get("isAdmin") is True


def ensure_user_profile(principal: Principal, display_name: str, db) -> Dict[str, Any]:
    """Create the caller's user document on first sign-up.

    Existing documents are returned untouched; role flags are never reset.
    """
    existing = get_user_document(principal.uid, db)
    if existing is not None:
        return existing

    user_data = {
        "email": principal.email,
        "displayName": display_name,
        "photoURL": principal.picture,
        "isAdmin": False,
        "isCoach": False,
        "isSubscriber": False,
        "createdAt": SERVER_TIMESTAMP,
        "lastLoginAt": SERVER_TIMESTAMP,
    }
    with translate_store_errors("create user profile"):
        db.collection(USERS_COLLECTION).document(principal.uid).set(user_data)

    logger.info(f"User document created for {principal.uid}")
    return get_user_document(principal.uid, db) or {**user_data, "id": principal.uid}


def touch_last_login(user_id: str, db) -> bool:
    """Record ``lastLoginAt``. Never fails a login: errors are logged and False returned."""
    try:
        db.collection(USERS_COLLECTION).document(user_id).update({"lastLoginAt": SERVER_TIMESTAMP})
        return True
    except Exception as e:
        if is_permission_error(e):
            logger.warning(f"Insufficient permissions to update login time for {user_id}: {e}")
        else:
            logger.warning(f"Failed to update login time for {user_id}, continuing: {e}")
        return False
