"""Coach service - resolves which user documents are coaches

The ``isCoach`` flag has been written both as a boolean and as the string
"true" over the life of the users collection. Every read path goes through
``is_coach_flag`` and none of them rewrites the stored value.
"""
from typing import Any, Dict, List, Optional

from pyuca import Collator

from lessonhub.core.config import UNNAMED_COACH, USERS_COLLECTION
from lessonhub.core.logging import coaches_logger
from lessonhub.core.metrics import coach_resolution_counter
from lessonhub.db.firestore import (
    FieldFilter, SERVER_TIMESTAMP, get_document, translate_store_errors
)
from lessonhub.schemas.coach import Coach, CoachCreate, CoachUpdate
from lessonhub.utils.slugs import slugify


def is_coach_flag(value: Any) -> bool:
    """True for boolean True or the literal string "true", nothing else"""
    return value is True or value == "true"


def project_coach(user_id: str, data: Dict[str, Any]) -> Coach:
    """Build the public coach view of a user document"""
    return Coach(
        id=user_id,
        name=data.get("displayName") or data.get("name") or UNNAMED_COACH,
        avatar=data.get("photoURL") or data.get("avatar") or None,
    )


_collator = Collator()


def coach_sort_key(coach: Coach):
    """Unicode collation order by name: case and accents only break ties"""
    return (_collator.sort_key(coach.name), coach.name)


def resolve_coaches(db) -> List[Coach]:
    """Return every coach, sorted by name.

    Three attempts, each only when the previous one found nothing:
    equality on boolean ``True``, equality on the string ``"true"``, then a
    full scan of the users collection filtered in memory.

    Raises:
        PermissionDeniedError: the store's security rules refused the read
        StoreUnavailableError: any other store failure
    """
    users = db.collection(USERS_COLLECTION)

    with translate_store_errors("read coaches data"):
        snapshots = list(users.where(filter=FieldFilter("isCoach", "==", True)).stream())
        tier = "boolean"

        if not snapshots:
            coaches_logger.info("No users with isCoach=True, retrying with string 'true'")
            snapshots = list(users.where(filter=FieldFilter("isCoach", "==", "true")).stream())
            tier = "string"

        if not snapshots:
            coaches_logger.info("No coach query matched, scanning the users collection")
            snapshots = [
                snapshot for snapshot in users.stream()
                if is_coach_flag((snapshot.to_dict() or {}).get("isCoach"))
            ]
            tier = "scan"

    coaches = sorted(
        (project_coach(snapshot.id, snapshot.to_dict() or {}) for snapshot in snapshots),
        key=coach_sort_key,
    )
    coach_resolution_counter.labels(tier=tier).inc()
    coaches_logger.info(f"Resolved {len(coaches)} coaches (tier: {tier})")
    return coaches


def resolve_coach_by_id(coach_id: str, db) -> Optional[Coach]:
    """Return the coach with this id, or None when it is missing or not a coach"""
    if not coach_id or not coach_id.strip():
        return None

    with translate_store_errors("read coach profile"):
        user = get_document(USERS_COLLECTION, coach_id, db)

    if user is None:
        coaches_logger.info(f"No user found with ID: {coach_id}")
        return None

    if not is_coach_flag(user.get("isCoach")):
        coaches_logger.info(f"User {coach_id} is not a coach (isCoach: {user.get('isCoach')!r})")
        return None

    return project_coach(coach_id, user)


def add_coach(data: CoachCreate, db) -> str:
    """Create a coach user document and return its id.

    Raises:
        ValueError: the id is empty or already taken
    """
    coach_id = (data.id or slugify(data.name)).strip()
    if not coach_id:
        raise ValueError("Coach name must contain at least one letter or digit")

    with translate_store_errors("add coach"):
        doc_ref = db.collection(USERS_COLLECTION).document(coach_id)
        if doc_ref.get().exists:
            raise ValueError(f"A user with ID '{coach_id}' already exists")

        doc_ref.set({
            "name": data.name,
            "displayName": data.name,
            "avatar": data.avatar,
            "photoURL": data.avatar,
            "isCoach": True,
            "isAdmin": False,
            "createdAt": SERVER_TIMESTAMP,
        })

    coaches_logger.info(f"Coach added with ID: {coach_id}")
    return coach_id


def update_coach(coach_id: str, data: CoachUpdate, db) -> None:
    """Update both name fields and both avatar fields of a coach"""
    with translate_store_errors("update coach"):
        db.collection(USERS_COLLECTION).document(coach_id).update({
            "name": data.name,
            "displayName": data.name,
            "avatar": data.avatar,
            "photoURL": data.avatar,
            "updatedAt": SERVER_TIMESTAMP,
        })


def set_coach_status(user_id: str, is_coach: bool, db) -> None:
    """Grant or revoke the coach flag, always stored as a boolean"""
    with translate_store_errors("update coach status"):
        db.collection(USERS_COLLECTION).document(user_id).update({
            "isCoach": bool(is_coach),
            "updatedAt": SERVER_TIMESTAMP,
        })
    coaches_logger.info(f"User {user_id} isCoach set to {bool(is_coach)}")
