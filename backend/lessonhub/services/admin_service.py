"""Admin service - user role management, store diagnostics and seeding"""
import logging
from typing import Any, Dict, List

from google.api_core import exceptions as google_exceptions

from lessonhub.core.config import USERS_COLLECTION, VIDEOS_COLLECTION
from lessonhub.core.metrics import admin_actions_counter
from lessonhub.db.firestore import (
    SERVER_TIMESTAMP, document_to_dict, is_permission_error, translate_store_errors
)

logger = logging.getLogger(__name__)


def list_users(db) -> List[Dict[str, Any]]:
    """Every user document, as stored"""
    with translate_store_errors("view user data"):
        users = [document_to_dict(snapshot) for snapshot in db.collection(USERS_COLLECTION).stream()]
    logger.info(f"Fetched {len(users)} users")
    return users


def set_admin_role(user_id: str, is_admin: bool, db) -> None:
    """Grant or revoke the admin flag"""
    with translate_store_errors("update user role"):
        db.collection(USERS_COLLECTION).document(user_id).update({
            "isAdmin": is_admin,
            "updatedAt": SERVER_TIMESTAMP,
        })
    admin_actions_counter.labels(action="set_admin_role").inc()


def set_subscription_status(user_id: str, is_subscriber: bool, db) -> None:
    """Grant or revoke the subscriber flag"""
    with translate_store_errors("update subscription status"):
        db.collection(USERS_COLLECTION).document(user_id).update({
            "isSubscriber": is_subscriber,
            "updatedAt": SERVER_TIMESTAMP,
        })
    admin_actions_counter.labels(action="set_subscription_status").inc()
    logger.info(f"User {user_id} isSubscriber set to {is_subscriber}")


def check_store_access(db) -> Dict[str, Any]:
    """Probe read access to the videos and users collections.

    Reports problems instead of raising so the admin UI can show guidance.
    """
    try:
        videos_probe = list(db.collection(VIDEOS_COLLECTION).limit(1).stream())
    except google_exceptions.GoogleAPIError as e:
        return {
            "videosAccess": False,
            "videosEmpty": False,
            "isPermissionError": is_permission_error(e),
            "error": str(e),
        }

    users_access = True
    users_error = None
    try:
        list(db.collection(USERS_COLLECTION).limit(1).stream())
    except google_exceptions.GoogleAPIError as e:
        users_access = False
        users_error = str(e)

    return {
        "videosAccess": True,
        "videosEmpty": not videos_probe,
        "usersAccess": users_access,
        "usersError": users_error,
    }


SAMPLE_COACHES = [
    {"name": "John Doe", "avatar": "/teacher-with-glasses.png", "isSubscriber": True},
    {"name": "Jane Smith", "avatar": "/smiling-female-teacher.png", "isSubscriber": True},
    {"name": "Alex Johnson", "avatar": "/young-male-teacher.png", "isSubscriber": False},
]

SAMPLE_USERS = [
    {"name": "Alice", "displayName": "Alice Admin", "email": "alice@example.com",
     "isAdmin": True, "isCoach": False, "isSubscriber": True},
    {"name": "Bob", "displayName": "Bob User", "email": "bob@example.com",
     "isAdmin": False, "isCoach": False, "isSubscriber": False},
]

# (coach index, video fields)
SAMPLE_VIDEOS = [
    (0, {
        "title": "HTML Basics: Structure of a Webpage",
        "date": "2023-09-15",
        "videoUrl": "https://www.youtube.com/watch?v=UB1O30fR-EE",
        "category": "HTML",
        "description": "Learn the fundamental structure of HTML documents and how to create your first webpage.",
        "githubUrl": "https://github.com/letphil/html-basics",
        "level": "Level 1",
        "tag": "Recommended by Coach",
    }),
    (1, {
        "title": "CSS Flexbox Layout",
        "date": "2023-10-08",
        "videoUrl": "https://www.youtube.com/watch?v=JJSoEo8JSnc",
        "category": "CSS",
        "description": "Master the flexible box layout model in CSS.",
        "githubUrl": "https://github.com/letphil/css-flexbox",
        "level": "Level 2",
        "tag": "Live Session",
    }),
    (2, {
        "title": "Introduction to React",
        "date": "2023-11-01",
        "videoUrl": "https://www.youtube.com/watch?v=SqcY0GlETPk",
        "category": "React",
        "description": "Get started with React library for building user interfaces.",
        "githubUrl": "https://github.com/letphil/react-intro",
        "level": "Level 3",
        "tag": "Recommended by Coach",
    }),
]


def initialize_sample_data(db) -> bool:
    """Seed coaches, users and videos when both collections are empty.

    Returns True when data was written.
    """
    users = db.collection(USERS_COLLECTION)
    videos = db.collection(VIDEOS_COLLECTION)

    with translate_store_errors("initialize sample data"):
        if list(videos.limit(1).stream()) or list(users.limit(1).stream()):
            logger.info("Collections already contain data, skipping sample data")
            return False

        coach_ids = []
        for coach in SAMPLE_COACHES:
            _, ref = users.add({
                "name": coach["name"],
                "displayName": coach["name"],
                "avatar": coach["avatar"],
                "photoURL": coach["avatar"],
                "isCoach": True,
                "isAdmin": False,
                "isSubscriber": coach["isSubscriber"],
                "createdAt": SERVER_TIMESTAMP,
            })
            coach_ids.append(ref.id)

        for user in SAMPLE_USERS:
            users.add({**user, "createdAt": SERVER_TIMESTAMP})

        for coach_index, video in SAMPLE_VIDEOS:
            videos.add({**video, "coachId": coach_ids[coach_index], "createdAt": SERVER_TIMESTAMP})

    admin_actions_counter.labels(action="initialize_sample_data").inc()
    logger.info("Sample data initialized")
    return True
