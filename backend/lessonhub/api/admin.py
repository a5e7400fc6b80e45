"""Admin API routes"""
import logging
from fastapi import APIRouter, Depends, HTTPException

from lessonhub.core.security import require_admin
from lessonhub.db.firestore import get_db
from lessonhub.schemas.admin import CoachStatusUpdate, SubscriptionStatusUpdate, UserRoleUpdate
from lessonhub.schemas.auth import Principal
from lessonhub.schemas.coach import CoachCreate, CoachUpdate
from lessonhub.schemas.settings import AppSettings, AppSettingsUpdate
from lessonhub.schemas.video import VideoCreate, VideoUpdate
from lessonhub.services.admin_service import (
    initialize_sample_data, list_users, set_admin_role, set_subscription_status
)
from lessonhub.services.coach_service import add_coach, set_coach_status, update_coach
from lessonhub.services.settings_service import get_app_settings, update_app_settings
from lessonhub.services.video_service import add_video, delete_video, update_video

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


# ============================================================================
# USERS
# ============================================================================

@router.get("/users")
def get_users(admin: Principal = Depends(require_admin), db=Depends(get_db)):
    """List every user document (admin only)"""
    return {"users": list_users(db)}


@router.put("/users")
def update_user_role(
    request_data: UserRoleUpdate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Grant or revoke the admin flag (admin only)"""
    set_admin_role(request_data.user_id, request_data.is_admin, db)
    logger.info(f"Admin {admin.uid} set isAdmin={request_data.is_admin} for user {request_data.user_id}")
    return {"message": "User role updated", "userId": request_data.user_id, "isAdmin": request_data.is_admin}


@router.put("/users/{user_id}/subscription")
def update_user_subscription(
    user_id: str,
    request_data: SubscriptionStatusUpdate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Grant or revoke the subscriber flag (admin only)"""
    set_subscription_status(user_id, request_data.is_subscriber, db)
    return {"message": "Subscription status updated", "userId": user_id, "isSubscriber": request_data.is_subscriber}


@router.put("/users/{user_id}/coach")
def update_user_coach_status(
    user_id: str,
    request_data: CoachStatusUpdate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Grant or revoke the coach flag (admin only)"""
    set_coach_status(user_id, request_data.is_coach, db)
    return {"message": "Coach status updated", "userId": user_id, "isCoach": request_data.is_coach}


# ============================================================================
# VIDEOS
# ============================================================================

@router.post("/videos", status_code=201)
def create_video(
    request_data: VideoCreate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Add a video (admin only)"""
    try:
        video_id = add_video(request_data, db)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"id": video_id}


@router.put("/videos/{video_id}")
def edit_video(
    video_id: str,
    request_data: VideoUpdate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Update a video (admin only)"""
    try:
        update_video(video_id, request_data, db)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"message": "Video updated", "id": video_id}


@router.delete("/videos/{video_id}")
def remove_video(video_id: str, admin: Principal = Depends(require_admin), db=Depends(get_db)):
    """Delete a video (admin only)"""
    delete_video(video_id, db)
    logger.info(f"Admin {admin.uid} deleted video {video_id}")
    return {"message": "Video deleted", "id": video_id}


# ============================================================================
# COACHES
# ============================================================================

@router.post("/coaches", status_code=201)
def create_coach(
    request_data: CoachCreate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Add a coach (admin only)"""
    try:
        coach_id = add_coach(request_data, db)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"id": coach_id}


@router.put("/coaches/{coach_id}")
def edit_coach(
    coach_id: str,
    request_data: CoachUpdate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Update a coach's name and avatar (admin only)"""
    update_coach(coach_id, request_data, db)
    return {"message": "Coach updated", "id": coach_id}


# ============================================================================
# SETTINGS & MAINTENANCE
# ============================================================================

@router.get("/settings", response_model=AppSettings)
def read_settings(admin: Principal = Depends(require_admin), db=Depends(get_db)):
    """Read app settings (admin only)"""
    return get_app_settings(db)


@router.put("/settings", response_model=AppSettings)
def save_settings(
    request_data: AppSettingsUpdate,
    admin: Principal = Depends(require_admin),
    db=Depends(get_db)
):
    """Save app settings (admin only)"""
    return update_app_settings(request_data, admin.uid, db)


@router.post("/initialize")
def initialize_data(admin: Principal = Depends(require_admin), db=Depends(get_db)):
    """Seed sample coaches, users and videos into an empty store (admin only)"""
    initialized = initialize_sample_data(db)
    message = "Sample data initialized" if initialized else "Collections already contain data"
    return {"initialized": initialized, "message": message}
