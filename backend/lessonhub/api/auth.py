"""Authentication API routes"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends

from lessonhub.core.security import get_optional_principal, require_principal
from lessonhub.db.firestore import get_db
from lessonhub.schemas.auth import AccessDecision, Principal, ProfileRequest
from lessonhub.services.access_service import evaluate_access
from lessonhub.services.user_service import ensure_user_profile, get_user_document, touch_last_login

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.get("/me")
def auth_me(principal: Principal = Depends(require_principal), db=Depends(get_db)):
    """The signed-in principal together with its stored profile"""
    return {
        "user": principal.model_dump(by_alias=True),
        "profile": get_user_document(principal.uid, db),
    }


@router.post("/profile")
def create_profile(
    request_data: ProfileRequest,
    principal: Principal = Depends(require_principal),
    db=Depends(get_db)
):
    """Create the caller's user document after sign-up (idempotent)"""
    profile = ensure_user_profile(principal, request_data.display_name, db)
    return {"profile": profile}


@router.post("/login")
def record_login(principal: Principal = Depends(require_principal), db=Depends(get_db)):
    """Record a sign-in; a failed timestamp write does not fail the login"""
    recorded = touch_last_login(principal.uid, db)
    logger.info(f"User {principal.uid} signed in")
    return {"user": principal.model_dump(by_alias=True), "lastLoginRecorded": recorded}


@router.get("/access", response_model=AccessDecision)
def get_access(principal: Optional[Principal] = Depends(get_optional_principal), db=Depends(get_db)):
    """Whether the caller may view gated videos, and why"""
    return evaluate_access(principal, db)
