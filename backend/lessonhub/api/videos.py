"""Video API routes"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from lessonhub.core.exceptions import NotAuthenticatedError, NotAuthorizedError
from lessonhub.core.security import get_optional_principal
from lessonhub.db.firestore import get_db
from lessonhub.schemas.auth import AccessDecision, Principal
from lessonhub.schemas.video import CategoryListing, Video, VideoListing, VideoQuery
from lessonhub.services.access_service import evaluate_access
from lessonhub.services.video_service import (
    get_videos_by_category, list_videos, list_videos_by_category
)

router = APIRouter(prefix="/api/videos", tags=["videos"])
logger = logging.getLogger(__name__)

SORT_ORDERS = ("newest", "oldest")


def require_video_access(
    principal: Optional[Principal] = Depends(get_optional_principal),
    db=Depends(get_db)
) -> AccessDecision:
    """Dependency: the access policy must grant gated content"""
    decision = evaluate_access(principal, db)
    if decision.has_access:
        return decision
    logger.info(f"Video access denied: {decision.reason}")
    if decision.reason == "unauthenticated":
        raise NotAuthenticatedError("Please sign in to view videos")
    raise NotAuthorizedError("Subscription required to view videos")


def video_query(
    tag: Optional[str] = Query(None),
    level: Optional[str] = Query(None),
    sort: str = Query("newest"),
) -> VideoQuery:
    """Dependency: filter and sort criteria from the query string"""
    if sort not in SORT_ORDERS:
        raise HTTPException(400, f"Invalid sort order. Must be one of: {', '.join(SORT_ORDERS)}")
    return VideoQuery(tag=tag or None, level=level or None, sort=sort)


@router.get("", response_model=VideoListing)
def get_videos(
    criteria: VideoQuery = Depends(video_query),
    decision: AccessDecision = Depends(require_video_access),
    db=Depends(get_db)
):
    """All videos joined to their coaches, filtered and sorted"""
    return list_videos(criteria, db)


@router.get("/categories", response_model=CategoryListing)
def get_videos_grouped(
    criteria: VideoQuery = Depends(video_query),
    decision: AccessDecision = Depends(require_video_access),
    db=Depends(get_db)
):
    """Filtered videos grouped by category"""
    return list_videos_by_category(criteria, db)


@router.get("/category/{category}", response_model=List[Video])
def get_category_videos(
    category: str,
    decision: AccessDecision = Depends(require_video_access),
    db=Depends(get_db)
):
    """Videos in one category, newest first"""
    return get_videos_by_category(category, db)
