"""Coach API routes"""
import logging
from typing import List
from fastapi import APIRouter, Depends

from lessonhub.api.videos import require_video_access, video_query
from lessonhub.core.exceptions import NotFoundError
from lessonhub.db.firestore import get_db
from lessonhub.schemas.auth import AccessDecision
from lessonhub.schemas.coach import Coach
from lessonhub.schemas.video import VideoListing, VideoQuery
from lessonhub.services.coach_service import resolve_coach_by_id, resolve_coaches
from lessonhub.services.video_service import list_coach_videos

router = APIRouter(prefix="/api/coaches", tags=["coaches"])
logger = logging.getLogger(__name__)


def get_coach_or_404(coach_id: str, db) -> Coach:
    coach = resolve_coach_by_id(coach_id, db)
    if coach is None:
        logger.info(f"Coach lookup for {coach_id} found nothing")
        raise NotFoundError("Coach not found")
    return coach


@router.get("", response_model=List[Coach])
def get_coaches(db=Depends(get_db)):
    """Every coach, sorted by name"""
    return resolve_coaches(db)


@router.get("/{coach_id}", response_model=Coach)
def get_coach(coach_id: str, db=Depends(get_db)):
    """One coach's public profile"""
    return get_coach_or_404(coach_id, db)


@router.get("/{coach_id}/videos", response_model=VideoListing)
def get_coach_videos(
    coach_id: str,
    criteria: VideoQuery = Depends(video_query),
    decision: AccessDecision = Depends(require_video_access),
    db=Depends(get_db)
):
    """One coach's videos, filtered and sorted"""
    coach = get_coach_or_404(coach_id, db)
    return list_coach_videos(coach, criteria, db)
