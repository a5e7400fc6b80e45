"""Video service - listing, filtering, sorting and admin mutations

Videos are joined to coaches through their owner reference: ``coachId``,
or the legacy ``teacherId`` when ``coachId`` is empty. ``owner_reference``
is the only place that fallback is implemented.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from lessonhub.core.config import VIDEOS_COLLECTION
from lessonhub.db.firestore import (
    FieldFilter, Query, SERVER_TIMESTAMP, document_to_dict, translate_store_errors
)
from lessonhub.core.exceptions import NotFoundError
from lessonhub.schemas.coach import Coach
from lessonhub.schemas.video import (
    CategoryListing, Video, VideoCreate, VideoListing, VideoQuery, VideoUpdate, VideoWithCoach
)
from lessonhub.services.coach_service import resolve_coaches
from lessonhub.utils.slugs import slugify

logger = logging.getLogger(__name__)

NO_MATCHES_MESSAGE = "No sessions match your selected filters. Try changing or clearing your filters."
NO_VIDEOS_MESSAGE = "There are no recorded sessions in the database yet."
UNCATEGORIZED = "Uncategorized"


def owner_reference(video: Dict[str, Any]) -> Optional[str]:
    """The coach a video belongs to: ``coachId`` first, then ``teacherId``"""
    return video.get("coachId") or video.get("teacherId") or None


def parse_video_date(value: Any) -> datetime:
    """Parse the ``YYYY-MM-DD`` date; anything unparseable sorts as the oldest"""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip()[:10], "%Y-%m-%d")
        except ValueError:
            pass
    return datetime.min


def apply_criteria(videos: Iterable[Dict[str, Any]], criteria: VideoQuery) -> List[Dict[str, Any]]:
    """Equality filters on tag and level (skipped when empty), then a stable date sort"""
    filtered = list(videos)
    if criteria.tag:
        filtered = [video for video in filtered if video.get("tag") == criteria.tag]
    if criteria.level:
        filtered = [video for video in filtered if video.get("level") == criteria.level]

    return sorted(
        filtered,
        key=lambda video: parse_video_date(video.get("date")),
        reverse=criteria.sort == "newest",
    )


def join_coaches(videos: Iterable[Dict[str, Any]], coaches: Iterable[Coach]) -> List[VideoWithCoach]:
    """Attach the coach named by each video's owner reference (None when unresolved)"""
    by_id = {coach.id: coach for coach in coaches}
    return [
        VideoWithCoach.model_validate({**video, "coach": by_id.get(owner_reference(video))})
        for video in videos
    ]


def fetch_all_videos(db) -> List[Dict[str, Any]]:
    """All video documents, newest first by stored date"""
    with translate_store_errors("load videos"):
        query = db.collection(VIDEOS_COLLECTION).order_by("date", direction=Query.DESCENDING)
        return [document_to_dict(snapshot) for snapshot in query.stream()]


def list_videos(criteria: VideoQuery, db) -> VideoListing:
    """Fetch, join, filter and sort every video.

    An empty result is not an error; ``message`` tells "nothing matches the
    filters" apart from "no videos exist".
    """
    videos = fetch_all_videos(db)
    coaches = resolve_coaches(db)

    selected = apply_criteria(videos, criteria)
    filtered = bool(criteria.tag or criteria.level)

    message = None
    if not selected:
        message = NO_MATCHES_MESSAGE if filtered else NO_VIDEOS_MESSAGE

    return VideoListing(
        videos=join_coaches(selected, coaches),
        total=len(selected),
        filtered=filtered,
        message=message,
    )


def group_by_category(videos: Iterable[VideoWithCoach]) -> Dict[str, List[VideoWithCoach]]:
    """Group videos by category in order of first appearance"""
    groups: Dict[str, List[VideoWithCoach]] = {}
    for video in videos:
        groups.setdefault(video.category or UNCATEGORIZED, []).append(video)
    return groups


def list_videos_by_category(criteria: VideoQuery, db) -> CategoryListing:
    """The list pipeline, grouped into category tabs"""
    listing = list_videos(criteria, db)
    return CategoryListing(categories=group_by_category(listing.videos), message=listing.message)


def get_videos_by_category(category: str, db) -> List[Video]:
    """Videos in one category, newest first"""
    with translate_store_errors("load videos by category"):
        snapshots = db.collection(VIDEOS_COLLECTION).where(
            filter=FieldFilter("category", "==", category)
        ).stream()
        videos = [document_to_dict(snapshot) for snapshot in snapshots]

    ordered = apply_criteria(videos, VideoQuery(sort="newest"))
    return [Video.model_validate(video) for video in ordered]


def get_videos_by_coach(coach_id: str, db) -> List[Dict[str, Any]]:
    """Videos owned by a coach; falls back to the legacy ``teacherId`` field
    only when no video matches on ``coachId``"""
    videos = db.collection(VIDEOS_COLLECTION)
    with translate_store_errors("load coach videos"):
        snapshots = list(videos.where(filter=FieldFilter("coachId", "==", coach_id)).stream())
        if not snapshots:
            snapshots = list(videos.where(filter=FieldFilter("teacherId", "==", coach_id)).stream())

    logger.info(f"Found {len(snapshots)} videos for coach {coach_id}")
    return [document_to_dict(snapshot) for snapshot in snapshots]


def list_coach_videos(coach: Coach, criteria: VideoQuery, db) -> VideoListing:
    """Filter and sort one coach's videos"""
    selected = apply_criteria(get_videos_by_coach(coach.id, db), criteria)
    filtered = bool(criteria.tag or criteria.level)

    message = None
    if not selected:
        message = NO_MATCHES_MESSAGE if filtered else "This coach has no recorded sessions yet."

    return VideoListing(
        videos=join_coaches(selected, [coach]),
        total=len(selected),
        filtered=filtered,
        message=message,
    )


# ============================================================================
# ADMIN MUTATIONS
# ============================================================================

def add_video(data: VideoCreate, db) -> str:
    """Create a video document and return its id.

    Raises:
        ValueError: the id is empty or already taken
    """
    video_id = (data.id or slugify(data.title)).strip()
    if not video_id:
        raise ValueError("Video title must contain at least one letter or digit")

    payload = data.model_dump(by_alias=True, exclude_none=True)
    payload.update({
        "id": video_id,
        "coachId": data.coach_id.strip(),
        "createdAt": SERVER_TIMESTAMP,
    })

    with translate_store_errors("add video"):
        doc_ref = db.collection(VIDEOS_COLLECTION).document(video_id)
        if doc_ref.get().exists:
            raise ValueError(f"A video with ID '{video_id}' already exists")
        doc_ref.set(payload)

    logger.info(f"Video added with ID: {video_id} (coach: {payload['coachId']})")
    return video_id


def update_video(video_id: str, changes: VideoUpdate, db) -> None:
    """Apply a partial update; only fields present in the request are written"""
    payload = changes.model_dump(by_alias=True, exclude_unset=True)
    if not payload:
        raise ValueError("No fields to update")
    if payload.get("coachId"):
        payload["coachId"] = payload["coachId"].strip()
    payload["updatedAt"] = SERVER_TIMESTAMP

    with translate_store_errors("update video"):
        db.collection(VIDEOS_COLLECTION).document(video_id).update(payload)


def delete_video(video_id: str, db) -> None:
    """Delete a video document"""
    with translate_store_errors("delete video"):
        doc_ref = db.collection(VIDEOS_COLLECTION).document(video_id)
        if not doc_ref.get().exists:
            raise NotFoundError(f"Video '{video_id}' not found")
        doc_ref.delete()
    logger.info(f"Deleted video with ID: {video_id}")
