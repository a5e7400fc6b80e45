"""Pydantic schemas for video operations"""
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import Field, field_validator

from lessonhub.schemas.base import DocumentModel
from lessonhub.schemas.coach import Coach

Category = Literal["HTML", "CSS", "JavaScript", "React", "TypeScript", "Node.js", "Next.js"]
Level = Literal["Level 1", "Level 2", "Level 3", "Level 4"]
Tag = Literal["Recommended by Coach", "Live Session"]
SortOrder = Literal["newest", "oldest"]

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class Video(DocumentModel):
    """Stored video document.

    Fields are loosely typed on purpose: documents written by older clients
    may carry values outside the current enumerations.
    """
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    video_url: Optional[str] = None
    github_url: Optional[str] = None
    date: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    tag: Optional[str] = None
    coach_id: Optional[str] = None
    teacher_id: Optional[str] = None
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None

    @field_validator(
        "title", "description", "video_url", "github_url", "date",
        "category", "level", "tag", "coach_id", "teacher_id",
        mode="before"
    )
    @classmethod
    def stringify_stored_value(cls, value):
        # Timestamps become YYYY-MM-DD, numbers become their text
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return str(value)


class VideoWithCoach(Video):
    """Video joined to the coach resolved from its owner reference"""
    coach: Optional[Coach] = None


class VideoCreate(DocumentModel):
    """Schema for adding a video; the id defaults to a slug of the title"""
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = ""
    video_url: str = Field(..., min_length=1)
    github_url: Optional[str] = None
    date: str = Field(..., pattern=DATE_PATTERN)
    category: Category
    level: Level = "Level 1"
    tag: Tag = "Recommended by Coach"
    coach_id: str = Field(..., min_length=1)


class VideoUpdate(DocumentModel):
    """Schema for a partial video update"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    video_url: Optional[str] = None
    github_url: Optional[str] = None
    date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    category: Optional[Category] = None
    level: Optional[Level] = None
    tag: Optional[Tag] = None
    coach_id: Optional[str] = None


class VideoQuery(DocumentModel):
    """User-supplied filter and sort criteria; empty values mean no filtering"""
    tag: Optional[str] = None
    level: Optional[str] = None
    sort: SortOrder = "newest"


class VideoListing(DocumentModel):
    """Result of the list pipeline"""
    videos: List[VideoWithCoach]
    total: int
    filtered: bool = False
    message: Optional[str] = None


class CategoryListing(DocumentModel):
    """Filtered videos grouped by category, in order of first appearance"""
    categories: Dict[str, List[VideoWithCoach]]
    message: Optional[str] = None
