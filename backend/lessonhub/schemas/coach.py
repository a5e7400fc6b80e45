"""Pydantic schemas for coaches"""
from typing import Optional
from pydantic import Field

from lessonhub.schemas.base import DocumentModel


class Coach(DocumentModel):
    """Read-only projection of a user document flagged as a coach"""
    id: str
    name: str
    avatar: Optional[str] = None


class CoachCreate(DocumentModel):
    """Schema for adding a coach; the id defaults to a slug of the name"""
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    avatar: Optional[str] = None


class CoachUpdate(DocumentModel):
    """Schema for updating a coach's public profile"""
    name: str = Field(..., min_length=1)
    avatar: Optional[str] = None
