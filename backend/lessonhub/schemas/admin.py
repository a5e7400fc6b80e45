"""Pydantic schemas for admin operations"""
from pydantic import Field, StrictBool

from lessonhub.schemas.base import DocumentModel


class UserRoleUpdate(DocumentModel):
    """Schema for toggling a user's admin flag"""
    user_id: str = Field(..., min_length=1)
    is_admin: StrictBool


class SubscriptionStatusUpdate(DocumentModel):
    """Schema for toggling a user's subscriber flag"""
    is_subscriber: StrictBool


class CoachStatusUpdate(DocumentModel):
    """Schema for toggling a user's coach flag"""
    is_coach: StrictBool
