"""Pydantic schemas for the global app settings document"""
from typing import Any, Optional
from pydantic import StrictBool

from lessonhub.schemas.base import DocumentModel


class AppSettings(DocumentModel):
    """Singleton ``settings/app`` document"""
    id: str = "app"
    require_subscription_for_videos: bool = False
    updated_at: Optional[Any] = None
    created_by: Optional[str] = None


class AppSettingsUpdate(DocumentModel):
    """Schema for updating app settings"""
    require_subscription_for_videos: StrictBool
