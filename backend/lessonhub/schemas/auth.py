"""Pydantic schemas for authentication and access decisions"""
from typing import Literal, Optional
from pydantic import Field

from lessonhub.schemas.base import DocumentModel


class Principal(DocumentModel):
    """The authenticated identity behind a request"""
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    is_admin: bool = False


class ProfileRequest(DocumentModel):
    """Schema for creating the caller's user document after sign-up"""
    display_name: str = Field(..., min_length=1, max_length=100)


AccessReason = Literal[
    "unauthenticated", "admin", "open", "subscriber", "not_subscribed", "fail_open"
]


class AccessDecision(DocumentModel):
    """Outcome of the gated-content access policy"""
    has_access: bool
    reason: AccessReason
