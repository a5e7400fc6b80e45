"""Security dependencies, bearer token verification, rate limiting and access logging"""
import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from firebase_admin import auth as firebase_auth

from lessonhub.core.exceptions import LessonHubError, NotAuthenticatedError, NotAuthorizedError
from lessonhub.core.logging import api_access_logger, security_logger
from lessonhub.core.metrics import token_verifications_counter
from lessonhub.db.firestore import get_db, initialize_firebase
from lessonhub.db.redis import check_rate_limit as redis_check_rate_limit
from lessonhub.schemas.auth import Principal
from lessonhub.services.user_service import get_user_document, is_admin_document


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from ``Authorization: Bearer <token>``"""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


def verify_id_token(token: str) -> Dict[str, Any]:
    """Verify a Firebase ID token and return its decoded claims.

    Raises:
        NotAuthenticatedError: the token is malformed, expired or revoked
    """
    try:
        claims = firebase_auth.verify_id_token(token, app=initialize_firebase())
    except (firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
            firebase_auth.RevokedIdTokenError, firebase_auth.CertificateFetchError, ValueError) as e:
        token_verifications_counter.labels(status="rejected").inc()
        security_logger.warning(f"ID token rejected: {e}")
        raise NotAuthenticatedError("Session expired or invalid. Please sign in again.") from e

    token_verifications_counter.labels(status="verified").inc()
    return claims


def get_optional_principal(request: Request, db=Depends(get_db)) -> Optional[Principal]:
    """Dependency: the verified principal, or None when no token was sent.

    The admin flag comes from the caller's user document. A store failure
    while reading it leaves the principal without admin rights instead of
    failing the request.
    """
    token = get_bearer_token(request)
    if not token:
        return None

    claims = verify_id_token(token)
    uid = claims["uid"]

    is_admin = False
    try:
        is_admin = is_admin_document(get_user_document(uid, db))
    except LessonHubError as e:
        security_logger.warning(f"Could not read user document for {uid}: {e}")

    return Principal(
        uid=uid,
        email=claims.get("email"),
        name=claims.get("name"),
        picture=claims.get("picture"),
        is_admin=is_admin,
    )


def require_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    """Dependency: Require authentication, return the principal"""
    if principal is None:
        raise NotAuthenticatedError("Not authenticated. Please sign in.")
    return principal


def require_admin(principal: Principal = Depends(require_principal), db=Depends(get_db)) -> Principal:
    """Dependency: Require admin role.

    Re-reads the caller's own user document so that store errors surface
    instead of silently downgrading the caller.
    """
    if not is_admin_document(get_user_document(principal.uid, db)):
        security_logger.warning(f"Admin access denied for {principal.uid}")
        raise NotAuthorizedError("Forbidden: Admin access required")
    return principal


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for rate limiting"""
    token = get_bearer_token(request)
    if token:
        return f"token:{hashlib.sha256(token.encode('utf-8')).hexdigest()[:32]}"

    client_ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"
    return f"ip:{client_ip}"


def check_rate_limit(identifier: str, strict: bool = False) -> bool:
    """Check if request is within rate limit

    Args:
        identifier: Client identifier (token hash or IP)
        strict: If True, use stricter rate limits for state-changing operations

    Returns:
        True if within limit, False if exceeded
    """
    return redis_check_rate_limit(identifier, strict=strict)


def log_api_access(request: Request, status_code: int = 200, error: Optional[str] = None):
    """Log detailed API access information"""
    client_ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"

    log_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "method": request.method,
        "path": request.url.path,
        "query": str(request.url.query) if request.url.query else None,
        "authenticated": get_bearer_token(request) is not None,
        "client_ip": client_ip,
        "user_agent": request.headers.get("User-Agent", "unknown"),
        "origin": request.headers.get("Origin", "none"),
        "status_code": status_code,
        "error": error
    }

    if error or status_code >= 400:
        api_access_logger.warning(f"API Access: {json.dumps(log_data)}")
    else:
        api_access_logger.info(f"API Access: {json.dumps(log_data)}")
