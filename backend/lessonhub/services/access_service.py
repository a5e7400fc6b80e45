"""Access service - decides whether a principal may view gated videos"""
from typing import Optional

from lessonhub.core.config import USERS_COLLECTION
from lessonhub.core.logging import access_logger
from lessonhub.core.metrics import access_decisions_counter
from lessonhub.db.firestore import get_document
from lessonhub.schemas.auth import AccessDecision, Principal
from lessonhub.services.settings_service import get_app_settings


def _decide(has_access: bool, reason: str) -> AccessDecision:
    access_decisions_counter.labels(result="granted" if has_access else "denied", reason=reason).inc()
    return AccessDecision(has_access=has_access, reason=reason)


def evaluate_access(principal: Optional[Principal], db) -> AccessDecision:
    """Evaluate the gated-content policy; the first matching rule wins.

    1. no principal            -> denied
    2. administrator           -> granted, settings are not read
    3. subscription not required (or settings document absent) -> granted
    4. otherwise granted iff the principal's user document has ``isSubscriber is True``

    Any failure while evaluating rules 2-4 grants access (fail-open), so a
    transient read error never locks signed-in users out.
    """
    if principal is None:
        return _decide(False, "unauthenticated")

    try:
        if principal.is_admin:
            return _decide(True, "admin")

        app_settings = get_app_settings(db)
        if not app_settings.require_subscription_for_videos:
            return _decide(True, "open")

        user = get_document(USERS_COLLECTION, principal.uid, db) or {}
        if user.get("isSubscriber") is True:
            return _decide(True, "subscriber")
        return _decide(False, "not_subscribed")
    except Exception as e:
        access_logger.warning(
            f"Access evaluation failed for {principal.uid}, granting access (fail-open): {e}",
            exc_info=True
        )
        return _decide(True, "fail_open")
