"""Settings service - global app settings singleton"""
import logging

from lessonhub.core.config import APP_SETTINGS_DOCUMENT, SETTINGS_COLLECTION
from lessonhub.db.firestore import SERVER_TIMESTAMP, get_document, translate_store_errors
from lessonhub.schemas.settings import AppSettings, AppSettingsUpdate

logger = logging.getLogger(__name__)


def get_app_settings(db) -> AppSettings:
    """Read ``settings/app``; defaults when the document is missing.

    Read-only: a missing document is never created here.
    """
    with translate_store_errors("read app settings"):
        data = get_document(SETTINGS_COLLECTION, APP_SETTINGS_DOCUMENT, db)

    if data is None:
        return AppSettings()
    return AppSettings.model_validate(data)


def update_app_settings(changes: AppSettingsUpdate, admin_user_id: str, db) -> AppSettings:
    """Create-or-merge the settings document"""
    payload = changes.model_dump(by_alias=True)
    payload.update({
        "updatedAt": SERVER_TIMESTAMP,
        "createdBy": admin_user_id,
    })

    with translate_store_errors("save app settings"):
        db.collection(SETTINGS_COLLECTION).document(APP_SETTINGS_DOCUMENT).set(payload, merge=True)

    logger.info(f"App settings saved by {admin_user_id}: {changes.model_dump()}")
    return get_app_settings(db)
