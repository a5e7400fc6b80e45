"""Domain error taxonomy

Each error carries the HTTP status it renders as. Handlers in
``lessonhub.core.middleware`` turn them into JSON responses.
"""


class LessonHubError(Exception):
    """Base class for expected, user-facing failures"""
    status_code = 500
    kind = "error"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(LessonHubError):
    """No principal on the request"""
    status_code = 401
    kind = "not_authenticated"


class NotAuthorizedError(LessonHubError):
    """Principal lacks admin, coach or subscriber privilege for the operation"""
    status_code = 403
    kind = "not_authorized"


class PermissionDeniedError(LessonHubError):
    """The store rejected the call because of its security rules.

    Usually a deployment problem rather than an access decision, so the
    message is shown verbatim with guidance.
    """
    status_code = 403
    kind = "permission_denied"


class NotFoundError(LessonHubError):
    """Referenced document does not exist"""
    status_code = 404
    kind = "not_found"


class StoreUnavailableError(LessonHubError):
    """Network or store unavailability; the caller may retry"""
    status_code = 503
    kind = "transient_io"
    retryable = True
