"""
Error taxonomy shared by the service layer and the API layer.

Services raise these; the API layer turns them into JSON responses with the
matching HTTP status code (see utils/api_helpers.py).
"""


class TrackerError(Exception):
    """Base class for every error the service layer reports to callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TrackerError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(TrackerError):
    status_code = 401
    default_message = "Could not validate credentials"


class ForbiddenError(TrackerError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(TrackerError):
    status_code = 404
    default_message = "Not found"


class ConflictError(TrackerError):
    status_code = 409
    default_message = "Conflict"


class UploadError(TrackerError):
    """Raised when the blob store rejects or fails to store a file."""

    status_code = 400
    default_message = "Upload failed"

    def __init__(self, message=None, status_code=None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class StoreError(TrackerError):
    status_code = 500
    default_message = "Persistence failure"
