"""Error taxonomy shared by the services, the HTTP layer and the workers."""

import enum


class FilestoreError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AuthError(FilestoreError):
    """Missing, unknown or expired credentials. Always rendered the same way."""

    status_code = 401
    message = "Unauthorized"


class ValidationReason(str, enum.Enum):
    MISSING_NAME = "Missing name"
    MISSING_TYPE = "Missing type"
    MISSING_DATA = "Missing data"
    PARENT_NOT_FOUND = "Parent not found"
    PARENT_NOT_FOLDER = "Parent is not a folder"
    MISSING_EMAIL = "Missing email"
    MISSING_PASSWORD = "Missing password"
    ALREADY_EXISTS = "Already exist"
    INVALID_IS_PUBLIC = "Invalid isPublic"
    FOLDER_HAS_NO_CONTENT = "A folder doesn't have content"


class ValidationError(FilestoreError):
    status_code = 400

    def __init__(self, reason: ValidationReason):
        self.reason = reason
        super().__init__(reason.value)


class NotFoundError(FilestoreError):
    """Record absent or owned by someone else; the two are indistinguishable."""

    status_code = 404
    message = "Not found"


class InternalError(FilestoreError):
    """A backing store failed. The cause is chained, never shown to the caller."""


class JobError(FilestoreError):
    """Failure inside a background job; handled by the queue's retry policy."""

    retryable = True


class PermanentJobError(JobError):
    """A job that cannot succeed on retry (missing ids, missing records)."""

    retryable = False
