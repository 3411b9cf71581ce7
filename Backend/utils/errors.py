class ApiError(Exception):
    """Request-scoped failure that maps onto an HTTP status and a JSON error body."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, cause=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.cause = cause


class CorruptStoreError(ApiError):
    status_code = 500
    message = "Failed to read database"


class WriteError(ApiError):
    status_code = 500
    message = "Failed to write to file"


class InvalidPayloadError(ApiError):
    status_code = 400
    message = "Invalid JSON"


class AuthorizationError(ApiError):
    status_code = 401
    message = "Unauthorized"
