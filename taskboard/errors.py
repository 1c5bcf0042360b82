class AppError(Exception):
    status_code = 500

    def __init__(self, detail: str = "Server error"):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AppError):
    status_code = 400


class InvalidIdentifier(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class StorageError(AppError):
    """Any failure coming back from redis. The detail is never sent to clients."""
    status_code = 500
