class DiscoverError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(DiscoverError):
    status_code = 401


class ValidationError(DiscoverError):
    status_code = 400


class ForbiddenError(DiscoverError):
    status_code = 403


class NotFoundError(DiscoverError):
    status_code = 404


class StorageError(DiscoverError):
    """Transient storage failure; the whole operation is safe to retry."""
    status_code = 500
