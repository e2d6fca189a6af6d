from __future__ import annotations


class ApplicationError(ValueError):
    """Failure of a single service operation, carrying a human-readable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApplicationError):
    pass


class NotFoundError(ApplicationError):
    pass
