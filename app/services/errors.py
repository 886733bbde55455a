"""Typed service-layer errors, translated to HTTP responses in app.main."""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """Invite, member, user or website does not exist."""

    status_code = 404


class ConflictError(ServiceError):
    """Duplicate pending invite or membership."""

    status_code = 409


class InvalidStateError(ServiceError):
    """Transition attempted from a state that does not allow it."""

    status_code = 400
