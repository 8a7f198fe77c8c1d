"""Exceptions raised by the service layer and translated by the endpoints."""


class NotFoundError(ValueError):
    """Raised when a resource does not exist or belongs to another user."""
