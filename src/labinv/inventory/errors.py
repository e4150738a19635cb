"""Exceptions raised by the inventory client."""


class InventoryError(Exception):
    """Base class for inventory client errors."""


class NetworkError(InventoryError):
    """The request never reached the service or no response came back."""


class ServiceError(InventoryError):
    """The service answered with a structured rejection.

    ``message`` is the backend's human-readable message, or ``None`` when the
    response carried none.
    """

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or f"Service error (HTTP {status_code})")
        self.message = message
        self.status_code = status_code


class NotFound(ServiceError):
    """The requested component id does not resolve."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "Component not found", status_code=404)


class ValidationError(InventoryError):
    """Client-side required-field check failed; nothing was sent."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


class PageOutOfRange(ValueError):
    """A page outside ``[1, total_pages]`` was requested for known totals."""

    def __init__(self, page: int, total_pages: int):
        super().__init__(f"Page {page} is outside 1..{total_pages}")
        self.page = page
        self.total_pages = total_pages
