"""
API error types.

Every exception here carries the HTTP status and the JSON body the client
receives. They are raised by the order service and rendered by the
exception handler registered in ``foodtruck.main``.
"""

from typing import Any, Optional


class OrderAPIError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, error: Optional[str] = None, message: Optional[str] = None):
        self.error = error or self.error
        self.message = message
        super().__init__(self.message or self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON error body."""
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class OrderNotFoundError(OrderAPIError):
    """The requested order id is not in the collection."""
    status_code = 404
    error = "Order not found"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__()


class OrderStorageFailedError(OrderAPIError):
    """The store rejected a write (or the read that precedes it)."""
    status_code = 500
    error = "Failed to save order"


class UnauthorizedError(OrderAPIError):
    """Missing or wrong admin token."""
    status_code = 401
    error = "Unauthorized"
