"""
ORDER WORKFLOW ERRORS

Domain errors raised by ``orders.services``. Each carries the HTTP status the
API layer answers with; the views turn them into ``{"detail": ...}``
responses.
"""

from rest_framework import status


class OrderWorkflowError(Exception):
    """Base exception for all order workflow failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Order operation failed."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(OrderWorkflowError):
    """Order, revision or message does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."


class AuthorizationError(OrderWorkflowError):
    """Actor is not a party of the order or the wrong party for the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized."


class ValidationError(OrderWorkflowError):
    """Missing/malformed input or an operation against an incompatible state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."


class ConflictError(OrderWorkflowError):
    """The target is already in the requested condition."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict with the current state."
