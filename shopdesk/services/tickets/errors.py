"""
Ticket System Errors
====================

Exception hierarchy for the ticket lifecycle. Every error carries a short
user-facing message that is safe to show in an ephemeral reply.

Author: حَـــــنَّـــــا
"""

from typing import Optional


class TicketError(Exception):
    """Base class for ticket workflow failures."""

    default_message = "Something went wrong with this ticket."

    def __init__(self, user_message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        self.user_message = user_message or self.default_message
        self.detail = detail
        super().__init__(detail or self.user_message)


class ValidationError(TicketError):
    """Intake data is missing or blank."""

    default_message = "Please fill in every required field."


class NotATicketError(TicketError):
    """The channel is not a tracked ticket."""

    default_message = "This command can only be used inside a ticket."


class PrerequisiteFetchError(TicketError):
    """A step the workflow cannot continue without has failed."""

    default_message = "Discord did not respond in time, please try again."


class DeliveryFailure(TicketError):
    """A best-effort message could not be delivered."""

    default_message = "A message could not be delivered."


class PlatformCallError(TicketError):
    """A Discord API call failed."""

    default_message = "Discord rejected the request."

    def __init__(
        self,
        operation: str,
        status: Optional[int] = None,
        *,
        detail: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.status = status
        super().__init__(detail=detail or f"{operation} failed (status {status})")


__all__ = [
    "TicketError",
    "ValidationError",
    "NotATicketError",
    "PrerequisiteFetchError",
    "DeliveryFailure",
    "PlatformCallError",
]
