"""Request desk exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requestdesk.models import FieldError


class RequestDeskError(Exception):
    """Base class for request desk errors."""


class ConfigError(RequestDeskError):
    """Board/label configuration is missing or invalid."""


class ValidationError(RequestDeskError):
    """Submission failed shape/content rules. Carries every violation found."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        fields = ", ".join(error.field for error in self.errors)
        super().__init__(f"Invalid submission: {fields}")


class BoardResolutionError(RequestDeskError):
    """Event has no enabled board, or the board has no incoming list."""


class CardCreateError(RequestDeskError):
    """Board service rejected or failed the create-card call."""

    def __init__(self, status_code: int | None, message: str) -> None:
        self.status_code = status_code
        self.message = message
        status = f"HTTP {status_code}" if status_code is not None else "no response"
        super().__init__(f"Card creation failed ({status}): {message}")


class AttachmentUploadError(RequestDeskError):
    """One attachment could not be decoded or uploaded."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        self.message = message
        super().__init__(f"Attachment {name!r} failed: {message}")


class TrelloAPIError(RequestDeskError):
    """Raised by the Trello client for non-2xx responses and transport errors.

    ``status_code`` is None when no response was received (timeout, network).
    """

    def __init__(self, status_code: int | None, message: str) -> None:
        self.status_code = status_code
        self.message = message
        status = f"HTTP {status_code}" if status_code is not None else "no response"
        super().__init__(f"{status}: {message}")
