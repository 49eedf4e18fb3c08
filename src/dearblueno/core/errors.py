"""Domain error taxonomy shared by services and the HTTP layer.

Services raise these exceptions before touching the store; the application
translates them into HTTP responses in :mod:`dearblueno.main`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class ContentError(Exception):
    """Base class for all domain failures raised by the content core."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to clients."""
        return {"detail": self.detail}


class ValidationFailed(ContentError):
    """Malformed or out-of-range input.

    Carries every field-level problem found so clients can show them at once.
    """

    status_code = 400

    def __init__(self, errors: list[dict[str, Any]], detail: str = "Invalid request") -> None:
        super().__init__(detail)
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> ValidationFailed:
        """Build an error describing one offending field."""
        return cls([{"loc": [field], "msg": message}], detail=message)

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.detail, "errors": self.errors}


class NotFoundError(ContentError):
    """Referenced post or comment is missing or not publicly visible."""

    status_code = 404


class UnauthorizedError(ContentError):
    """Missing or insufficient authentication."""

    status_code = 401


class ForbiddenError(ContentError):
    """Authenticated, but not entitled to perform the action."""

    status_code = 403

    def __init__(self, detail: str, *, banned_until: datetime | None = None) -> None:
        super().__init__(detail)
        self.banned_until = banned_until

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.banned_until is not None:
            payload["banned_until"] = self.banned_until.isoformat()
        return payload


class AuthorMismatchError(ForbiddenError):
    """Raised when someone other than the author tries to delete a comment."""
