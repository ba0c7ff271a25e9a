"""Error taxonomy shared by the designer core, services and routers"""

from typing import Dict, Optional


class FormNotFoundError(LookupError):
    """Raised when a form identifier does not match any stored form."""

    def __init__(self, form_id: str):
        super().__init__(f"Form not found: {form_id}")
        self.form_id = form_id


class ValidationFailure(ValueError):
    """Recoverable input problem surfaced next to the offending input.

    ``errors`` maps a field identifier (or a form-level key such as
    ``"title"``) to the user-facing message.
    """

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class TransportFailure(RuntimeError):
    """A save or submit call that could not complete. Never retried automatically."""


class DesignerInvariantError(RuntimeError):
    """Programming error: an impossible designer transition or a malformed request."""
