"""Exception types raised by the flag administration layers."""

from typing import Any, List, Optional


class FlagAdminError(Exception):
    """Base class for all flag-admin errors."""


class FetchError(FlagAdminError):
    """The listing service could not return a page of flag records."""


class MutationError(FlagAdminError):
    """A single create/update call was rejected by the mutation service.

    ``body`` keeps the decoded error payload returned by the backend (if any)
    so callers can surface ``body["message"]``.
    """

    def __init__(self, message: str, body: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.body = body if body is not None else {"message": message}


class SaveError(FlagAdminError):
    """A batch save had at least one failed call."""

    def __init__(self, message: str, outcomes: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.outcomes = outcomes or []


class SaveInProgressError(FlagAdminError):
    """A save was requested while another batch is still in flight."""


def body_message(body: Any) -> Optional[str]:
    """Extract ``message`` from a decoded error body (dict or list of dicts)."""
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if isinstance(body, list) and body and isinstance(body[0], dict) and body[0].get("message"):
        return str(body[0]["message"])
    return None


def error_message(exc: BaseException) -> str:
    """Return the user-facing message of a rejected call.

    Prefers ``exc.body["message"]`` (the backend's own wording) and falls back
    to the exception text.
    """
    return body_message(getattr(exc, "body", None)) or str(exc) or exc.__class__.__name__
