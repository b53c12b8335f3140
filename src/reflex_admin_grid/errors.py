"""Exception types raised by reflex-admin-grid."""

from typing import Any


class AdminGridError(Exception):
    """Base class for all package errors."""


class ColumnKindError(AdminGridError, TypeError):
    """A search value was set through the wrong setter for a column's kind."""


class ApiError(AdminGridError):
    """A backend call failed (transport error, HTTP error, or bad body).

    Attributes:
        url: The request URL, when known.
        status_code: HTTP status, or ``None`` for transport failures.
        payload: Decoded error body, when the server sent one.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.payload = payload

    @property
    def is_transient(self) -> bool:
        """Transport failures and 5xx responses are worth retrying."""
        return self.status_code is None or self.status_code >= 500


class JobFormError(AdminGridError):
    """Field-level validation errors from the job-creation form."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors
