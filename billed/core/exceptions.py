"""Typed exceptions raised by the store client and caught at container boundaries."""

from typing import Any, Optional


class BilledError(Exception):
    """Base exception for all application errors."""

    code: str = "BILLED_ERROR"


class StoreError(BilledError):
    """
    A remote store call was rejected or could not be completed.

    `status_code` is the HTTP status when the server answered, None for
    transport failures (connection refused, timeout).
    """

    code: str = "STORE_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


def error_message(error: BaseException) -> str:
    """Human-readable text for an error rendered in place of the data."""
    status_code = getattr(error, "status_code", None)
    detail = str(error)
    if status_code is None:
        return detail
    prefix = f"Erreur {status_code}"
    if not detail or detail.startswith(prefix):
        return detail or prefix
    return f"{prefix} : {detail}"
