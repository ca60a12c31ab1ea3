from __future__ import annotations

from typing import Dict


class ApiError(Exception):
    """
    An HTTP error whose body is a fixed, caller-safe message.

    Rendered by the application-level handler as ``{"error": message}``.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


# PUBLIC_INTERFACE
def error_envelope(message: str) -> Dict[str, str]:
    """
    Build the standard error body for failed requests.

    Args:
        message: The fixed message shown to callers. Never pass driver or
            exception text here.

    Returns:
        Dict with the single key ``error``.
    """
    return {"error": message}
