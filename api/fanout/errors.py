"""Errors raised by the notification pipeline before dispatch starts."""

from typing import Optional, Sequence


class NotifierError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(NotifierError):
    """The inbound request is unusable; nothing was looked up or sent."""

    status_code = 400

    def __init__(self, message: str, missing: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])

    def to_body(self) -> dict:
        body = super().to_body()
        if self.missing:
            body["missing"] = self.missing
        return body


class ResolutionError(NotifierError):
    """The integration lookup failed (connectivity, permissions, ...)."""

    status_code = 500
