"""Contact pipeline error types

Every error carries the message shown to the caller and the HTTP status it
maps to. Operator-facing detail goes to the log, never into the message.
"""
from typing import Optional


class ContactError(Exception):
    """Base error for a failed submission attempt"""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> dict:
        return {"error": self.message}


class ConfigurationError(ContactError):
    """Required operator configuration is missing"""

    status_code = 500


class SubmissionValidationError(ContactError):
    """Submitted payload violates a field rule"""

    status_code = 400


class VerificationError(ContactError):
    """Challenge token was rejected or could not be checked"""

    status_code = 400

    def __init__(self, message: str = "Verification failed. Please try again.", error_codes: Optional[list] = None):
        super().__init__(message)
        self.error_codes = error_codes or []


class DeliveryError(ContactError):
    """Delivery service rejected the message or was unreachable"""

    status_code = 502
