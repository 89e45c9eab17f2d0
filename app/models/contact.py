"""Contact submission Pydantic models"""
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError
from email_validator import validate_email, EmailNotValidError
from typing import Any, Dict, List, Optional

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 2000
PHONE_MAX_LENGTH = 50

# Messages for errors pydantic raises itself (missing field, wrong type)
FIELD_MESSAGES = {
    "email": "Please provide a valid email address.",
    "phone": "Please provide a valid phone number.",
    "message": "Message cannot be empty.",
    "turnstileToken": "Verification is required.",
    "honeypot": "Invalid input.",
    "domain": "Invalid submission origin.",
}

CUSTOM_ERROR_TYPES = {
    "invalid_email",
    "message_empty",
    "message_too_short",
    "message_too_long",
    "phone_too_long",
    "token_missing",
}


def is_valid_email(value: str) -> bool:
    """Syntax-only address check (no DNS lookup)"""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class SubmissionPayload(BaseModel):
    """Contact form submission as received from the browser"""
    email: str
    phone: Optional[str] = None
    message: str
    turnstile_token: str = Field(alias="turnstileToken")
    honeypot: Optional[str] = None
    domain: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v: str) -> str:
        v = v.strip()
        if not v or not is_valid_email(v):
            raise PydanticCustomError("invalid_email", FIELD_MESSAGES["email"])
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > PHONE_MAX_LENGTH:
            raise PydanticCustomError("phone_too_long", "Phone number is too long.")
        return v or None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("message_empty", "Message cannot be empty.")
        if len(v) < MESSAGE_MIN_LENGTH:
            raise PydanticCustomError("message_too_short", "Message is too short.")
        if len(v) > MESSAGE_MAX_LENGTH:
            raise PydanticCustomError(
                "message_too_long", "Message is a bit too long. Please shorten it."
            )
        return v

    @field_validator("turnstile_token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("token_missing", FIELD_MESSAGES["turnstileToken"])
        return v

    def delivery_body(self) -> Dict[str, Any]:
        """Payload forwarded to the delivery service (no token, no honeypot)"""
        return self.model_dump(exclude={"turnstile_token", "honeypot"}, exclude_none=True)


def first_error_message(exc: ValidationError) -> str:
    """User-facing message for the first violated field rule"""
    errors = exc.errors()
    if not errors:
        return "Invalid input."
    first = errors[0]
    if first["type"] in CUSTOM_ERROR_TYPES:
        return first["msg"]
    field = str(first["loc"][0]) if first.get("loc") else ""
    return FIELD_MESSAGES.get(field, "Invalid input.")


class VerificationOutcome(BaseModel):
    """Verdict returned by the Turnstile siteverify endpoint"""
    success: bool = False
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")

    model_config = ConfigDict(populate_by_name=True)


class ContactResponse(BaseModel):
    """Accepted submission"""
    ok: bool = True


class ErrorResponse(BaseModel):
    """Rejected submission"""
    error: str
