"""Verified contact submission relay

One call per submission attempt. Nothing is shared between calls: the
settings object and HTTP client are handed in by the caller.
"""
import httpx
import logging
from typing import Any, Optional

from pydantic import ValidationError

from app.config import Settings
from app.models.contact import ContactResponse, SubmissionPayload, first_error_message
from app.services.delivery_service import forward_submission
from app.services.turnstile_service import verify_token
from app.utils.errors import ConfigurationError, SubmissionValidationError

logger = logging.getLogger(__name__)


def check_configuration(settings: Settings) -> None:
    """Raise before any network call if operator configuration is missing"""
    if not settings.turnstile_secret_key:
        logger.error("Turnstile secret key is not configured. Set TURNSTILE_SECRET_KEY.")
        raise ConfigurationError("Verification service is not configured.")
    if not settings.formspree_endpoint:
        logger.error("Formspree form is not configured. Set FORMSPREE_FORM_ID.")
        raise ConfigurationError("Contact service is not configured.")


def parse_payload(raw_body: Any) -> SubmissionPayload:
    """Validate the request body, reporting only the first violation"""
    if not isinstance(raw_body, dict):
        raise SubmissionValidationError("Invalid input.")
    try:
        return SubmissionPayload.model_validate(raw_body)
    except ValidationError as e:
        raise SubmissionValidationError(first_error_message(e))


async def relay_submission(
    raw_body: Any,
    *,
    settings: Settings,
    client: httpx.AsyncClient,
    remote_ip: Optional[str] = None
) -> ContactResponse:
    """
    Gate, verify and forward one contact submission.

    Order matters: delivery is only attempted after the token has been
    verified, and both calls are awaited one after the other.

    Args:
        raw_body: Decoded JSON body of the request
        settings: Application settings
        client: HTTP client used for both outbound calls
        remote_ip: Caller's forwarded address, passed to the verifier

    Returns:
        ContactResponse on acceptance

    Raises:
        ContactError subclasses, each mapping to one response status
    """
    check_configuration(settings)
    payload = parse_payload(raw_body)

    # Honeypot filled: accept silently and contact nobody
    if payload.honeypot:
        logger.info("Honeypot field filled, dropping submission")
        return ContactResponse()

    if payload.domain and settings.allowed_domain and payload.domain != settings.allowed_domain:
        logger.warning(f"Submission from unexpected origin: {payload.domain}")
        raise SubmissionValidationError("Invalid submission origin.")

    await verify_token(client, settings, payload.turnstile_token, remote_ip)
    await forward_submission(client, settings, payload)

    return ContactResponse()
