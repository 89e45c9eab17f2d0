"""Cloudflare Turnstile token verification"""
import httpx
import logging
from typing import Optional

from app.config import Settings
from app.models.contact import VerificationOutcome
from app.utils.errors import VerificationError

logger = logging.getLogger(__name__)


async def verify_token(
    client: httpx.AsyncClient,
    settings: Settings,
    token: str,
    remote_ip: Optional[str] = None
) -> VerificationOutcome:
    """
    Check a challenge token against the Turnstile siteverify endpoint.

    Args:
        client: Shared HTTP client for this request
        settings: Application settings (secret and verify URL)
        token: Token issued to the browser widget
        remote_ip: Caller's forwarded address, if known

    Returns:
        The authority's verdict (only when it reports success)

    Raises:
        VerificationError: Token rejected, or the authority was unreachable
    """
    data = {
        "secret": settings.turnstile_secret_key,
        "response": token,
    }
    if remote_ip:
        data["remoteip"] = remote_ip

    try:
        response = await client.post(settings.turnstile_verify_url, data=data)
        outcome = VerificationOutcome.model_validate(response.json())
    except httpx.HTTPError as e:
        logger.error(f"Turnstile verification request failed: {e}")
        raise VerificationError()
    except ValueError as e:
        # Non-JSON or unexpected body shape
        logger.error(f"Turnstile returned an unreadable response ({response.status_code}): {e}")
        raise VerificationError()

    if not outcome.success:
        logger.warning(f"Turnstile rejected token: {outcome.error_codes}")
        raise VerificationError(error_codes=outcome.error_codes)

    return outcome
