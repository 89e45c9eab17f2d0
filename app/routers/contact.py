"""Contact form endpoint - verified message relay"""
from fastapi import APIRouter, Depends, Request, Response
from typing import AsyncIterator
import httpx
import logging

from app.config import Settings, get_settings
from app.models.contact import ContactResponse, ErrorResponse
from app.services.contact_relay import check_configuration, relay_submission
from app.utils.rate_limit import contact_rate_limit, get_forwarded_address, limiter

logger = logging.getLogger(__name__)
router = APIRouter()


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    """One outbound client per request, bounded by the configured deadline"""
    async with httpx.AsyncClient(timeout=settings.outbound_timeout_seconds) as client:
        yield client


async def require_configuration(settings: Settings = Depends(get_settings)) -> None:
    # Dependencies resolve before the rate limit is counted
    check_configuration(settings)


@router.post(
    "",
    response_model=ContactResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    dependencies=[Depends(require_configuration)]
)
@limiter.limit(contact_rate_limit)
async def submit_contact(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client)
):
    """
    Handle contact form submission (PUBLIC endpoint)
    Verifies the Turnstile token, then forwards the message to Formspree
    """
    try:
        raw_body = await request.json()
    except ValueError:
        # Reported as a validation error once configuration is checked
        raw_body = None

    return await relay_submission(
        raw_body,
        settings=settings,
        client=client,
        remote_ip=get_forwarded_address(request)
    )
