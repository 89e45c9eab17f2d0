"""Message delivery via Formspree"""
import httpx
import logging

from app.config import Settings
from app.models.contact import SubmissionPayload
from app.utils.errors import DeliveryError

logger = logging.getLogger(__name__)

DEFAULT_DELIVERY_ERROR = "Failed to submit contact form. Please try again."


def extract_error_message(response: httpx.Response) -> str:
    """Pull a readable error out of a failed delivery response"""
    try:
        data = response.json()
    except ValueError:
        return DEFAULT_DELIVERY_ERROR

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, str) and error:
            return error
    return DEFAULT_DELIVERY_ERROR


async def forward_submission(
    client: httpx.AsyncClient,
    settings: Settings,
    payload: SubmissionPayload
) -> None:
    """
    Forward a verified submission to the delivery service.

    The token and honeypot never leave this process.

    Raises:
        DeliveryError: Delivery service rejected the message or was unreachable
    """
    try:
        response = await client.post(
            settings.formspree_endpoint,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json"
            },
            json=payload.delivery_body()
        )
    except httpx.HTTPError as e:
        logger.error(f"Formspree request failed: {e}")
        raise DeliveryError(DEFAULT_DELIVERY_ERROR)

    if not response.is_success:
        message = extract_error_message(response)
        logger.error(f"Formspree rejected submission: {response.status_code} - {response.text}")
        raise DeliveryError(message)

    logger.info("Contact submission delivered")
