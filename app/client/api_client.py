"""HTTP client for the contact relay, as used by the contact form"""
import httpx
import logging
from typing import Any, Dict

from app.models.widget import WidgetConfig

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong. Please try again."


class SubmissionRejected(Exception):
    """The relay refused the submission or could not be reached"""

    def __init__(self, message: str = GENERIC_FAILURE, status_code: int = 0):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ContactApiClient:
    """Thin wrapper around the relay endpoints"""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = ""):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def send(self, payload: Dict[str, Any]) -> None:
        """
        POST one submission to the relay.

        Raises:
            SubmissionRejected: Non-2xx response (carrying the relay's
                `error` text when present) or a transport failure
        """
        try:
            response = await self.http_client.post(f"{self.base_url}/api/contact", json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Contact relay unreachable: {e}")
            raise SubmissionRejected()

        if response.is_success:
            return

        message = GENERIC_FAILURE
        try:
            data = response.json()
            if isinstance(data, dict) and data.get("error"):
                message = str(data["error"])
        except ValueError:
            pass

        raise SubmissionRejected(message, status_code=response.status_code)

    async def fetch_widget_config(self) -> WidgetConfig:
        """Site key and availability of the challenge widget"""
        response = await self.http_client.get(f"{self.base_url}/api/widget/config")
        response.raise_for_status()
        return WidgetConfig.model_validate(response.json())
