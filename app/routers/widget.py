"""Widget endpoints - Public challenge widget configuration"""
from fastapi import APIRouter, Depends
import logging

from app.config import Settings, get_settings
from app.models.widget import WidgetConfig

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/config", response_model=WidgetConfig)
async def get_widget_config(settings: Settings = Depends(get_settings)):
    """
    Get challenge widget configuration (PUBLIC endpoint - no auth required)
    Used by the contact form to render the Turnstile widget
    """
    if not settings.turnstile_site_key:
        # Operators see this; the form just renders without a challenge
        logger.warning("Turnstile site key is not configured. Set TURNSTILE_SITE_KEY.")
        return WidgetConfig(site_key=None, enabled=False)

    return WidgetConfig(site_key=settings.turnstile_site_key, enabled=True)
