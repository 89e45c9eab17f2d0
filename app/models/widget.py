"""Widget-related Pydantic models"""
from pydantic import BaseModel
from typing import Optional


class WidgetConfig(BaseModel):
    """Challenge widget configuration response"""
    site_key: Optional[str] = None
    enabled: bool = False
