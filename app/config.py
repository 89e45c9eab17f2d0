"""Application configuration"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Cloudflare Turnstile
    # Secret stays server-side; the site key is handed to the browser widget
    turnstile_secret_key: Optional[str] = None
    turnstile_site_key: Optional[str] = None
    turnstile_verify_url: str = "https://challenges.cloudflare.com/turnstile/v0/siteverify"

    # Formspree (message delivery)
    formspree_form_id: Optional[str] = None
    formspree_base_url: str = "https://formspree.io/f"

    # Submissions declaring a different origin are rejected
    allowed_domain: Optional[str] = None

    # Deadline for each outbound call (verification, delivery)
    outbound_timeout_seconds: float = 5.0

    # Per-address submission limit
    rate_limit_enabled: bool = True
    rate_limit_window_seconds: int = 60
    rate_limit_max_requests: int = 5

    # Application
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def formspree_endpoint(self) -> Optional[str]:
        """Full delivery URL, or None when no form is configured"""
        if not self.formspree_form_id:
            return None
        return f"{self.formspree_base_url.rstrip('/')}/{self.formspree_form_id}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
