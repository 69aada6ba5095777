from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logger = logging.getLogger(__name__)

_PLACEHOLDER_MARKERS = ("placeholder", "change-in-production", "your_")
_MIN_SECRET_LENGTH = 32


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class SiteConfig:
    base_url: str = os.getenv("SITE_BASE_URL", "https://eastatwest.com")
    production: bool = os.getenv("ENVIRONMENT", "development") == "production"

    # Staff sessions
    session_secret: str = os.getenv("SESSION_SECRET", "eastwest-secret-change-in-production")
    session_cookie: str = "eastwest_session"
    session_max_age: int = 7 * 24 * 3600
    session_refresh_after: int = 3600
    secure_cookies: bool = _env_flag("SESSION_COOKIE_SECURE")
    identity_failure_mode: str = os.getenv("IDENTITY_FAILURE_MODE", "fail")

    # Routing
    protected_prefix: str = "/protected"
    login_path: str = "/login"
    dashboard_path: str = "/dashboard"
    api_prefix: str = "/api"
    data_fetch_param: str = "_rsc"
    content_paths: tuple[str, ...] = ("gallery", "reservations", "menu")

    reservations_inbox: str = os.getenv("RESERVATIONS_EMAIL", "contact@eastatwest.com")


@dataclass(frozen=True)
class EmailConfig:
    resend_api_key: str = os.getenv("RESEND_API_KEY", "")
    resend_from_email: str = os.getenv("RESEND_FROM_EMAIL", "contact@eastatwest.com")
    smtp_host: str = os.getenv("SMTP_HOST", "")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: str = os.getenv("SMTP_USER", "")
    smtp_password: str = os.getenv("SMTP_PASS", "")
    smtp_secure: bool = _env_flag("SMTP_SECURE")
    smtp_from_email: str = os.getenv("SMTP_FROM_EMAIL", "contact@eastatwest.com")

    @property
    def resend_configured(self) -> bool:
        return bool(self.resend_api_key)

    @property
    def smtp_configured(self) -> bool:
        return bool(
            self.smtp_host and self.smtp_port and self.smtp_user and self.smtp_password
        )


DEFAULT_SITE_CONFIG = SiteConfig()
DEFAULT_EMAIL_CONFIG = EmailConfig()


def check_session_config(config: SiteConfig = DEFAULT_SITE_CONFIG) -> bool:
    """Return ``True`` when the session secret looks production-ready.

    Empty, placeholder and short secrets are reported and treated as
    not configured.
    """
    secret = config.session_secret
    if not secret:
        logger.error("SESSION_SECRET is not configured")
        return False

    lowered = secret.lower()
    if any(marker in lowered for marker in _PLACEHOLDER_MARKERS):
        logger.warning("SESSION_SECRET appears to be a placeholder value")
        return False

    if len(secret) < _MIN_SECRET_LENGTH:
        logger.error(
            "SESSION_SECRET appears to be invalid (shorter than %d characters)",
            _MIN_SECRET_LENGTH,
        )
        return False

    return True
