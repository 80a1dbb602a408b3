"""
Callback relay configuration.

Loaded once from environment variables at process start and injected into
the handlers, so tests can swap in fake credentials and endpoints.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from app.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


# Hugging Face OAuth endpoints
HF_TOKEN_URL = "https://huggingface.co/oauth/token"
HF_USERINFO_URL = "https://huggingface.co/api/whoami-v2"

# Delivery modes
MODE_DEEP_LINK = "deep_link"
MODE_WINDOW_MESSAGE = "window_message"
SUPPORTED_MODES = [MODE_DEEP_LINK, MODE_WINDOW_MESSAGE]

DEFAULT_APP_SCHEME = "aiEdgeGallery"


def _env_number(name: str, default: str, cast):
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {name}: {value!r}") from e


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RelayConfig:
    """
    Relay configuration settings.

    Client credentials are only needed in deep link mode; their absence is
    reported by /debug rather than failing startup.
    """

    port: int = 3000
    mode: str = MODE_DEEP_LINK
    client_id: str | None = None
    client_secret: str | None = None
    redirect_uri: str | None = None
    app_scheme: str = DEFAULT_APP_SCHEME
    token_url: str = HF_TOKEN_URL
    userinfo_url: str = HF_USERINFO_URL
    http_timeout: float = 10.0
    debug_endpoint_enabled: bool = True
    app_display_name: str = "AI Edge Gallery"

    def __post_init__(self):
        if self.mode not in SUPPORTED_MODES:
            raise ConfigurationError(
                f"Unknown relay mode: {self.mode}. Supported: {SUPPORTED_MODES}"
            )

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Load configuration from environment variables."""
        return cls(
            port=_env_number("PORT", "3000", int),
            mode=os.getenv("RELAY_MODE", MODE_DEEP_LINK).strip().lower(),
            client_id=os.getenv("HF_CLIENT_ID"),
            client_secret=os.getenv("HF_CLIENT_SECRET"),
            redirect_uri=os.getenv("HF_REDIRECT_URI"),
            app_scheme=os.getenv("ANDROID_SCHEME") or DEFAULT_APP_SCHEME,
            token_url=os.getenv("OAUTH_TOKEN_URL", HF_TOKEN_URL),
            userinfo_url=os.getenv("OAUTH_USERINFO_URL", HF_USERINFO_URL),
            http_timeout=_env_number("HTTP_TIMEOUT_SECONDS", "10", float),
            debug_endpoint_enabled=_env_flag("DEBUG_ENDPOINT_ENABLED", True),
            app_display_name=os.getenv("APP_DISPLAY_NAME", "AI Edge Gallery"),
        )

    @property
    def exchanges_code(self) -> bool:
        """Whether the relay exchanges the code server-side."""
        return self.mode == MODE_DEEP_LINK

    def has_client_credentials(self) -> bool:
        """Check if client id and secret are both configured."""
        return bool(self.client_id and self.client_secret)

    def debug_summary(self) -> dict:
        """
        Configuration summary for the /debug endpoint.

        Secrets are reported as presence flags only. The redirect URI and
        scheme are echoed verbatim.
        """
        return {
            "CLIENT_ID": "Set" if self.client_id else "Missing",
            "CLIENT_SECRET": "Set" if self.client_secret else "Missing",
            "REDIRECT_URI": self.redirect_uri or "Missing",
            "ANDROID_SCHEME": self.app_scheme,
        }


@lru_cache()
def get_relay_config() -> RelayConfig:
    """Get relay configuration singleton."""
    config = RelayConfig.from_env()
    if config.exchanges_code and not config.has_client_credentials():
        logger.warning("OAuth client credentials not configured (HF_CLIENT_ID/HF_CLIENT_SECRET)")
    return config
