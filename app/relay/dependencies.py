"""
FastAPI dependencies for the relay endpoints.

Provides dependency injection for configuration, the outcome renderer and
the relay service. Tests override get_relay_config or get_token_exchanger
through app.dependency_overrides.
"""

from typing import Annotated, Optional

from fastapi import Depends

from app.core.ports import OutcomeRenderer, TokenExchanger
from app.core.services import CallbackRelayService
from app.infrastructure.oauth_provider_client import OAuthProviderClient
from app.infrastructure.renderers import DeepLinkRenderer, WindowMessageRenderer
from app.relay.config import RelayConfig, get_relay_config


def get_renderer(
    config: Annotated[RelayConfig, Depends(get_relay_config)],
) -> OutcomeRenderer:
    """Provide the renderer for the configured delivery mode."""
    if config.exchanges_code:
        return DeepLinkRenderer(
            scheme=config.app_scheme, app_display_name=config.app_display_name
        )
    return WindowMessageRenderer()


def get_token_exchanger(
    config: Annotated[RelayConfig, Depends(get_relay_config)],
) -> Optional[TokenExchanger]:
    """Provide the token exchanger, only in modes that exchange codes."""
    if not config.exchanges_code:
        return None
    return OAuthProviderClient(config)


def get_relay_service(
    renderer: Annotated[OutcomeRenderer, Depends(get_renderer)],
    token_exchanger: Annotated[Optional[TokenExchanger], Depends(get_token_exchanger)],
) -> CallbackRelayService:
    """
    Provide the relay service dependency.

    This is where the core service is wired with its delivery adapters.
    """
    return CallbackRelayService(renderer=renderer, token_exchanger=token_exchanger)


# Type aliases for cleaner dependency injection
Config = Annotated[RelayConfig, Depends(get_relay_config)]
Renderer = Annotated[OutcomeRenderer, Depends(get_renderer)]
RelayService = Annotated[CallbackRelayService, Depends(get_relay_service)]
