"""
Callback relay API endpoints.

- GET /auth/callback - Relay the provider redirect to the waiting client
- GET /oauth/callback - Log the redirect query and acknowledge it
- GET /debug - Report configuration presence
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from starlette.responses import Response

from app.core.domain import ProviderError
from app.relay.dependencies import Config, RelayService, Renderer


logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

# Reason reported to the client when the relay itself fails
INTERNAL_ERROR = "internal_error"


@router.get("/auth/callback")
async def auth_callback(
    request: Request,
    relay: RelayService,
    renderer: Renderer,
) -> Response:
    """
    Relay an OAuth provider redirect to the waiting client.

    Depending on the configured mode, the client is either a native app
    (deep link, after a server-side token exchange) or the window that
    opened this popup (postMessage with the raw code).

    Args:
        request: Starlette request (query carries code, state and/or error)
        relay: Relay service wired for the configured mode
        renderer: Renderer used to report unexpected failures

    Returns:
        HTML page or redirect carrying the outcome; never a bare 4xx/5xx
    """
    params = dict(request.query_params)
    logger.info("Received callback with query", extra={"query": params})

    try:
        return await relay.handle_callback(params)
    except Exception as e:
        logger.error(f"Unexpected error relaying callback: {e}", exc_info=True)
        return renderer.render(ProviderError(error=INTERNAL_ERROR))


@router.get("/oauth/callback", response_class=PlainTextResponse)
async def oauth_callback(request: Request) -> str:
    """Log the redirect query parameters and acknowledge the redirect."""
    logger.info(
        "OAuth callback query params", extra={"query": dict(request.query_params)}
    )
    return "OAuth redirect successful! You can close this tab."


@router.get("/debug")
async def debug(config: Config):
    """
    Report which configuration values are present.

    Secrets are reported as Set/Missing. Disabled with
    DEBUG_ENDPOINT_ENABLED=false.
    """
    if not config.debug_endpoint_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    return {"env": config.debug_summary()}
