"""
Core application services and use cases.

This module contains the relay logic, independent of HTTP framework
details and of the delivery channel used to notify the client.
"""

import logging
from typing import Mapping, Optional

from starlette.responses import Response

from app.core.domain import (
    CallbackResult,
    ExchangeFailure,
    ProviderError,
    Success,
    classify_callback,
)
from app.core.exceptions import ConfigurationError
from app.core.ports import OutcomeRenderer, TokenExchanger

logger = logging.getLogger(__name__)


class CallbackRelayService:
    """
    Application service relaying a provider redirect to the waiting client.

    Classification is shared; the renderer decides how the outcome reaches
    the client and whether the code is exchanged server-side first.
    """

    def __init__(
        self,
        renderer: OutcomeRenderer,
        token_exchanger: Optional[TokenExchanger] = None,
    ):
        """
        Initialize the relay service.

        Args:
            renderer: Delivery channel for the outcome
            token_exchanger: Required when the renderer exchanges codes

        Raises:
            ConfigurationError: If the renderer needs an exchanger and none is given
        """
        if renderer.exchanges_code and token_exchanger is None:
            raise ConfigurationError(
                f"{type(renderer).__name__} requires a token exchanger"
            )
        self.renderer = renderer
        self.token_exchanger = token_exchanger

    async def handle_callback(self, params: Mapping[str, str]) -> Response:
        """Classify the redirect query and notify the client of the outcome."""
        return await self.notify_outcome(classify_callback(params))

    async def notify_outcome(self, result: CallbackResult) -> Response:
        """
        Turn a classified callback into the response delivered to the client.

        Args:
            result: Classified callback

        Returns:
            Response produced by the configured renderer
        """
        if isinstance(result, ProviderError):
            logger.error("OAuth error from provider", extra={"error": result.error})
            return self.renderer.render(result)

        if not isinstance(result, Success):
            logger.error("No authorization code received")
            return self.renderer.render(result)

        if not self.renderer.exchanges_code:
            logger.info("Forwarding authorization code to client")
            return self.renderer.render(result)

        if self.token_exchanger is None:
            raise ConfigurationError(
                f"{type(self.renderer).__name__} requires a token exchanger"
            )
        logger.info("Exchanging code for token...")
        exchanged = await self.token_exchanger.exchange(result.code)

        if isinstance(exchanged, ExchangeFailure):
            logger.error(
                "Error during token exchange", extra={"reason": exchanged.reason}
            )
        else:
            logger.info(
                "Token exchange succeeded", extra={"user": exchanged.user_name}
            )
        return self.renderer.render(exchanged)
