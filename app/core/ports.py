"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the relay use case and external systems.
Infrastructure adapters implement these ports.
"""

from typing import Protocol, Union

from starlette.responses import Response

from app.core.domain import (
    ExchangeFailure,
    MissingCode,
    ProviderError,
    Success,
    TokenExchangeResult,
    TokenGrant,
)


# Everything a renderer may be asked to present
Outcome = Union[Success, ProviderError, MissingCode, TokenGrant, ExchangeFailure]


class TokenExchanger(Protocol):
    """
    Port (interface) for exchanging an authorization code.

    Implemented by infrastructure adapters (e.g., OAuthProviderClient).
    Failures are returned as ExchangeFailure, never raised.
    """

    async def exchange(self, code: str) -> TokenExchangeResult:
        """
        Exchange an authorization code for an access token and user name.

        Args:
            code: Authorization code from the provider redirect

        Returns:
            TokenGrant on success, ExchangeFailure otherwise
        """
        ...


class OutcomeRenderer(Protocol):
    """
    Port (interface) for notifying the waiting client of an outcome.

    One implementation per delivery channel (deep link, window message).
    """

    exchanges_code: bool

    def render(self, outcome: Outcome) -> Response:
        """Build the HTTP response that delivers the outcome."""
        ...
