"""
Client for the OAuth provider's token and identity endpoints.

Implements the TokenExchanger port: authorization-code grant with HTTP Basic
client authentication, followed by a best-effort bearer-token identity lookup.
"""

import logging
from typing import Any

import httpx

from app.core.domain import ExchangeFailure, TokenExchangeResult, TokenGrant
from app.core.exceptions import IdentityLookupError, TokenExchangeError
from app.relay.config import RelayConfig


logger = logging.getLogger(__name__)

UNKNOWN_USER = "unknown"


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, or return an empty dict."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class OAuthProviderClient:
    """
    A client exchanging authorization codes with an OAuth 2.0 provider.

    Both outbound calls are bounded by the configured timeout. Codes are
    single use, so nothing is retried.
    """

    def __init__(self, config: RelayConfig):
        """
        Initializes the client.

        Args:
            config: Relay configuration with endpoints and credentials
        """
        self._config = config

    async def exchange(self, code: str) -> TokenExchangeResult:
        """
        Exchange an authorization code for an access token and user name.

        Args:
            code: Authorization code from the provider redirect

        Returns:
            TokenGrant on success, ExchangeFailure with the reason otherwise.
            A failed identity lookup still yields a TokenGrant with an
            unknown user.
        """
        async with httpx.AsyncClient(timeout=self._config.http_timeout) as client:
            try:
                access_token = await self._request_token(client, code)
            except TokenExchangeError as e:
                return ExchangeFailure(reason=str(e))

            try:
                user_name = await self._lookup_user_name(client, access_token)
            except IdentityLookupError as e:
                logger.warning(f"Identity lookup failed, continuing: {e}")
                user_name = UNKNOWN_USER

        return TokenGrant(access_token=access_token, user_name=user_name)

    async def _request_token(self, client: httpx.AsyncClient, code: str) -> str:
        """
        POST the authorization code to the token endpoint.

        Raises:
            TokenExchangeError: On non-2xx, missing token or network failure
        """
        try:
            response = await client.post(
                self._config.token_url,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self._config.redirect_uri or "",
                },
                auth=(self._config.client_id or "", self._config.client_secret or ""),
                headers={"Accept": "application/json"},
            )
        except httpx.RequestError as e:
            raise TokenExchangeError(
                f"Network error during token exchange: {e}"
            ) from e

        data = _json_body(response)
        logger.info(
            f"Token response: status={response.status_code}",
            extra={"response_fields": sorted(data)},
        )

        if not response.is_success:
            detail = (
                data.get("error_description")
                or data.get("error")
                or f"HTTP {response.status_code}"
            )
            raise TokenExchangeError(f"Token exchange failed: {detail}")

        access_token = data.get("access_token")
        if not access_token:
            raise TokenExchangeError("No access token received")

        return str(access_token)

    async def _lookup_user_name(
        self, client: httpx.AsyncClient, access_token: str
    ) -> str:
        """
        GET the identity endpoint with the bearer token.

        Raises:
            IdentityLookupError: On non-2xx or network failure
        """
        try:
            response = await client.get(
                self._config.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IdentityLookupError(
                f"Identity lookup failed: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise IdentityLookupError(f"Network error during identity lookup: {e}") from e

        name = _json_body(response).get("name")
        logger.info(f"User data: {name}")
        return str(name) if name else UNKNOWN_USER
