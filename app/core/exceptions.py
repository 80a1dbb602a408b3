"""
Domain exceptions for the callback relay.

Exchange errors are raised inside the provider adapter and converted to an
explicit TokenExchangeResult at its boundary. RelayError escaping a route is
caught by the centralized exception handler in main.py.
"""


class RelayError(Exception):
    """Base exception for callback relay errors."""

    pass


class TokenExchangeError(RelayError):
    """
    Raised when the provider rejects the code-for-token exchange.

    Covers non-2xx responses, responses without an access token and
    network failures talking to the token endpoint.
    """

    pass


class IdentityLookupError(RelayError):
    """Raised when the bearer-token identity lookup fails."""

    pass


class ConfigurationError(RelayError):
    """Raised when relay configuration is invalid."""

    pass
