"""
Core domain models for the OAuth callback relay.

These models represent a single callback request and are independent of
any infrastructure or delivery mechanism. Nothing here is persisted.
"""

from typing import Annotated, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field


# Reason sent to the client when the provider redirect carried no code
NO_CODE_ERROR = "no_code"


class Success(BaseModel):
    """Provider redirected back with an authorization code."""

    kind: Literal["success"] = "success"
    code: str = Field(description="Authorization code issued by the provider")
    state: Optional[str] = Field(
        default=None, description="Opaque state echoed back by the provider"
    )


class ProviderError(BaseModel):
    """Provider signaled a failure via the `error` query parameter."""

    kind: Literal["provider_error"] = "provider_error"
    error: str = Field(description="Error code reported by the provider")


class MissingCode(BaseModel):
    """Redirect carried neither an error nor an authorization code."""

    kind: Literal["missing_code"] = "missing_code"

    @property
    def error(self) -> str:
        return NO_CODE_ERROR


CallbackResult = Annotated[
    Union[Success, ProviderError, MissingCode], Field(discriminator="kind")
]


class TokenGrant(BaseModel):
    """Successful code-for-token exchange."""

    kind: Literal["grant"] = "grant"
    access_token: str
    user_name: str = "unknown"


class ExchangeFailure(BaseModel):
    """Failed code-for-token exchange, with a user-presentable reason."""

    kind: Literal["failure"] = "failure"
    reason: str


TokenExchangeResult = Annotated[
    Union[TokenGrant, ExchangeFailure], Field(discriminator="kind")
]


def classify_callback(params: Mapping[str, str]) -> CallbackResult:
    """
    Classify an inbound provider redirect.

    `error` takes precedence over `code`. Empty values count as absent,
    except for `state`, which is carried through exactly as received.

    Args:
        params: Query parameters of the redirect

    Returns:
        Exactly one of Success, ProviderError or MissingCode
    """
    error = params.get("error")
    if error:
        return ProviderError(error=error)

    code = params.get("code")
    if not code:
        return MissingCode()

    return Success(code=code, state=params.get("state"))
