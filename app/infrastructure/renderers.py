"""
Outcome renderers: the two channels for notifying the waiting client.

- DeepLinkRenderer: redirects a native app through its custom URL scheme,
  after the code has been exchanged server-side.
- WindowMessageRenderer: posts the raw code to the popup's opener window.

Values reaching a page are JSON-encoded inside scripts and HTML-escaped in
markup.
"""

import html
import json
from typing import Any
from urllib.parse import quote

from fastapi import status
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.responses import Response

from app.core.domain import (
    NO_CODE_ERROR,
    ExchangeFailure,
    MissingCode,
    ProviderError,
    Success,
    TokenGrant,
)
from app.core.ports import Outcome


# Delay before the deep link fires, and before the manual fallback appears
REDIRECT_DELAY_MS = 1000
FALLBACK_DELAY_MS = 3000


def encode_component(value: str) -> str:
    """Percent-encode a value for use inside a URL query component."""
    return quote(value, safe="")


def script_literal(value: Any) -> str:
    """Encode a value as a JavaScript literal safe to embed in a <script> block."""
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
    )


class DeepLinkRenderer:
    """
    Notify a native app through `<scheme>://oauth-success|oauth-error` links.
    """

    exchanges_code = True

    def __init__(self, scheme: str, app_display_name: str = "the app"):
        self.scheme = scheme
        self.app_display_name = app_display_name

    def error_url(self, reason: str) -> str:
        return f"{self.scheme}://oauth-error?error={encode_component(reason)}"

    def success_url(self, access_token: str, user_name: str) -> str:
        return (
            f"{self.scheme}://oauth-success"
            f"?token={encode_component(access_token)}"
            f"&user={encode_component(user_name or 'unknown')}"
        )

    def render(self, outcome: Outcome) -> Response:
        if isinstance(outcome, TokenGrant):
            return self._success_page(
                self.success_url(outcome.access_token, outcome.user_name)
            )

        if isinstance(outcome, (ProviderError, MissingCode)):
            reason = outcome.error
        elif isinstance(outcome, ExchangeFailure):
            reason = outcome.reason
        else:
            raise TypeError(
                f"{type(outcome).__name__} must be exchanged before deep linking"
            )

        return RedirectResponse(
            url=self.error_url(reason), status_code=status.HTTP_302_FOUND
        )

    def _success_page(self, redirect_url: str) -> HTMLResponse:
        href = html.escape(redirect_url, quote=True)
        app_name = html.escape(self.app_display_name)
        fallback_html = (
            f'Please return to the {app_name} app or <a href="{href}">click here</a>'
        )

        html_content = f"""<!DOCTYPE html>
<html>
  <head>
    <title>Authentication Successful</title>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
      body {{ font-family: Arial, sans-serif; text-align: center; padding: 50px; }}
      .success {{ color: #28a745; }}
      .loading {{ color: #6c757d; }}
    </style>
  </head>
  <body>
    <h1 class="success">&#9989; Authentication Successful!</h1>
    <p class="loading">Redirecting back to {app_name}...</p>
    <p>If you're not redirected automatically, <a href="{href}">click here</a></p>
    <script>
      var redirectUrl = {script_literal(redirect_url)};
      setTimeout(() => {{
        window.location.href = redirectUrl;
      }}, {REDIRECT_DELAY_MS});
      setTimeout(() => {{
        document.querySelector('.loading').innerHTML = {script_literal(fallback_html)};
      }}, {FALLBACK_DELAY_MS});
    </script>
  </body>
</html>
"""
        return HTMLResponse(content=html_content)


class WindowMessageRenderer:
    """
    Notify the opener window with `postMessage`, then close the popup.

    The code is never exchanged here; the opener is expected to do it.
    Without an opener the outcome is shown inline in the same tab.
    """

    exchanges_code = False

    def render(self, outcome: Outcome) -> Response:
        if isinstance(outcome, Success):
            return self._message_page(
                title="OAuth Success",
                message={
                    "type": "oauth-success",
                    "code": outcome.code,
                    "state": outcome.state,
                },
                intro="Authorization successful. Closing window...",
                fallback=f"Authorization code received: {outcome.code}",
            )

        if isinstance(outcome, ProviderError):
            return self._message_page(
                title="OAuth Error",
                message={"type": "oauth-error", "error": outcome.error},
                fallback=f"OAuth error: {outcome.error}",
            )

        if isinstance(outcome, MissingCode):
            return self._message_page(
                title="OAuth Error",
                message={"type": "oauth-error", "error": NO_CODE_ERROR},
                fallback="No authorization code received.",
            )

        if isinstance(outcome, ExchangeFailure):
            return self._message_page(
                title="OAuth Error",
                message={"type": "oauth-error", "error": outcome.reason},
                fallback=f"OAuth error: {outcome.reason}",
            )

        raise TypeError(f"Cannot post {type(outcome).__name__} to an opener window")

    def _message_page(
        self,
        title: str,
        message: dict[str, Any],
        fallback: str,
        intro: str = "",
    ) -> HTMLResponse:
        intro_html = f"<p>{html.escape(intro)}</p>" if intro else ""

        html_content = f"""<!DOCTYPE html>
<html>
  <head><title>{html.escape(title)}</title></head>
  <body>
    {intro_html}
    <script>
      if (window.opener) {{
        window.opener.postMessage({script_literal(message)}, '*');
        window.close();
      }} else {{
        var p = document.createElement('p');
        p.textContent = {script_literal(fallback)};
        document.body.replaceChildren(p);
      }}
    </script>
  </body>
</html>
"""
        return HTMLResponse(content=html_content)
