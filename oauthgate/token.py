import json
import logging
from typing import Awaitable, Callable, TypeAlias
from urllib.parse import parse_qsl

import aiohttp

from .security import HardenedHttp, hardened_http
from .types import (
    AccessTokenContainer,
    OAuthProviderConfig,
    TokenRequest,
    TokenResponse,
)

logger = logging.getLogger(__name__)

TokenClient: TypeAlias = Callable[[TokenRequest], Awaitable[TokenResponse]]


class TokenExchangeError(Exception):
    """The token endpoint could not be reached or did not answer in time."""


def token_request(
    config: OAuthProviderConfig,
    callback_uri: str,
    code: str,
) -> TokenRequest:
    return TokenRequest(
        "POST",
        config.token_uri,
        [
            ("grant_type", "authorization_code"),
            ("code", code),
            ("redirect_uri", callback_uri),
            ("client_id", config.credentials.user),
            ("client_secret", config.credentials.password),
        ],
    )


class AiohttpTokenClient:
    http: HardenedHttp

    def __init__(self, http: HardenedHttp = hardened_http):
        self.http = http

    async def __call__(self, request: TokenRequest) -> TokenResponse:
        logger.debug(f"{request.method} {request.uri}")
        try:
            async with self.http.get_session() as session:
                async with session.request(
                    request.method,
                    request.uri,
                    data=aiohttp.FormData(request.form),
                    headers={"Accept": "application/json"},
                ) as resp:
                    body = await resp.text()
                    return TokenResponse(resp.status, body, resp.content_type)
        except (aiohttp.ClientError, TimeoutError, UnicodeDecodeError) as exception:
            raise TokenExchangeError(
                f"{request.method} {request.uri}: {exception!r}"
            ) from exception


def access_token_from(response: TokenResponse) -> AccessTokenContainer | None:
    """Reads the access token out of a token endpoint reply.

    JSON and form-encoded bodies carry it in `access_token`, anything else is
    taken as the bare token."""

    content_type = (response.content_type or "").split(";")[0].strip().lower()
    if content_type == "application/json":
        try:
            parsed = json.loads(response.body)
        except ValueError:
            return None
        token = parsed.get("access_token") if isinstance(parsed, dict) else None
    elif content_type == "application/x-www-form-urlencoded":
        token = dict(parse_qsl(response.body)).get("access_token")
    else:
        token = response.body.strip()

    if not isinstance(token, str) or not token:
        return None
    return AccessTokenContainer(token)
