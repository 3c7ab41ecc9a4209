from typing import Any, Mapping

from .oauth import OAuthProvider
from .persistence import OAuthPersistence, SessionOAuthPersistence
from .security import DEFAULT_TIMEOUT, HardenedHttp
from .token import AiohttpTokenClient, TokenClient
from .types import Credentials, OAuthProviderConfig


def provider_config_from(config: Mapping[str, Any]) -> OAuthProviderConfig:
    return OAuthProviderConfig(
        config["OAUTH_AUTH_BASE_URI"],
        config["OAUTH_AUTHORIZE_PATH"],
        config["OAUTH_TOKEN_PATH"],
        Credentials(config["OAUTH_CLIENT_ID"], config["OAUTH_CLIENT_SECRET"]),
        config["OAUTH_API_BASE_URI"],
    )


def scopes_from(config: Mapping[str, Any]) -> list[str]:
    # from_prefixed_env parses JSON lists, plain strings are space separated
    scopes: list[str] | str = config.get("OAUTH_SCOPES", [])
    if isinstance(scopes, str):
        return scopes.split()
    return [str(scope) for scope in scopes]


def provider_from(
    config: Mapping[str, Any],
    persistence: OAuthPersistence | None = None,
    token_client: TokenClient | None = None,
) -> OAuthProvider:
    """Builds an OAuthProvider from Flask style config (OAUTH_* keys)."""

    if persistence is None:
        persistence = SessionOAuthPersistence(config.get("OAUTH_SESSION_PREFIX", "oauth"))
    if token_client is None:
        timeout = float(config.get("OAUTH_TOKEN_TIMEOUT", DEFAULT_TIMEOUT))
        token_client = AiohttpTokenClient(HardenedHttp(timeout))

    return OAuthProvider(
        provider_config_from(config),
        token_client,
        config["OAUTH_CALLBACK_URI"],
        scopes_from(config),
        persistence,
    )
