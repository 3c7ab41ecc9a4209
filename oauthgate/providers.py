from authlib.common.security import generate_token

from .oauth import OAuthProvider
from .persistence import OAuthPersistence
from .state import with_query
from .token import AiohttpTokenClient, TokenClient
from .types import Credentials, OAuthProviderConfig


def google_config(credentials: Credentials) -> OAuthProviderConfig:
    return OAuthProviderConfig(
        "https://accounts.google.com",
        "/o/oauth2/v2/auth",
        "/oauth2/v4/token",
        credentials,
        "https://www.googleapis.com",
    )


def dropbox_config(credentials: Credentials) -> OAuthProviderConfig:
    return OAuthProviderConfig(
        "https://www.dropbox.com",
        "/oauth2/authorize",
        "/oauth2/token",
        credentials,
        "https://api.dropboxapi.com",
    )


def _with_nonce(uri: str) -> str:
    return with_query(uri, "nonce", generate_token())


def google(
    credentials: Credentials,
    callback_uri: str,
    persistence: OAuthPersistence,
    scopes: list[str] | None = None,
    token_client: TokenClient | None = None,
) -> OAuthProvider:
    """Google sign in. Asks for `openid` unless told otherwise and sends a
    fresh nonce with every authorization request."""

    return OAuthProvider(
        google_config(credentials),
        token_client or AiohttpTokenClient(),
        callback_uri,
        scopes if scopes is not None else ["openid"],
        persistence,
        redirect_modifier=_with_nonce,
    )


def dropbox(
    credentials: Credentials,
    callback_uri: str,
    persistence: OAuthPersistence,
    token_client: TokenClient | None = None,
) -> OAuthProvider:
    # dropbox scopes are fixed by the app registration
    return OAuthProvider(
        dropbox_config(credentials),
        token_client or AiohttpTokenClient(),
        callback_uri,
        [],
        persistence,
    )
