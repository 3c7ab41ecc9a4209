from .oauth import OAuthProvider, verify_callback
from .persistence import OAuthPersistence, SessionOAuthPersistence
from .state import decode_state, encode_state, generate_csrf, with_query
from .token import AiohttpTokenClient, TokenClient, TokenExchangeError, access_token_from
from .types import (
    AccessTokenContainer,
    CallbackFailure,
    Credentials,
    CrossSiteRequestForgeryToken,
    OAuthProviderConfig,
    State,
    TokenRequest,
    TokenResponse,
)

__all__ = [
    "AccessTokenContainer",
    "AiohttpTokenClient",
    "CallbackFailure",
    "Credentials",
    "CrossSiteRequestForgeryToken",
    "OAuthPersistence",
    "OAuthProvider",
    "OAuthProviderConfig",
    "SessionOAuthPersistence",
    "State",
    "TokenClient",
    "TokenExchangeError",
    "TokenRequest",
    "TokenResponse",
    "access_token_from",
    "decode_state",
    "encode_state",
    "generate_csrf",
    "verify_callback",
    "with_query",
]
