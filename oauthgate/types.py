from enum import Enum
from typing import NamedTuple, NewType

CrossSiteRequestForgeryToken = NewType("CrossSiteRequestForgeryToken", str)
AccessTokenContainer = NewType("AccessTokenContainer", str)


class Credentials(NamedTuple):
    user: str
    password: str


class OAuthProviderConfig(NamedTuple):
    auth_base_uri: str
    authorize_path: str
    token_path: str
    credentials: Credentials
    api_base_uri: str

    @property
    def authorize_uri(self) -> str:
        return f"{self.auth_base_uri}{self.authorize_path}"

    @property
    def token_uri(self) -> str:
        return f"{self.api_base_uri}{self.token_path}"


class State(NamedTuple):
    csrf: CrossSiteRequestForgeryToken
    uri: str = "/"


class TokenRequest(NamedTuple):
    method: str
    uri: str
    form: list[tuple[str, str]]


class TokenResponse(NamedTuple):
    status: int
    body: str
    content_type: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class CallbackFailure(Enum):
    MISSING_CSRF_COOKIE = "missing_csrf_cookie"
    MISSING_CODE = "missing_code"
    UNDECODABLE_STATE = "undecodable_state"
    STATE_MISMATCH = "state_mismatch"
    TOKEN_EXCHANGE_FAILURE = "token_exchange_failure"
