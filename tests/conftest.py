from typing_extensions import override

import pytest
from flask import Flask, Request, Response

from oauthgate import (
    AccessTokenContainer,
    Credentials,
    CrossSiteRequestForgeryToken,
    OAuthPersistence,
    OAuthProvider,
    OAuthProviderConfig,
    TokenRequest,
    TokenResponse,
    with_query,
)


class FakeOAuthPersistence(OAuthPersistence):
    """Keeps tokens in memory and reads the CSRF value from a plain cookie."""

    def __init__(self):
        self.csrf: CrossSiteRequestForgeryToken | None = None
        self.access_token: AccessTokenContainer | None = None
        self.invalidated = 0

    @override
    def lookup_token(self, request: Request) -> AccessTokenContainer | None:
        return self.access_token

    @override
    def assign_token(
        self,
        request: Request,
        response: Response,
        token: AccessTokenContainer,
    ) -> Response:
        self.access_token = token
        return response

    @override
    def lookup_csrf(self, request: Request) -> CrossSiteRequestForgeryToken | None:
        value = request.cookies.get("serviceCsrf")
        return CrossSiteRequestForgeryToken(value) if value else None

    @override
    def assign_csrf(
        self,
        response: Response,
        csrf: CrossSiteRequestForgeryToken,
    ) -> Response:
        self.csrf = csrf
        return response

    @override
    def invalidate(self, response: Response) -> Response:
        self.invalidated += 1
        return response


class FakeTokenClient:
    def __init__(
        self,
        status: int = 200,
        body: str = "access token goes here",
        content_type: str = "text/plain",
        error: Exception | None = None,
    ):
        self.response = TokenResponse(status, body, content_type)
        self.error = error
        self.requests: list[TokenRequest] = []

    async def __call__(self, request: TokenRequest) -> TokenResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


PROVIDER_CONFIG = OAuthProviderConfig(
    "http://authHost",
    "/auth",
    "/token",
    Credentials("user", "password"),
    "http://apiHost",
)

CALLBACK_URI = "http://callbackHost/callback"


@pytest.fixture
def persistence():
    return FakeOAuthPersistence()


@pytest.fixture
def token_client():
    return FakeTokenClient()


def make_provider(
    persistence: OAuthPersistence,
    token_client: FakeTokenClient,
) -> OAuthProvider:
    return OAuthProvider(
        PROVIDER_CONFIG,
        token_client,
        CALLBACK_URI,
        ["scope1", "scope2"],
        persistence,
        lambda uri: with_query(uri, "nonce", "randomNonce"),
        lambda: CrossSiteRequestForgeryToken("randomCsrf"),
    )


def make_app(provider: OAuthProvider) -> Flask:
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.register_blueprint(provider.blueprint())

    @app.get("/")
    @provider.auth_filter
    def protected():
        return "i am witorious!"

    @app.get("/reports/<name>")
    @provider.auth_filter
    async def report(name: str):
        return f"report {name}"

    return app


@pytest.fixture
def provider(persistence, token_client):
    return make_provider(persistence, token_client)


@pytest.fixture
def client(provider):
    return make_app(provider).test_client()
