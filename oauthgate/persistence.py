from abc import ABC, abstractmethod
from typing_extensions import override

from flask import Request, Response, current_app, session

from .types import AccessTokenContainer, CrossSiteRequestForgeryToken


class OAuthPersistence(ABC):
    """Stores the CSRF token and the access token between requests.

    Implementations are the only place allowed to touch session-carrying
    response state (cookies, headers, server side sessions)."""

    @abstractmethod
    def lookup_token(self, request: Request) -> AccessTokenContainer | None:
        pass

    @abstractmethod
    def assign_token(
        self,
        request: Request,
        response: Response,
        token: AccessTokenContainer,
    ) -> Response:
        pass

    @abstractmethod
    def lookup_csrf(self, request: Request) -> CrossSiteRequestForgeryToken | None:
        pass

    @abstractmethod
    def assign_csrf(
        self,
        response: Response,
        csrf: CrossSiteRequestForgeryToken,
    ) -> Response:
        pass

    @abstractmethod
    def invalidate(self, response: Response) -> Response:
        pass


class SessionOAuthPersistence(OAuthPersistence):
    """Keeps both values in Flask's session, which is a cookie signed with the
    app's SECRET_KEY. Must be used inside a request context."""

    csrf_key: str
    token_key: str

    def __init__(self, prefix: str = "oauth"):
        self.csrf_key = f"{prefix}_csrf"
        self.token_key = f"{prefix}_access_token"

    @override
    def lookup_token(self, request: Request) -> AccessTokenContainer | None:
        token: str | None = session.get(self.token_key)
        return AccessTokenContainer(token) if token else None

    @override
    def assign_token(
        self,
        request: Request,
        response: Response,
        token: AccessTokenContainer,
    ) -> Response:
        # the attempt is over, its csrf token must not be reused
        _ = session.pop(self.csrf_key, None)
        session[self.token_key] = token
        return response

    @override
    def lookup_csrf(self, request: Request) -> CrossSiteRequestForgeryToken | None:
        csrf: str | None = session.get(self.csrf_key)
        return CrossSiteRequestForgeryToken(csrf) if csrf else None

    @override
    def assign_csrf(
        self,
        response: Response,
        csrf: CrossSiteRequestForgeryToken,
    ) -> Response:
        session[self.csrf_key] = csrf
        return response

    @override
    def invalidate(self, response: Response) -> Response:
        current_app.logger.debug(f"dropping {self.csrf_key} and {self.token_key}")
        _ = session.pop(self.csrf_key, None)
        _ = session.pop(self.token_key, None)
        return response
