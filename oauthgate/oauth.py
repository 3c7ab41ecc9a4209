from functools import wraps
from http import HTTPStatus
from typing import Any, Callable, Mapping
from urllib.parse import quote, urlencode, urlsplit

from flask import Blueprint, Request, Response, current_app, redirect, request

from .persistence import OAuthPersistence
from .state import csrf_matches, decode_state, encode_state, generate_csrf
from .token import TokenClient, TokenExchangeError, access_token_from, token_request
from .types import (
    CallbackFailure,
    CrossSiteRequestForgeryToken,
    OAuthProviderConfig,
    State,
)

# characters left alone when putting the original path back into a URI
_PATH_SAFE = "/:@!$&'()*+,;=~"


class OAuthProvider:
    """Authorization code flow in front of Flask views.

    `auth_filter` guards a view and sends callers without an access token to
    the authorization server; `callback` receives the server's answer,
    exchanges the code and sends the caller back where they started."""

    config: OAuthProviderConfig
    token_client: TokenClient
    callback_uri: str
    scopes: list[str]
    persistence: OAuthPersistence
    redirect_modifier: Callable[[str], str]
    generate_csrf: Callable[[], CrossSiteRequestForgeryToken]

    def __init__(
        self,
        config: OAuthProviderConfig,
        token_client: TokenClient,
        callback_uri: str,
        scopes: list[str],
        persistence: OAuthPersistence,
        redirect_modifier: Callable[[str], str] = lambda uri: uri,
        generate_csrf: Callable[[], CrossSiteRequestForgeryToken] = generate_csrf,
    ):
        self.config = config
        self.token_client = token_client
        self.callback_uri = callback_uri
        self.scopes = list(scopes)
        self.persistence = persistence
        self.redirect_modifier = redirect_modifier
        self.generate_csrf = generate_csrf

    def auth_filter(self, view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        def filtered(*args: Any, **kwargs: Any) -> Any:
            if self.persistence.lookup_token(request) is not None:
                return current_app.ensure_sync(view)(*args, **kwargs)
            return self.authorize_redirect()

        return filtered

    def authorize_redirect(self) -> Response:
        csrf = self.generate_csrf()
        state = encode_state(csrf, original_uri(request))
        qparam = urlencode(
            [
                ("client_id", self.config.credentials.user),
                ("response_type", "code"),
                ("scope", " ".join(self.scopes)),
                ("redirect_uri", self.callback_uri),
                ("state", state),
            ]
        )
        location = self.redirect_modifier(f"{self.config.authorize_uri}?{qparam}")
        current_app.logger.debug(f"no access token, redirecting to {location}")
        return self.persistence.assign_csrf(redirect(location, 307), csrf)

    async def callback(self) -> Response:
        verified = verify_callback(request.args, self.persistence.lookup_csrf(request))
        if isinstance(verified, CallbackFailure):
            return self._reject(verified)
        code, state = verified

        exchange = token_request(self.config, self.callback_uri, code)
        try:
            resp = await self.token_client(exchange)
        except TokenExchangeError as exception:
            current_app.logger.warning(f"token exchange failed: {exception}")
            return self._reject(CallbackFailure.TOKEN_EXCHANGE_FAILURE)

        if not resp.ok:
            current_app.logger.warning(f"token endpoint returned {resp.status}")
            return self._reject(CallbackFailure.TOKEN_EXCHANGE_FAILURE)

        token = access_token_from(resp)
        if token is None:
            current_app.logger.warning("token endpoint reply has no access token")
            return self._reject(CallbackFailure.TOKEN_EXCHANGE_FAILURE)

        current_app.logger.debug(f"assigning access token, resuming {state.uri}")
        response = redirect(state.uri, 307)
        response.headers["action"] = "assignToken"
        return self.persistence.assign_token(request, response, token)

    def blueprint(self, name: str = "oauth") -> Blueprint:
        """Blueprint serving `callback` on the path of the callback URI."""

        bp = Blueprint(name, __name__)
        path = urlsplit(self.callback_uri).path or "/"
        bp.add_url_rule(path, "callback", self.callback, methods=["GET"])
        return bp

    def _reject(self, failure: CallbackFailure) -> Response:
        current_app.logger.debug(f"rejecting callback: {failure.name}")
        return self.persistence.invalidate(Response(status=HTTPStatus.FORBIDDEN))


def verify_callback(
    args: Mapping[str, str],
    csrf: CrossSiteRequestForgeryToken | None,
) -> tuple[str, State] | CallbackFailure:
    """Checks the callback query against the stored CSRF token.

    Returns the authorization code and the decoded state, or the first
    check that failed."""

    if csrf is None:
        return CallbackFailure.MISSING_CSRF_COOKIE

    code = args.get("code")
    if not code:
        return CallbackFailure.MISSING_CODE

    state = decode_state(args.get("state") or "")
    if state is None:
        return CallbackFailure.UNDECODABLE_STATE
    if not csrf_matches(csrf, state.csrf):
        return CallbackFailure.STATE_MISMATCH

    return code, state


def original_uri(request: Request) -> str:
    # a leading "//" would make the resume location protocol relative
    path = "/" + (request.script_root + request.path).lstrip("/")
    uri = quote(path, safe=_PATH_SAFE)
    if request.query_string:
        uri += "?" + request.query_string.decode("utf-8", "replace")
    return uri
