from hmac import compare_digest
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from authlib.common.security import generate_token

from .types import CrossSiteRequestForgeryToken, State


def encode_state(csrf: CrossSiteRequestForgeryToken, uri: str) -> str:
    """Packs the CSRF token and the URI to resume into an opaque `state` value."""

    return urlencode([("csrf", csrf), ("uri", uri)])


def decode_state(state: str) -> State | None:
    """Inverse of `encode_state` for non-empty values. Returns None for anything
    that is not a form-encoded blob carrying a non-empty `csrf`; an empty or
    absent `uri` resumes at `/`. Extra keys are ignored."""

    try:
        pairs = parse_qsl(state, strict_parsing=True)
    except ValueError:
        return None

    values = dict(pairs)
    csrf = values.get("csrf")
    if not csrf:
        return None
    return State(CrossSiteRequestForgeryToken(csrf), values.get("uri") or "/")


def generate_csrf() -> CrossSiteRequestForgeryToken:
    return CrossSiteRequestForgeryToken(generate_token())


def csrf_matches(
    expected: CrossSiteRequestForgeryToken,
    actual: CrossSiteRequestForgeryToken,
) -> bool:
    return compare_digest(
        expected.encode("utf-8", "surrogatepass"),
        actual.encode("utf-8", "surrogatepass"),
    )


def with_query(uri: str, name: str, value: str) -> str:
    """Appends `name=value` to the query of `uri`, after any existing parameters."""

    parts = urlsplit(uri)
    pair = urlencode([(name, value)])
    query = f"{parts.query}&{pair}" if parts.query else pair
    return urlunsplit(parts._replace(query=query))
