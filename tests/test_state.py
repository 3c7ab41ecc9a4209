# Tests for oauthgate/state.py

import pytest
from hypothesis import given
from hypothesis import strategies as st

from oauthgate import (
    CrossSiteRequestForgeryToken,
    State,
    decode_state,
    encode_state,
    generate_csrf,
    with_query,
)


# non-empty text without lone surrogates, which cannot be UTF-8 encoded
values = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=1,
)


def csrf(value: str) -> CrossSiteRequestForgeryToken:
    return CrossSiteRequestForgeryToken(value)


class TestEncodeState:
    def test_form_encodes_csrf_then_uri(self):
        assert encode_state(csrf("randomCsrf"), "/") == "csrf=randomCsrf&uri=%2F"

    def test_escapes_values(self):
        encoded = encode_state(csrf("a b&c"), "/search?q=x y")
        assert encoded == "csrf=a+b%26c&uri=%2Fsearch%3Fq%3Dx+y"


class TestDecodeState:
    @pytest.mark.parametrize(
        ("token", "uri"),
        [
            ("randomCsrf", "/"),
            ("a b+c&d=e", "/reports/weekly?team=core&sort=desc"),
            ("ünïcode", "/päth?q=%20already%20escaped"),
        ],
    )
    def test_round_trip(self, token, uri):
        assert decode_state(encode_state(csrf(token), uri)) == State(csrf(token), uri)

    @given(token=values, uri=values)
    def test_round_trip_property(self, token, uri):
        assert decode_state(encode_state(csrf(token), uri)) == State(csrf(token), uri)

    @given(st.text())
    def test_decode_never_raises(self, state):
        decoded = decode_state(state)
        assert decoded is None or isinstance(decoded, State)

    def test_empty_uri_resumes_at_root(self):
        assert decode_state(encode_state(csrf("x"), "")) == State(csrf("x"), "/")

    def test_empty_csrf_is_invalid(self):
        assert decode_state(encode_state(csrf(""), "/home")) is None

    def test_missing_uri_defaults_to_root(self):
        assert decode_state("csrf=randomCsrf") == State(csrf("randomCsrf"), "/")

    def test_extra_keys_are_ignored(self):
        decoded = decode_state("nonce=n&csrf=randomCsrf&uri=%2Fhome&other=1")
        assert decoded == State(csrf("randomCsrf"), "/home")

    @pytest.mark.parametrize(
        "state",
        [
            "",
            "nonsense",
            "csrf",
            "csrf=",
            "uri=%2F",
            "%%%",
            "&&",
            "csrf=a&&uri=b",
            "\x00\xff",
        ],
    )
    def test_malformed_state_is_invalid(self, state):
        assert decode_state(state) is None


class TestGenerateCsrf:
    def test_tokens_are_unique(self):
        tokens = {generate_csrf() for _ in range(50)}
        assert len(tokens) == 50

    def test_tokens_are_url_safe(self):
        token = generate_csrf()
        assert len(token) >= 30
        assert token.isalnum()


class TestWithQuery:
    def test_adds_query_to_bare_uri(self):
        assert with_query("http://authHost/auth", "nonce", "n") == "http://authHost/auth?nonce=n"

    def test_appends_after_existing_parameters(self):
        uri = with_query("http://authHost/auth?client_id=user&scope=a+b", "nonce", "n")
        assert uri == "http://authHost/auth?client_id=user&scope=a+b&nonce=n"

    def test_encodes_value(self):
        assert with_query("/x", "prompt", "select account") == "/x?prompt=select+account"
