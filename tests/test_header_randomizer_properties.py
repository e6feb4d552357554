"""
Property-based tests for the Header Randomizer module.

Uses Hypothesis for property-based testing; seeded random sources make the
generated header sets reproducible.
"""

import random
import re

from hypothesis import given, settings
from hypothesis import strategies as st

from rdap_lookup.header_randomizer import (
    ACCEPT_ENCODINGS,
    ACCEPT_LANGUAGES,
    ORIGINS,
    RDAP_ACCEPT,
    REFERERS,
    SESSION_ID_HEADER,
    USER_AGENTS,
    HeaderRandomizer,
    static_headers,
)

REQUIRED_HEADERS = (
    "User-Agent",
    "Accept",
    "Accept-Language",
    "Accept-Encoding",
    SESSION_ID_HEADER,
)

HEX_TOKEN = re.compile(r"^[0-9a-f]{32}$")


class TestHeaderSetProperty:
    """Every generated header set is complete and drawn from the pools."""

    @given(seed=st.integers(min_value=0, max_value=2**32))
    @settings(max_examples=100)
    def test_required_headers_always_present(self, seed: int) -> None:
        """
        *For any* random source, generate_headers() SHALL include User-Agent,
        Accept, Accept-Language, Accept-Encoding and a session id.
        """
        headers = HeaderRandomizer(random.Random(seed)).generate_headers()

        for name in REQUIRED_HEADERS:
            assert name in headers, f"Missing header {name}"

    @given(seed=st.integers(min_value=0, max_value=2**32))
    @settings(max_examples=100)
    def test_values_come_from_pools(self, seed: int) -> None:
        """*For any* random source, sampled values SHALL come from their pools."""
        headers = HeaderRandomizer(random.Random(seed)).generate_headers()

        assert headers["User-Agent"] in USER_AGENTS
        assert headers["Accept"] == RDAP_ACCEPT
        assert headers["Accept-Language"] in ACCEPT_LANGUAGES
        assert headers["Accept-Encoding"] in ACCEPT_ENCODINGS
        assert headers["DNT"] in ("0", "1")
        assert headers["Cache-Control"] == "no-cache"
        assert headers["Pragma"] == "no-cache"
        assert headers["Sec-Fetch-Mode"] == "navigate"
        assert headers["Sec-Fetch-Dest"] == "document"
        assert headers["Sec-Fetch-Site"] == "none"
        assert headers["Sec-Fetch-User"] == "?1"
        if "Referer" in headers:
            assert headers["Referer"] in REFERERS
        if "Origin" in headers:
            assert headers["Origin"] in ORIGINS

    @given(seed=st.integers(min_value=0, max_value=2**32))
    @settings(max_examples=100)
    def test_session_id_is_hex_token(self, seed: int) -> None:
        headers = HeaderRandomizer(random.Random(seed)).generate_headers()
        assert HEX_TOKEN.match(headers[SESSION_ID_HEADER])

    @given(
        seed=st.integers(min_value=0, max_value=2**32),
        calls=st.integers(min_value=2, max_value=20),
    )
    @settings(max_examples=50)
    def test_consecutive_session_ids_differ(self, seed: int, calls: int) -> None:
        """
        *For any* sequence of calls, two consecutive header sets SHALL never
        share a session id.
        """
        randomizer = HeaderRandomizer(random.Random(seed))
        ids = [randomizer.generate_headers()[SESSION_ID_HEADER] for _ in range(calls)]

        for previous, current in zip(ids, ids[1:]):
            assert previous != current


class TestDeterminism:
    """Injected random sources make header sets reproducible."""

    @given(seed=st.integers(min_value=0, max_value=2**32))
    @settings(max_examples=50)
    def test_same_seed_same_headers(self, seed: int) -> None:
        first = HeaderRandomizer(random.Random(seed)).generate_headers()
        second = HeaderRandomizer(random.Random(seed)).generate_headers()
        assert first == second

    def test_optional_headers_are_sometimes_omitted(self) -> None:
        randomizer = HeaderRandomizer(random.Random(1234))
        samples = [randomizer.generate_headers() for _ in range(200)]

        assert any("Referer" in h for h in samples)
        assert any("Referer" not in h for h in samples)
        assert any("Origin" in h for h in samples)
        assert any("Origin" not in h for h in samples)

    def test_repeated_session_token_is_resampled(self) -> None:
        class RepeatingRandom(random.Random):
            def __init__(self) -> None:
                super().__init__(0)
                self._bits = iter([7, 7, 9])

            def getrandbits(self, k: int) -> int:
                return next(self._bits)

        randomizer = HeaderRandomizer(RepeatingRandom())

        assert randomizer.session_id() == format(7, "032x")
        assert randomizer.session_id() == format(9, "032x")


def test_static_headers() -> None:
    headers = static_headers()
    assert headers == {
        "User-Agent": "RDAP-Client/1.0",
        "Accept": "application/rdap+json, application/json",
    }
