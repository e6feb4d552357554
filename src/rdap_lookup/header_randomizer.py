"""
Request header randomization.

Each call to HeaderRandomizer.generate_headers() samples a fresh, internally
consistent browser-like header set so that repeated RDAP queries do not share
a fixed client fingerprint. This diversifies the fingerprint only; it gives no
anonymity guarantee.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

RDAP_ACCEPT = "application/rdap+json, application/json, */*"

STATIC_USER_AGENT = "RDAP-Client/1.0"

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_1) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Edge/120.0.0.0",
)

# None means "send no Referer"
REFERERS = (
    "https://www.google.com/",
    "https://www.bing.com/",
    "https://duckduckgo.com/",
    "https://www.yahoo.com/",
    "https://registro.br/",
    "https://www.whois.com/",
    "https://who.is/",
    None,
)

# None means "send no Origin"
ORIGINS = (
    "https://www.google.com",
    "https://registro.br",
    "https://www.whois.com",
    "https://who.is",
    None,
)

ACCEPT_LANGUAGES = (
    "en-US,en;q=0.9",
    "pt-BR,pt;q=0.9,en;q=0.8",
    "en-GB,en;q=0.9",
    "es-ES,es;q=0.9,en;q=0.8",
    "fr-FR,fr;q=0.9,en;q=0.8",
)

ACCEPT_ENCODINGS = (
    "gzip, deflate, br",
    "gzip, deflate",
    "gzip, deflate, br, zstd",
)

SESSION_ID_HEADER = "X-Session-Id"
SESSION_ID_BITS = 128


class HeaderRandomizer:
    """
    Builds randomized request headers.

    The random source is injectable so tests can seed it and assert exact
    header sets. Without one, a SystemRandom instance is used.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.SystemRandom()
        self._last_session_id: Optional[str] = None

    def _choice(self, pool: Sequence[T]) -> T:
        return self._rng.choice(pool)

    def session_id(self) -> str:
        """Return a fresh 32 character hex token, never equal to the previous one."""
        token = format(self._rng.getrandbits(SESSION_ID_BITS), "032x")
        while token == self._last_session_id:
            token = format(self._rng.getrandbits(SESSION_ID_BITS), "032x")
        self._last_session_id = token
        return token

    def generate_headers(self) -> dict[str, str]:
        """Sample a complete header set for one request."""
        headers = {
            "User-Agent": self._choice(USER_AGENTS),
            "Accept": RDAP_ACCEPT,
            "Accept-Language": self._choice(ACCEPT_LANGUAGES),
            "Accept-Encoding": self._choice(ACCEPT_ENCODINGS),
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "DNT": "1" if self._rng.random() > 0.5 else "0",
            "Upgrade-Insecure-Requests": "1",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Sec-Fetch-User": "?1",
        }

        referer = self._choice(REFERERS)
        if referer:
            headers["Referer"] = referer

        origin = self._choice(ORIGINS)
        if origin:
            headers["Origin"] = origin

        headers[SESSION_ID_HEADER] = self.session_id()

        return headers


def static_headers() -> dict[str, str]:
    """Headers sent when randomization is disabled."""
    return {
        "User-Agent": STATIC_USER_AGENT,
        "Accept": "application/rdap+json, application/json",
    }
