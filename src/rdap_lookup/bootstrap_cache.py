"""
RDAP bootstrap cache.

Fetches the IANA RDAP bootstrap registry (the mapping of TLD sets to the RDAP
servers authoritative for them) and keeps a verbatim copy on disk. The file's
own modification time is the staleness clock: a copy younger than the TTL is
served without touching the network, anything older is replaced wholesale.

Bootstrap format:
{
    "services": [
        [["com", "net"], ["https://rdap.verisign.com/com/v1/"]],
        [["org"], ["https://rdap.publicinterestregistry.org/rdap/"]],
        ...
    ]
}
"""

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional

import httpx

from .audit_logger import AuditLogger
from .config import ClientConfig
from .enums import FetchErrorCode
from .exceptions import FetchError
from .retry_manager import RetryManager

IANA_BOOTSTRAP_URL = "https://data.iana.org/rdap/dns.json"

DEFAULT_CACHE_FILENAME = ".rdap-tld-cache.json"

# 24 hours
DEFAULT_CACHE_TTL = 86400

DEFAULT_FETCH_TIMEOUT = 10.0

COMPONENT = "bootstrap"


class BootstrapCache:
    """
    Handle on one persisted copy of the bootstrap registry.

    The cache path is resolved once, when the handle is built. Several handles
    may point at the same file; writes are atomic and the last writer wins.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        ttl_seconds: float = DEFAULT_CACHE_TTL,
        bootstrap_url: str = IANA_BOOTSTRAP_URL,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        fetch_retries: int = 0,
        proxy: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_manager: Optional[RetryManager] = None,
        logger: Optional[AuditLogger] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the bootstrap cache.

        Args:
            path: Cache file location (defaults to .rdap-tld-cache.json in the cwd)
            ttl_seconds: Maximum age of a cached copy before it is refetched
            bootstrap_url: Registry document URL
            fetch_timeout: Timeout for the registry fetch, in seconds
            fetch_retries: Retry budget for the fetch (0 = single attempt)
            proxy: Optional outbound proxy URL
            transport: Optional httpx transport (used by tests)
            retry_manager: Executor for the fetch; one is built if omitted
            logger: Optional audit logger
            clock: Source of the current time, in epoch seconds
        """
        self._path = Path(path if path is not None else DEFAULT_CACHE_FILENAME).resolve()
        self._ttl_seconds = ttl_seconds
        self._bootstrap_url = bootstrap_url
        self._fetch_timeout = fetch_timeout
        self._fetch_retries = fetch_retries
        self._proxy = proxy
        self._transport = transport
        self._logger = logger
        self._clock = clock
        self._retry_manager = retry_manager or RetryManager(ClientConfig(), logger=logger)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def age_seconds(self) -> Optional[float]:
        """Age of the cache file by modification time, or None if absent."""
        try:
            mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            return None
        return max(0.0, self._clock() - mtime)

    def is_stale(self) -> bool:
        """True if the cache file is absent or at least ttl_seconds old."""
        age = self.age_seconds()
        return age is None or age >= self._ttl_seconds

    async def load(self) -> dict:
        """
        Return the bootstrap registry, refreshing it if absent or stale.

        Returns:
            The bootstrap document as parsed JSON

        Raises:
            FetchError: If the fetch fails and no cached copy can be read
        """
        if not self.is_stale():
            cached = self._read_cache_file()
            if cached is not None:
                return cached

        try:
            return await self.refresh()
        except FetchError as e:
            stale = self._read_cache_file()
            if stale is None:
                raise
            if self._logger:
                self._logger.warn(
                    COMPONENT,
                    "Bootstrap refresh failed, using stale cache",
                    {
                        "path": str(self._path),
                        "age_seconds": self.age_seconds(),
                        "error": e.message,
                    },
                )
            return stale

    async def refresh(self) -> dict:
        """
        Fetch the registry unconditionally and overwrite the cache file.

        Raises:
            FetchError: If the document cannot be fetched or is not a registry
        """
        if self._logger:
            self._logger.info(
                COMPONENT,
                "Updating RDAP bootstrap dataset from IANA",
                {"url": self._bootstrap_url},
            )

        data = await self._retry_manager.execute_with_retry(
            self._fetch,
            max_retries=self._fetch_retries,
        )
        self._write_cache_file(data)
        return data

    async def _fetch(self) -> dict:
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._fetch_timeout),
                follow_redirects=True,
                proxy=self._proxy,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    self._bootstrap_url,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            raise FetchError(
                code=FetchErrorCode.NETWORK_ERROR.value,
                message=f"Failed to fetch bootstrap registry: {e}",
                details={"url": self._bootstrap_url, "error_type": type(e).__name__},
            ) from e

        if response.status_code >= 400:
            raise FetchError(
                code=FetchErrorCode.HTTP_STATUS.value,
                message=f"Bootstrap registry returned HTTP {response.status_code}",
                details={"url": self._bootstrap_url, "status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(
                code=FetchErrorCode.PARSE_ERROR.value,
                message=f"Bootstrap registry is not valid JSON: {e}",
                details={"url": self._bootstrap_url},
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("services"), list):
            raise FetchError(
                code=FetchErrorCode.INVALID_REGISTRY.value,
                message="Bootstrap registry has no services list",
                details={"url": self._bootstrap_url},
            )

        return data

    def _read_cache_file(self) -> Optional[dict]:
        """Load the cache file, returning None if it is missing or unreadable."""
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            if self._logger:
                self._logger.warn(
                    COMPONENT,
                    "Ignoring unreadable bootstrap cache",
                    {"path": str(self._path), "error": str(e)},
                )
            return None

        if not isinstance(data, dict) or not isinstance(data.get("services"), list):
            return None
        return data

    def _write_cache_file(self, data: dict) -> None:
        """Replace the cache file atomically; readers never see a partial file."""
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=self._path.name + ".",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            if self._logger:
                self._logger.log_error(
                    COMPONENT,
                    "Failed to write bootstrap cache",
                    error=e,
                    additional_data={"path": str(self._path)},
                )
            return

        if self._logger:
            self._logger.debug(
                COMPONENT,
                "Bootstrap cache written",
                {"path": str(self._path), "services": len(data.get("services", []))},
            )
