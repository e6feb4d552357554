"""
RDAP Client for registration data lookups.

This module composes the pieces of a lookup: the server resolver picks the
registry's RDAP URL from the cached IANA bootstrap registry, the retry manager
runs the GET with exponential backoff, and every attempt is sent with a fresh
header set from the header randomizer.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from .audit_logger import AuditLogger, create_logger
from .bootstrap_cache import BootstrapCache
from .config import ClientConfig, LoggingConfig
from .exceptions import HTTPError, ResponseError
from .header_randomizer import HeaderRandomizer, static_headers
from .models import ContactRecord, Entity, FormattedSummary, RDAPDocument
from .normalizer import format_response, format_summary, parse_contact
from .retry_manager import RetryManager
from .server_resolver import ServerResolver

COMPONENT = "rdap_client"


class RDAPClient:
    """
    Async RDAP client with retries and header randomization.

    Usable as an async context manager; the underlying httpx client is
    created lazily otherwise and released by close().
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        cache: Optional[BootstrapCache] = None,
        header_randomizer: Optional[HeaderRandomizer] = None,
        logger: Optional[AuditLogger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the RDAP client.

        Args:
            config: Client configuration (defaults to ClientConfig())
            cache: Bootstrap cache handle; one in the working directory is used if omitted
            header_randomizer: Source of randomized request headers
            logger: Audit logger; a WARN-level stderr logger is used if omitted
            transport: Optional httpx transport for RDAP queries (used by tests)
            sleep: Coroutine used to wait between retries
        """
        logger = logger or create_logger(LoggingConfig(level="warn"))
        self._config = config or ClientConfig()
        self._logger = logger
        self._transport = transport
        self._proxy_url = self._config.proxy.to_url() if self._config.proxy else None
        self._retry_manager = RetryManager(self._config, logger=logger, sleep=sleep)
        self._cache = cache or BootstrapCache(
            proxy=self._proxy_url,
            retry_manager=self._retry_manager,
            logger=logger,
        )
        self._resolver = ServerResolver(self._cache, logger=logger)
        self._header_randomizer = header_randomizer or HeaderRandomizer()
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "RDAPClient":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def resolver(self) -> ServerResolver:
        return self._resolver

    @property
    def cache(self) -> BootstrapCache:
        return self._cache

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                follow_redirects=True,
                proxy=self._proxy_url,
                transport=self._transport,
            )
        return self._client

    def _request_headers(self) -> dict[str, str]:
        if self._config.randomize_headers:
            return self._header_randomizer.generate_headers()
        return static_headers()

    async def resolve_url(self, domain: str) -> str:
        """Resolve the RDAP URL for a domain through the bootstrap registry."""
        return await self._resolver.resolve_url(domain)

    async def _fetch_once(self, url: str) -> RDAPDocument:
        client = self._ensure_client()
        headers = self._request_headers()

        self._logger.info(COMPONENT, "Querying", {"url": url})
        self._logger.debug(COMPONENT, "Request headers", {"headers": headers})

        response = await client.get(url, headers=headers)

        if response.status_code >= 400:
            raise HTTPError(
                status_code=response.status_code,
                url=url,
                reason=response.reason_phrase,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseError(
                code="parse_error",
                message=f"Failed to parse RDAP response: {e}",
                details={"url": url, "status_code": response.status_code},
            ) from e

        if not isinstance(payload, dict):
            raise ResponseError(
                code="parse_error",
                message="RDAP response is not a JSON object",
                details={"url": url, "type": type(payload).__name__},
            )

        return RDAPDocument.from_dict(payload)

    async def query_domain(
        self,
        domain: str,
        rdap_url: Optional[str] = None,
    ) -> RDAPDocument:
        """
        Query RDAP for domain information.

        Args:
            domain: The domain to query (validated, lowercase)
            rdap_url: Optional explicit URL; skips bootstrap resolution

        Returns:
            The RDAP document returned by the server

        Raises:
            InvalidDomainError: If the domain has no TLD
            FetchError: If the bootstrap registry is unavailable
            HTTPError: If every attempt ended with a status >= 400
            httpx.HTTPError: If every attempt failed at the transport level
        """
        url = rdap_url or await self._resolver.resolve_url(domain)

        document = await self._retry_manager.execute_with_retry(
            lambda: self._fetch_once(url),
        )

        self._logger.info(
            COMPONENT,
            "Fetched RDAP data",
            {"domain": domain, "url": url, "object_class": document.object_class_name},
        )
        return document

    def parse_vcard(self, entity: Union[Entity, dict]) -> ContactRecord:
        """Project an entity's vCard onto a contact record."""
        return parse_contact(entity)

    def format_summary(self, document: Union[RDAPDocument, dict[str, Any]]) -> FormattedSummary:
        """Condense a document into a summary."""
        return format_summary(document)

    def format_response(self, document: Union[RDAPDocument, dict[str, Any]]) -> str:
        """Condense a document and render it as pretty-printed JSON."""
        return format_response(document)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
