"""
Maps a domain's TLD to the RDAP query URL of its registry.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .audit_logger import AuditLogger
from .bootstrap_cache import BootstrapCache
from .enums import DomainValidationErrorCode
from .exceptions import InvalidDomainError

# IANA redirector used when the bootstrap registry has no entry for a TLD
FALLBACK_RDAP_BASE = "https://rdap.iana.org"

COMPONENT = "resolver"


@dataclass(frozen=True)
class ResolvedServer:
    """Outcome of resolving a domain to an RDAP URL."""

    url: str
    tld: str
    is_fallback: bool = False


def extract_tld(domain: str) -> str:
    """
    Return the rightmost dot-delimited label, lowercased.

    Raises:
        InvalidDomainError: If there is no non-empty rightmost label
    """
    tld = domain.strip().rsplit(".", 1)[-1].lower() if domain else ""
    if not tld:
        raise InvalidDomainError(
            code=DomainValidationErrorCode.INVALID_TLD.value,
            message="Invalid domain",
            details={"domain": domain},
        )
    return tld


def _normalize_tld_entry(entry: Any) -> Optional[str]:
    if not isinstance(entry, str):
        return None
    return entry[1:].lower() if entry.startswith(".") else entry.lower()


def find_service_base(registry: dict, tld: str) -> Optional[str]:
    """
    Find the first candidate base URL registered for a TLD.

    Services are scanned in registry order and the first match wins.
    """
    for service in registry.get("services", []):
        if not isinstance(service, list) or len(service) < 2:
            continue
        tlds, urls = service[0], service[1]
        if not isinstance(tlds, list):
            continue
        if any(_normalize_tld_entry(entry) == tld for entry in tlds):
            if isinstance(urls, list) and urls and isinstance(urls[0], str):
                return urls[0]
            return None
    return None


class ServerResolver:
    """Resolves domains to RDAP URLs through a bootstrap cache handle."""

    def __init__(
        self,
        cache: BootstrapCache,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._cache = cache
        self._logger = logger

    @property
    def cache(self) -> BootstrapCache:
        return self._cache

    async def resolve(self, domain: str) -> ResolvedServer:
        """
        Resolve the RDAP URL for a domain.

        Args:
            domain: A validated, lowercase domain name

        Returns:
            ResolvedServer with the query URL; is_fallback is set when the
            TLD is not in the bootstrap registry

        Raises:
            InvalidDomainError: If no TLD can be extracted
            FetchError: If the registry is unavailable and not cached
        """
        tld = extract_tld(domain)
        registry = await self._cache.load()

        base = find_service_base(registry, tld)
        if base is None:
            if self._logger:
                self._logger.warn(
                    COMPONENT,
                    f"No RDAP server found for .{tld}, using fallback IANA",
                    {"domain": domain, "tld": tld},
                )
            return ResolvedServer(
                url=f"{FALLBACK_RDAP_BASE}/domain/{domain}",
                tld=tld,
                is_fallback=True,
            )

        return ResolvedServer(
            url=f"{base.rstrip('/')}/domain/{domain}",
            tld=tld,
        )

    async def resolve_url(self, domain: str) -> str:
        """Resolve and return only the URL."""
        return (await self.resolve(domain)).url
