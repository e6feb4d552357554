"""
RDAP Lookup - Resilient RDAP client with bootstrap resolution.

This package resolves the RDAP server responsible for a domain through the
IANA bootstrap registry, queries it with retries and randomized request
headers, and normalizes the response into contact records and summaries.
"""

__version__ = "0.1.0"
__author__ = "RDAP Lookup Team"

from rdap_lookup.exceptions import (
    RDAPLookupError,
    InvalidDomainError,
    FetchError,
    HTTPError,
    ConfigurationError,
    ResponseError,
)
from rdap_lookup.enums import (
    LogLevel,
    DomainValidationErrorCode,
    FetchErrorCode,
    VCardProperty,
    OutputView,
)
from rdap_lookup.config import (
    ProxyAuth,
    ProxyConfig,
    ClientConfig,
    LoggingConfig,
    load_config_from_file,
)
from rdap_lookup.audit_logger import (
    AuditLogger,
    LogEntry,
    create_logger,
)
from rdap_lookup.models import (
    RDAPDocument,
    Entity,
    Event,
    Nameserver,
    IPAddresses,
    SecureDNS,
    Link,
    Notice,
    PublicId,
    ContactRecord,
    PostalAddress,
    RoleContact,
    NameserverSummary,
    FormattedSummary,
)
from rdap_lookup.header_randomizer import (
    HeaderRandomizer,
    static_headers,
)
from rdap_lookup.bootstrap_cache import (
    BootstrapCache,
    IANA_BOOTSTRAP_URL,
)
from rdap_lookup.server_resolver import (
    ServerResolver,
    ResolvedServer,
    FALLBACK_RDAP_BASE,
)
from rdap_lookup.retry_manager import RetryManager
from rdap_lookup.normalizer import (
    parse_contact,
    format_summary,
    format_response,
)
from rdap_lookup.rdap_client import RDAPClient
from rdap_lookup.domain_validator import DomainValidator

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exceptions
    "RDAPLookupError",
    "InvalidDomainError",
    "FetchError",
    "HTTPError",
    "ConfigurationError",
    "ResponseError",
    # Enums
    "LogLevel",
    "DomainValidationErrorCode",
    "FetchErrorCode",
    "VCardProperty",
    "OutputView",
    # Config
    "ProxyAuth",
    "ProxyConfig",
    "ClientConfig",
    "LoggingConfig",
    "load_config_from_file",
    # Logging
    "AuditLogger",
    "LogEntry",
    "create_logger",
    # Models
    "RDAPDocument",
    "Entity",
    "Event",
    "Nameserver",
    "IPAddresses",
    "SecureDNS",
    "Link",
    "Notice",
    "PublicId",
    "ContactRecord",
    "PostalAddress",
    "RoleContact",
    "NameserverSummary",
    "FormattedSummary",
    # Components
    "HeaderRandomizer",
    "static_headers",
    "BootstrapCache",
    "IANA_BOOTSTRAP_URL",
    "ServerResolver",
    "ResolvedServer",
    "FALLBACK_RDAP_BASE",
    "RetryManager",
    "parse_contact",
    "format_summary",
    "format_response",
    "RDAPClient",
    "DomainValidator",
]
