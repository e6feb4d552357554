"""
Enumeration types for the RDAP lookup client.

These enums provide type-safe constants for log levels, error codes,
vCard property tags and output views.
"""

from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}


class DomainValidationErrorCode(Enum):
    """Error codes for domain validation failures."""

    EMPTY_INPUT = "empty_input"
    FORBIDDEN_CHARS = "forbidden_chars"
    INVALID_FORMAT = "invalid_format"
    INVALID_TLD = "invalid_tld"
    IDNA_ERROR = "idna_error"


class FetchErrorCode(Enum):
    """Error codes for bootstrap registry retrieval."""

    NETWORK_ERROR = "network_error"
    HTTP_STATUS = "http_status"
    PARSE_ERROR = "parse_error"
    INVALID_REGISTRY = "invalid_registry"


class VCardProperty(Enum):
    """vCard property tags projected into a contact record."""

    FN = "fn"
    ORG = "org"
    EMAIL = "email"
    TEL = "tel"
    ADR = "adr"

    @classmethod
    def from_tag(cls, tag) -> Optional["VCardProperty"]:
        """Map a raw property tag to a known property, or None."""
        if not isinstance(tag, str):
            return None
        try:
            return cls(tag.lower())
        except ValueError:
            return None


class OutputView(Enum):
    """Views the command line front end can print for a response."""

    FORMATTED = "formatted"
    RAW = "raw"
    NAMESERVERS = "nameservers"
    KEY_INFO = "key-info"
    CONTACTS = "contacts"
    EVENTS = "events"
