"""
Domain input cleaning and validation.

Turns what a user typed (possibly a URL, possibly mixed case, possibly an
internationalized name) into the lowercase, IDNA-encoded domain the RDAP
client expects, or rejects it.
"""

import re
from typing import Optional

import idna

from .enums import DomainValidationErrorCode
from .exceptions import InvalidDomainError

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# Labels of letters, digits, hyphen or underscore, ending in an alphabetic
# TLD of two or more letters (or its punycode form)
DOMAIN_PATTERN = re.compile(r"^([a-z0-9_-]+\.)+([a-z]{2,}|xn--[a-z0-9-]+)$")

# Control characters, whitespace and symbols never valid in a hostname
FORBIDDEN_CHARS_PATTERN = re.compile(
    r'[\x00-\x1f\x7f'
    r'\s'
    r'!@#$%^&*()+=\[\]{}|\\:;"\'<>,?`~]'
)


class DomainValidator:
    """
    Validates and normalizes domain input.

    Handles:
    - Stripping of surrounding whitespace, http(s) scheme and path
    - Conversion to lowercase canonical form
    - IDNA encoding for international characters
    - Rejection of forbidden characters and non domain-shaped input
    """

    def clean(self, raw_domain: Optional[str]) -> str:
        """
        Validate and normalize a domain string.

        Args:
            raw_domain: The raw input, e.g. "https://Example.COM/path"

        Returns:
            The canonical domain, e.g. "example.com"

        Raises:
            InvalidDomainError: If the input cannot be turned into a domain
        """
        if not raw_domain or not raw_domain.strip():
            raise InvalidDomainError(
                code=DomainValidationErrorCode.EMPTY_INPUT.value,
                message="Domain is required",
                details={"raw_input": raw_domain},
            )

        domain = SCHEME_PATTERN.sub("", raw_domain.strip())
        domain = domain.split("/", 1)[0]

        if FORBIDDEN_CHARS_PATTERN.search(domain):
            raise InvalidDomainError(
                code=DomainValidationErrorCode.FORBIDDEN_CHARS.value,
                message=f"Invalid domain: {domain}",
                details={
                    "raw_input": raw_domain,
                    "forbidden_chars": FORBIDDEN_CHARS_PATTERN.findall(domain),
                },
            )

        canonical = self.normalize_to_canonical(domain)

        if not DOMAIN_PATTERN.match(canonical):
            raise InvalidDomainError(
                code=DomainValidationErrorCode.INVALID_FORMAT.value,
                message=f"Please enter a valid domain (e.g., example.com): {domain}",
                details={"raw_input": raw_domain, "canonical": canonical},
            )

        return canonical

    def is_valid(self, raw_domain: Optional[str]) -> bool:
        """Return True if clean() would accept the input."""
        try:
            self.clean(raw_domain)
        except InvalidDomainError:
            return False
        return True

    def normalize_to_canonical(self, domain: str) -> str:
        """
        Convert domain to canonical form (lowercase, IDNA-encoded).

        Raises:
            InvalidDomainError: If IDNA encoding fails
        """
        domain_lower = domain.lower().rstrip(".")

        if not any(ord(c) > 127 for c in domain_lower):
            return domain_lower

        try:
            return idna.encode(domain_lower, uts46=True).decode("ascii")
        except idna.IDNAError as e:
            raise InvalidDomainError(
                code=DomainValidationErrorCode.IDNA_ERROR.value,
                message=f"IDNA encoding failed: {e}",
                details={"domain": domain, "idna_error": str(e)},
            )
