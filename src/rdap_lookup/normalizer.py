"""
Response normalization.

Two stateless, best-effort transforms over an already fetched RDAP document:

- parse_contact() projects an entity's vCard array (RFC 7095 jCard) onto a
  ContactRecord.
- format_summary() condenses a document into a FormattedSummary.

Neither raises on malformed input; missing or oddly shaped members simply
leave the corresponding output fields empty.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .enums import VCardProperty
from .models import (
    ContactRecord,
    Entity,
    FormattedSummary,
    NameserverSummary,
    PostalAddress,
    RDAPDocument,
    RoleContact,
)

# jCard property layout: [name, parameters, value-type, value, ...]
VCARD_VALUE_INDEX = 3

# Positions inside a structured adr value
ADR_STREET = 2
ADR_CITY = 3
ADR_STATE = 4
ADR_POSTAL_CODE = 5
ADR_COUNTRY = 6

# date, time, optional fraction, optional offset
TIMESTAMP_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}(?::\d{2})?)"
    r"(?:[.,](\d+))?([Zz]|[+-]\d{2}(?::?\d{2})?)?$"
)


def _text(value: Any) -> Optional[str]:
    """Reduce a jCard value to text; lists of components are joined."""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts = [part for part in value if isinstance(part, str) and part]
        return ", ".join(parts) if parts else None
    return None


def _component(values: list, index: int) -> Optional[str]:
    return _text(values[index]) if len(values) > index else None


def _parse_address(value: Any) -> Optional[PostalAddress]:
    if not isinstance(value, list):
        return None
    return PostalAddress(
        street=_component(value, ADR_STREET),
        city=_component(value, ADR_CITY),
        state=_component(value, ADR_STATE),
        postal_code=_component(value, ADR_POSTAL_CODE),
        country=_component(value, ADR_COUNTRY),
    )


def _vcard_properties(entity: Union[Entity, dict, None]) -> list:
    if isinstance(entity, Entity):
        vcard = entity.vcard_array
    elif isinstance(entity, dict):
        vcard = entity.get("vcardArray")
    else:
        return []

    if not isinstance(vcard, list) or len(vcard) < 2 or not isinstance(vcard[1], list):
        return []
    return vcard[1]


def parse_contact(entity: Union[Entity, dict, None]) -> ContactRecord:
    """
    Project an entity's vCard array onto a contact record.

    Args:
        entity: An Entity model or the raw entity object

    Returns:
        ContactRecord; empty when the entity carries no vCard
    """
    record = ContactRecord()

    for prop in _vcard_properties(entity):
        if not isinstance(prop, list) or not prop:
            continue

        value = prop[VCARD_VALUE_INDEX] if len(prop) > VCARD_VALUE_INDEX else None

        match VCardProperty.from_tag(prop[0]):
            case VCardProperty.FN:
                record.full_name = _text(value)
            case VCardProperty.ORG:
                record.organization = _text(value)
            case VCardProperty.EMAIL:
                record.email = _text(value)
            case VCardProperty.TEL:
                record.phone = _text(value)
            case VCardProperty.ADR:
                address = _parse_address(value)
                if address is not None:
                    record.address = address
            case _:
                pass

    return record


def _canonical_timestamp(text: str) -> str:
    """
    Rewrite an RFC 3339 timestamp into the subset every supported
    datetime.fromisoformat() accepts: six fraction digits, +HH:MM offsets.
    """
    match = TIMESTAMP_PATTERN.match(text)
    if match is None:
        return text

    date, clock, fraction, offset = match.groups()
    out = f"{date}T{clock}"
    if fraction:
        out += "." + fraction[:6].ljust(6, "0")
    if offset:
        if offset in ("Z", "z"):
            out += "+00:00"
        elif len(offset) == 3:
            out += offset + ":00"
        elif ":" not in offset:
            out += f"{offset[:3]}:{offset[3:]}"
        else:
            out += offset
    return out


def to_iso8601(value: Any) -> Optional[str]:
    """
    Normalize an RDAP timestamp to UTC ISO-8601 with milliseconds.

    Naive timestamps are read as UTC. Values that do not parse are returned
    unchanged so no information is dropped.
    """
    if not isinstance(value, str):
        return None

    try:
        parsed = datetime.fromisoformat(_canonical_timestamp(value.strip()))
    except ValueError:
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)

    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def _as_document(doc: Union[RDAPDocument, dict, None]) -> RDAPDocument:
    if isinstance(doc, RDAPDocument):
        return doc
    return RDAPDocument.from_dict(doc)


def format_summary(doc: Union[RDAPDocument, dict, None]) -> FormattedSummary:
    """
    Condense an RDAP document into a summary.

    Events are keyed by action with the last occurrence winning. Nameservers
    keep document order. Contacts are keyed by role; an entity with several
    roles is filed under each, and a later entity replaces an earlier one
    holding the same role.
    """
    document = _as_document(doc)

    summary = FormattedSummary(
        domain=document.ldh_name,
        handle=document.handle,
        status=list(document.status) if document.status is not None else None,
        secure_dns=document.secure_dns.to_dict() if document.secure_dns is not None else None,
    )

    for event in document.events or []:
        if event.event_action is None:
            continue
        summary.events[event.event_action] = to_iso8601(event.event_date)

    for ns in document.nameservers or []:
        summary.nameservers.append(NameserverSummary(
            name=ns.ldh_name,
            ips=ns.ip_addresses.to_dict() if ns.ip_addresses is not None else None,
        ))

    for entity in document.entities or []:
        for role in entity.roles or []:
            summary.contacts[role] = RoleContact(contact=parse_contact(entity), handle=entity.handle)

    return summary


def format_response(doc: Union[RDAPDocument, dict, None]) -> str:
    """Summarize a document and render it as pretty-printed JSON."""
    return format_summary(doc).to_json()
