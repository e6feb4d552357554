"""
Data models for RDAP documents and their normalized projections.

RDAP is intentionally extensible, so every object model keeps the members it
does not recognize in an ``extra`` side map. ``to_dict()`` puts them back,
which lets a document be re-serialized without losing registry extensions.
Parsing is lenient: a known member with an unexpected type is kept in
``extra`` rather than rejected.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _as_str_list(value: Any) -> Optional[list[str]]:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def _as_dict_list(value: Any) -> Optional[list[dict]]:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return None


class _Fields:
    """Splits a JSON object into typed members and leftovers."""

    def __init__(self, data: Any) -> None:
        self._data = data if isinstance(data, dict) else {}
        self.extra: dict = {}
        self._seen: set = set()

    def take(self, key: str, convert) -> Any:
        self._seen.add(key)
        if key not in self._data:
            return None
        raw = self._data[key]
        value = convert(raw)
        if value is None and raw is not None:
            self.extra[key] = raw
        return value

    def rest(self) -> dict:
        for key, value in self._data.items():
            if key not in self._seen:
                self.extra[key] = value
        return self.extra


def _put(out: dict, key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


@dataclass(frozen=True)
class Link:
    """An RDAP link object."""

    href: Optional[str] = None
    rel: Optional[str] = None
    type: Optional[str] = None
    value: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Link":
        f = _Fields(data)
        href = f.take("href", _as_str)
        rel = f.take("rel", _as_str)
        type_ = f.take("type", _as_str)
        value = f.take("value", _as_str)
        return cls(href=href, rel=rel, type=type_, value=value, extra=f.rest())

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "value", self.value)
        _put(out, "rel", self.rel)
        _put(out, "href", self.href)
        _put(out, "type", self.type)
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class Notice:
    """An RDAP notice or remark."""

    title: Optional[str] = None
    description: Optional[list[str]] = None
    links: Optional[list[Link]] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Notice":
        f = _Fields(data)
        title = f.take("title", _as_str)
        description = f.take("description", _as_str_list)
        links = f.take("links", _as_dict_list)
        return cls(
            title=title,
            description=description,
            links=[Link.from_dict(link) for link in links] if links is not None else None,
            extra=f.rest(),
        )

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "title", self.title)
        _put(out, "description", self.description)
        if self.links is not None:
            out["links"] = [link.to_dict() for link in self.links]
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class Event:
    """An RDAP event (registration, expiration, last changed...)."""

    event_action: Optional[str] = None
    event_date: Optional[str] = None
    event_actor: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        f = _Fields(data)
        action = f.take("eventAction", _as_str)
        date = f.take("eventDate", _as_str)
        actor = f.take("eventActor", _as_str)
        return cls(event_action=action, event_date=date, event_actor=actor, extra=f.rest())

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "eventAction", self.event_action)
        _put(out, "eventDate", self.event_date)
        _put(out, "eventActor", self.event_actor)
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class IPAddresses:
    """Glue addresses of a nameserver."""

    v4: Optional[list[str]] = None
    v6: Optional[list[str]] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "IPAddresses":
        f = _Fields(data)
        v4 = f.take("v4", _as_str_list)
        v6 = f.take("v6", _as_str_list)
        return cls(v4=v4, v6=v6, extra=f.rest())

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "v4", self.v4)
        _put(out, "v6", self.v6)
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class Nameserver:
    """An RDAP nameserver object."""

    ldh_name: Optional[str] = None
    object_class_name: Optional[str] = None
    unicode_name: Optional[str] = None
    ip_addresses: Optional[IPAddresses] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Nameserver":
        f = _Fields(data)
        object_class_name = f.take("objectClassName", _as_str)
        ldh_name = f.take("ldhName", _as_str)
        unicode_name = f.take("unicodeName", _as_str)
        ips = f.take("ipAddresses", lambda v: v if isinstance(v, dict) else None)
        return cls(
            ldh_name=ldh_name,
            object_class_name=object_class_name,
            unicode_name=unicode_name,
            ip_addresses=IPAddresses.from_dict(ips) if ips is not None else None,
            extra=f.rest(),
        )

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "objectClassName", self.object_class_name)
        _put(out, "ldhName", self.ldh_name)
        _put(out, "unicodeName", self.unicode_name)
        if self.ip_addresses is not None:
            out["ipAddresses"] = self.ip_addresses.to_dict()
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class SecureDNS:
    """The secureDNS block of a domain."""

    zone_signed: Optional[bool] = None
    delegation_signed: Optional[bool] = None
    ds_data: Optional[list[dict]] = None
    key_data: Optional[list[dict]] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "SecureDNS":
        f = _Fields(data)
        zone_signed = f.take("zoneSigned", _as_bool)
        delegation_signed = f.take("delegationSigned", _as_bool)
        ds_data = f.take("dsData", _as_dict_list)
        key_data = f.take("keyData", _as_dict_list)
        return cls(
            zone_signed=zone_signed,
            delegation_signed=delegation_signed,
            ds_data=ds_data,
            key_data=key_data,
            extra=f.rest(),
        )

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "zoneSigned", self.zone_signed)
        _put(out, "delegationSigned", self.delegation_signed)
        _put(out, "dsData", self.ds_data)
        _put(out, "keyData", self.key_data)
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class PublicId:
    """A public identifier (e.g. an IANA registrar id)."""

    type: Optional[str] = None
    identifier: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "PublicId":
        f = _Fields(data)
        type_ = f.take("type", _as_str)
        identifier = f.take("identifier", _as_str)
        return cls(type=type_, identifier=identifier, extra=f.rest())

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "type", self.type)
        _put(out, "identifier", self.identifier)
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class Entity:
    """An RDAP participant: registrant, registrar, technical contact..."""

    object_class_name: Optional[str] = None
    handle: Optional[str] = None
    roles: Optional[list[str]] = None
    vcard_array: Optional[list] = None
    entities: Optional[list["Entity"]] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Entity":
        f = _Fields(data)
        object_class_name = f.take("objectClassName", _as_str)
        handle = f.take("handle", _as_str)
        roles = f.take("roles", _as_str_list)
        vcard_array = f.take("vcardArray", lambda v: v if isinstance(v, list) else None)
        entities = f.take("entities", _as_dict_list)
        return cls(
            object_class_name=object_class_name,
            handle=handle,
            roles=roles,
            vcard_array=vcard_array,
            entities=[cls.from_dict(e) for e in entities] if entities is not None else None,
            extra=f.rest(),
        )

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "objectClassName", self.object_class_name)
        _put(out, "handle", self.handle)
        _put(out, "roles", self.roles)
        _put(out, "vcardArray", self.vcard_array)
        if self.entities is not None:
            out["entities"] = [e.to_dict() for e in self.entities]
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class RDAPDocument:
    """
    A raw RDAP response, read-only once received.

    ``raw`` holds the payload exactly as decoded; the typed members are a view
    over it and ``extra`` carries every top-level member not modeled here.
    """

    object_class_name: Optional[str] = None
    handle: Optional[str] = None
    ldh_name: Optional[str] = None
    unicode_name: Optional[str] = None
    status: Optional[list[str]] = None
    entities: Optional[list[Entity]] = None
    events: Optional[list[Event]] = None
    nameservers: Optional[list[Nameserver]] = None
    secure_dns: Optional[SecureDNS] = None
    links: Optional[list[Link]] = None
    notices: Optional[list[Notice]] = None
    public_ids: Optional[list[PublicId]] = None
    extra: dict = field(default_factory=dict)
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> "RDAPDocument":
        f = _Fields(data)
        object_class_name = f.take("objectClassName", _as_str)
        handle = f.take("handle", _as_str)
        ldh_name = f.take("ldhName", _as_str)
        unicode_name = f.take("unicodeName", _as_str)
        status = f.take("status", _as_str_list)
        entities = f.take("entities", _as_dict_list)
        events = f.take("events", _as_dict_list)
        nameservers = f.take("nameservers", _as_dict_list)
        secure_dns = f.take("secureDNS", lambda v: v if isinstance(v, dict) else None)
        links = f.take("links", _as_dict_list)
        notices = f.take("notices", _as_dict_list)
        public_ids = f.take("publicIds", _as_dict_list)

        return cls(
            object_class_name=object_class_name,
            handle=handle,
            ldh_name=ldh_name,
            unicode_name=unicode_name,
            status=status,
            entities=[Entity.from_dict(e) for e in entities] if entities is not None else None,
            events=[Event.from_dict(e) for e in events] if events is not None else None,
            nameservers=(
                [Nameserver.from_dict(ns) for ns in nameservers]
                if nameservers is not None else None
            ),
            secure_dns=SecureDNS.from_dict(secure_dns) if secure_dns is not None else None,
            links=[Link.from_dict(link) for link in links] if links is not None else None,
            notices=[Notice.from_dict(n) for n in notices] if notices is not None else None,
            public_ids=(
                [PublicId.from_dict(p) for p in public_ids]
                if public_ids is not None else None
            ),
            extra=f.rest(),
            raw=data if isinstance(data, dict) else {},
        )

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "objectClassName", self.object_class_name)
        _put(out, "handle", self.handle)
        _put(out, "ldhName", self.ldh_name)
        _put(out, "unicodeName", self.unicode_name)
        _put(out, "status", self.status)
        if self.entities is not None:
            out["entities"] = [e.to_dict() for e in self.entities]
        if self.events is not None:
            out["events"] = [e.to_dict() for e in self.events]
        if self.nameservers is not None:
            out["nameservers"] = [ns.to_dict() for ns in self.nameservers]
        if self.secure_dns is not None:
            out["secureDNS"] = self.secure_dns.to_dict()
        if self.links is not None:
            out["links"] = [link.to_dict() for link in self.links]
        if self.notices is not None:
            out["notices"] = [n.to_dict() for n in self.notices]
        if self.public_ids is not None:
            out["publicIds"] = [p.to_dict() for p in self.public_ids]
        out.update(self.extra)
        return out


@dataclass
class PostalAddress:
    """Structured address taken from a vCard ``adr`` property."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "street", self.street)
        _put(out, "city", self.city)
        _put(out, "state", self.state)
        _put(out, "postalCode", self.postal_code)
        _put(out, "country", self.country)
        return out


@dataclass
class ContactRecord:
    """Normalized projection of an entity's vCard array."""

    full_name: Optional[str] = None
    organization: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[PostalAddress] = None

    def is_empty(self) -> bool:
        return not self.to_dict()

    def display_name(self) -> str:
        return self.full_name or self.organization or "N/A"

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "fullName", self.full_name)
        _put(out, "organization", self.organization)
        _put(out, "email", self.email)
        _put(out, "phone", self.phone)
        if self.address is not None:
            out["address"] = self.address.to_dict()
        return out


@dataclass
class RoleContact:
    """A contact filed under one role, with the owning entity's handle."""

    contact: ContactRecord
    handle: Optional[str] = None

    def to_dict(self) -> dict:
        out = self.contact.to_dict()
        _put(out, "handle", self.handle)
        return out


@dataclass
class NameserverSummary:
    """Nameserver name with its glue addresses."""

    name: Optional[str] = None
    ips: Optional[dict] = None

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "name", self.name)
        _put(out, "ips", self.ips)
        return out


@dataclass
class FormattedSummary:
    """Condensed, display-ready view of an RDAP document."""

    domain: Optional[str] = None
    handle: Optional[str] = None
    status: Optional[list[str]] = None
    events: dict[str, Optional[str]] = field(default_factory=dict)
    nameservers: list[NameserverSummary] = field(default_factory=list)
    contacts: dict[str, RoleContact] = field(default_factory=dict)
    secure_dns: Optional[dict] = None

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "domain", self.domain)
        _put(out, "handle", self.handle)
        _put(out, "status", self.status)
        out["events"] = dict(self.events)
        out["nameservers"] = [ns.to_dict() for ns in self.nameservers]
        out["contacts"] = {role: c.to_dict() for role, c in self.contacts.items()}
        _put(out, "secureDNS", self.secure_dns)
        return out

    def to_json(self) -> str:
        """Pretty-printed JSON with a stable key order."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
