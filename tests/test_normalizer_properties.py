"""
Property-based tests for the Response Normalizer module.

Covers the vCard projection, the formatted summary and the lenient document
model underneath them.
"""

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from rdap_lookup.models import Entity, RDAPDocument
from rdap_lookup.normalizer import (
    format_response,
    format_summary,
    parse_contact,
    to_iso8601,
)

SAMPLE_DOCUMENT = {
    "objectClassName": "domain",
    "handle": "2336799_DOMAIN_COM-VRSN",
    "ldhName": "EXAMPLE.COM",
    "status": ["client delete prohibited", "client transfer prohibited"],
    "events": [
        {"eventAction": "registration", "eventDate": "1995-08-14T04:00:00Z"},
        {"eventAction": "expiration", "eventDate": "2025-08-13T04:00:00Z"},
        {"eventAction": "last update of RDAP database", "eventDate": "2024-05-01T12:30:45.123Z"},
    ],
    "nameservers": [
        {"objectClassName": "nameserver", "ldhName": "A.IANA-SERVERS.NET"},
        {
            "objectClassName": "nameserver",
            "ldhName": "B.IANA-SERVERS.NET",
            "ipAddresses": {"v4": ["199.43.133.53"], "v6": ["2001:500:8d::53"]},
        },
    ],
    "entities": [
        {
            "objectClassName": "entity",
            "handle": "376",
            "roles": ["registrar"],
            "vcardArray": [
                "vcard",
                [
                    ["version", {}, "text", "4.0"],
                    ["fn", {}, "text", "RESERVED-Internet Assigned Numbers Authority"],
                ],
            ],
        },
        {
            "objectClassName": "entity",
            "handle": "C-1",
            "roles": ["registrant", "technical"],
            "vcardArray": [
                "vcard",
                [
                    ["version", {}, "text", "4.0"],
                    ["fn", {}, "text", "Jane Doe"],
                    ["org", {}, "text", "Example Org"],
                    ["email", {}, "text", "jane@example.com"],
                    ["tel", {"type": "voice"}, "uri", "tel:+1.5555551234"],
                    ["adr", {}, "text", ["", "", "1 Main St", "Springfield", "IL", "62701", "US"]],
                ],
            ],
        },
    ],
    "secureDNS": {"delegationSigned": False},
    "rdapConformance": ["rdap_level_0", "icann_rdap_technical_implementation_guide_0"],
    "port43": "whois.verisign-grs.com",
}


def vcard_entity(*properties) -> dict:
    return {"objectClassName": "entity", "vcardArray": ["vcard", list(properties)]}


class TestParseContact:
    """vCard properties map onto contact record fields."""

    def test_full_name(self) -> None:
        record = parse_contact(vcard_entity(["fn", {}, "text", "Jane Doe"]))
        assert record.full_name == "Jane Doe"
        assert record.to_dict() == {"fullName": "Jane Doe"}

    def test_entity_without_vcard_is_empty(self) -> None:
        assert parse_contact({"objectClassName": "entity"}).to_dict() == {}
        assert parse_contact(Entity()).is_empty()

    def test_all_known_properties(self) -> None:
        entity = Entity.from_dict(SAMPLE_DOCUMENT["entities"][1])
        record = parse_contact(entity)

        assert record.full_name == "Jane Doe"
        assert record.organization == "Example Org"
        assert record.email == "jane@example.com"
        assert record.phone == "tel:+1.5555551234"
        assert record.address.to_dict() == {
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "postalCode": "62701",
            "country": "US",
        }

    def test_unknown_and_malformed_properties_ignored(self) -> None:
        record = parse_contact(vcard_entity(
            ["kind", {}, "text", "individual"],
            ["fn"],
            [],
            "garbage",
            [42, {}, "text", "x"],
            ["adr", {}, "text", "not-a-list"],
            ["email", {}, "text", "ops@example.net"],
        ))
        assert record.to_dict() == {"email": "ops@example.net"}

    def test_short_address_keeps_available_parts(self) -> None:
        record = parse_contact(vcard_entity(["adr", {}, "text", ["", "", "Street", "Town"]]))
        assert record.address.to_dict() == {"street": "Street", "city": "Town"}

    def test_multi_line_street_is_joined(self) -> None:
        record = parse_contact(vcard_entity(
            ["adr", {}, "text", ["", "", ["Suite 5", "1 Main St"], "Town", "", "", "US"]],
        ))
        assert record.address.street == "Suite 5, 1 Main St"

    def test_later_property_overwrites_earlier(self) -> None:
        record = parse_contact(vcard_entity(
            ["fn", {}, "text", "First"],
            ["FN", {}, "text", "Second"],
        ))
        assert record.full_name == "Second"

    @given(value=st.recursive(
        st.none() | st.booleans() | st.integers() | st.text(max_size=5),
        lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=3), children, max_size=3),
        max_leaves=20,
    ))
    @settings(max_examples=200)
    def test_never_raises(self, value) -> None:
        """*For any* JSON-ish vcardArray value, parse_contact SHALL not raise."""
        parse_contact({"vcardArray": value})
        parse_contact(Entity.from_dict({"vcardArray": value}))


class TestFormatSummary:
    """The summary is a deterministic projection of the document."""

    def test_sample_document(self) -> None:
        summary = format_summary(SAMPLE_DOCUMENT).to_dict()

        assert summary["domain"] == "EXAMPLE.COM"
        assert summary["handle"] == "2336799_DOMAIN_COM-VRSN"
        assert summary["status"] == SAMPLE_DOCUMENT["status"]
        assert summary["events"] == {
            "registration": "1995-08-14T04:00:00.000Z",
            "expiration": "2025-08-13T04:00:00.000Z",
            "last update of RDAP database": "2024-05-01T12:30:45.123Z",
        }
        assert summary["nameservers"] == [
            {"name": "A.IANA-SERVERS.NET"},
            {
                "name": "B.IANA-SERVERS.NET",
                "ips": {"v4": ["199.43.133.53"], "v6": ["2001:500:8d::53"]},
            },
        ]
        assert set(summary["contacts"]) == {"registrar", "registrant", "technical"}
        assert summary["contacts"]["registrant"]["handle"] == "C-1"
        assert summary["contacts"]["technical"]["fullName"] == "Jane Doe"
        assert summary["contacts"]["registrar"] == {
            "fullName": "RESERVED-Internet Assigned Numbers Authority",
            "handle": "376",
        }
        assert summary["secureDNS"] == {"delegationSigned": False}

    def test_duplicate_event_action_last_wins(self) -> None:
        doc = {
            "objectClassName": "domain",
            "events": [
                {"eventAction": "last changed", "eventDate": "2020-01-01T00:00:00Z"},
                {"eventAction": "last changed", "eventDate": "2023-06-15T10:20:30+02:00"},
            ],
        }
        assert format_summary(doc).events == {"last changed": "2023-06-15T08:20:30.000Z"}

    def test_shared_role_last_entity_wins(self) -> None:
        doc = {
            "objectClassName": "domain",
            "entities": [
                {"handle": "A", "roles": ["abuse"], **vcard_entity(["fn", {}, "text", "First"])},
                {"handle": "B", "roles": ["abuse"], **vcard_entity(["fn", {}, "text", "Second"])},
            ],
        }
        contacts = format_summary(doc).to_dict()["contacts"]
        assert contacts == {"abuse": {"fullName": "Second", "handle": "B"}}

    def test_roles_of_one_entity_get_separate_records(self) -> None:
        doc = {
            "objectClassName": "domain",
            "entities": [
                {"handle": "C-9", "roles": ["admin", "technical"], **vcard_entity(["fn", {}, "text", "Ops"])},
            ],
        }
        contacts = format_summary(doc).contacts

        assert contacts["admin"].contact is not contacts["technical"].contact
        contacts["admin"].contact.full_name = "Changed"
        assert contacts["technical"].contact.full_name == "Ops"

    def test_entity_without_roles_is_skipped(self) -> None:
        doc = {"objectClassName": "domain", "entities": [vcard_entity(["fn", {}, "text", "X"])]}
        assert format_summary(doc).contacts == {}

    def test_empty_document(self) -> None:
        assert format_summary({}).to_dict() == {"events": {}, "nameservers": [], "contacts": {}}

    def test_accepts_document_model(self) -> None:
        document = RDAPDocument.from_dict(SAMPLE_DOCUMENT)
        assert format_summary(document) == format_summary(SAMPLE_DOCUMENT)

    def test_format_response_is_deterministic(self) -> None:
        first = format_response(SAMPLE_DOCUMENT)
        second = format_response(json.loads(json.dumps(SAMPLE_DOCUMENT)))
        assert first == second
        assert json.loads(first)["domain"] == "EXAMPLE.COM"
        assert first.startswith("{\n  ")

    @given(actions=st.lists(
        st.tuples(
            st.sampled_from(["registration", "expiration", "last changed", "transfer"]),
            st.datetimes(timezones=st.none()).map(lambda d: d.strftime("%Y-%m-%dT%H:%M:%SZ")),
        ),
        max_size=10,
    ))
    @settings(max_examples=100)
    def test_events_keep_last_occurrence(self, actions) -> None:
        """
        *For any* event list, each action SHALL map to the date of its last
        occurrence in document order.
        """
        doc = {"events": [{"eventAction": a, "eventDate": d} for a, d in actions]}

        expected = {}
        for action, date in actions:
            expected[action] = to_iso8601(date)

        assert format_summary(doc).events == expected

    @given(doc=st.dictionaries(
        st.sampled_from(["ldhName", "handle", "status", "events", "nameservers", "entities", "secureDNS", "x"]),
        st.recursive(
            st.none() | st.booleans() | st.integers() | st.text(max_size=5),
            lambda children: st.lists(children, max_size=3) | st.dictionaries(st.text(max_size=3), children, max_size=3),
            max_leaves=15,
        ),
    ))
    @settings(max_examples=200)
    def test_malformed_documents_never_raise(self, doc) -> None:
        """*For any* malformed document, format_response SHALL return identical text twice."""
        assert format_response(doc) == format_response(doc)


class TestIso8601:
    def test_utc_suffix(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05Z") == "2024-01-02T03:04:05.000Z"

    def test_offset_converted_to_utc(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05-05:00") == "2024-01-02T08:04:05.000Z"

    def test_naive_read_as_utc(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05") == "2024-01-02T03:04:05.000Z"

    def test_short_fraction_padded(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05.1Z") == "2024-01-02T03:04:05.100Z"

    def test_odd_length_fraction(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05.12345Z") == "2024-01-02T03:04:05.123Z"

    def test_nanosecond_fraction_truncated(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05.123456789Z") == "2024-01-02T03:04:05.123Z"

    def test_offset_without_colon(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05+0000") == "2024-01-02T03:04:05.000Z"
        assert to_iso8601("2024-01-02T03:04:05+0530") == "2024-01-01T21:34:05.000Z"

    def test_hour_only_offset(self) -> None:
        assert to_iso8601("2024-01-02T03:04:05-02") == "2024-01-02T05:04:05.000Z"

    def test_lowercase_separators(self) -> None:
        assert to_iso8601("2024-01-02t03:04:05z") == "2024-01-02T03:04:05.000Z"

    def test_unparseable_kept_verbatim(self) -> None:
        assert to_iso8601("yesterday") == "yesterday"

    def test_missing_date(self) -> None:
        assert to_iso8601(None) is None


class TestDocumentModel:
    """Unknown members survive a parse and re-serialize."""

    def test_extensions_preserved(self) -> None:
        document = RDAPDocument.from_dict(SAMPLE_DOCUMENT)

        assert document.extra == {
            "rdapConformance": SAMPLE_DOCUMENT["rdapConformance"],
            "port43": "whois.verisign-grs.com",
        }
        assert document.to_dict() == SAMPLE_DOCUMENT
        assert document.raw is SAMPLE_DOCUMENT

    def test_wrongly_typed_member_kept_in_extra(self) -> None:
        document = RDAPDocument.from_dict({"objectClassName": "domain", "status": "active"})
        assert document.status is None
        assert document.extra == {"status": "active"}
        assert document.to_dict() == {"objectClassName": "domain", "status": "active"}

    def test_nested_entity_extensions_preserved(self) -> None:
        raw = {
            "objectClassName": "entity",
            "roles": ["registrar"],
            "publicIds": [{"type": "IANA Registrar ID", "identifier": "292"}],
            "entities": [{"objectClassName": "entity", "roles": ["abuse"], "x-custom": 1}],
        }
        entity = Entity.from_dict(raw)
        assert entity.entities[0].extra == {"x-custom": 1}
        assert entity.to_dict() == raw
