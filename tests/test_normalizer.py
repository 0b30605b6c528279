from sophos_dashboard.models import Endpoint
from sophos_dashboard.normalizer import (
    deduplicate_endpoints,
    first_match,
    normalize_endpoint,
    normalize_endpoints,
    IP_ADDRESS_RULES,
)


def test_missing_fields_get_defaults():
    ep = normalize_endpoint({"id": "abc"})

    assert ep.hostname == "Unknown"
    assert ep.os.name == "Unknown OS"
    assert ep.os.version is None
    assert ep.type == "computer"
    assert ep.online is False
    assert ep.health.overall == "unknown"
    assert ep.group.name == "No Group"
    assert ep.ip_addresses == ()
    assert ep.last_seen is None


def test_full_record():
    raw = {
        "id": "e1",
        "hostname": "SRV-01",
        "os": {"name": "Ubuntu", "version": "22.04"},
        "endpoint_type": "server",
        "online": True,
        "health": {"overall": "critical"},
        "group": {"name": "Prod"},
        "ipAddresses": ["10.1.1.1"],
        "lastSeenAt": "2024-01-15T11:15:00Z",
    }
    ep = normalize_endpoint(raw)

    assert ep.to_dict() == {
        "id": "e1",
        "hostname": "SRV-01",
        "os": {"name": "Ubuntu", "version": "22.04"},
        "type": "server",
        "online": True,
        "health": {"overall": "critical"},
        "group": {"name": "Prod"},
        "ipAddresses": ["10.1.1.1"],
        "lastSeen": "2024-01-15T11:15:00Z",
    }


def test_split_ip_fields_are_concatenated_in_order():
    raw = {
        "id": "1",
        "ipAddresses": [],
        "ip_addresses": [],
        "ipv4Addresses": ["10.0.0.1"],
        "ipv6Addresses": ["::1"],
    }
    assert list(normalize_endpoint(raw).ip_addresses) == ["10.0.0.1", "::1"]


def test_snake_case_split_fields_follow_camel_case():
    raw = {
        "id": "1",
        "ipv6_addresses": ["fe80::1"],
        "ipv4_addresses": ["172.16.0.9"],
        "ipv6Addresses": ["::1"],
    }
    assert list(normalize_endpoint(raw).ip_addresses) == ["::1", "172.16.0.9", "fe80::1"]


def test_combined_field_wins_over_split_fields():
    raw = {
        "id": "1",
        "ipAddresses": ["192.168.0.5"],
        "ip_addresses": ["192.168.0.6"],
        "ipv4Addresses": ["10.0.0.1"],
    }
    assert list(normalize_endpoint(raw).ip_addresses) == ["192.168.0.5"]


def test_snake_case_combined_field_used_when_camel_case_empty():
    raw = {"id": "1", "ipAddresses": [], "ip_addresses": ["192.168.0.6"], "ipv4Addresses": ["10.0.0.1"]}
    assert list(normalize_endpoint(raw).ip_addresses) == ["192.168.0.6"]


def test_non_list_ip_values_are_ignored():
    raw = {"id": "1", "ipAddresses": "10.0.0.1", "ipv4Addresses": None, "ipv6Addresses": ["::2"]}
    assert list(normalize_endpoint(raw).ip_addresses) == ["::2"]


def test_type_read_from_endpoint_type_only():
    assert normalize_endpoint({"id": "1", "type": "server"}).type == "computer"
    assert normalize_endpoint({"id": "1", "endpoint_type": "mobile"}).type == "mobile"


def test_unrecognised_health_becomes_unknown():
    assert normalize_endpoint({"id": "1", "health": {"overall": "suspicious"}}).health.overall == "unknown"
    assert normalize_endpoint({"id": "1", "health": {"overall": "Good"}}).health.overall == "good"


def test_last_seen_fallback_fields():
    assert normalize_endpoint({"id": "1", "last_seen": "2024-01-01T00:00:00Z"}).last_seen == "2024-01-01T00:00:00Z"
    assert normalize_endpoint({"id": "1", "lastSeen": "a", "last_seen": "b"}).last_seen == "a"


def test_normalization_is_deterministic():
    raw = {"id": "7", "hostname": "H", "ipv4Addresses": ["1.1.1.1"], "os": {"name": "macOS"}}
    first = normalize_endpoint(raw)
    second = normalize_endpoint(raw)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_first_match_returns_default_when_nothing_matches():
    assert first_match({}, IP_ADDRESS_RULES, default=["x"]) == ["x"]


def test_records_without_id_are_skipped():
    endpoints = normalize_endpoints([{"hostname": "no-id"}, {"id": "2"}, "garbage"])
    assert [ep.id for ep in endpoints] == ["2"]


def test_deduplicate_keeps_first_occurrence(caplog):
    first = Endpoint(id="42", hostname="first")
    second = Endpoint(id="42", hostname="second")
    other = Endpoint(id="43")

    unique = deduplicate_endpoints([first, other, second])

    assert unique == [first, other]
    assert "Duplicate endpoint found: 42" in caplog.text
