"""
Normalization of vendor endpoint records.

Sophos field names differ between API versions and transports (camelCase,
snake_case, split IPv4/IPv6 lists). Each canonical field is resolved by an
ordered list of named extraction rules; the first rule that yields a
non-empty value wins.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import HEALTH_STATES, Endpoint, Group, Health, OperatingSystem

logger = logging.getLogger(__name__)

RawEndpoint = Dict[str, Any]


@dataclass(frozen=True)
class ExtractionRule:
    name: str
    extract: Callable[[RawEndpoint], Any]


def _string_list(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _nested(raw: RawEndpoint, outer: str, inner: str) -> Any:
    obj = raw.get(outer)
    if isinstance(obj, dict):
        return obj.get(inner)
    return None


def _field(name: str) -> ExtractionRule:
    return ExtractionRule(name, lambda raw: raw.get(name))


def _combined_ip_fields(raw: RawEndpoint) -> List[str]:
    # Order matters: camelCase v4, v6 then snake_case v4, v6.
    out: List[str] = []
    for key in ("ipv4Addresses", "ipv6Addresses", "ipv4_addresses", "ipv6_addresses"):
        out.extend(_string_list(raw.get(key)))
    return out


IP_ADDRESS_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule("ipAddresses", lambda raw: _string_list(raw.get("ipAddresses"))),
    ExtractionRule("ip_addresses", lambda raw: _string_list(raw.get("ip_addresses"))),
    ExtractionRule("ipv4/ipv6 fields", _combined_ip_fields),
)

HOSTNAME_RULES = (_field("hostname"),)
OS_NAME_RULES = (ExtractionRule("os.name", lambda raw: _nested(raw, "os", "name")),)
OS_VERSION_RULES = (ExtractionRule("os.version", lambda raw: _nested(raw, "os", "version")),)
TYPE_RULES = (_field("endpoint_type"),)
HEALTH_RULES = (ExtractionRule("health.overall", lambda raw: _nested(raw, "health", "overall")),)
GROUP_RULES = (ExtractionRule("group.name", lambda raw: _nested(raw, "group", "name")),)
LAST_SEEN_RULES = (_field("lastSeenAt"), _field("lastSeen"), _field("last_seen"))


def _is_empty(value: object) -> bool:
    return value is None or value == "" or value == [] or value is False


def first_match(raw: RawEndpoint, rules: Sequence[ExtractionRule], default: Any = None) -> Any:
    """Evaluate rules in priority order and return the first non-empty value."""
    for rule in rules:
        value = rule.extract(raw)
        if not _is_empty(value):
            return value
    return default


def _text(value: object, default: Optional[str]) -> Optional[str]:
    if value is None:
        return default
    s = str(value)
    return s if s else default


def _health_state(value: object) -> str:
    state = str(value).strip().lower() if value is not None else ""
    return state if state in HEALTH_STATES else "unknown"


def normalize_endpoint(raw: RawEndpoint) -> Endpoint:
    """
    Convert a raw vendor record into the canonical Endpoint.

    Raises ValueError if the record has no id.
    """
    endpoint_id = raw.get("id")
    if endpoint_id is None or str(endpoint_id) == "":
        raise ValueError("endpoint record has no id")

    return Endpoint(
        id=str(endpoint_id),
        hostname=_text(first_match(raw, HOSTNAME_RULES), "Unknown"),
        os=OperatingSystem(
            name=_text(first_match(raw, OS_NAME_RULES), "Unknown OS"),
            version=_text(first_match(raw, OS_VERSION_RULES), None),
        ),
        type=_text(first_match(raw, TYPE_RULES), "computer"),
        online=bool(raw.get("online")),
        health=Health(overall=_health_state(first_match(raw, HEALTH_RULES))),
        group=Group(name=_text(first_match(raw, GROUP_RULES), "No Group")),
        ip_addresses=tuple(first_match(raw, IP_ADDRESS_RULES, default=[])),
        last_seen=_text(first_match(raw, LAST_SEEN_RULES), None),
    )


def normalize_endpoints(raw_items: Iterable[RawEndpoint]) -> List[Endpoint]:
    """Normalize a batch of vendor records, skipping records without an id."""
    endpoints: List[Endpoint] = []
    for item in raw_items:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object endpoint record: %r", item)
            continue
        try:
            endpoints.append(normalize_endpoint(item))
        except ValueError:
            logger.warning("Skipping endpoint with no 'id' (hostname=%s)", item.get("hostname"))
    return endpoints


def deduplicate_endpoints(endpoints: Iterable[Endpoint]) -> List[Endpoint]:
    """Drop endpoints whose id was already seen, keeping the first occurrence."""
    seen = set()
    unique: List[Endpoint] = []
    for ep in endpoints:
        if ep.id in seen:
            logger.warning("Duplicate endpoint found: %s (%s)", ep.id, ep.hostname)
            continue
        seen.add(ep.id)
        unique.append(ep)
    return unique
