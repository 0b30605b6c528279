from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from .models import DashboardStats, Endpoint

STATUS_FILTERS = ("all", "online", "offline")
HEALTH_FILTERS = ("all", "good", "warning", "critical", "unknown")


def compute_stats(endpoints: Sequence[Endpoint]) -> DashboardStats:
    """Derive summary counts from an endpoint list. Recompute whenever the list changes."""
    total = len(endpoints)
    online = sum(1 for ep in endpoints if ep.online)
    health = Counter(ep.health.overall for ep in endpoints)

    return DashboardStats(
        total_endpoints=total,
        online_endpoints=online,
        offline_endpoints=total - online,
        healthy_endpoints=health["good"],
        warning_endpoints=health["warning"],
        critical_endpoints=health["critical"],
        unknown_endpoints=health["unknown"],
        os_counts=dict(Counter(ep.os.name for ep in endpoints)),
        type_counts=dict(Counter(ep.type for ep in endpoints)),
        group_counts=dict(Counter(ep.group.name for ep in endpoints)),
    )


@dataclass(frozen=True)
class EndpointFilter:
    """
    Search and filter criteria for the endpoint table.

    "all" disables a criterion. `search` is a case-insensitive substring
    match over hostname, OS name and group name.
    """

    search: str = ""
    status: str = "all"
    health: str = "all"
    os: str = "all"
    type: str = "all"
    group: str = "all"

    def __post_init__(self):
        if self.status not in STATUS_FILTERS:
            raise ValueError(f"status filter must be one of {STATUS_FILTERS}, got {self.status!r}")
        if self.health not in HEALTH_FILTERS:
            raise ValueError(f"health filter must be one of {HEALTH_FILTERS}, got {self.health!r}")

    def matches(self, ep: Endpoint) -> bool:
        term = self.search.lower()
        if term and not (
            term in ep.hostname.lower()
            or term in ep.os.name.lower()
            or term in ep.group.name.lower()
        ):
            return False
        if self.status == "online" and not ep.online:
            return False
        if self.status == "offline" and ep.online:
            return False
        if self.health != "all" and ep.health.overall != self.health:
            return False
        if self.os != "all" and ep.os.name != self.os:
            return False
        if self.type != "all" and ep.type != self.type:
            return False
        if self.group != "all" and ep.group.name != self.group:
            return False
        return True


def filter_endpoints(endpoints: Iterable[Endpoint], endpoint_filter: EndpointFilter) -> List[Endpoint]:
    return [ep for ep in endpoints if endpoint_filter.matches(ep)]


def filter_options(endpoints: Iterable[Endpoint]) -> Dict[str, List[str]]:
    """Distinct values available for the OS, type and group drop-downs."""
    endpoints = list(endpoints)
    return {
        "os": sorted({ep.os.name for ep in endpoints}),
        "type": sorted({ep.type for ep in endpoints}),
        "group": sorted({ep.group.name for ep in endpoints}),
    }
