from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

HEALTH_STATES = ("good", "warning", "critical", "unknown")


@dataclass(frozen=True)
class Credentials:
    """Sophos Central API client credentials, as stored in the secrets file."""

    client_id: str
    client_secret: str = field(repr=False)
    tenant_id: str
    region: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "tenant_id": self.tenant_id,
            "region": self.region,
        }


@dataclass(frozen=True)
class OperatingSystem:
    name: str = "Unknown OS"
    version: Optional[str] = None


@dataclass(frozen=True)
class Health:
    overall: str = "unknown"


@dataclass(frozen=True)
class Group:
    name: str = "No Group"


@dataclass(frozen=True)
class Endpoint:
    """
    Normalized representation of a managed device.

    Every field except `id` carries a default, so an endpoint built from a
    sparse vendor record never holds a missing value.
    """

    id: str
    hostname: str = "Unknown"
    os: OperatingSystem = OperatingSystem()
    type: str = "computer"
    online: bool = False
    health: Health = Health()
    group: Group = Group()
    ip_addresses: Tuple[str, ...] = ()
    last_seen: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase record shape consumed by the presentation layer."""
        os_info: Dict[str, Any] = {"name": self.os.name}
        if self.os.version is not None:
            os_info["version"] = self.os.version

        out: Dict[str, Any] = {
            "id": self.id,
            "hostname": self.hostname,
            "os": os_info,
            "type": self.type,
            "online": self.online,
            "health": {"overall": self.health.overall},
            "group": {"name": self.group.name},
            "ipAddresses": list(self.ip_addresses),
        }
        if self.last_seen is not None:
            out["lastSeen"] = self.last_seen
        return out


@dataclass
class DashboardStats:
    """Summary counts derived from the current endpoint list."""

    total_endpoints: int = 0
    online_endpoints: int = 0
    offline_endpoints: int = 0
    healthy_endpoints: int = 0
    warning_endpoints: int = 0
    critical_endpoints: int = 0
    unknown_endpoints: int = 0
    os_counts: Dict[str, int] = field(default_factory=dict)
    type_counts: Dict[str, int] = field(default_factory=dict)
    group_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEndpoints": self.total_endpoints,
            "onlineEndpoints": self.online_endpoints,
            "offlineEndpoints": self.offline_endpoints,
            "healthyEndpoints": self.healthy_endpoints,
            "warningEndpoints": self.warning_endpoints,
            "criticalEndpoints": self.critical_endpoints,
            "unknownEndpoints": self.unknown_endpoints,
            "osCounts": dict(self.os_counts),
            "typeCounts": dict(self.type_counts),
            "groupCounts": dict(self.group_counts),
        }


@dataclass(frozen=True)
class EndpointDataResult:
    """
    Outcome of one fetch cycle.

    Exactly one of three variants is returned:
    - Ok: live data from the Sophos API
    - Mock: sample data shown on purpose (forced, or no credentials configured)
    - Degraded: sample data shown because the live fetch failed
    """

    data: Tuple[Endpoint, ...]

    success = True
    source = "api"

    @property
    def error(self) -> Optional[str]:
        return None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "data": [ep.to_dict() for ep in self.data],
            "source": self.source,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class Ok(EndpointDataResult):
    pass


@dataclass(frozen=True)
class Mock(EndpointDataResult):
    reason: str = "Using mock data"

    source = "mock"


@dataclass(frozen=True)
class Degraded(EndpointDataResult):
    reason: str = "Unknown error occurred while fetching from Sophos API"

    success = False
    source = "mock"

    @property
    def error(self) -> Optional[str]:
        return self.reason

