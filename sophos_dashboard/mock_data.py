"""Fixed sample inventory shown when live data is unavailable."""

from typing import Tuple

from .models import Endpoint, Group, Health, OperatingSystem


def _ep(
    id: str,
    hostname: str,
    os_name: str,
    os_version,
    type: str,
    online: bool,
    health: str,
    group: str,
    ip: str,
    last_seen: str,
) -> Endpoint:
    return Endpoint(
        id=id,
        hostname=hostname,
        os=OperatingSystem(name=os_name, version=os_version),
        type=type,
        online=online,
        health=Health(overall=health),
        group=Group(name=group),
        ip_addresses=(ip,),
        last_seen=last_seen,
    )


MOCK_ENDPOINTS: Tuple[Endpoint, ...] = (
    _ep("1", "DESKTOP-ABC123", "Windows 11", "22H2", "computer", True, "good",
        "IT Department", "192.168.1.100", "2024-01-15T10:30:00Z"),
    _ep("2", "LAPTOP-XYZ789", "Windows 10", "21H2", "computer", False, "warning",
        "Sales Team", "192.168.1.101", "2024-01-14T16:45:00Z"),
    _ep("3", "MACBOOK-PRO-001", "macOS", "14.2", "computer", True, "good",
        "Design Team", "192.168.1.102", "2024-01-15T11:00:00Z"),
    _ep("4", "SERVER-PROD-01", "Windows Server 2022", None, "server", True, "critical",
        "Production Servers", "192.168.1.50", "2024-01-15T11:15:00Z"),
    _ep("5", "UBUNTU-DEV-01", "Ubuntu", "22.04", "server", True, "good",
        "Development", "192.168.1.51", "2024-01-15T11:20:00Z"),
    _ep("6", "WORKSTATION-DESIGN", "Windows 11", "23H2", "computer", True, "good",
        "Design Team", "192.168.1.103", "2024-01-15T11:25:00Z"),
    _ep("7", "LAPTOP-SALES-01", "Windows 10", "22H2", "computer", False, "warning",
        "Sales Team", "192.168.1.104", "2024-01-13T14:20:00Z"),
    _ep("8", "SERVER-DB-01", "Windows Server 2019", None, "server", True, "good",
        "Production Servers", "192.168.1.52", "2024-01-15T11:30:00Z"),
    _ep("9", "LAPTOP-HR-01", "Windows 11", "23H2", "computer", True, "good",
        "HR Department", "192.168.1.105", "2024-01-15T11:35:00Z"),
    _ep("10", "IPHONE-SALES-02", "iOS", "17.2", "mobile", True, "good",
        "Sales Team", "192.168.1.106", "2024-01-15T11:40:00Z"),
)
