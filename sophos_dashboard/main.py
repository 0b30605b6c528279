import argparse
import getpass
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from .config import load_settings, normalize_region
from .dashboard import HEALTH_FILTERS, STATUS_FILTERS, EndpointFilter, compute_stats, filter_endpoints
from .logging_config import configure_logging
from .models import Credentials, Endpoint
from .service import EndpointService

logger = logging.getLogger(__name__)


def _print_counts(title: str, counts: Dict[str, int]) -> None:
    print(f"{title}:")
    for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        print(f"  {name:<30} {count}")


def _print_endpoints(endpoints: List[Endpoint]) -> None:
    print(f"{'HOSTNAME':<24} {'STATUS':<8} {'HEALTH':<9} {'OS':<22} {'TYPE':<9} {'GROUP':<20} IP")
    for ep in endpoints:
        os_label = f"{ep.os.name} {ep.os.version}" if ep.os.version else ep.os.name
        print(
            f"{ep.hostname:<24} {'online' if ep.online else 'offline':<8} {ep.health.overall:<9} "
            f"{os_label:<22} {ep.type:<9} {ep.group.name:<20} {', '.join(ep.ip_addresses) or '-'}"
        )


def cmd_summary(service: EndpointService, args: argparse.Namespace) -> int:
    result = service.get_endpoint_data()
    stats = compute_stats(result.data)

    print(f"=== Sophos endpoint dashboard (source: {result.source}) ===")
    if result.error:
        print(f"Live data unavailable, showing sample data: {result.error}")
    print(f"Total endpoints:   {stats.total_endpoints}")
    print(f"Online / offline:  {stats.online_endpoints} / {stats.offline_endpoints}")
    print(
        f"Health:            {stats.healthy_endpoints} good, {stats.warning_endpoints} warning, "
        f"{stats.critical_endpoints} critical, {stats.unknown_endpoints} unknown"
    )
    _print_counts("Operating systems", stats.os_counts)
    _print_counts("Types", stats.type_counts)
    _print_counts("Groups", stats.group_counts)
    return 0


def cmd_list(service: EndpointService, args: argparse.Namespace) -> int:
    try:
        endpoint_filter = EndpointFilter(
            search=args.search,
            status=args.status,
            health=args.health,
            os=args.os,
            type=args.type,
            group=args.group,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    result = service.get_endpoint_data()
    matching = filter_endpoints(result.data, endpoint_filter)

    if args.json:
        payload = result.to_dict()
        payload["data"] = [ep.to_dict() for ep in matching]
        print(json.dumps(payload, indent=2))
        return 0

    if result.error:
        print(f"Live data unavailable, showing sample data: {result.error}", file=sys.stderr)
    _print_endpoints(matching)
    print(f"\n{len(matching)} of {len(result.data)} endpoints (source: {result.source})")
    return 0


def cmd_save_credentials(service: EndpointService, args: argparse.Namespace) -> int:
    secret = args.client_secret or getpass.getpass("Client secret: ")
    try:
        region = normalize_region(args.region or service.settings.default_region)
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    credentials = Credentials(
        client_id=args.client_id,
        client_secret=secret,
        tenant_id=args.tenant_id,
        region=region,
    )
    if not service.store.save(credentials):
        print(f"Failed to save credentials to {service.store.path}", file=sys.stderr)
        return 1
    print(f"Credentials saved successfully to: {service.store.path}")
    return 0


def cmd_secrets_path(service: EndpointService, args: argparse.Namespace) -> int:
    print(service.store.path)
    return 0


def cmd_clear_cache(service: EndpointService, args: argparse.Namespace) -> int:
    cache_files = service.cache_manager.list_cache_files()
    print(f"Found {len(cache_files)} cache files:")
    for cf in cache_files:
        print(f"  - {cf['key']}: {cf['size_kb']} KB (modified: {cf['modified']})")

    if not service.clear_cache():
        print("Failed to clear cache", file=sys.stderr)
        return 1
    print("Cache cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sophos-dashboard",
        description="Sophos Central endpoint inventory dashboard",
    )
    sub = parser.add_subparsers(dest="command")

    summary = sub.add_parser("summary", help="Show inventory statistics (default)")
    summary.set_defaults(func=cmd_summary)

    lst = sub.add_parser("list", help="List endpoints, optionally filtered")
    lst.add_argument("--search", default="", help="Match hostname, OS or group (case-insensitive)")
    lst.add_argument("--status", default="all", choices=STATUS_FILTERS)
    lst.add_argument("--health", default="all", choices=HEALTH_FILTERS)
    lst.add_argument("--os", default="all", help="Exact OS name")
    lst.add_argument("--type", default="all", help="Exact endpoint type")
    lst.add_argument("--group", default="all", help="Exact group name")
    lst.add_argument("--json", action="store_true", help="Print the result as JSON")
    lst.set_defaults(func=cmd_list)

    save = sub.add_parser("save-credentials", help="Store Sophos API credentials")
    save.add_argument("--client-id", required=True)
    save.add_argument("--client-secret", help="Prompted for if omitted")
    save.add_argument("--tenant-id", required=True)
    save.add_argument("--region", help="e.g. us01, eu01, ap01")
    save.set_defaults(func=cmd_save_credentials)

    path = sub.add_parser("secrets-path", help="Print the secrets file location")
    path.set_defaults(func=cmd_secrets_path)

    clear = sub.add_parser("clear-cache", help="Delete the cached endpoint inventory")
    clear.set_defaults(func=cmd_clear_cache)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging early so load_settings() warnings/errors are visible.
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    settings = load_settings()
    configure_logging(settings.log_level, settings.log_dir)

    service = EndpointService(settings)
    func = getattr(args, "func", cmd_summary)
    logger.debug("Running command %s", args.command or "summary")
    return func(service, args)


if __name__ == "__main__":
    sys.exit(main())
