import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

APP_DIR_NAME = "sophos-dashboard"
SECRETS_FILE_NAME = "sophos_secrets.json"
DEFAULT_REGION = "us01"
DEFAULT_TOKEN_URL = "https://id.sophos.com/api/v2/oauth2/token"

_REGION_RE = re.compile(r"^[a-z]{2}[0-9]{2}$")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}={raw!r} (expected true/false).")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


def normalize_region(region: str) -> str:
    """Lower-case a region code and make sure it looks like 'us01', 'eu02', ..."""
    r = (region or "").strip().lower()
    if not _REGION_RE.match(r):
        raise RuntimeError(f"Invalid Sophos region code: {region!r} (expected e.g. us01, eu01, ap01).")
    return r


def user_data_dir() -> Path:
    """Return the platform's per-user application data directory."""
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.getenv("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def default_app_dir() -> Path:
    return user_data_dir() / APP_DIR_NAME


def default_secrets_path() -> Path:
    return default_app_dir() / SECRETS_FILE_NAME


@dataclass
class Settings:
    use_mock_data: bool
    default_region: str
    token_url: str
    secrets_file: Path
    cache_dir: Path
    request_timeout: int = 30
    page_size: int = 100
    cache_ttl_hours: int = 1
    verify_ssl: bool = True
    log_level: str = "INFO"
    log_dir: Optional[Path] = None


def _as_bool(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
    raise RuntimeError(f"{name} must be a boolean")


def _as_int(value: object, name: str) -> int:
    if isinstance(value, bool):
        raise RuntimeError(f"{name} must be an integer")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _check_positive(settings: Settings) -> Settings:
    if settings.request_timeout <= 0:
        raise RuntimeError("request timeout must be > 0 seconds")
    if not 1 <= settings.page_size <= 500:
        raise RuntimeError("page size must be between 1 and 500")
    if settings.cache_ttl_hours < 0:
        raise RuntimeError("cache TTL must be >= 0 hours")
    return settings


def _load_settings_from_yaml(path: str) -> Settings:
    """Load settings from a single YAML config file."""
    p = Path(path)
    if not p.is_file():
        raise RuntimeError(f"APP_CONFIG_FILE not found: {path}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise RuntimeError(f"Failed to read YAML config: {path}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RuntimeError("YAML config root must be a mapping/object")

    # Sophos config
    sophos = raw.get("sophos") or {}
    if not isinstance(sophos, dict):
        raise RuntimeError("sophos must be a mapping/object")

    default_region = normalize_region(str(sophos.get("region", DEFAULT_REGION)))

    token_url = sophos.get("token_url", DEFAULT_TOKEN_URL)
    if not isinstance(token_url, str) or not token_url.strip():
        raise RuntimeError("sophos.token_url must be a non-empty string")

    secrets_file_raw = sophos.get("secrets_file")
    if secrets_file_raw is not None and not isinstance(secrets_file_raw, str):
        raise RuntimeError("sophos.secrets_file must be a string or null")
    secrets_file = Path(secrets_file_raw) if secrets_file_raw else default_secrets_path()

    # Runtime config
    runtime = raw.get("runtime") or {}
    if not isinstance(runtime, dict):
        raise RuntimeError("runtime must be a mapping/object")

    log_dir_raw = runtime.get("log_dir")

    return _check_positive(
        Settings(
            use_mock_data=_as_bool(runtime.get("use_mock_data", False), "runtime.use_mock_data"),
            default_region=default_region,
            token_url=token_url.strip(),
            secrets_file=secrets_file,
            cache_dir=Path(str(runtime.get("cache_dir", default_app_dir()))),
            request_timeout=_as_int(sophos.get("timeout", 30), "sophos.timeout"),
            page_size=_as_int(sophos.get("page_size", 100), "sophos.page_size"),
            cache_ttl_hours=_as_int(runtime.get("cache_ttl_hours", 1), "runtime.cache_ttl_hours"),
            verify_ssl=_as_bool(sophos.get("verify_ssl", True), "sophos.verify_ssl"),
            log_level=str(runtime.get("log_level", "INFO")),
            log_dir=Path(str(log_dir_raw)) if log_dir_raw else None,
        )
    )


def load_settings() -> Settings:
    """Load settings from a YAML file (APP_CONFIG_FILE) or from environment variables."""

    # YAML-first mode (single source of truth)
    app_config_file = os.getenv("APP_CONFIG_FILE")
    if app_config_file:
        return _load_settings_from_yaml(app_config_file)

    secrets_file = os.getenv("SOPHOS_SECRETS_FILE")
    log_dir = os.getenv("LOG_DIR")

    settings = Settings(
        use_mock_data=_env_bool("USE_MOCK_DATA", default=False),
        default_region=normalize_region(os.getenv("SOPHOS_REGION", DEFAULT_REGION)),
        token_url=os.getenv("SOPHOS_TOKEN_URL", DEFAULT_TOKEN_URL).strip(),
        secrets_file=Path(secrets_file) if secrets_file else default_secrets_path(),
        cache_dir=Path(os.getenv("CACHE_DIR", str(default_app_dir()))),
        request_timeout=_env_int("SOPHOS_TIMEOUT", 30),
        page_size=_env_int("SOPHOS_PAGE_SIZE", 100),
        cache_ttl_hours=_env_int("CACHE_TTL_HOURS", 1),
        verify_ssl=_env_bool("SOPHOS_VERIFY_SSL", default=True),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=Path(log_dir) if log_dir else None,
    )
    if settings.use_mock_data:
        logger.info("USE_MOCK_DATA is set; live Sophos API calls are disabled")
    return _check_positive(settings)
