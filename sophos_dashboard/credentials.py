import json
import logging
import os
from pathlib import Path
from typing import Optional

from .config import DEFAULT_REGION, normalize_region
from .errors import StorageError
from .models import Credentials

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("client_id", "client_secret", "tenant_id")


class CredentialStore:
    """
    Sophos API credentials persisted as a JSON secrets file.

    File format:
        {"client_id": "...", "client_secret": "...", "tenant_id": "...", "region": "us01"}

    Missing or broken files are an expected state (the dashboard then shows
    sample data), so load() and save() never raise.
    """

    def __init__(self, path: Path, default_region: str = DEFAULT_REGION):
        self._path = Path(path)
        self.default_region = default_region

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Credentials:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageError(f"Failed to read secrets file {self._path}: {exc.strerror}") from exc
        except UnicodeDecodeError as exc:
            raise StorageError(f"Secrets file {self._path} is not valid UTF-8") from exc
        except json.JSONDecodeError as exc:
            raise StorageError(f"Failed to parse secrets file {self._path}: {exc.msg}") from exc

        if not isinstance(raw, dict):
            raise StorageError(f"Secrets file {self._path} must contain a JSON object")

        values = {}
        for key in REQUIRED_KEYS:
            value = raw.get(key)
            if not isinstance(value, str) or not value.strip():
                raise StorageError(f"Secrets file {self._path} is missing {key!r}")
            values[key] = value.strip()

        region = raw.get("region")
        if not isinstance(region, str) or not region.strip():
            region = self.default_region
        try:
            region = normalize_region(region)
        except RuntimeError as exc:
            raise StorageError(str(exc)) from exc

        return Credentials(region=region, **values)

    def load(self) -> Optional[Credentials]:
        """Return the stored credentials, or None if there are none usable."""
        if not self._path.is_file():
            logger.info("No secrets file found at %s", self._path)
            return None

        try:
            credentials = self._read()
        except StorageError as exc:
            logger.error("%s", exc)
            return None

        logger.info("Loaded Sophos credentials for tenant %s (region %s)", credentials.tenant_id, credentials.region)
        return credentials

    def save(self, credentials: Credentials) -> bool:
        """Write credentials to the secrets file. Returns False on failure."""
        try:
            self._write(credentials)
        except StorageError as exc:
            logger.error("%s", exc)
            return False

        logger.info("Credentials saved to %s", self._path)
        return True

    def _write(self, credentials: Credentials) -> None:
        payload = json.dumps(credentials.to_dict(), indent=2, sort_keys=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
        except OSError as exc:
            raise StorageError(f"Failed to save credentials to {self._path}: {exc.strerror}") from exc
