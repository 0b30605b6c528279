import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure root logger with console and optional file handlers.

    Args:
        level: Log level (INFO, DEBUG, etc.)
        log_dir: If provided, create a timestamped log file in this directory.
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()

    # Console goes to stderr so `list --json` output stays clean on stdout.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    # urllib3 logs every connection; only show that at DEBUG.
    http_level = logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    for name in ("urllib3", "requests"):
        logging.getLogger(name).setLevel(http_level)

    if log_dir:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y-%m-%d__%H_%M_%S")
            log_file = log_dir / f"sophos-dashboard_{timestamp}.log"
            file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            root.info("Logging to file: %s", log_file)
        except PermissionError as exc:
            root.error(
                "File logging disabled (permission error writing to %s): %s",
                str(log_dir),
                exc,
            )
        except OSError as exc:
            root.error(
                "File logging disabled (OS error creating log file under %s): %s",
                str(log_dir),
                exc,
            )
