import logging

import pytest

from sophos_dashboard.logging_config import configure_logging


@pytest.fixture(autouse=True)
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    http_levels = {name: logging.getLogger(name).level for name in ("urllib3", "requests")}
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, lvl in http_levels.items():
        logging.getLogger(name).setLevel(lvl)


def test_http_loggers_quiet_at_info():
    configure_logging("INFO")

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("requests").level == logging.WARNING


def test_http_loggers_follow_debug():
    configure_logging("debug")

    assert logging.getLogger("urllib3").level == logging.DEBUG


def test_log_file_created(tmp_path):
    configure_logging("INFO", log_dir=tmp_path / "logs")
    logging.getLogger("sophos_dashboard.test").info("hello")

    files = list((tmp_path / "logs").glob("sophos-dashboard_*.log"))
    assert len(files) == 1
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello" in files[0].read_text(encoding="utf-8")
