from pathlib import Path
from typing import Any, List

import pytest

from sophos_dashboard.config import Settings
from sophos_dashboard.models import Credentials


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays queued responses in order."""

    def __init__(self, post: List[Any] = None, get: List[Any] = None):
        self.headers = {}
        self._post = list(post or [])
        self._get = list(get or [])
        self.post_calls = []
        self.get_calls = []

    @staticmethod
    def _next(queue: List[Any]) -> FakeResponse:
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        self.post_calls.append((url, kwargs))
        return self._next(self._post)

    def get(self, url, **kwargs):
        self.get_calls.append((url, kwargs))
        return self._next(self._get)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        use_mock_data=False,
        default_region="us01",
        token_url="https://id.example.test/oauth2/token",
        secrets_file=tmp_path / "secrets" / "sophos_secrets.json",
        cache_dir=tmp_path / "cache",
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        client_id="cid",
        client_secret="s3cret",
        tenant_id="tenant-1",
        region="eu01",
    )


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
