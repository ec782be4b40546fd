"""Shared fixtures for the uploader tests."""

import logging
from pathlib import Path

import pytest

from r2_uploader.config.settings import CredentialsConfig, SyncOptions, UploaderConfig

CF_ENV_VARS = [
    "CF_ACCOUNT_ID",
    "CF_ACCESS_KEY_ID",
    "CF_SECRET_ACCESS_KEY",
    "CF_BUCKET_NAME",
    "CF_REGION",
    "CF_ENDPOINT_URL",
]


class FakeObjectStore:
    """In-memory object store that can be told to fail for some keys."""

    def __init__(self, fail_keys=None, failures_before_success=0):
        self.fail_keys = set(fail_keys or ())
        self.failures_before_success = failures_before_success
        self.calls = []
        self.objects = {}

    async def put(self, bucket, key, body, content_type):
        self.calls.append((bucket, key, body, content_type))
        if key in self.fail_keys:
            raise ConnectionError(f"connection reset while writing {key}")
        if self.failures_before_success > 0:
            self.failures_before_success -= 1
            raise ConnectionError("temporary failure")
        self.objects[(bucket, key)] = (body, content_type)
        return {"ETag": '"fake"'}

    def keys(self):
        return sorted(key for _, key in self.objects)


class RecordingSleep:
    """Replacement for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials out of the tests."""
    for var in CF_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from inside a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def book_dir(workdir):
    """Create a small book tree in the working directory."""
    book = workdir / "book"
    (book / "css").mkdir(parents=True)
    (book / "chapters" / "part1").mkdir(parents=True)
    (book / "index.html").write_text("<html>index</html>")
    (book / "css" / "style.css").write_text("body { color: black; }")
    (book / "chapters" / "part1" / "intro.html").write_text("<h1>Intro</h1>")
    return book


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def config(workdir) -> UploaderConfig:
    return UploaderConfig(
        source_dir="book",
        credentials=CredentialsConfig(bucket="test-bucket"),
        sync_options=SyncOptions(retry_delay=0, ledger_path=str(workdir / "hash.bin")),
    )


def read_ledger(path: Path):
    text = path.read_text(encoding="utf-8")
    return {line for line in text.split("\n") if line}


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger("r2_uploader")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
