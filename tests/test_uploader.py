"""Tests for the retrying uploader."""

import pytest

from r2_uploader.sync.uploader import RetryingUploader

from .conftest import FakeObjectStore


class TestRetryingUploader:
    """Test RetryingUploader functionality."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self, store, recording_sleep):
        uploader = RetryingUploader(store, sleep=recording_sleep)

        result = await uploader.upload("bucket", "book/index.html", b"<html/>", "text/html")

        assert result.success
        assert result.attempts == 1
        assert result.error is None
        assert recording_sleep.delays == []
        assert store.objects[("bucket", "book/index.html")] == (b"<html/>", "text/html")

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, recording_sleep):
        store = FakeObjectStore(failures_before_success=2)
        uploader = RetryingUploader(store, base_delay=1.0, sleep=recording_sleep)

        result = await uploader.upload("bucket", "book/a.css", b"a{}", "text/css")

        assert result.success
        assert result.attempts == 3
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhaustion_makes_exactly_three_attempts(self, recording_sleep):
        store = FakeObjectStore(fail_keys={"book/broken.png"})
        uploader = RetryingUploader(store, sleep=recording_sleep)

        result = await uploader.upload("bucket", "book/broken.png", b"png", "image/png")

        assert not result.success
        assert result.attempts == 3
        assert len(store.calls) == 3
        assert isinstance(result.error, ConnectionError)
        assert "book/broken.png" in str(result.error)
        # Strictly increasing waits between attempts
        assert recording_sleep.delays == [1.0, 2.0]
        assert all(a < b for a, b in zip(recording_sleep.delays, recording_sleep.delays[1:]))

    @pytest.mark.asyncio
    async def test_same_payload_is_resent_on_every_attempt(self, recording_sleep):
        store = FakeObjectStore(fail_keys={"book/data.json"})
        uploader = RetryingUploader(store, sleep=recording_sleep)
        body = b'{"chapter": 1}'

        await uploader.upload("bucket", "book/data.json", body, "application/json")

        assert {call for call in store.calls} == {
            ("bucket", "book/data.json", body, "application/json")
        }

    @pytest.mark.asyncio
    async def test_reports_last_error(self, recording_sleep):
        class CountingStore:
            def __init__(self):
                self.count = 0

            async def put(self, bucket, key, body, content_type):
                self.count += 1
                raise RuntimeError(f"failure {self.count}")

        uploader = RetryingUploader(CountingStore(), sleep=recording_sleep)

        result = await uploader.upload("bucket", "key", b"x", "text/plain")

        assert str(result.error) == "failure 3"

    def test_backoff_doubles(self):
        uploader = RetryingUploader(FakeObjectStore(), base_delay=0.5)
        assert [uploader.backoff_delay(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryingUploader(FakeObjectStore(), max_attempts=0)
