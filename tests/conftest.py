"""Shared pytest fixtures for testing."""

from datetime import datetime, timezone
from typing import Iterator, Optional

import httpx
import pytest
import respx

from bcecloud import BceClient, ClientConfig, Credential
from bcecloud.streams import ByteSource


FIXED_TIME = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_TIME


# =============================================================================
# Credential / Config Fixtures
# =============================================================================


@pytest.fixture
def credential() -> Credential:
    """Credential used by the golden signing fixtures."""
    return Credential(access_key_id="AK", secret_access_key="SK")


@pytest.fixture
def config(credential: Credential) -> ClientConfig:
    """Default client configuration."""
    return ClientConfig(credentials=credential, region="bj")


@pytest.fixture
def small_chunk_config(credential: Credential) -> ClientConfig:
    """Configuration with tiny chunks, for streaming tests."""
    return ClientConfig(credentials=credential, region="bj", chunk_size=4)


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_api() -> Iterator[respx.MockRouter]:
    """Mock all httpx traffic."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def client(credential: Credential, mock_api: respx.MockRouter) -> Iterator[BceClient]:
    """Client signing with a fixed clock against mocked endpoints."""
    with BceClient(credentials=credential, region="bj", clock=fixed_clock) as c:
        yield c


# =============================================================================
# Upload Source Doubles
# =============================================================================


class GeneratedSource(ByteSource):
    """
    Source producing ``total`` zero bytes on demand.

    Records how many bytes were handed out and the largest single read,
    so tests can check nothing is read ahead of the consumer.
    """

    def __init__(
        self,
        total: int,
        fail_after: Optional[int] = None,
        error: Exception = OSError("disk went away"),
    ) -> None:
        self.total = total
        self.produced = 0
        self.largest_read = 0
        self.reads = 0
        self.closed = False
        self._fail_after = fail_after
        self._error = error

    @property
    def size(self) -> Optional[int]:
        return self.total

    def read(self, size: int) -> bytes:
        if self._fail_after is not None and self.reads >= self._fail_after:
            raise self._error
        self.reads += 1
        n = min(size, self.total - self.produced)
        self.produced += n
        self.largest_read = max(self.largest_read, n)
        return bytes(n)

    def close(self) -> None:
        self.closed = True


class ConsumingTransport(httpx.BaseTransport):
    """
    Transport that drains the request body chunk by chunk, measuring how
    far the source ever got ahead of the wire.
    """

    def __init__(self, source: GeneratedSource, status_code: int = 200) -> None:
        self.source = source
        self.status_code = status_code
        self.consumed = 0
        self.max_in_flight = 0
        self.request: Optional[httpx.Request] = None

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.request = request
        for chunk in request.stream:
            self.max_in_flight = max(self.max_in_flight, self.source.produced - self.consumed)
            self.consumed += len(chunk)
        return httpx.Response(self.status_code, headers={"etag": '"d41d8cd9"'})


class AsyncConsumingTransport(httpx.AsyncBaseTransport):
    """Async counterpart of ConsumingTransport."""

    def __init__(self, source: GeneratedSource, status_code: int = 200) -> None:
        self.source = source
        self.status_code = status_code
        self.consumed = 0
        self.max_in_flight = 0
        self.request: Optional[httpx.Request] = None

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.request = request
        async for chunk in request.stream:
            self.max_in_flight = max(self.max_in_flight, self.source.produced - self.consumed)
            self.consumed += len(chunk)
        return httpx.Response(self.status_code, headers={"etag": '"d41d8cd9"'})


class TrackingStream(httpx.SyncByteStream):
    """Response body stream that records how much was pulled and whether it was closed."""

    def __init__(self, chunks) -> None:
        self.chunks = list(chunks)
        self.yielded = 0
        self.closed = False

    def __iter__(self):
        for chunk in self.chunks:
            self.yielded += 1
            yield chunk

    def close(self) -> None:
        self.closed = True


class AsyncTrackingStream(httpx.AsyncByteStream):
    """Async counterpart of TrackingStream."""

    def __init__(self, chunks) -> None:
        self.chunks = list(chunks)
        self.yielded = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            self.yielded += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True
