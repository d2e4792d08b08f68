"""
BCE Cloud Python SDK - Byte Streams

Upload sources and download streams. Neither side ever holds more than
one chunk of the payload in memory.
"""

from __future__ import annotations

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import IO, AsyncIterator, Iterator, Optional, Union

import httpx

from bcecloud.exceptions import BceError, TransportError

logger = logging.getLogger("bcecloud.streams")


# =============================================================================
# Upload sources
# =============================================================================


class ByteSource(ABC):
    """
    A readable, forward-only source of request body bytes.

    Subclasses implement ``read``; the transport pulls one chunk at a
    time through ``iter_chunks`` / ``aiter_chunks`` and closes the
    source when the body is done or the send fails.
    """

    @property
    def size(self) -> Optional[int]:
        """Total number of bytes, or None when unknown."""
        return None

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of data."""

    def close(self) -> None:
        pass

    def _read_chunk(self, chunk_size: int) -> bytes:
        try:
            return self.read(chunk_size)
        except BceError:
            raise
        except Exception as e:
            raise TransportError(f"Failed to read upload source: {e}") from e

    def iter_chunks(self, chunk_size: int) -> Iterator[bytes]:
        try:
            while True:
                chunk = self._read_chunk(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()

    async def aiter_chunks(self, chunk_size: int) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await asyncio.to_thread(self._read_chunk, chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()


class FileSource(ByteSource):
    """
    Upload source backed by a file on disk.

    The file is opened on first read and closed once the body has been
    sent.

    Example:
        >>> client.bos.put_object("my-bucket", "backup.tar", FileSource("/tmp/backup.tar"))
    """

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        self._path = os.fspath(path)
        self._file: Optional[IO[bytes]] = None

    @property
    def path(self) -> str:
        return self._path

    def _open(self) -> IO[bytes]:
        if self._file is None:
            try:
                self._file = open(self._path, "rb")
            except OSError as e:
                raise TransportError(f"Cannot open upload source {self._path}: {e}") from e
        return self._file

    @property
    def size(self) -> Optional[int]:
        try:
            return os.stat(self._path).st_size
        except OSError as e:
            raise TransportError(f"Cannot stat upload source {self._path}: {e}") from e

    def read(self, size: int) -> bytes:
        return self._open().read(size)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class StreamSource(ByteSource):
    """
    Upload source wrapping a caller-owned binary file-like object.

    The wrapped object is not closed; its owner is responsible for it.
    """

    def __init__(self, stream: IO[bytes], size: Optional[int] = None) -> None:
        self._stream = stream
        self._size = size

    @property
    def size(self) -> Optional[int]:
        return self._size

    def read(self, size: int) -> bytes:
        data = self._stream.read(size)
        if isinstance(data, str):
            raise TransportError("Upload stream must be opened in binary mode")
        return data


def as_byte_source(body: object) -> Optional[ByteSource]:
    """Return ``body`` as a ByteSource, or None for literal bodies."""
    if isinstance(body, ByteSource):
        return body
    if isinstance(body, (bytes, bytearray, memoryview, str)) or body is None:
        return None
    if hasattr(body, "read"):
        return StreamSource(body)  # type: ignore[arg-type]
    raise TypeError(f"Unsupported request body type: {type(body).__name__}")


# =============================================================================
# Download streams
# =============================================================================


class ByteStream:
    """
    Lazy, single-pass iterator over a response body.

    The connection is released when the body is exhausted, when reading
    fails, on ``close()``, or on leaving a ``with`` block, whichever
    comes first. Once closed the stream yields nothing more.

    Example:
        >>> with client.bos.get_object_as_stream("my-bucket", "big.log") as stream:
        ...     for chunk in stream:
        ...         sink.write(chunk)
    """

    def __init__(self, response: httpx.Response, chunk_size: int) -> None:
        self._response = response
        self._chunks = response.iter_bytes(chunk_size)
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> "ByteStream":
        return self

    def __next__(self) -> bytes:
        if self._closed:
            raise StopIteration
        try:
            return next(self._chunks)
        except StopIteration:
            self.close()
            raise
        except httpx.HTTPError as e:
            self.close()
            raise TransportError(f"Failed reading response stream: {e}") from e

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._response.close()
            logger.debug("Response stream closed")

    def __enter__(self) -> "ByteStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncByteStream:
    """Async counterpart of ByteStream."""

    def __init__(self, response: httpx.Response, chunk_size: int) -> None:
        self._response = response
        self._chunks = response.aiter_bytes(chunk_size)
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "AsyncByteStream":
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except httpx.HTTPError as e:
            await self.aclose()
            raise TransportError(f"Failed reading response stream: {e}") from e

    async def aclose(self) -> None:
        if not self._closed:
            self._closed = True
            await self._response.aclose()
            logger.debug("Response stream closed")

    async def __aenter__(self) -> "AsyncByteStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
