"""
BCE Cloud Python SDK - Transport

This module signs and sends requests and turns responses into one of a
fixed set of materializations. Service resources build a RequestSpec
and pick a Materialization; everything between that and the wire lives
here.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import httpx

from bcecloud.auth import (
    DATE_HEADER,
    SECURITY_TOKEN_HEADER,
    Signer,
    SigningContext,
    format_timestamp,
)
from bcecloud.canonical import QueryValue, build_canonical_request, query_string, uri_encode
from bcecloud.config import ClientConfig
from bcecloud.endpoints import EndpointTarget
from bcecloud.exceptions import DecodeError, RemoteError, TransportError
from bcecloud.streams import AsyncByteStream, ByteSource, ByteStream, as_byte_source

logger = logging.getLogger("bcecloud.http")

REQUEST_ID_HEADER = "x-bce-request-id"
USER_AGENT = "bcecloud-python/1.0.0"

Body = Union[None, bytes, bytearray, memoryview, str, ByteSource, Any]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Materialization(str, Enum):
    """How a response body is handed back to the caller."""
    JSON = "json"
    TEXT = "text"
    BLOB = "blob"
    STREAM = "stream"
    EMPTY = "empty"


@dataclass
class RequestSpec:
    """
    A request as a resource describes it, before signing.

    Attributes:
        method: HTTP method
        path: Unencoded request path
        query: Query parameters in wire order; None values are bare keys
        headers: Request headers; a ``host`` header overrides the endpoint host
        body: None, bytes, str, a ByteSource, or a binary file-like object
        signed_headers: Extra header names to sign beyond the defaults
    """
    method: str
    path: str
    query: Dict[str, QueryValue] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Body = None
    signed_headers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    A materialized response.

    The type of ``body`` is fixed by ``materialization``:

    - JSON: the decoded value
    - TEXT: str
    - BLOB: bytes
    - STREAM: ByteStream or AsyncByteStream
    - EMPTY: None
    """
    materialization: Materialization
    status_code: int
    headers: httpx.Headers
    body: Any = None

    @property
    def request_id(self) -> Optional[str]:
        return self.headers.get(REQUEST_ID_HEADER)


class BaseTransport:
    """
    Shared request preparation and response decoding.

    Holds only read-only state (config, endpoint, signer), so a single
    transport may have any number of requests in flight.
    """

    def __init__(
        self,
        config: ClientConfig,
        endpoint: EndpointTarget,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = config
        self._endpoint = endpoint
        self._signer = Signer(config.credentials)
        self._clock = clock or _utc_now

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def endpoint(self) -> EndpointTarget:
        return self._endpoint

    def _build_url(self, path: str, query: Mapping[str, QueryValue]) -> str:
        url = f"{self._config.protocol}://{self._endpoint.host}{uri_encode(path, safe='/')}"
        encoded_query = query_string(query)
        if encoded_query:
            url = f"{url}?{encoded_query}"
        return url

    def _prepare(
        self,
        spec: RequestSpec,
        source: Optional[ByteSource],
        size: Optional[int],
    ) -> Tuple[str, str, Dict[str, str], Optional[bytes]]:
        """
        Sign ``spec`` against the current clock.

        Args:
            spec: Request to sign
            source: Streamed body, if any
            size: Size of ``source`` when known

        Returns:
            Tuple of (method, url, headers, literal content)
        """
        method = spec.method.upper()
        path = self._endpoint.full_path(spec.path)
        headers = {name.strip().lower(): str(value).strip() for name, value in spec.headers.items()}
        headers.setdefault("host", self._endpoint.host)
        headers.setdefault("user-agent", USER_AGENT)

        content: Optional[bytes] = None
        if source is not None:
            if size is not None:
                headers["content-length"] = str(size)
        elif spec.body is not None:
            body = spec.body
            content = body.encode("utf-8") if isinstance(body, str) else bytes(body)
            headers["content-length"] = str(len(content))

        credentials = self._config.credentials
        if credentials.session_token:
            headers[SECURITY_TOKEN_HEADER] = credentials.session_token

        timestamp = self._clock()
        headers[DATE_HEADER] = format_timestamp(timestamp)

        canonical = build_canonical_request(
            method, path, spec.query, headers, spec.signed_headers
        )
        context = SigningContext.for_request(
            canonical, timestamp, self._config.expiration_seconds
        )
        headers["authorization"] = self._signer.sign(context, canonical)

        return method, self._build_url(path, spec.query), headers, content

    def _remote_error(self, response: httpx.Response) -> RemoteError:
        raw_body = response.content
        try:
            payload = response.json() if raw_body else None
        except ValueError:
            payload = None
        return RemoteError(
            status_code=response.status_code,
            raw_body=raw_body,
            payload=payload,
            request_id=response.headers.get(REQUEST_ID_HEADER),
        )

    def _decode(
        self,
        response: httpx.Response,
        materialization: Materialization,
    ) -> ResponseEnvelope:
        """Decode a fully read success response."""
        raw_body = response.content

        if materialization is Materialization.JSON:
            try:
                body = response.json()
            except ValueError as e:
                raise DecodeError(
                    f"Response body is not valid JSON: {e}",
                    materialization=materialization.value,
                    raw_body=raw_body,
                ) from e
        elif materialization is Materialization.TEXT:
            encoding = response.charset_encoding or "utf-8"
            try:
                body = raw_body.decode(encoding)
            except (UnicodeDecodeError, LookupError) as e:
                raise DecodeError(
                    f"Response body is not valid {encoding} text: {e}",
                    materialization=materialization.value,
                    raw_body=raw_body,
                ) from e
        elif materialization is Materialization.BLOB:
            body = raw_body
        elif materialization is Materialization.EMPTY:
            if raw_body and self._config.strict_empty_body:
                raise DecodeError(
                    f"Expected an empty body, got {len(raw_body)} bytes",
                    materialization=materialization.value,
                    raw_body=raw_body,
                )
            body = None
        else:
            raise ValueError(f"Cannot decode a buffered body as {materialization.value}")

        return ResponseEnvelope(
            materialization=materialization,
            status_code=response.status_code,
            headers=response.headers,
            body=body,
        )


class Transport(BaseTransport):
    """
    Synchronous transport over ``httpx.Client``.

    Args:
        config: Client configuration
        endpoint: Resolved endpoint this transport talks to
        http_client: Shared httpx client; one is created (and owned) if omitted
        clock: Returns the signing time; defaults to the current UTC time

    Example:
        >>> transport = Transport(config, resolve_region_endpoint("bj"))
        >>> envelope = transport.dispatch(
        ...     RequestSpec("GET", "/", headers={"host": "my-bucket.bj.bcebos.com"}),
        ...     Materialization.JSON,
        ... )
        >>> envelope.body["name"]
        'my-bucket'
    """

    def __init__(
        self,
        config: ClientConfig,
        endpoint: EndpointTarget,
        http_client: Optional[httpx.Client] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(config, endpoint, clock)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.Client(
            timeout=httpx.Timeout(config.timeout),
        )

    def dispatch(
        self,
        spec: RequestSpec,
        materialization: Union[Materialization, str] = Materialization.JSON,
    ) -> ResponseEnvelope:
        """
        Sign and send a request, then materialize the response.

        Args:
            spec: Request to send
            materialization: How to hand back the response body, as a
                Materialization or its value such as "json"

        Returns:
            ResponseEnvelope

        Raises:
            SigningError: If the request cannot be signed
            TransportError: If the request fails on the network or the body source
            RemoteError: If the service answers with a non-2xx status
            DecodeError: If the body does not fit the materialization
            ValueError: If the materialization is not one of the known kinds
        """
        materialization = Materialization(materialization)
        source = as_byte_source(spec.body)
        try:
            size = source.size if source is not None else None
            method, url, headers, content = self._prepare(spec, source, size)
            body = content if source is None else source.iter_chunks(self._config.chunk_size)

            logger.debug(f"Dispatching {method} {spec.path}")
            request = self._http_client.build_request(method, url, headers=headers, content=body)

            try:
                response = self._http_client.send(request, stream=True)
            except httpx.HTTPError as e:
                raise TransportError(f"Request failed: {e}") from e
        finally:
            if source is not None:
                source.close()

        logger.debug(f"Response status: {response.status_code}")

        if materialization is Materialization.STREAM and response.is_success:
            return ResponseEnvelope(
                materialization=materialization,
                status_code=response.status_code,
                headers=response.headers,
                body=ByteStream(response, self._config.chunk_size),
            )

        try:
            response.read()
        except httpx.HTTPError as e:
            raise TransportError(f"Failed reading response: {e}") from e
        finally:
            response.close()

        if not response.is_success:
            raise self._remote_error(response)
        return self._decode(response, materialization)

    def json(self, spec: RequestSpec) -> Any:
        return self.dispatch(spec, Materialization.JSON).body

    def text(self, spec: RequestSpec) -> str:
        return self.dispatch(spec, Materialization.TEXT).body

    def blob(self, spec: RequestSpec) -> bytes:
        return self.dispatch(spec, Materialization.BLOB).body

    def stream(self, spec: RequestSpec) -> ByteStream:
        return self.dispatch(spec, Materialization.STREAM).body

    def no_content(self, spec: RequestSpec) -> ResponseEnvelope:
        return self.dispatch(spec, Materialization.EMPTY)

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Transport(host='{self._endpoint.host}')"


class AsyncTransport(BaseTransport):
    """Asynchronous transport over ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: ClientConfig,
        endpoint: EndpointTarget,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(config, endpoint, clock)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
        )

    async def dispatch(
        self,
        spec: RequestSpec,
        materialization: Union[Materialization, str] = Materialization.JSON,
    ) -> ResponseEnvelope:
        """Sign and send a request, then materialize the response."""
        materialization = Materialization(materialization)
        source = as_byte_source(spec.body)
        try:
            size = None
            if source is not None:
                size = await asyncio.to_thread(lambda: source.size)
            method, url, headers, content = self._prepare(spec, source, size)
            body = content if source is None else source.aiter_chunks(self._config.chunk_size)

            logger.debug(f"Dispatching async {method} {spec.path}")
            request = self._http_client.build_request(method, url, headers=headers, content=body)

            try:
                response = await self._http_client.send(request, stream=True)
            except httpx.HTTPError as e:
                raise TransportError(f"Request failed: {e}") from e
        finally:
            if source is not None:
                source.close()

        logger.debug(f"Response status: {response.status_code}")

        if materialization is Materialization.STREAM and response.is_success:
            return ResponseEnvelope(
                materialization=materialization,
                status_code=response.status_code,
                headers=response.headers,
                body=AsyncByteStream(response, self._config.chunk_size),
            )

        try:
            await response.aread()
        except httpx.HTTPError as e:
            raise TransportError(f"Failed reading response: {e}") from e
        finally:
            await response.aclose()

        if not response.is_success:
            raise self._remote_error(response)
        return self._decode(response, materialization)

    async def json(self, spec: RequestSpec) -> Any:
        return (await self.dispatch(spec, Materialization.JSON)).body

    async def text(self, spec: RequestSpec) -> str:
        return (await self.dispatch(spec, Materialization.TEXT)).body

    async def blob(self, spec: RequestSpec) -> bytes:
        return (await self.dispatch(spec, Materialization.BLOB)).body

    async def stream(self, spec: RequestSpec) -> AsyncByteStream:
        return (await self.dispatch(spec, Materialization.STREAM)).body

    async def no_content(self, spec: RequestSpec) -> ResponseEnvelope:
        return await self.dispatch(spec, Materialization.EMPTY)

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AsyncTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncTransport(host='{self._endpoint.host}')"
