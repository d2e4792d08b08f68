"""
BCE Cloud Python SDK - Main Client

This module provides the BceClient and AsyncBceClient classes that
serve as the entry point for all service interactions.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from bcecloud.auth import Credential
from bcecloud.config import ClientConfig, Endpoints, Limits
from bcecloud.endpoints import resolve_endpoint
from bcecloud.http import AsyncTransport, Clock, Transport
from bcecloud.resources.bls import AsyncBlsResource, BlsResource
from bcecloud.resources.bos import AsyncBosResource, BosResource

logger = logging.getLogger("bcecloud")


def _build_config(
    config: Optional[ClientConfig],
    credentials: Optional[Credential],
    region: str,
    timeout: float,
    expiration_seconds: int,
    strict_empty_body: bool,
    bos_endpoint: Optional[str],
    bls_endpoint: Optional[str],
    debug: bool,
) -> ClientConfig:
    if config is not None:
        return config
    return ClientConfig(
        credentials=credentials,  # type: ignore[arg-type]
        region=region,
        timeout=timeout,
        expiration_seconds=expiration_seconds,
        strict_empty_body=strict_empty_body,
        bos_endpoint=bos_endpoint,
        bls_endpoint=bls_endpoint,
        debug=debug,
    )


def _enable_debug_logging() -> None:
    logging.basicConfig(level=logging.DEBUG)
    logger.setLevel(logging.DEBUG)


class BceClient:
    """
    Main client for BCE object storage (BOS) and log query (BLS).

    Endpoints are resolved when the client is built, so an unknown region
    fails here with ConfigurationError rather than on the first request.

    Args:
        credentials: Access key pair used to sign every request.
        region: Region identifier. Defaults to "bj".
        timeout: Request timeout in seconds. Defaults to 30.
        expiration_seconds: Signature validity window. Defaults to 1800.
        strict_empty_body: Raise DecodeError when a call expecting no body gets one.
        bos_endpoint: Host template overriding the BOS endpoint.
        bls_endpoint: Host template overriding the BLS endpoint.
        debug: Enable debug logging. Defaults to False.
        config: A prebuilt ClientConfig; replaces all the options above.
        http_transport: Custom httpx transport, mainly for tests.
        clock: Signing clock, mainly for tests.

    Example:
        >>> client = BceClient(credentials=Credential("AK", "SK"), region="bj")
        >>> result = client.bos.list_objects("my-bucket", prefix="logs/")
        >>> for obj in result:
        ...     print(obj.key)

    Attributes:
        bos: Resource for BOS object storage
        bls: Resource for BLS log queries
    """

    def __init__(
        self,
        credentials: Optional[Credential] = None,
        region: str = "bj",
        *,
        timeout: float = 30.0,
        expiration_seconds: int = Limits.DEFAULT_EXPIRATION_SECONDS,
        strict_empty_body: bool = False,
        bos_endpoint: Optional[str] = None,
        bls_endpoint: Optional[str] = None,
        debug: bool = False,
        config: Optional[ClientConfig] = None,
        http_transport: Optional[httpx.BaseTransport] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = _build_config(
            config, credentials, region, timeout, expiration_seconds,
            strict_empty_body, bos_endpoint, bls_endpoint, debug,
        )

        # Setup logging
        if self._config.debug:
            _enable_debug_logging()

        bos_target = resolve_endpoint(
            self._config.region, host_template=self._config.bos_endpoint
        )
        bls_target = resolve_endpoint(
            self._config.region,
            service_id=Endpoints.BLS_SERVICE_ID,
            host_template=self._config.bls_endpoint,
        )

        self._http_client = httpx.Client(
            timeout=httpx.Timeout(self._config.timeout),
            transport=http_transport,
        )

        self.bos = BosResource(Transport(self._config, bos_target, self._http_client, clock))
        self.bls = BlsResource(Transport(self._config, bls_target, self._http_client, clock))

        logger.debug(
            f"BceClient initialized for region {self._config.region} "
            f"(bos={bos_target.host}, bls={bls_target.host})"
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._http_client.close()
        logger.debug("BceClient closed")

    def __enter__(self) -> "BceClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"BceClient(region='{self._config.region}')"


class AsyncBceClient:
    """
    Async client for BCE object storage (BOS) and log query (BLS).

    Takes the same arguments as BceClient; ``http_transport`` must be an
    ``httpx.AsyncBaseTransport``.

    Example:
        >>> async with AsyncBceClient(credentials=Credential("AK", "SK")) as client:
        ...     text = await client.bos.get_object("my-bucket", "hello.txt")
    """

    def __init__(
        self,
        credentials: Optional[Credential] = None,
        region: str = "bj",
        *,
        timeout: float = 30.0,
        expiration_seconds: int = Limits.DEFAULT_EXPIRATION_SECONDS,
        strict_empty_body: bool = False,
        bos_endpoint: Optional[str] = None,
        bls_endpoint: Optional[str] = None,
        debug: bool = False,
        config: Optional[ClientConfig] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = _build_config(
            config, credentials, region, timeout, expiration_seconds,
            strict_empty_body, bos_endpoint, bls_endpoint, debug,
        )

        if self._config.debug:
            _enable_debug_logging()

        bos_target = resolve_endpoint(
            self._config.region, host_template=self._config.bos_endpoint
        )
        bls_target = resolve_endpoint(
            self._config.region,
            service_id=Endpoints.BLS_SERVICE_ID,
            host_template=self._config.bls_endpoint,
        )

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout),
            transport=http_transport,
        )

        self.bos = AsyncBosResource(
            AsyncTransport(self._config, bos_target, self._http_client, clock)
        )
        self.bls = AsyncBlsResource(
            AsyncTransport(self._config, bls_target, self._http_client, clock)
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def close(self) -> None:
        """Close the async HTTP client."""
        await self._http_client.aclose()
        logger.debug("AsyncBceClient closed")

    async def __aenter__(self) -> "AsyncBceClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncBceClient(region='{self._config.region}')"
