"""
BCE Cloud Python SDK - Configuration

This module contains configuration classes and defaults for the SDK.
"""

from dataclasses import dataclass
from typing import Optional

from bcecloud.auth import Credential
from bcecloud.exceptions import ConfigurationError


# Request limits
class Limits:
    """Transport limits and signing defaults."""

    # Streaming
    DEFAULT_CHUNK_SIZE = 64 * 1024  # 64KB
    MAX_CHUNK_SIZE = 8 * 1024 * 1024  # 8MB

    # Signing
    DEFAULT_EXPIRATION_SECONDS = 1800  # 30 minutes


# Endpoints
class Endpoints:
    """Service hosts."""

    BOS_DOMAIN = "bcebos.com"
    BLS_SERVICE_ID = "bls-log"

    SERVICE_HOSTS = {
        "bls-log": {
            "bj": "bls-log.bj.baidubce.com",
            "gz": "bls-log.gz.baidubce.com",
            "su": "bls-log.su.baidubce.com",
            "bd": "bls-log.bd.baidubce.com",
            "fwh": "bls-log.fwh.baidubce.com",
            "hkg": "bls-log.hkg.baidubce.com",
        },
    }

    # BLS
    LOG_RECORDS = "/v1/logstore/{log_store_name}/logrecord"


@dataclass(frozen=True)
class ClientConfig:
    """
    Configuration for the BCE Cloud client.

    Constructed once per client and shared by reference with every
    transport; it is never mutated after construction.

    Attributes:
        credentials: Access key pair used to sign requests
        region: Region identifier, e.g. "bj"
        protocol: "https" or "http"
        timeout: Request timeout in seconds
        expiration_seconds: Signature validity window in seconds
        chunk_size: Upload/download chunk size in bytes
        strict_empty_body: Reject non-empty bodies on empty materialization
        bos_endpoint: Host template overriding the BOS endpoint
        bls_endpoint: Host template overriding the BLS endpoint
        debug: Enable debug logging
    """
    credentials: Credential
    region: str = "bj"
    protocol: str = "https"
    timeout: float = 30.0
    expiration_seconds: int = Limits.DEFAULT_EXPIRATION_SECONDS
    chunk_size: int = Limits.DEFAULT_CHUNK_SIZE
    strict_empty_body: bool = False
    bos_endpoint: Optional[str] = None
    bls_endpoint: Optional[str] = None
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.credentials, Credential):
            raise ConfigurationError("credentials must be a Credential instance")
        if not self.region:
            raise ConfigurationError("region is required")
        if self.protocol not in ("http", "https"):
            raise ConfigurationError(f"Unsupported protocol: {self.protocol!r}")
        if not 0 < self.chunk_size <= Limits.MAX_CHUNK_SIZE:
            raise ConfigurationError(
                f"chunk_size must be between 1 and {Limits.MAX_CHUNK_SIZE} bytes"
            )
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
