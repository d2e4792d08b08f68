"""
BCE Cloud Python SDK

A Python SDK for Baidu AI Cloud object storage (BOS) and log query (BLS),
built on a shared request-signing and dispatch layer.

Example:
    >>> from bcecloud import BceClient, Credential
    >>> client = BceClient(credentials=Credential("your-ak", "your-sk"), region="bj")
    >>> client.bos.put_object("my-bucket", "hello.txt", "Hello, BOS")
    >>> client.bos.get_object("my-bucket", "hello.txt")
    'Hello, BOS'
"""

__version__ = "1.0.0"
__author__ = "BCE Cloud SDK Team"
__license__ = "MIT"

from bcecloud.auth import Credential, Signer, SigningContext, format_timestamp
from bcecloud.canonical import CanonicalRequest, build_canonical_request
from bcecloud.client import AsyncBceClient, BceClient
from bcecloud.config import ClientConfig
from bcecloud.endpoints import EndpointTarget, resolve_endpoint
from bcecloud.exceptions import (
    BceError,
    ConfigurationError,
    DecodeError,
    RemoteError,
    SigningError,
    TransportError,
)
from bcecloud.http import (
    AsyncTransport,
    Materialization,
    RequestSpec,
    ResponseEnvelope,
    Transport,
)
from bcecloud.models import (
    CommonPrefix,
    ListObjectsResult,
    LogRecordQuery,
    LogRecordResultSet,
    ObjectOwner,
    ObjectSummary,
    QueryLogRecordResult,
)
from bcecloud.streams import AsyncByteStream, ByteSource, ByteStream, FileSource, StreamSource

__all__ = [
    # Main client
    "BceClient",
    "AsyncBceClient",
    "ClientConfig",

    # Signing
    "Credential",
    "Signer",
    "SigningContext",
    "CanonicalRequest",
    "build_canonical_request",
    "format_timestamp",

    # Endpoints
    "EndpointTarget",
    "resolve_endpoint",

    # Transport
    "Transport",
    "AsyncTransport",
    "RequestSpec",
    "ResponseEnvelope",
    "Materialization",

    # Streams
    "ByteSource",
    "FileSource",
    "StreamSource",
    "ByteStream",
    "AsyncByteStream",

    # Models
    "ListObjectsResult",
    "ObjectSummary",
    "ObjectOwner",
    "CommonPrefix",
    "LogRecordQuery",
    "LogRecordResultSet",
    "QueryLogRecordResult",

    # Exceptions
    "BceError",
    "ConfigurationError",
    "SigningError",
    "TransportError",
    "RemoteError",
    "DecodeError",
]
