"""
BCE Cloud Python SDK - Canonical Requests

Pure functions that turn a request's method, path, query and headers
into the canonical string fed to the signer. Nothing here reads the
clock or touches credentials.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import quote

QueryValue = Optional[Union[str, int]]

# Headers signed whenever they are present on the request
DEFAULT_SIGNED_HEADERS = frozenset({
    "host",
    "content-length",
    "content-type",
    "content-md5",
})
SIGNED_HEADER_PREFIX = "x-bce-"


def uri_encode(value: str, safe: str = "") -> str:
    """Percent-encode everything except ``A-Za-z0-9-._~`` and ``safe``."""
    return quote(value, safe="-_.~" + safe)


@dataclass(frozen=True)
class CanonicalRequest:
    """Canonical form of a request, the input to the signature."""
    method: str
    canonical_uri: str
    canonical_query: str
    canonical_headers: str
    signed_header_names: Tuple[str, ...]

    @property
    def string(self) -> str:
        return "\n".join([
            self.method,
            self.canonical_uri,
            self.canonical_query,
            self.canonical_headers,
        ])


def canonical_uri(path: str) -> str:
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    return uri_encode(path, safe="/")


def encode_query(query: Optional[Mapping[str, QueryValue]]) -> Iterable[Tuple[str, Optional[str]]]:
    """Yield (encoded key, encoded value or None) pairs in the given order."""
    for key, value in (query or {}).items():
        encoded_value = None if value is None else uri_encode(str(value))
        yield uri_encode(str(key)), encoded_value


def _join_pair(key: str, value: Optional[str]) -> str:
    # A missing value and an empty value canonicalize differently
    return key if value is None else f"{key}={value}"


def canonical_query_string(query: Optional[Mapping[str, QueryValue]]) -> str:
    pairs = [
        (key, value)
        for key, value in encode_query(query)
        if key.lower() != "authorization"
    ]
    pairs.sort(key=lambda pair: (pair[0], pair[1] or ""))
    return "&".join(_join_pair(key, value) for key, value in pairs)


def query_string(query: Optional[Mapping[str, QueryValue]]) -> str:
    """Encode a query for the wire, preserving the caller's order."""
    return "&".join(_join_pair(key, value) for key, value in encode_query(query))


def canonical_headers(
    headers: Optional[Mapping[str, str]],
    signed_headers: Iterable[str] = (),
) -> Tuple[str, Tuple[str, ...]]:
    """
    Canonicalize the signable subset of ``headers``.

    Args:
        headers: Request headers, any case
        signed_headers: Extra header names the caller wants signed

    Returns:
        Tuple of (canonical header block, sorted signed header names)
    """
    extra = {name.strip().lower() for name in signed_headers}
    selected = {}
    for name, value in (headers or {}).items():
        name = name.strip().lower()
        value = str(value).strip()
        if not value:
            continue
        if (
            name in DEFAULT_SIGNED_HEADERS
            or name.startswith(SIGNED_HEADER_PREFIX)
            or name in extra
        ):
            selected[name] = value

    names = tuple(sorted(selected))
    lines = [f"{uri_encode(name)}:{uri_encode(selected[name])}" for name in names]
    return "\n".join(lines), names


def build_canonical_request(
    method: str,
    path: str,
    query: Optional[Mapping[str, QueryValue]] = None,
    headers: Optional[Mapping[str, str]] = None,
    signed_headers: Iterable[str] = (),
) -> CanonicalRequest:
    """
    Build the canonical request for signing.

    Args:
        method: HTTP method, any case
        path: Unencoded request path
        query: Query parameters; None values are sent as bare keys
        headers: Request headers, must include ``host``
        signed_headers: Extra header names to sign beyond the defaults

    Returns:
        CanonicalRequest

    Example:
        >>> build_canonical_request(
        ...     "GET", "/", {"prefix": "logs/"}, {"host": "mybucket.example.com"}
        ... ).string
        'GET\\n/\\nprefix=logs%2F\\nhost:mybucket.example.com'
    """
    header_block, names = canonical_headers(headers, signed_headers)
    return CanonicalRequest(
        method=method.upper(),
        canonical_uri=canonical_uri(path),
        canonical_query=canonical_query_string(query),
        canonical_headers=header_block,
        signed_header_names=names,
    )
