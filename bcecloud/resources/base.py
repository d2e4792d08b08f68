"""
BCE Cloud Python SDK - Base Resource

This module contains the base classes for all service resources.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from bcecloud.canonical import QueryValue
from bcecloud.exceptions import DecodeError
from bcecloud.http import AsyncTransport, Materialization, Transport


def build_params(**kwargs: Any) -> Dict[str, QueryValue]:
    """Build query parameters, dropping options that were not given."""
    return {k: v for k, v in kwargs.items() if v is not None}


class BaseResource:
    """
    Base class for all synchronous resources.

    A resource adds no state of its own; it turns method calls into
    RequestSpecs for the transport it was given.
    """

    def __init__(self, transport: Transport) -> None:
        """
        Initialize the resource.

        Args:
            transport: Transport bound to this service's endpoint
        """
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport


class AsyncBaseResource:
    """Base class for all asynchronous resources."""

    def __init__(self, transport: AsyncTransport) -> None:
        self._transport = transport

    @property
    def transport(self) -> AsyncTransport:
        return self._transport


def expect_object(body: Any, *required: str) -> Dict[str, Any]:
    """
    Check that a decoded JSON body is an object carrying ``required`` keys.

    Raises:
        DecodeError: If the body has another shape
    """
    if not isinstance(body, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(body).__name__}",
            materialization=Materialization.JSON.value,
        )
    missing = [key for key in required if key not in body]
    if missing:
        raise DecodeError(
            f"Response is missing required fields: {', '.join(missing)}",
            materialization=Materialization.JSON.value,
        )
    return body


def merge_headers(
    headers: Optional[Dict[str, str]],
    **overrides: str,
) -> Dict[str, str]:
    """Merge caller headers with resource-controlled ones; overrides win."""
    merged = {name.lower(): value for name, value in (headers or {}).items()}
    merged.update({name.replace("_", "-"): value for name, value in overrides.items()})
    return merged
