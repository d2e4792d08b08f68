"""
BCE Cloud Python SDK - BOS Resource

This module provides methods for working with objects in BOS buckets.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Union

from bcecloud.http import Body, RequestSpec
from bcecloud.models import ListObjectsResult
from bcecloud.resources.base import (
    AsyncBaseResource,
    BaseResource,
    build_params,
    expect_object,
    merge_headers,
)
from bcecloud.streams import AsyncByteStream, ByteStream, FileSource

PathLike = Union[str, "os.PathLike[str]"]


def _object_path(key: str) -> str:
    return f"/{key}"


def _etag(headers) -> Optional[str]:
    value = headers.get("etag")
    return value.strip('"') if value else None


class _BosRequests:
    """RequestSpec builders shared by the sync and async resources."""

    _transport: object

    def _bucket_host(self, bucket_name: str) -> str:
        return self._transport.endpoint.sub_resource_host(bucket_name)  # type: ignore[attr-defined]

    def _list_objects_spec(
        self,
        bucket_name: str,
        delimiter: Optional[str],
        marker: Optional[str],
        max_keys: Optional[int],
        prefix: Optional[str],
    ) -> RequestSpec:
        return RequestSpec(
            method="GET",
            path="/",
            query=build_params(
                delimiter=delimiter or None,
                marker=marker or None,
                maxKeys=max_keys or None,
                prefix=prefix or None,
            ),
            headers={
                "content-type": "application/json",
                "host": self._bucket_host(bucket_name),
            },
        )

    def _object_spec(self, method: str, bucket_name: str, key: str) -> RequestSpec:
        return RequestSpec(
            method=method,
            path=_object_path(key),
            headers={"host": self._bucket_host(bucket_name)},
        )

    def _put_object_spec(
        self,
        bucket_name: str,
        key: str,
        body: Body,
        headers: Optional[Dict[str, str]],
    ) -> RequestSpec:
        return RequestSpec(
            method="PUT",
            path=_object_path(key),
            headers=merge_headers(headers, host=self._bucket_host(bucket_name)),
            body=body,
        )


class BosResource(BaseResource, _BosRequests):
    """
    Resource for BOS object storage.

    Each call targets ``{bucket}.{region}.bcebos.com`` through the
    ``host`` header while connecting to the region endpoint.

    Example:
        >>> client = BceClient(credentials=Credential("AK", "SK"), region="bj")
        >>> client.bos.put_object("my-bucket", "hello.txt", "Hello")
        >>> client.bos.get_object("my-bucket", "hello.txt")
        'Hello'
    """

    def list_objects(
        self,
        bucket_name: str,
        *,
        delimiter: Optional[str] = None,
        marker: Optional[str] = None,
        max_keys: Optional[int] = None,
        prefix: Optional[str] = None,
    ) -> ListObjectsResult:
        """
        List objects in a bucket.

        Args:
            bucket_name: Bucket to list
            delimiter: Roll keys sharing a prefix up to this character
            marker: Start listing after this key
            max_keys: Maximum number of keys to return
            prefix: Only list keys starting with this prefix

        Returns:
            ListObjectsResult

        Example:
            >>> result = client.bos.list_objects("my-bucket", prefix="logs/")
            >>> for obj in result:
            ...     print(obj.key, obj.size)
        """
        spec = self._list_objects_spec(bucket_name, delimiter, marker, max_keys, prefix)
        return ListObjectsResult.from_dict(expect_object(self._transport.json(spec), "name"))

    def get_object(self, bucket_name: str, key: str) -> str:
        """Get an object's content as text."""
        return self._transport.text(self._object_spec("GET", bucket_name, key))

    def get_object_as_bytes(self, bucket_name: str, key: str) -> bytes:
        """Get an object's content as bytes."""
        return self._transport.blob(self._object_spec("GET", bucket_name, key))

    def get_object_as_stream(self, bucket_name: str, key: str) -> ByteStream:
        """
        Get an object's content as a stream of byte chunks.

        The stream holds a connection open until it is exhausted or
        closed; use it as a context manager.
        """
        return self._transport.stream(self._object_spec("GET", bucket_name, key))

    def put_object(
        self,
        bucket_name: str,
        key: str,
        body: Body,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[str]:
        """
        Upload an object.

        Args:
            bucket_name: Target bucket
            key: Object key
            body: str, bytes, a ByteSource, or a binary file-like object;
                sources and file-like objects are streamed
            headers: Extra headers, e.g. content-type or x-bce-meta-*

        Returns:
            The object's ETag, if the service returned one
        """
        envelope = self._transport.no_content(
            self._put_object_spec(bucket_name, key, body, headers)
        )
        return _etag(envelope.headers)

    def put_object_from_file(
        self,
        bucket_name: str,
        key: str,
        file: PathLike,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[str]:
        """Upload a file from disk without loading it into memory."""
        return self.put_object(bucket_name, key, FileSource(file), headers=headers)

    def delete_object(self, bucket_name: str, key: str) -> None:
        """Delete an object."""
        self._transport.no_content(self._object_spec("DELETE", bucket_name, key))


class AsyncBosResource(AsyncBaseResource, _BosRequests):
    """Async resource for BOS object storage."""

    async def list_objects(
        self,
        bucket_name: str,
        *,
        delimiter: Optional[str] = None,
        marker: Optional[str] = None,
        max_keys: Optional[int] = None,
        prefix: Optional[str] = None,
    ) -> ListObjectsResult:
        spec = self._list_objects_spec(bucket_name, delimiter, marker, max_keys, prefix)
        return ListObjectsResult.from_dict(expect_object(await self._transport.json(spec), "name"))

    async def get_object(self, bucket_name: str, key: str) -> str:
        return await self._transport.text(self._object_spec("GET", bucket_name, key))

    async def get_object_as_bytes(self, bucket_name: str, key: str) -> bytes:
        return await self._transport.blob(self._object_spec("GET", bucket_name, key))

    async def get_object_as_stream(self, bucket_name: str, key: str) -> AsyncByteStream:
        return await self._transport.stream(self._object_spec("GET", bucket_name, key))

    async def put_object(
        self,
        bucket_name: str,
        key: str,
        body: Body,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[str]:
        envelope = await self._transport.no_content(
            self._put_object_spec(bucket_name, key, body, headers)
        )
        return _etag(envelope.headers)

    async def put_object_from_file(
        self,
        bucket_name: str,
        key: str,
        file: PathLike,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[str]:
        return await self.put_object(bucket_name, key, FileSource(file), headers=headers)

    async def delete_object(self, bucket_name: str, key: str) -> None:
        await self._transport.no_content(self._object_spec("DELETE", bucket_name, key))
