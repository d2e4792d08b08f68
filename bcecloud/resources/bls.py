"""
BCE Cloud Python SDK - BLS Resource

This module provides log record queries against BLS log stores.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bcecloud.auth import format_timestamp
from bcecloud.config import Endpoints
from bcecloud.http import RequestSpec
from bcecloud.models import LogRecordQuery, QueryLogRecordResult
from bcecloud.resources.base import AsyncBaseResource, BaseResource, expect_object


def _query_spec(query: LogRecordQuery) -> RequestSpec:
    return RequestSpec(
        method="GET",
        path=Endpoints.LOG_RECORDS.format(log_store_name=query.log_store_name),
        query={
            "query": query.query,
            "startDateTime": format_timestamp(query.start_datetime),
            "endDateTime": format_timestamp(query.end_datetime),
        },
    )


def _as_query(
    query: Optional[LogRecordQuery],
    log_store_name: Optional[str],
    query_string: Optional[str],
    start_datetime: Optional[datetime],
    end_datetime: Optional[datetime],
) -> LogRecordQuery:
    if query is not None:
        return query
    if not (log_store_name and query_string is not None and start_datetime and end_datetime):
        raise ValueError(
            "Provide a LogRecordQuery or log_store_name, query, "
            "start_datetime and end_datetime"
        )
    return LogRecordQuery(
        log_store_name=log_store_name,
        query=query_string,
        start_datetime=start_datetime,
        end_datetime=end_datetime,
    )


class BlsResource(BaseResource):
    """
    Resource for querying BLS log records.

    Example:
        >>> result = client.bls.query_log_record(
        ...     log_store_name="app-logs",
        ...     query_string="match level:ERROR",
        ...     start_datetime=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ...     end_datetime=datetime(2024, 1, 2, tzinfo=timezone.utc),
        ... )
        >>> if result.result_set:
        ...     print(result.result_set.records())
    """

    def query_log_record(
        self,
        query: Optional[LogRecordQuery] = None,
        *,
        log_store_name: Optional[str] = None,
        query_string: Optional[str] = None,
        start_datetime: Optional[datetime] = None,
        end_datetime: Optional[datetime] = None,
    ) -> QueryLogRecordResult:
        """
        Query log records in a log store.

        Args:
            query: Full query, or use the keyword arguments instead
            log_store_name: Log store to query
            query_string: Query statement
            start_datetime: Start of the time range
            end_datetime: End of the time range

        Returns:
            QueryLogRecordResult
        """
        spec = _query_spec(
            _as_query(query, log_store_name, query_string, start_datetime, end_datetime)
        )
        return QueryLogRecordResult.from_dict(expect_object(self._transport.json(spec)))


class AsyncBlsResource(AsyncBaseResource):
    """Async resource for querying BLS log records."""

    async def query_log_record(
        self,
        query: Optional[LogRecordQuery] = None,
        *,
        log_store_name: Optional[str] = None,
        query_string: Optional[str] = None,
        start_datetime: Optional[datetime] = None,
        end_datetime: Optional[datetime] = None,
    ) -> QueryLogRecordResult:
        spec = _query_spec(
            _as_query(query, log_store_name, query_string, start_datetime, end_datetime)
        )
        return QueryLogRecordResult.from_dict(expect_object(await self._transport.json(spec)))
