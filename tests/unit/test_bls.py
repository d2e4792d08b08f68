"""
Unit Tests for the BLS Resource

Tests for log record queries, including the known-good authorization
header for a fixed query.
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from bcecloud import AsyncBceClient, LogRecordQuery, QueryLogRecordResult
from bcecloud.exceptions import DecodeError, RemoteError

from conftest import fixed_clock


BLS_HOST = "bls-log.bj.baidubce.com"
LOG_RECORD_PATH = "/v1/logstore/my-store/logrecord"
GOLDEN_AUTHORIZATION = (
    "bce-auth-v1/AK/2024-01-01T00:00:00Z/1800/host;x-bce-date/"
    "e3d5d9281609ce78dfa861adbcb1b3ddf76bf923f2735ef5ec8848d9ebc743f2"
)

START = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
END = datetime(2024, 1, 1, 1, 0, 0, tzinfo=timezone.utc)

RESULT_RESPONSE = {
    "resultSet": {
        "columns": ["@timestamp", "level", "message"],
        "rows": [
            [1704067200000, "ERROR", "disk full"],
            [1704067260000, "ERROR", "retrying"],
        ],
        "isTruncated": False,
    }
}


@pytest.fixture
def log_query() -> LogRecordQuery:
    return LogRecordQuery(
        log_store_name="my-store",
        query="level:ERROR",
        start_datetime=START,
        end_datetime=END,
    )


class TestQueryLogRecord:
    """Tests for query_log_record."""

    def test_golden_authorization(self, client, mock_api, log_query):
        """Test the signed request against the known-good header."""
        route = mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(200, json=RESULT_RESPONSE)
        )

        client.bls.query_log_record(log_query)

        request = route.calls.last.request
        assert request.headers["authorization"] == GOLDEN_AUTHORIZATION
        assert request.headers["x-bce-date"] == "2024-01-01T00:00:00Z"
        assert request.headers["host"] == BLS_HOST
        assert dict(request.url.params) == {
            "query": "level:ERROR",
            "startDateTime": "2024-01-01T00:00:00Z",
            "endDateTime": "2024-01-01T01:00:00Z",
        }

    def test_result_set_parsed(self, client, mock_api, log_query):
        """Test that the result set becomes typed rows."""
        mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(200, json=RESULT_RESPONSE)
        )

        result = client.bls.query_log_record(log_query)

        assert isinstance(result, QueryLogRecordResult)
        assert result.result_set.columns == ["@timestamp", "level", "message"]
        assert len(result.result_set.rows) == 2
        assert result.result_set.records()[0] == {
            "@timestamp": 1704067200000,
            "level": "ERROR",
            "message": "disk full",
        }

    def test_empty_result(self, client, mock_api, log_query):
        """Test that a response with no result set parses to None."""
        mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(200, json={})
        )

        assert client.bls.query_log_record(log_query).result_set is None

    def test_non_object_body_is_decode_error(self, client, mock_api, log_query):
        """Test that a JSON array response fails as DecodeError."""
        mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(200, json=[["ERROR", "disk full"]])
        )

        with pytest.raises(DecodeError):
            client.bls.query_log_record(log_query)

    def test_keyword_arguments(self, client, mock_api):
        """Test that keyword arguments sign the same as a query object."""
        route = mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(200, json=RESULT_RESPONSE)
        )

        client.bls.query_log_record(
            log_store_name="my-store",
            query_string="level:ERROR",
            start_datetime=START,
            end_datetime=END,
        )
        assert route.calls.last.request.headers["authorization"] == GOLDEN_AUTHORIZATION

    def test_other_timezone_converted(self, client, mock_api):
        """Test that range bounds are sent in UTC."""
        route = mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(200, json={})
        )
        beijing = timezone(timedelta(hours=8))

        client.bls.query_log_record(
            log_store_name="my-store",
            query_string="level:ERROR",
            start_datetime=datetime(2024, 1, 1, 8, 0, 0, tzinfo=beijing),
            end_datetime=datetime(2024, 1, 1, 9, 0, 0, tzinfo=beijing),
        )
        assert route.calls.last.request.headers["authorization"] == GOLDEN_AUTHORIZATION

    def test_incomplete_arguments(self, client):
        """Test that a partial query is rejected before dispatch."""
        with pytest.raises(ValueError):
            client.bls.query_log_record(log_store_name="my-store")

    def test_unknown_log_store(self, client, mock_api, log_query):
        """Test that service errors carry the request id."""
        mock_api.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
            return_value=httpx.Response(
                404,
                json={"code": "LogStoreNotFound"},
                headers={"x-bce-request-id": "req-42"},
            )
        )

        with pytest.raises(RemoteError) as exc_info:
            client.bls.query_log_record(log_query)
        assert exc_info.value.request_id == "req-42"
        assert "req-42" in str(exc_info.value)


class TestAsyncQueryLogRecord:
    """Tests for the async BLS resource."""

    @pytest.mark.asyncio
    async def test_async_query(self, credential, log_query):
        """Test that the async client signs identically."""
        async with respx.mock(assert_all_called=False) as router:
            route = router.get(host=BLS_HOST, path=LOG_RECORD_PATH).mock(
                return_value=httpx.Response(200, json=RESULT_RESPONSE)
            )

            async with AsyncBceClient(credentials=credential, clock=fixed_clock) as client:
                result = await client.bls.query_log_record(log_query)

            assert len(result.result_set.rows) == 2
            assert route.calls.last.request.headers["authorization"] == GOLDEN_AUTHORIZATION
