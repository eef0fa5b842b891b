"""
Unit tests for the feed client and payload decoder
"""

import httpx
import pytest
from unittest.mock import Mock, AsyncMock, patch
from core.exceptions import TransportError, DecodeError
from ingestion.extractors.feed_client import FeedClient
from ingestion.extractors.decoder import decode_records
from schemas.raw import RawTrip, RawCovid, RawCCVI


def _response(status_code=200, content=b"[]"):
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.text = content.decode("utf-8")
    return response


class TestFeedClient:
    """Test feed client functionality"""

    @pytest.mark.asyncio
    async def test_fetch_returns_body(self):
        client = FeedClient()
        body = b'[{"row_id": "60602-2021-10"}]'

        with patch("httpx.AsyncClient") as mock_client:
            mock_get = AsyncMock(return_value=_response(200, body))
            mock_client.return_value.__aenter__.return_value.get = mock_get

            result = await client.fetch("https://data.example.org/resource/covid.json", 500)

            assert result == body
            mock_get.assert_awaited_once_with(
                "https://data.example.org/resource/covid.json",
                params={"$limit": 500}
            )

    @pytest.mark.asyncio
    async def test_fetch_disables_compression_and_applies_limits(self):
        client = FeedClient(
            max_idle_connections=3,
            idle_timeout=10,
            connect_timeout=5,
            response_timeout=20
        )

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(return_value=_response())

            await client.fetch("https://data.example.org/resource/ccvi.json", 200)

            kwargs = mock_client.call_args.kwargs
            assert kwargs["headers"]["Accept-Encoding"] == "identity"
            assert kwargs["limits"].max_keepalive_connections == 3
            assert kwargs["limits"].keepalive_expiry == 10
            assert kwargs["timeout"].connect == 5
            assert kwargs["timeout"].read == 20

    @pytest.mark.asyncio
    async def test_non_success_status_raises_transport_error(self):
        client = FeedClient()

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=_response(503, b"Service Unavailable")
            )

            with pytest.raises(TransportError) as exc_info:
                await client.fetch("https://data.example.org/resource/trips.json", 500)

            assert exc_info.value.context["status_code"] == 503
            assert exc_info.value.context["feed_url"] == "https://data.example.org/resource/trips.json"

    @pytest.mark.asyncio
    async def test_connection_failure_raises_transport_error(self):
        client = FeedClient()

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ConnectError("connection refused")
            )

            with pytest.raises(TransportError) as exc_info:
                await client.fetch("https://data.example.org/resource/trips.json", 500)

            assert isinstance(exc_info.value.original_exception, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_fetch_is_not_retried(self):
        client = FeedClient()

        with patch("httpx.AsyncClient") as mock_client:
            mock_get = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))
            mock_client.return_value.__aenter__.return_value.get = mock_get

            with pytest.raises(TransportError):
                await client.fetch("https://data.example.org/resource/trips.json", 500)

            assert mock_get.await_count == 1

    def test_explicit_zero_settings_are_kept(self):
        client = FeedClient(max_idle_connections=0, idle_timeout=0.0)

        assert client.max_idle_connections == 0
        assert client.idle_timeout == 0.0


class TestDecoder:
    """Test payload decoding"""

    def test_decodes_array_preserving_order_and_strings(self):
        payload = (
            b'[{"trip_id": "b", "pickup_centroid_latitude": "41.98"},'
            b' {"trip_id": "a", "pickup_centroid_latitude": "41.79"}]'
        )

        records, error = decode_records(payload, RawTrip)

        assert error is None
        assert [r.trip_id for r in records] == ["b", "a"]
        assert records[0].pickup_centroid_latitude == "41.98"

    def test_missing_and_null_fields_become_empty(self):
        payload = b'[{"trip_id": null}]'

        records, error = decode_records(payload, RawTrip)

        assert error is None
        assert records[0].trip_id == ""
        assert records[0].trip_end_timestamp == ""

    def test_numbers_are_kept_as_text_and_extra_fields_ignored(self):
        payload = b'[{"community_area_or_zip": 25, "ccvi_score": 51.6, "location": "POINT (1 2)"}]'

        records, error = decode_records(payload, RawCCVI)

        assert error is None
        assert records[0].community_area_or_zip == "25"
        assert records[0].ccvi_score == "51.6"
        assert not hasattr(records[0], "location")

    def test_empty_array(self):
        records, error = decode_records(b"[]", RawCovid)

        assert records == []
        assert error is None

    @pytest.mark.parametrize("payload", [
        b"{not json",
        b'{"row_id": "60602-2021-10"}',
        b'["60602-2021-10"]',
        b"",
    ])
    def test_malformed_payload_yields_empty_list_and_error(self, payload):
        records, error = decode_records(payload, RawCovid, source="https://data.example.org/covid.json")

        assert records == []
        assert isinstance(error, DecodeError)
        assert error.context["source"] == "https://data.example.org/covid.json"
