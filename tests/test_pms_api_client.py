"""Tests for the PMS API client and the data source built on it."""

from datetime import date
from unittest.mock import patch

import httpx
import pytest

from hotel_pricing.clients import (
    PMSAPIAuthenticationError,
    PMSAPIClient,
    PMSAPIClientError,
    PMSAPINotFoundError,
    PMSAPIServerError,
)
from hotel_pricing.errors import DataSourceError
from hotel_pricing.services import AvailabilityResolver, PriceRuleEngine
from hotel_pricing.storage import PMSAPIDataSource


def _snapshot_transport(snapshot):
    """Serve the snapshot fixture the way the PMS REST API does."""
    collections = {
        "/api/room-types": snapshot["roomTypes"],
        "/api/rooms": snapshot["rooms"],
        "/api/reservations": snapshot["reservations"],
        "/api/price-rules": snapshot["priceRules"],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path in collections:
            return httpx.Response(200, json=collections[path])
        collection, _, record_id = path.rpartition("/")
        for record in collections.get(collection, []):
            if record["id"] == record_id:
                return httpx.Response(200, json=record)
        return httpx.Response(404, json={"error": "Not found"})

    return httpx.MockTransport(handler)


class TestPMSAPIClient:
    """Tests for PMSAPIClient."""

    def test_sends_bearer_token_and_params(self):
        """Test the API key and rule filters are sent with the request."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        client = PMSAPIClient(
            base_url="http://pms.test/", api_key="secret", transport=httpx.MockTransport(handler)
        )

        assert client.get_price_rules(room_type_id="rt-standard") == []
        request = seen[0]
        assert request.url.host == "pms.test"
        assert request.url.path == "/api/price-rules"
        assert request.url.params["roomTypeId"] == "rt-standard"
        assert request.url.params["active"] == "true"
        assert request.headers["Authorization"] == "Bearer secret"

    def test_not_found(self):
        """Test a 404 raises PMSAPINotFoundError."""
        client = PMSAPIClient(
            base_url="http://pms.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(404)),
        )

        with pytest.raises(PMSAPINotFoundError):
            client.get_room("room-999")

    def test_authentication_failure(self):
        """Test a 401 raises PMSAPIAuthenticationError without retrying."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401)

        client = PMSAPIClient(base_url="http://pms.test", transport=httpx.MockTransport(handler))

        with pytest.raises(PMSAPIAuthenticationError):
            client.get_rooms()
        assert len(calls) == 1

    def test_client_error(self):
        """Test other 4xx responses raise PMSAPIClientError."""
        client = PMSAPIClient(
            base_url="http://pms.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(422, text="bad filter")),
        )

        with pytest.raises(PMSAPIClientError):
            client.get_reservations(status="CONFIRMED")

    @patch("hotel_pricing.clients.pms_api_client.time.sleep")
    def test_server_error_retried_then_succeeds(self, mock_sleep):
        """Test transient 5xx responses are retried with backoff."""
        responses = [httpx.Response(503), httpx.Response(200, json=[{"id": "rt"}])]
        client = PMSAPIClient(
            base_url="http://pms.test",
            transport=httpx.MockTransport(lambda request: responses.pop(0)),
        )

        assert client.get_room_types() == [{"id": "rt"}]
        mock_sleep.assert_called_once_with(1)

    @patch("hotel_pricing.clients.pms_api_client.time.sleep")
    def test_server_error_exhausts_retries(self, mock_sleep):
        """Test persistent 5xx responses raise PMSAPIServerError."""
        client = PMSAPIClient(
            base_url="http://pms.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="down")),
        )

        with pytest.raises(PMSAPIServerError):
            client.get_room_types()
        assert mock_sleep.call_count == client.max_retries - 1

    @patch("hotel_pricing.clients.pms_api_client.time.sleep")
    def test_connection_error(self, mock_sleep):
        """Test transport errors raise PMSAPIClientError after retries."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = PMSAPIClient(base_url="http://pms.test", transport=httpx.MockTransport(handler))

        with pytest.raises(PMSAPIClientError):
            client.get_rooms()


class TestPMSAPIDataSource:
    """Tests for PMSAPIDataSource."""

    def _data_source(self, snapshot):
        client = PMSAPIClient(base_url="http://pms.test", transport=_snapshot_transport(snapshot))
        return PMSAPIDataSource(client)

    def test_price_quote_over_api(self, snapshot):
        """Test the engine prices a stay from API records."""
        engine = PriceRuleEngine(self._data_source(snapshot))

        quote = engine.price_quote("rt-standard", date(2024, 12, 20), date(2024, 12, 24))

        assert quote.totals.total_final == 540000

    def test_availability_over_api(self, snapshot):
        """Test availability filters API bookings locally."""
        resolver = AvailabilityResolver(self._data_source(snapshot))

        results = resolver.find_available(date(2024, 7, 12), date(2024, 7, 14))

        assert [u.id for u in results[0].available_units] == ["room-102"]

    def test_availability_reads_each_table_once(self, snapshot):
        """Test a search over every category requests rooms and reservations once."""
        inner = _snapshot_transport(snapshot)
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return inner.handle_request(request)

        client = PMSAPIClient(base_url="http://pms.test", transport=httpx.MockTransport(handler))
        resolver = AvailabilityResolver(PMSAPIDataSource(client))

        results = resolver.find_available(date(2024, 7, 12), date(2024, 7, 14))

        assert len(results) == 2
        assert paths.count("/api/rooms") == 1
        assert paths.count("/api/reservations") == 1

    def test_missing_record_is_none(self, snapshot):
        """Test a 404 for a single record maps to None."""
        data_source = self._data_source(snapshot)

        assert data_source.get_room_category("rt-missing") is None
        assert data_source.get_price_rule("rule-a").multiplier == 1.5

    def test_inactive_rules_filtered(self, snapshot):
        """Test inactive rules are dropped even if the API returns them."""
        data_source = self._data_source(snapshot)

        assert [r.id for r in data_source.list_price_rules("rt-suite")] == ["rule-c"]
        assert len(data_source.list_price_rules("rt-suite", active_only=False)) == 2

    @patch("hotel_pricing.clients.pms_api_client.time.sleep")
    def test_client_failure_wrapped(self, mock_sleep):
        """Test client failures surface as DataSourceError."""
        client = PMSAPIClient(
            base_url="http://pms.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        with pytest.raises(DataSourceError):
            PMSAPIDataSource(client).list_rooms()
