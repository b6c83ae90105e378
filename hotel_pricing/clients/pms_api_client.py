"""PMS REST API client for room, reservation and price rule records."""

import time
from typing import Any, Optional

import httpx
from structlog import get_logger

from hotel_pricing.config import settings

logger = get_logger(__name__)


class PMSAPIClientError(Exception):
    """Base exception for PMS API client errors."""

    pass


class PMSAPIAuthenticationError(PMSAPIClientError):
    """Raised when PMS API authentication fails."""

    pass


class PMSAPINotFoundError(PMSAPIClientError):
    """Raised when a PMS API resource is not found."""

    pass


class PMSAPIServerError(PMSAPIClientError):
    """Raised when the PMS API returns a server error."""

    pass


class PMSAPIClient:
    """Client for the PMS REST endpoints the pricing engine reads."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the PMS API client.

        Args:
            base_url: API base URL (defaults to PMS_API_BASE_URL)
            api_key: API key sent as a bearer token (defaults to PMS_API_API_KEY)
            transport: Optional httpx transport, e.g. a MockTransport in tests
        """
        self.base_url = (base_url or settings.pms_api_base_url).rstrip("/")
        self.api_key = (api_key if api_key is not None else settings.pms_api.api_key).strip()
        self.timeout = settings.pms_api.request_timeout
        self.max_retries = settings.pms_api.max_retries
        self.retry_backoff_base = 2  # Exponential backoff base
        self.transport = transport

    def _get_headers(self) -> dict[str, str]:
        """Get default headers for PMS API requests.

        Returns:
            Dictionary of HTTP headers, with the bearer token when configured.
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "HotelPricingEngine/1.0",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request to the PMS API with retry logic.

        Server errors, timeouts and transport errors are retried with
        exponential backoff; client errors are raised immediately.

        Args:
            method: HTTP method
            endpoint: API endpoint path (without base URL)
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            PMSAPIAuthenticationError: If authentication fails
            PMSAPINotFoundError: If resource not found
            PMSAPIServerError: If server error persists after retries
            PMSAPIClientError: For other API errors
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers()

        for attempt in range(self.max_retries):
            try:
                with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                    response = client.request(
                        method=method,
                        url=url,
                        headers=headers,
                        params=params,
                    )

                if response.status_code in (401, 403):
                    logger.error(
                        "PMS API authentication failed",
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise PMSAPIAuthenticationError(
                        f"Authentication failed for {endpoint}: {response.status_code}"
                    )

                if response.status_code == 404:
                    logger.warning(
                        "PMS API resource not found",
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise PMSAPINotFoundError(f"Resource not found: {endpoint}")

                if response.status_code >= 500:
                    if attempt < self.max_retries - 1:
                        wait_time = self.retry_backoff_base ** attempt
                        logger.warning(
                            "PMS API server error, retrying",
                            endpoint=endpoint,
                            status_code=response.status_code,
                            attempt=attempt + 1,
                            max_retries=self.max_retries,
                            wait_seconds=wait_time,
                        )
                        time.sleep(wait_time)
                        continue
                    logger.error(
                        "PMS API server error, max retries exceeded",
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise PMSAPIServerError(f"Server error at {endpoint}: {response.text}")

                if 400 <= response.status_code < 500:
                    logger.error(
                        "PMS API client error",
                        endpoint=endpoint,
                        status_code=response.status_code,
                        response_text=response.text[:200],  # Limit error text
                    )
                    raise PMSAPIClientError(f"Client error at {endpoint}: {response.text}")

                logger.debug(
                    "PMS API request successful",
                    endpoint=endpoint,
                    method=method,
                    status_code=response.status_code,
                )
                if response.text:
                    return response.json()
                return None

            except httpx.TimeoutException as e:
                if attempt < self.max_retries - 1:
                    wait_time = self.retry_backoff_base ** attempt
                    logger.warning(
                        "PMS API request timeout, retrying",
                        endpoint=endpoint,
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                        wait_seconds=wait_time,
                    )
                    time.sleep(wait_time)
                    continue
                logger.error("PMS API request timeout, max retries exceeded", endpoint=endpoint)
                raise PMSAPIClientError(f"Request timeout for {endpoint}") from e

            except httpx.RequestError as e:
                if attempt < self.max_retries - 1:
                    wait_time = self.retry_backoff_base ** attempt
                    logger.warning(
                        "PMS API request error, retrying",
                        endpoint=endpoint,
                        error=str(e),
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                        wait_seconds=wait_time,
                    )
                    time.sleep(wait_time)
                    continue
                logger.error(
                    "PMS API request error, max retries exceeded",
                    endpoint=endpoint,
                    error=str(e),
                )
                raise PMSAPIClientError(f"Request failed for {endpoint}: {str(e)}") from e

        raise PMSAPIClientError(f"Failed to complete request to {endpoint}")

    def get_room_types(self) -> list[dict[str, Any]]:
        """Fetch all room types."""
        logger.info("Fetching room types from PMS API")
        return self._make_request("GET", "/api/room-types") or []

    def get_room_type(self, room_type_id: str) -> dict[str, Any]:
        """Fetch a single room type.

        Raises:
            PMSAPINotFoundError: If the room type does not exist
        """
        return self._make_request("GET", f"/api/room-types/{room_type_id}")

    def get_rooms(self) -> list[dict[str, Any]]:
        """Fetch all rooms with their room type."""
        logger.info("Fetching rooms from PMS API")
        return self._make_request("GET", "/api/rooms") or []

    def get_room(self, room_id: str) -> dict[str, Any]:
        """Fetch a single room.

        Raises:
            PMSAPINotFoundError: If the room does not exist
        """
        return self._make_request("GET", f"/api/rooms/{room_id}")

    def get_reservations(self, status: Optional[str] = None) -> list[dict[str, Any]]:
        """Fetch reservations, optionally filtered by status.

        The PMS only filters by check-in date, not by stay overlap, so callers
        fetch everything and filter locally.
        """
        params = {"status": status} if status else None
        reservations = self._make_request("GET", "/api/reservations", params=params) or []
        logger.info(
            "Successfully fetched reservations",
            status=status,
            reservation_count=len(reservations),
        )
        return reservations

    def get_price_rules(
        self,
        room_type_id: Optional[str] = None,
        active_only: bool = True,
    ) -> list[dict[str, Any]]:
        """Fetch price rules, sorted by the PMS by priority descending."""
        params: dict[str, Any] = {}
        if room_type_id:
            params["roomTypeId"] = room_type_id
        if active_only:
            params["active"] = "true"
        rules = self._make_request("GET", "/api/price-rules", params=params or None) or []
        logger.info(
            "Successfully fetched price rules",
            room_category_id=room_type_id,
            rule_count=len(rules),
        )
        return rules

    def get_price_rule(self, rule_id: str) -> dict[str, Any]:
        """Fetch a single price rule.

        Raises:
            PMSAPINotFoundError: If the rule does not exist
        """
        return self._make_request("GET", f"/api/price-rules/{rule_id}")
