"""API clients package."""

from hotel_pricing.clients.pms_api_client import (
    PMSAPIAuthenticationError,
    PMSAPIClient,
    PMSAPIClientError,
    PMSAPINotFoundError,
    PMSAPIServerError,
)

__all__ = [
    "PMSAPIClient",
    "PMSAPIClientError",
    "PMSAPIAuthenticationError",
    "PMSAPINotFoundError",
    "PMSAPIServerError",
]
