"""HTTP handlers for pricing and availability (API Gateway proxy events)."""

import json
from typing import Any, Callable, Optional

from hotel_pricing.config import get_logger
from hotel_pricing.errors import PricingError, ValidationError
from hotel_pricing.models import SearchRequest
from hotel_pricing.models.calendar import parse_iso_date
from hotel_pricing.services import AvailabilityResolver, PriceRuleEngine, QuoteAssembler
from hotel_pricing.storage import PricingDataSource, create_data_source, parse_record
from hotel_pricing.transformers import (
    DailyAvailabilityTransformer,
    PriceQuoteTransformer,
    SearchTransformer,
)

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(body, default=str),
    }


def _parse_body(event: dict[str, Any]) -> dict[str, Any]:
    """Read the JSON body of a proxy event, which may already be decoded."""
    body = event.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError("Request body is not valid JSON") from e
    if not isinstance(parsed, dict):
        raise ValidationError("Request body must be a JSON object")
    return parsed


def _query_params(event: dict[str, Any]) -> dict[str, Any]:
    return event.get("queryStringParameters") or {}


def _require(params: dict[str, Any], *names: str) -> None:
    missing = [name for name in names if not params.get(name)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def _parse_date(value: Any, field: str):
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date for {field}: {value}") from e


def _run(
    operation: str,
    event: dict[str, Any],
    handle: Callable[[PricingDataSource], dict[str, Any]],
    data_source: Optional[PricingDataSource],
) -> dict[str, Any]:
    """Execute a handler body and map failures to HTTP responses."""
    try:
        source = data_source if data_source is not None else create_data_source()
        return _response(200, handle(source))
    except PricingError as e:
        logger.warning(
            "Request rejected",
            operation=operation,
            status_code=e.status_code,
            error=str(e),
        )
        return _response(e.status_code, {"error": str(e)})
    except Exception as e:
        logger.error(
            "Request failed",
            operation=operation,
            path=event.get("path"),
            error=str(e),
            exc_info=True,
        )
        return _response(500, {"error": "Internal server error"})


def calculate_price_handler(
    event: dict[str, Any],
    context: Any = None,
    data_source: Optional[PricingDataSource] = None,
) -> dict[str, Any]:
    """Price a stay for one room type.

    Body: ``{"roomTypeId", "startDate", "endDate"}``.
    """

    def handle(source: PricingDataSource) -> dict[str, Any]:
        body = _parse_body(event)
        _require(body, "roomTypeId", "startDate", "endDate")
        quote = PriceRuleEngine(source).price_quote(
            body["roomTypeId"],
            _parse_date(body["startDate"], "startDate"),
            _parse_date(body["endDate"], "endDate"),
        )
        return PriceQuoteTransformer.transform(quote)

    return _run("calculate_price", event, handle, data_source)


def search_availability_handler(
    event: dict[str, Any],
    context: Any = None,
    data_source: Optional[PricingDataSource] = None,
) -> dict[str, Any]:
    """Search free, priced room types for a stay.

    Body: ``{"checkIn", "checkOut", "adults", "children", "roomTypeId"?}``.
    """

    def handle(source: PricingDataSource) -> dict[str, Any]:
        body = _parse_body(event)
        _require(body, "checkIn", "checkOut")
        request = parse_record(SearchRequest, body)
        result = QuoteAssembler(source).search(request)
        return SearchTransformer.transform(result)

    return _run("search_availability", event, handle, data_source)


def daily_availability_handler(
    event: dict[str, Any],
    context: Any = None,
    data_source: Optional[PricingDataSource] = None,
) -> dict[str, Any]:
    """Per-day room counts for a calendar view.

    Query: ``start``, ``end`` (both inclusive), optional ``roomTypeId``.
    """

    def handle(source: PricingDataSource) -> dict[str, Any]:
        params = _query_params(event)
        _require(params, "start", "end")
        summary = AvailabilityResolver(source).daily_availability(
            _parse_date(params["start"], "start"),
            _parse_date(params["end"], "end"),
            room_category_id=params.get("roomTypeId") or None,
        )
        return DailyAvailabilityTransformer.transform(summary)

    return _run("daily_availability", event, handle, data_source)


def rule_calendar_handler(
    event: dict[str, Any],
    context: Any = None,
    data_source: Optional[PricingDataSource] = None,
) -> dict[str, Any]:
    """Nights on which a price rule matches and whether it wins them.

    Path parameter ``id``; query ``start``, ``end``.
    """

    def handle(source: PricingDataSource) -> dict[str, Any]:
        path_params = event.get("pathParameters") or {}
        params = _query_params(event)
        _require(path_params, "id")
        _require(params, "start", "end")
        nights = PriceRuleEngine(source).rule_calendar(
            path_params["id"],
            _parse_date(params["start"], "start"),
            _parse_date(params["end"], "end"),
        )
        return PriceQuoteTransformer.transform_rule_calendar(path_params["id"], nights)

    return _run("rule_calendar", event, handle, data_source)


ROUTES: dict[str, Callable[..., dict[str, Any]]] = {
    "/api/calculate-price": calculate_price_handler,
    "/api/search-availability": search_availability_handler,
    "/api/availability": daily_availability_handler,
    "/api/price-rules/{id}/calendar": rule_calendar_handler,
}


def _route(event: dict[str, Any]) -> Optional[Callable[..., dict[str, Any]]]:
    resource = event.get("resource")
    if resource in ROUTES:
        return ROUTES[resource]

    path = (event.get("path") or "").rstrip("/")
    if path in ROUTES:
        return ROUTES[path]
    if path.startswith("/api/price-rules/") and path.endswith("/calendar"):
        return rule_calendar_handler
    return None


def lambda_handler(
    event: dict[str, Any],
    context: Any = None,
    data_source: Optional[PricingDataSource] = None,
) -> dict[str, Any]:
    """Route an API Gateway proxy event to its handler.

    Args:
        event: Proxy event with ``path`` or ``resource``
        context: Lambda context
        data_source: Records to read from (defaults to the configured source)

    Returns:
        Proxy response with statusCode, headers and JSON body
    """
    handler = _route(event)
    logger.info(
        "Lambda invoked",
        path=event.get("path"),
        resource=event.get("resource"),
        request_id=getattr(context, "aws_request_id", None),
    )
    if handler is None:
        return _response(404, {"error": f"No route for {event.get('path')}"})

    if handler is rule_calendar_handler and not (event.get("pathParameters") or {}).get("id"):
        rule_id = (event.get("path") or "").rstrip("/").split("/")[-2]
        event = {**event, "pathParameters": {"id": rule_id}}

    return handler(event, context, data_source=data_source)
