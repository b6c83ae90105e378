"""Command-line entry point for the hotel pricing engine."""

import argparse
import json
import sys
from typing import Any, Optional

from hotel_pricing.config import configure_logging, get_logger, settings
from hotel_pricing.errors import PricingError
from hotel_pricing.models import SearchRequest
from hotel_pricing.models.calendar import parse_iso_date
from hotel_pricing.services import AvailabilityResolver, PriceRuleEngine, QuoteAssembler
from hotel_pricing.storage import PricingDataSource, create_data_source
from hotel_pricing.transformers import (
    DailyAvailabilityTransformer,
    PriceQuoteTransformer,
    SearchTransformer,
)

logger = get_logger(__name__)


def _date_arg(value: str):
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hotel-pricing",
        description="Price stays and resolve room availability from a PMS snapshot.",
    )
    parser.add_argument(
        "--data",
        help="JSON snapshot to read (defaults to DATA_SOURCE_SNAPSHOT_PATH, or the PMS API "
        "when DATA_SOURCE_KIND=api)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="Price a stay for one room type")
    quote.add_argument("room_type_id")
    quote.add_argument("start", type=_date_arg)
    quote.add_argument("end", type=_date_arg)

    search = subparsers.add_parser("search", help="Find free, priced room types")
    search.add_argument("check_in", type=_date_arg)
    search.add_argument("check_out", type=_date_arg)
    search.add_argument("--adults", type=int, default=1)
    search.add_argument("--children", type=int, default=0)
    search.add_argument("--room-type-id")

    daily = subparsers.add_parser("daily", help="Per-day room counts")
    daily.add_argument("start", type=_date_arg)
    daily.add_argument("end", type=_date_arg)
    daily.add_argument("--room-type-id")

    calendar = subparsers.add_parser("calendar", help="Nights a price rule matches")
    calendar.add_argument("rule_id")
    calendar.add_argument("start", type=_date_arg)
    calendar.add_argument("end", type=_date_arg)

    return parser


def run_command(args: argparse.Namespace, data_source: PricingDataSource) -> dict[str, Any]:
    """Execute a parsed command and return its JSON body."""
    if args.command == "quote":
        quote = PriceRuleEngine(data_source).price_quote(args.room_type_id, args.start, args.end)
        return PriceQuoteTransformer.transform(quote)

    if args.command == "search":
        request = SearchRequest(
            check_in=args.check_in,
            check_out=args.check_out,
            adults=args.adults,
            children=args.children,
            room_category_id=args.room_type_id,
        )
        return SearchTransformer.transform(QuoteAssembler(data_source).search(request))

    if args.command == "daily":
        summary = AvailabilityResolver(data_source).daily_availability(
            args.start, args.end, room_category_id=args.room_type_id
        )
        return DailyAvailabilityTransformer.transform(summary)

    if args.command == "calendar":
        nights = PriceRuleEngine(data_source).rule_calendar(args.rule_id, args.start, args.end)
        return PriceQuoteTransformer.transform_rule_calendar(args.rule_id, nights)

    raise ValueError(f"Unknown command: {args.command}")


def main(
    argv: Optional[list[str]] = None,
    data_source: Optional[PricingDataSource] = None,
) -> int:
    """Parse arguments, run the command and print its JSON result.

    Returns:
        Exit code: 0 on success, 1 on errors
    """
    args = build_parser().parse_args(argv)
    logger.info("Running command", command=args.command, environment=settings.environment)

    try:
        if data_source is None:
            kind = "file" if args.data else None
            data_source = create_data_source(kind=kind, snapshot_path=args.data)
        result = run_command(args, data_source)
    except PricingError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(json.dumps({"error": str(e)}))
        return 1
    except Exception as e:
        logger.error(
            "Fatal error in command",
            command=args.command,
            error=str(e),
            exc_info=True,
        )
        print(json.dumps({"error": str(e)}))
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


def cli() -> int:
    """Console script entry: configure logging, then run."""
    configure_logging()
    return main()


if __name__ == "__main__":
    sys.exit(cli())
