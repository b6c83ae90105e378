"""Temporal matching of price rules against a single night."""

from datetime import date
from typing import Iterable, Optional

from hotel_pricing.models import PriceRule, RecurringType
from hotel_pricing.models.calendar import day_of_week


def bounded_rule_matches(rule: PriceRule, night: date) -> bool:
    """Bounded rules apply from start_date to end_date, both inclusive."""
    return rule.start_date <= night <= rule.end_date


def recurring_rule_matches(rule: PriceRule, night: date) -> bool:
    """Recurring rules apply on their cadence until the recurrence end date.

    WEEKLY with an empty ``days_of_week`` matches every night.
    """
    if rule.recurring_end_date is not None and night > rule.recurring_end_date:
        return False

    if rule.recurring_type == RecurringType.WEEKLY:
        return not rule.days_of_week or day_of_week(night) in rule.days_of_week
    if rule.recurring_type == RecurringType.CUSTOM:
        return day_of_week(night) in rule.days_of_week
    if rule.recurring_type == RecurringType.MONTHLY:
        return night.day == rule.start_date.day
    return False


def rule_matches(rule: PriceRule, night: date) -> bool:
    """Check whether a rule's temporal condition holds on a night.

    The active flag is not checked here; callers pass active rules.
    """
    if rule.is_recurring:
        return recurring_rule_matches(rule, night)
    return bounded_rule_matches(rule, night)


def sort_rules(rules: Iterable[PriceRule]) -> list[PriceRule]:
    """Order rules by priority descending, then id ascending."""
    return sorted(rules, key=PriceRule.sort_key)


def select_rule(sorted_rules: list[PriceRule], night: date) -> Optional[PriceRule]:
    """Return the first matching rule of a pre-sorted list, if any."""
    for rule in sorted_rules:
        if rule_matches(rule, night):
            return rule
    return None
