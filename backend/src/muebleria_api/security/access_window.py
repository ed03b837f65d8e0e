"""Time-windowed access evaluation.

An account may act only while the current instant falls inside one of its
active weekly access windows. Each window is interpreted in its own
timezone: the instant is projected into that zone before the weekday and
wall-clock time are compared, so local midnight boundaries are respected.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, time, timezone
from enum import StrEnum
from typing import Any, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from muebleria_api.models.domain.account import DayOfWeek

logger = logging.getLogger(__name__)


class ScheduledRule(Protocol):
    """Fields the evaluator reads from an access rule."""

    id: Any
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    timezone: str
    is_active: bool


class ScheduledAccount(Protocol):
    """Fields the evaluator reads from an account."""

    bypass_access_rules: bool
    access_rules: Iterable[ScheduledRule]


class DenialReason(StrEnum):
    """Why the evaluator refused access."""

    NO_SCHEDULE = "No work schedule assigned"
    OUTSIDE_HOURS = "Outside of allowed working hours"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access window evaluation."""

    allowed: bool
    reason: DenialReason | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = AccessDecision(allowed=True)


def resolve_timezone(name: str) -> ZoneInfo | None:
    """Resolve an IANA timezone identifier, returning None when it is unknown or malformed."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        return None


def _as_utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        # Naive instants are taken as UTC
        return now.replace(tzinfo=timezone.utc)
    return now


def rule_admits(rule: ScheduledRule, now: datetime | None = None) -> bool:
    """Check whether a single rule admits the given instant.

    The rule admits when it is active, the local weekday in the rule's
    timezone equals the rule's day, and the local time lies within
    ``[start_time, end_time]`` (both ends inclusive). A rule with an
    unresolvable timezone never admits.

    Args:
        rule: Access rule to check
        now: Evaluation instant (defaults to the current time)

    Returns:
        True if the rule admits the instant
    """
    if not rule.is_active:
        return False

    zone = resolve_timezone(rule.timezone)
    if zone is None:
        logger.warning(
            "Ignoring access rule %s with invalid timezone %r", rule.id, rule.timezone
        )
        return False

    local_now = _as_utc(now).astimezone(zone)
    if DayOfWeek.from_weekday(local_now.weekday()) != rule.day_of_week:
        return False

    local_time = local_now.time().replace(tzinfo=None)
    return rule.start_time <= local_time <= rule.end_time


def evaluate(account: ScheduledAccount, now: datetime | None = None) -> AccessDecision:
    """Decide whether an account may act at the given instant.

    Accounts that bypass access rules are always allowed. Accounts without
    any rule are always denied. Otherwise at least one active rule must
    admit the instant.

    Args:
        account: Account with its access rules loaded
        now: Evaluation instant (defaults to the current time)

    Returns:
        AccessDecision with the denial reason when access is refused
    """
    if account.bypass_access_rules:
        return ALLOWED

    rules = list(account.access_rules or [])
    if not rules:
        return AccessDecision(allowed=False, reason=DenialReason.NO_SCHEDULE)

    instant = _as_utc(now)
    if any(rule_admits(rule, instant) for rule in rules):
        return ALLOWED

    return AccessDecision(allowed=False, reason=DenialReason.OUTSIDE_HOURS)


def is_access_allowed(account: ScheduledAccount, now: datetime | None = None) -> bool:
    """Check whether an account may act at the given instant."""
    return evaluate(account, now).allowed
