"""
Day Grouping - Buckets a conversation by calendar day for rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional

from orgchat.domain.entities.message import Message


@dataclass(frozen=True)
class DayBucket:
    day: date
    label: str
    messages: tuple[Message, ...]


def day_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day:%b} {day.day}"


def local_day(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    return moment.astimezone(tz).date() if tz else moment.date()


def format_time(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    local = moment.astimezone(tz) if tz else moment
    return f"{local:%H:%M}"


def group_by_day(
    messages: Iterable[Message],
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
) -> list[DayBucket]:
    """Chronological buckets, one per local calendar day that has messages."""
    if today is None:
        today = datetime.now(tz or timezone.utc).date()

    ordered = sorted(messages, key=lambda m: m.created_at)
    buckets: list[DayBucket] = []
    current_day: Optional[date] = None
    current: list[Message] = []
    for message in ordered:
        day = local_day(message.created_at, tz)
        if current_day is not None and day != current_day:
            buckets.append(DayBucket(current_day, day_label(current_day, today), tuple(current)))
            current = []
        current_day = day
        current.append(message)
    if current_day is not None:
        buckets.append(DayBucket(current_day, day_label(current_day, today), tuple(current)))
    return buckets
