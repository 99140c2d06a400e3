from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ..config import MONTH_WINDOW_DAYS, WEEK_WINDOW_DAYS
from ..utils.time import end_of_day, start_of_day, start_of_month, start_of_week


@dataclass(frozen=True)
class BucketWindows:
    today_end: datetime
    week_end: datetime
    month_end: datetime

    @classmethod
    def for_now(cls, now: datetime) -> "BucketWindows":
        today = start_of_day(now)
        return cls(
            today_end=end_of_day(today),
            week_end=end_of_day(today + timedelta(days=WEEK_WINDOW_DAYS)),
            month_end=end_of_day(today + timedelta(days=MONTH_WINDOW_DAYS)),
        )

    def bucket_for(self, due_date) -> str:
        if due_date is None:
            return "due_later"
        if due_date <= self.today_end:
            return "due_today"
        if due_date <= self.week_end:
            return "due_this_week"
        if due_date <= self.month_end:
            return "due_this_month"
        return "due_later"


@dataclass
class Buckets:
    due_today: List = field(default_factory=list)
    due_this_week: List = field(default_factory=list)
    due_this_month: List = field(default_factory=list)
    due_later: List = field(default_factory=list)
    all: List = field(default_factory=list)

    NAMES = ("due_today", "due_this_week", "due_this_month", "due_later")


def schedule_order(item):
    # Earliest due first, unscheduled last, item id breaks ties
    return (item.due_date is None, item.due_date or datetime.max, str(item.id))


def partition(items, now: datetime) -> Buckets:
    """Split schedule items into disjoint due-date buckets.

    Every item lands in exactly one named bucket; ``all`` holds each item
    once in due-date order and the buckets keep that order.
    """
    windows = BucketWindows.for_now(now)
    buckets = Buckets()
    for item in sorted(items, key=schedule_order):
        getattr(buckets, windows.bucket_for(item.due_date)).append(item)
        buckets.all.append(item)
    return buckets


def is_due(item, now: datetime) -> bool:
    return item.due_date is not None and item.due_date <= now


@dataclass(frozen=True)
class CompletionCounts:
    total: int
    today: int
    this_week: int
    this_month: int


def completion_window_start(now: datetime) -> datetime:
    """Earliest instant any completion window reaches back to.

    The week can start in the previous month, so this is not always the 1st.
    """
    return min(start_of_week(now), start_of_month(now))


def count_completions(review_dates, now: datetime, total: Optional[int] = None) -> CompletionCounts:
    """Count review events (not items) in the local calendar windows.

    ``review_dates`` only needs to reach back to ``completion_window_start``
    when ``total`` is given; otherwise every date is counted towards it.
    """
    today = start_of_day(now)
    week = start_of_week(now)
    month = start_of_month(now)
    counted = in_today = in_week = in_month = 0
    for reviewed_at in review_dates:
        counted += 1
        if reviewed_at >= today:
            in_today += 1
        if reviewed_at >= week:
            in_week += 1
        if reviewed_at >= month:
            in_month += 1
    if total is None:
        total = counted
    return CompletionCounts(total=total, today=in_today, this_week=in_week, this_month=in_month)
