from datetime import datetime, time, timedelta

from django.utils import timezone

from ..config import WEEK_STARTS_ON


def to_local_iso(dt_utc):
    if dt_utc is None:
        return None
    return timezone.localtime(dt_utc).isoformat()


def start_of_day(now: datetime) -> datetime:
    local = timezone.localtime(now)
    return timezone.make_aware(datetime.combine(local.date(), time.min), local.tzinfo)


def end_of_day(now: datetime) -> datetime:
    local = timezone.localtime(now)
    return timezone.make_aware(datetime.combine(local.date(), time.max), local.tzinfo)


def start_of_week(now: datetime) -> datetime:
    today = start_of_day(now)
    offset = (today.weekday() - WEEK_STARTS_ON) % 7
    return start_of_day(today - timedelta(days=offset))


def start_of_month(now: datetime) -> datetime:
    today = start_of_day(now)
    return start_of_day(today.replace(day=1))
