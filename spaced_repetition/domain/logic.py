from dataclasses import dataclass
from datetime import datetime, timedelta

from ..config import MAX_LEVEL, MIN_LEVEL
from .ladder import clamp_level, interval_days


@dataclass(frozen=True)
class ReviewOutcome:
    level_before: int
    level_after: int
    reviewed_at: datetime
    due_date: datetime

    @property
    def interval_days(self) -> int:
        return interval_days(self.level_after)


def next_level(level: int, was_successful: bool) -> int:
    # One step up on success, one step down on a lapse; never a reset to zero
    level = clamp_level(level)
    if was_successful:
        return min(MAX_LEVEL, level + 1)
    return max(MIN_LEVEL, level - 1)


def next_due_date(now: datetime, level: int) -> datetime:
    return now + timedelta(days=interval_days(level))


def apply_review(level_before: int, was_successful: bool, now: datetime) -> ReviewOutcome:
    """Canonical transition rule for a single review event.

    Pure: the same (level, outcome, now) always produces the same result, so
    it backs both the persisted review and the client-facing preview.
    """
    level_before = clamp_level(level_before)
    level_after = next_level(level_before, was_successful)
    return ReviewOutcome(
        level_before=level_before,
        level_after=level_after,
        reviewed_at=now,
        due_date=next_due_date(now, level_after),
    )


def resolve_success(was_successful, review_option):
    """Derive the boolean outcome from the optional finer-grained option.

    Returns None when the pair contradicts itself.
    """
    if review_option is None:
        return was_successful
    if was_successful is None:
        return review_option.implies_success
    if bool(was_successful) != review_option.implies_success:
        return None
    return bool(was_successful)
