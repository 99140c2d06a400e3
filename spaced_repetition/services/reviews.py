from django.db import transaction
from django.utils import timezone
import structlog
from ..data.repos import persist_review, resolve_item, stored_level
from ..domain.errors import InvalidState
from ..domain.logic import apply_review
from ..utils.time import to_local_iso

logger = structlog.get_logger()


def submit_review(user_id, identifier, was_successful: bool, review_option=None, now=None):
    now = now or timezone.now()
    logger.info("review_received",
        user_id=str(user_id),
        identifier=str(identifier),
        was_successful=was_successful,
        review_option=review_option.value if review_option else None,
    )

    # Serialize read-modify-write per schedule item
    with transaction.atomic():
        item = resolve_item(user_id, identifier, for_update=True)
        outcome = apply_review(item.review_level, was_successful, now)

        entry = persist_review(item, outcome, was_successful, review_option)

        # Compare the history entry against what the row now holds
        level_now = stored_level(item)
        if entry.level_before != outcome.level_before or entry.level_after != level_now:
            logger.error("review_state_mismatch",
                schedule_item_id=str(item.pk),
                entry_level_before=entry.level_before,
                entry_level_after=entry.level_after,
                stored_level=level_now,
            )
            raise InvalidState(schedule_item_id=str(item.pk))

    logger.info("review_scheduled",
        user_id=str(user_id),
        schedule_item_id=str(item.pk),
        level_before=outcome.level_before,
        level_after=outcome.level_after,
        interval_days=outcome.interval_days,
        due_date_utc=outcome.due_date.isoformat(),
        due_date_local=to_local_iso(outcome.due_date),
    )

    return item, outcome


def preview_review(user_id, identifier, now=None):
    """Outcomes the review rule would produce, without recording anything."""
    now = now or timezone.now()
    item = resolve_item(user_id, identifier)
    return item, {
        "success": apply_review(item.review_level, True, now),
        "failure": apply_review(item.review_level, False, now),
    }
