from collections import Counter

from django.utils import timezone
import structlog
from ..adapters import catalog
from ..config import MAX_LEVEL, MIN_LEVEL
from ..data import repos
from ..domain.buckets import completion_window_start, count_completions, is_due, partition
from ..domain.errors import NotFound
from ..domain.ladder import retention_estimate

logger = structlog.get_logger()


def attach_reviewables(items, history=False):
    """Decorate items with their catalog ref (and optionally history) in two queries."""
    refs = catalog.refs_for(item.reviewable_id for item in items)
    histories = repos.history_for_items(items) if history else {}
    for item in items:
        item.reviewable = refs.get(item.reviewable_id)
        if history:
            item.history_entries = histories.get(item.pk, [])
    return items


def add_item(user_id, identifier, now=None):
    now = now or timezone.now()
    ref = catalog.resolve(identifier)
    if ref is None:
        raise NotFound(f"No reviewable item matches '{identifier}'", identifier=str(identifier))

    # Freshly added items are due immediately
    item = repos.create_item(user_id, ref, due_date=now)
    item.reviewable = ref
    logger.info("schedule_item_added",
        user_id=str(user_id),
        schedule_item_id=str(item.pk),
        reviewable_id=str(ref.id),
        reviewable_slug=ref.slug,
    )
    return item


def remove_item(user_id, identifier):
    item = repos.resolve_item(user_id, identifier)
    item_id = item.pk
    repos.delete_item(item)
    logger.info("schedule_item_removed",
        user_id=str(user_id),
        schedule_item_id=str(item_id),
        reviewable_id=str(item.reviewable_id),
    )


def available_items(user_id):
    """Completed catalog items the user has not opted into reviewing yet."""
    scheduled = repos.scheduled_reviewable_ids(user_id)
    return [ref for ref in catalog.completed_refs(user_id) if ref.id not in scheduled]


def get_due_reviews(user_id, now=None):
    now = now or timezone.now()
    return attach_reviewables(repos.list_due_items(user_id, now), history=True)


def get_all_scheduled(user_id, now=None):
    now = now or timezone.now()
    items = attach_reviewables(repos.list_items(user_id))
    return partition(items, now)


def get_item_history(user_id, identifier):
    item = repos.resolve_item(user_id, identifier)
    attach_reviewables([item])
    entries = repos.history_for_item(item)
    for entry in entries:
        entry.retention_percent = retention_estimate(entry.level_after)
    return item, entries


def get_stats(user_id, now=None):
    now = now or timezone.now()
    items = repos.list_items(user_id)
    buckets = partition(items, now)
    levels = Counter(item.review_level for item in items)
    completions = count_completions(
        repos.review_dates(user_id, since=completion_window_start(now)),
        now,
        total=repos.review_count(user_id),
    )

    stats = {
        "by_level": {level: levels.get(level, 0) for level in range(MIN_LEVEL, MAX_LEVEL + 1)},
        "due_now": sum(1 for item in items if is_due(item, now)),
        "due_this_week": len(buckets.due_this_week),
        "total_reviewed": completions.total,
        "completed_today": completions.today,
        "completed_this_week": completions.this_week,
        "completed_this_month": completions.this_month,
    }
    logger.info("review_stats_computed", user_id=str(user_id), **{
        k: v for k, v in stats.items() if k != "by_level"
    })
    return stats
