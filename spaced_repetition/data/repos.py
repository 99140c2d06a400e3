from django.db import IntegrityError, transaction

from ..adapters import catalog, parse_uuid
from ..domain.errors import AlreadyExists, NotFound, Unauthorized
from .models import ReviewHistoryEntry, ScheduleItem


def resolve_item(user_id, identifier, for_update=False):
    """
    Resolve a schedule item id, reviewable id or reviewable slug to the
    caller's ScheduleItem. Lock the row when ``for_update`` is set; the
    caller must already be inside a transaction.
    """
    qs = ScheduleItem.objects.all()
    if for_update:
        qs = qs.select_for_update()

    raw = str(identifier or "").strip()
    if not raw:
        raise NotFound("Empty identifier")

    key = parse_uuid(raw)
    if key is not None:
        item = qs.filter(pk=key).first()
        if item is not None:
            if item.user_id != user_id:
                raise Unauthorized(identifier=raw)
            return item
        item = qs.filter(user_id=user_id, reviewable_id=key).first()
    else:
        item = qs.filter(user_id=user_id, reviewable_slug=raw).first()
        if item is None:
            # Slug may have changed in the catalog since the item was added
            ref = catalog.resolve(raw)
            if ref is not None:
                item = qs.filter(user_id=user_id, reviewable_id=ref.id).first()

    if item is None:
        raise NotFound(f"No scheduled item matches '{raw}'", identifier=raw)
    return item


def create_item(user_id, ref, due_date):
    if ScheduleItem.objects.filter(user_id=user_id, reviewable_id=ref.id).exists():
        raise AlreadyExists(reviewable_id=str(ref.id))
    try:
        # Savepoint so a lost race leaves the outer transaction usable
        with transaction.atomic():
            return ScheduleItem.objects.create(
                user_id=user_id,
                reviewable_id=ref.id,
                reviewable_slug=ref.slug,
                review_level=0,
                last_reviewed_at=None,
                due_date=due_date,
            )
    except IntegrityError:
        raise AlreadyExists(reviewable_id=str(ref.id))


def delete_item(item):
    # History rows go with the item via the cascade
    item.delete()


def list_items(user_id):
    return list(ScheduleItem.objects.filter(user_id=user_id))


def list_due_items(user_id, now):
    return list(
        ScheduleItem.objects.filter(user_id=user_id, due_date__lte=now).order_by(
            "due_date", "id"
        )
    )


def scheduled_reviewable_ids(user_id):
    return set(
        ScheduleItem.objects.filter(user_id=user_id).values_list("reviewable_id", flat=True)
    )


def persist_review(item, outcome, was_successful, review_option=None):
    """
    Write the new schedule state and its history entry. Must run inside the
    transaction that locked ``item``.
    """
    item.review_level = outcome.level_after
    item.last_reviewed_at = outcome.reviewed_at
    item.due_date = outcome.due_date
    item.save(update_fields=["review_level", "last_reviewed_at", "due_date"])

    return ReviewHistoryEntry.objects.create(
        schedule_item=item,
        user_id=item.user_id,
        date=outcome.reviewed_at,
        was_successful=was_successful,
        level_before=outcome.level_before,
        level_after=outcome.level_after,
        review_option=review_option.value if review_option else None,
    )


def history_for_item(item):
    return list(ReviewHistoryEntry.objects.filter(schedule_item=item).order_by("date", "id"))


def history_for_items(items):
    history = {item.pk: [] for item in items}
    if not history:
        return history
    entries = ReviewHistoryEntry.objects.filter(schedule_item_id__in=list(history)).order_by(
        "date", "id"
    )
    for entry in entries:
        history[entry.schedule_item_id].append(entry)
    return history


def stored_level(item):
    return ScheduleItem.objects.filter(pk=item.pk).values_list("review_level", flat=True).get()


def review_count(user_id):
    return ReviewHistoryEntry.objects.filter(user_id=user_id).count()


def review_dates(user_id, since):
    return list(
        ReviewHistoryEntry.objects.filter(user_id=user_id, date__gte=since).values_list(
            "date", flat=True
        )
    )
