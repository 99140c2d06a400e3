from datetime import datetime, timedelta, timezone as dt_tz
import threading
import time

import pytest
from django.db import connection

from spaced_repetition.data.models import ReviewHistoryEntry, ScheduleItem
from spaced_repetition.domain.enums import ReviewOption
from spaced_repetition.domain.errors import AlreadyExists, InvalidState, NotFound, Unauthorized
from spaced_repetition.services import reviews, schedule
from spaced_repetition.services.reviews import preview_review, submit_review

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=dt_tz.utc)


def set_level(item, level, last_reviewed_at=None):
    ScheduleItem.objects.filter(pk=item.pk).update(
        review_level=level, last_reviewed_at=last_reviewed_at
    )
    item.refresh_from_db()
    return item


# Lifecycle

@pytest.mark.django_db
def test_add_creates_immediately_due_item(user, problems):
    item = schedule.add_item(user.id, "two-sum", now=NOW)

    assert item.review_level == 0
    assert item.last_reviewed_at is None
    assert item.due_date == NOW
    assert item.reviewable_id == problems[0].id
    assert item.reviewable_slug == "two-sum"
    assert item.reviewable.name == "Two Sum"
    assert not ReviewHistoryEntry.objects.exists()


@pytest.mark.django_db
def test_add_by_reviewable_id(user, problems):
    item = schedule.add_item(user.id, str(problems[1].id), now=NOW)
    assert item.reviewable_slug == "group-anagrams"


@pytest.mark.django_db
def test_add_twice_raises_already_exists(user, problems):
    schedule.add_item(user.id, "two-sum", now=NOW)

    with pytest.raises(AlreadyExists):
        schedule.add_item(user.id, str(problems[0].id), now=NOW)

    assert ScheduleItem.objects.filter(user_id=user.id).count() == 1


@pytest.mark.django_db
def test_same_reviewable_for_two_users(user, other_user, problems):
    schedule.add_item(user.id, "two-sum", now=NOW)
    schedule.add_item(other_user.id, "two-sum", now=NOW)
    assert ScheduleItem.objects.count() == 2


@pytest.mark.django_db
def test_add_unknown_reviewable_raises_not_found(user, problems):
    with pytest.raises(NotFound):
        schedule.add_item(user.id, "no-such-problem", now=NOW)


@pytest.mark.django_db
@pytest.mark.parametrize("form", ["item_id", "reviewable_id", "slug"])
def test_remove_accepts_every_identifier_form(user, problems, form):
    item = schedule.add_item(user.id, "two-sum", now=NOW)
    submit_review(user.id, item.pk, True, now=NOW)
    identifier = {
        "item_id": str(item.pk),
        "reviewable_id": str(problems[0].id),
        "slug": "two-sum",
    }[form]

    schedule.remove_item(user.id, identifier)

    assert not ScheduleItem.objects.exists()
    assert not ReviewHistoryEntry.objects.exists()


@pytest.mark.django_db
def test_add_then_remove_leaves_nothing_due(user, problems):
    schedule.add_item(user.id, "two-sum", now=NOW)
    assert len(schedule.get_due_reviews(user.id, NOW)) == 1

    schedule.remove_item(user.id, "two-sum")

    assert schedule.get_due_reviews(user.id, NOW) == []
    with pytest.raises(NotFound):
        schedule.get_item_history(user.id, "two-sum")


@pytest.mark.django_db
def test_remove_unknown_raises_not_found(user, problems):
    with pytest.raises(NotFound):
        schedule.remove_item(user.id, "two-sum")


@pytest.mark.django_db
def test_remove_someone_elses_item_is_unauthorized(user, other_user, problems):
    item = schedule.add_item(other_user.id, "two-sum", now=NOW)

    with pytest.raises(Unauthorized):
        schedule.remove_item(user.id, str(item.pk))
    # Reviewable forms are scoped to the caller
    with pytest.raises(NotFound):
        schedule.remove_item(user.id, "two-sum")

    assert ScheduleItem.objects.filter(pk=item.pk).exists()


@pytest.mark.django_db
def test_slug_renamed_in_catalog_still_resolves(user, problems):
    schedule.add_item(user.id, "two-sum", now=NOW)
    problems[0].slug = "two-sum-classic"
    problems[0].save()

    schedule.remove_item(user.id, "two-sum-classic")
    assert not ScheduleItem.objects.exists()


@pytest.mark.django_db
def test_available_items_excludes_scheduled(user, completed):
    schedule.add_item(user.id, "group-anagrams", now=NOW)

    slugs = {ref.slug for ref in schedule.available_items(user.id)}

    assert slugs == {"two-sum", "number-of-islands"}


@pytest.mark.django_db
def test_available_items_only_lists_completed(user, problems):
    assert schedule.available_items(user.id) == []


# Reviews

@pytest.mark.django_db
def test_success_from_level_three(user, problems):
    item = schedule.add_item(user.id, "two-sum", now=NOW - timedelta(days=10))
    set_level(item, 3, last_reviewed_at=NOW - timedelta(days=3))

    item, outcome = submit_review(user.id, "two-sum", True, now=NOW)

    assert outcome.level_after == 4
    assert outcome.due_date == datetime(2025, 1, 6, 9, 0, tzinfo=dt_tz.utc)
    item.refresh_from_db()
    assert item.review_level == 4
    assert item.last_reviewed_at == NOW
    assert item.due_date == outcome.due_date


@pytest.mark.django_db
def test_failure_at_floor_stays_at_zero(user, problems):
    item = schedule.add_item(user.id, "two-sum", now=NOW)

    _, outcome = submit_review(user.id, item.pk, False, now=NOW)

    assert outcome.level_after == 0
    assert outcome.due_date == NOW + timedelta(days=1)


@pytest.mark.django_db
def test_success_at_ceiling_still_logs_history(user, problems):
    item = set_level(schedule.add_item(user.id, "two-sum", now=NOW), 7)

    _, outcome = submit_review(user.id, item.pk, True, now=NOW)

    assert outcome.level_after == 7
    assert outcome.due_date == NOW + timedelta(days=21)
    entry = ReviewHistoryEntry.objects.get(schedule_item=item)
    assert (entry.level_before, entry.level_after) == (7, 7)


@pytest.mark.django_db
def test_failure_steps_back_one_level_only(user, problems):
    item = set_level(schedule.add_item(user.id, "two-sum", now=NOW), 5)

    _, outcome = submit_review(user.id, item.pk, False, ReviewOption.FORGOT, now=NOW)

    assert outcome.level_after == 4
    entry = ReviewHistoryEntry.objects.get(schedule_item=item)
    assert entry.review_option == "forgot"
    assert entry.was_successful is False


@pytest.mark.django_db
def test_repeated_identical_reviews_are_separate_events(user, problems):
    item = schedule.add_item(user.id, "two-sum", now=NOW)

    submit_review(user.id, item.pk, True, now=NOW)
    submit_review(user.id, item.pk, True, now=NOW)

    item.refresh_from_db()
    assert item.review_level == 2
    assert ReviewHistoryEntry.objects.filter(schedule_item=item).count() == 2


@pytest.mark.django_db
def test_early_review_uses_same_rule(user, problems):
    item = schedule.add_item(user.id, "two-sum", now=NOW)
    submit_review(user.id, item.pk, True, now=NOW)

    # Due tomorrow, reviewed an hour later anyway
    _, outcome = submit_review(user.id, item.pk, True, now=NOW + timedelta(hours=1))

    assert outcome.level_after == 2
    assert outcome.due_date == NOW + timedelta(hours=1, days=2)


@pytest.mark.django_db
def test_history_forms_a_consistent_chain(user, problems):
    item = schedule.add_item(user.id, "two-sum", now=NOW)
    results = [True, True, False, True, True, True, False, False, True]
    for offset, was_successful in enumerate(results):
        submit_review(user.id, item.pk, was_successful, now=NOW + timedelta(days=offset))

    _, entries = schedule.get_item_history(user.id, "two-sum")
    item.refresh_from_db()

    assert len(entries) == len(results)
    assert entries[0].level_before == 0
    for previous, current in zip(entries, entries[1:]):
        assert current.level_before == previous.level_after
        assert current.date > previous.date
    assert entries[-1].level_after == item.review_level
    assert all(abs(e.level_after - e.level_before) <= 1 for e in entries)
    assert entries[-1].retention_percent == 70


@pytest.mark.django_db
def test_review_on_foreign_item_is_unauthorized(user, other_user, problems):
    item = schedule.add_item(other_user.id, "two-sum", now=NOW)

    with pytest.raises(Unauthorized):
        submit_review(user.id, item.pk, True, now=NOW)

    assert not ReviewHistoryEntry.objects.exists()


@pytest.mark.django_db
def test_review_unknown_item_raises_not_found(user, problems):
    with pytest.raises(NotFound):
        submit_review(user.id, "two-sum", True, now=NOW)


@pytest.mark.django_db
def test_mismatched_write_rolls_back_both_records(user, problems, monkeypatch):
    item = set_level(schedule.add_item(user.id, "two-sum", now=NOW), 2)
    real_persist = reviews.persist_review

    def corrupting_persist(item, outcome, was_successful, review_option=None):
        entry = real_persist(item, outcome, was_successful, review_option)
        # Row ends up one level short of what the history entry records
        ScheduleItem.objects.filter(pk=item.pk).update(review_level=outcome.level_after - 1)
        return entry

    monkeypatch.setattr(reviews, "persist_review", corrupting_persist)

    with pytest.raises(InvalidState):
        submit_review(user.id, item.pk, True, now=NOW)

    item.refresh_from_db()
    assert item.review_level == 2
    assert item.last_reviewed_at is None
    assert not ReviewHistoryEntry.objects.exists()


@pytest.mark.django_db(transaction=True)
def test_concurrent_reviews_of_one_item_are_serialized(transactional_db, user, problems, monkeypatch):
    item = schedule.add_item(user.id, "two-sum", now=NOW)
    real_apply = reviews.apply_review

    def slow_apply(level, was_successful, now):
        time.sleep(0.2)
        return real_apply(level, was_successful, now)

    monkeypatch.setattr(reviews, "apply_review", slow_apply)
    barrier = threading.Barrier(2)
    errors = []

    def review():
        try:
            barrier.wait(timeout=5)
            submit_review(user.id, item.pk, True, now=NOW)
        except Exception as exc:
            errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=review) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []
    item.refresh_from_db()
    assert item.review_level == 2
    levels = list(
        ReviewHistoryEntry.objects.filter(schedule_item=item).values_list(
            "level_before", "level_after"
        )
    )
    assert levels == [(0, 1), (1, 2)]


@pytest.mark.django_db
def test_preview_does_not_write(user, problems):
    item = set_level(schedule.add_item(user.id, "two-sum", now=NOW), 4)

    _, outcomes = preview_review(user.id, "two-sum", now=NOW)

    assert outcomes["success"].level_after == 5
    assert outcomes["success"].due_date == NOW + timedelta(days=8)
    assert outcomes["failure"].level_after == 3
    assert outcomes["failure"].due_date == NOW + timedelta(days=3)
    item.refresh_from_db()
    assert item.review_level == 4
    assert not ReviewHistoryEntry.objects.exists()


# Queries

@pytest.mark.django_db
def test_due_reviews_ordered_earliest_first(user, problems):
    late = schedule.add_item(user.id, "two-sum", now=NOW - timedelta(hours=1))
    early = schedule.add_item(user.id, "group-anagrams", now=NOW - timedelta(days=2))
    schedule.add_item(user.id, "number-of-islands", now=NOW + timedelta(minutes=5))

    due = schedule.get_due_reviews(user.id, NOW)

    assert [i.pk for i in due] == [early.pk, late.pk]
    assert due[0].reviewable.slug == "group-anagrams"
    assert due[0].history_entries == []


@pytest.mark.django_db
def test_all_scheduled_partitions_every_item(user, problems, utc_zone):
    today = schedule.add_item(user.id, "two-sum", now=NOW)
    week = schedule.add_item(user.id, "group-anagrams", now=NOW)
    later = schedule.add_item(user.id, "number-of-islands", now=NOW)
    ScheduleItem.objects.filter(pk=week.pk).update(due_date=NOW + timedelta(days=3))
    ScheduleItem.objects.filter(pk=later.pk).update(due_date=NOW + timedelta(days=60))

    buckets = schedule.get_all_scheduled(user.id, NOW)

    assert [i.pk for i in buckets.due_today] == [today.pk]
    assert [i.pk for i in buckets.due_this_week] == [week.pk]
    assert buckets.due_this_month == []
    assert [i.pk for i in buckets.due_later] == [later.pk]
    assert [i.pk for i in buckets.all] == [today.pk, week.pk, later.pk]


@pytest.mark.django_db
def test_queries_are_scoped_to_user(user, other_user, problems):
    schedule.add_item(other_user.id, "two-sum", now=NOW)

    assert schedule.get_due_reviews(user.id, NOW) == []
    assert schedule.get_all_scheduled(user.id, NOW).all == []


@pytest.mark.django_db
def test_stats(user, problems, utc_zone):
    now = datetime(2025, 1, 15, 12, 0, tzinfo=dt_tz.utc)  # Wednesday
    reviewed = schedule.add_item(user.id, "two-sum", now=datetime(2024, 12, 30, tzinfo=dt_tz.utc))
    for when in [
        datetime(2024, 12, 31, 10, 0, tzinfo=dt_tz.utc),
        datetime(2025, 1, 5, 10, 0, tzinfo=dt_tz.utc),
        datetime(2025, 1, 13, 10, 0, tzinfo=dt_tz.utc),
        datetime(2025, 1, 15, 8, 0, tzinfo=dt_tz.utc),
    ]:
        submit_review(user.id, reviewed.pk, True, now=when)
    schedule.add_item(user.id, "group-anagrams", now=now)

    stats = schedule.get_stats(user.id, now)

    assert stats["by_level"] == {0: 1, 1: 0, 2: 0, 3: 0, 4: 1, 5: 0, 6: 0, 7: 0}
    assert stats["due_now"] == 1
    assert stats["due_this_week"] == 1
    assert stats["total_reviewed"] == 4
    assert stats["completed_today"] == 1
    assert stats["completed_this_week"] == 2
    assert stats["completed_this_month"] == 3


@pytest.mark.django_db
def test_stats_for_new_user(user):
    stats = schedule.get_stats(user.id, NOW)
    assert stats["total_reviewed"] == 0
    assert sum(stats["by_level"].values()) == 0


@pytest.mark.django_db
def test_stats_week_spanning_month_boundary(user, problems, utc_zone):
    now = datetime(2025, 1, 1, 12, 0, tzinfo=dt_tz.utc)  # Wednesday
    item = schedule.add_item(user.id, "two-sum", now=datetime(2024, 12, 1, tzinfo=dt_tz.utc))
    for when in [
        datetime(2024, 12, 20, 10, 0, tzinfo=dt_tz.utc),
        datetime(2024, 12, 30, 10, 0, tzinfo=dt_tz.utc),
        datetime(2025, 1, 1, 8, 0, tzinfo=dt_tz.utc),
    ]:
        submit_review(user.id, item.pk, True, now=when)

    stats = schedule.get_stats(user.id, now)

    assert stats["total_reviewed"] == 3
    assert stats["completed_today"] == 1
    assert stats["completed_this_week"] == 2
    assert stats["completed_this_month"] == 1
