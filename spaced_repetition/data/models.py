import uuid

from django.db import models
from django.utils import timezone

from ..config import MAX_LEVEL, MIN_LEVEL
from ..domain.enums import ReviewOption


class ScheduleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField()
    reviewable_id = models.UUIDField()
    reviewable_slug = models.SlugField(max_length=255, null=True, blank=True)
    review_level = models.PositiveSmallIntegerField(default=0)
    last_reviewed_at = models.DateTimeField(null=True, blank=True)
    due_date = models.DateTimeField(null=True, blank=True)  # UTC
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "reviewable_id"], name="uq_schedule_user_reviewable"
            ),
            models.CheckConstraint(
                condition=models.Q(review_level__gte=MIN_LEVEL, review_level__lte=MAX_LEVEL),
                name="ck_schedule_level_range",
            ),
        ]
        indexes = [
            models.Index(fields=["user_id", "due_date"], name="idx_schedule_user_due"),
            models.Index(fields=["user_id", "reviewable_slug"], name="idx_schedule_user_slug"),
        ]

    def __str__(self):
        return f"{self.reviewable_slug or self.reviewable_id} @ L{self.review_level}"


class ReviewHistoryEntry(models.Model):
    """One review event. Rows are only ever inserted."""

    REVIEW_OPTION_CHOICES = [(option.value, option.value) for option in ReviewOption]

    schedule_item = models.ForeignKey(
        ScheduleItem, on_delete=models.CASCADE, related_name="history"
    )
    user_id = models.UUIDField()
    date = models.DateTimeField(default=timezone.now)
    was_successful = models.BooleanField()
    level_before = models.PositiveSmallIntegerField()
    level_after = models.PositiveSmallIntegerField()
    review_option = models.CharField(
        max_length=16, choices=REVIEW_OPTION_CHOICES, null=True, blank=True
    )

    class Meta:
        ordering = ["date", "id"]
        indexes = [
            models.Index(fields=["user_id", "date"], name="idx_history_user_date"),
            models.Index(fields=["schedule_item", "date"], name="idx_history_item_date"),
        ]
