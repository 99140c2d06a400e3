import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ScheduleItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.UUIDField()),
                ("reviewable_id", models.UUIDField()),
                ("reviewable_slug", models.SlugField(blank=True, max_length=255, null=True)),
                ("review_level", models.PositiveSmallIntegerField(default=0)),
                ("last_reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user_id", "due_date"], name="idx_schedule_user_due"),
                    models.Index(fields=["user_id", "reviewable_slug"], name="idx_schedule_user_slug"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user_id", "reviewable_id"), name="uq_schedule_user_reviewable"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("review_level__gte", 0), ("review_level__lte", 7)),
                        name="ck_schedule_level_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReviewHistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("date", models.DateTimeField(default=django.utils.timezone.now)),
                ("was_successful", models.BooleanField()),
                ("level_before", models.PositiveSmallIntegerField()),
                ("level_after", models.PositiveSmallIntegerField()),
                (
                    "review_option",
                    models.CharField(
                        blank=True,
                        choices=[("easy", "easy"), ("difficult", "difficult"), ("forgot", "forgot")],
                        max_length=16,
                        null=True,
                    ),
                ),
                (
                    "schedule_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="spaced_repetition.scheduleitem",
                    ),
                ),
            ],
            options={
                "ordering": ["date", "id"],
                "indexes": [
                    models.Index(fields=["user_id", "date"], name="idx_history_user_date"),
                    models.Index(fields=["schedule_item", "date"], name="idx_history_item_date"),
                ],
            },
        ),
    ]
