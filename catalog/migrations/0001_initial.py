import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Topic",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255, null=True, unique=True)),
            ],
        ),
        migrations.CreateModel(
            name="Problem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255, null=True, unique=True)),
                (
                    "difficulty",
                    models.CharField(
                        choices=[("EASY", "Easy"), ("MEDIUM", "Medium"), ("HARD", "Hard")],
                        default="MEDIUM",
                        max_length=16,
                    ),
                ),
                (
                    "topic",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="problems",
                        to="catalog.topic",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Completion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("completed_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "problem",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="completions",
                        to="catalog.problem",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user_id", "completed_at"], name="idx_completion_user_at"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("user_id", "problem"), name="uq_completion_user_problem"),
                ],
            },
        ),
    ]
