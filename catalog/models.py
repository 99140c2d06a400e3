import uuid

from django.db import models
from django.utils import timezone


class Topic(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, null=True, blank=True)

    def __str__(self):
        return self.name


class Problem(models.Model):
    """A learnable unit, e.g. a solved coding problem."""

    class Difficulty(models.TextChoices):
        EASY = "EASY"
        MEDIUM = "MEDIUM"
        HARD = "HARD"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, null=True, blank=True)
    difficulty = models.CharField(
        max_length=16, choices=Difficulty.choices, default=Difficulty.MEDIUM
    )
    topic = models.ForeignKey(
        Topic, on_delete=models.SET_NULL, null=True, blank=True, related_name="problems"
    )

    def __str__(self):
        return self.name


class Completion(models.Model):
    user_id = models.UUIDField()
    problem = models.ForeignKey(
        Problem, on_delete=models.CASCADE, related_name="completions"
    )
    completed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "problem"], name="uq_completion_user_problem"
            ),
        ]
        indexes = [
            models.Index(fields=["user_id", "completed_at"], name="idx_completion_user_at"),
        ]
