from django.apps import AppConfig


class SpacedRepetitionConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "spaced_repetition"
