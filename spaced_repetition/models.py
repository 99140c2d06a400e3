from .data.models import ReviewHistoryEntry, ScheduleItem  # noqa: F401
