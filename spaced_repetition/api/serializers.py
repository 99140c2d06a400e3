from rest_framework import serializers

from ..domain.enums import ReviewOption
from ..domain.ladder import interval_days, retention_estimate, strength_label
from ..domain.logic import resolve_success
from ..utils.time import to_local_iso


class AddItemSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=255)


class ReviewInSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=255)
    was_successful = serializers.BooleanField(required=False, allow_null=True, default=None)
    review_option = serializers.ChoiceField(
        choices=[option.value for option in ReviewOption],
        required=False,
        allow_null=True,
        default=None,
    )

    def validate(self, attrs):
        option = ReviewOption(attrs["review_option"]) if attrs.get("review_option") else None
        was_successful = attrs.get("was_successful")
        if was_successful is None and option is None:
            raise serializers.ValidationError("Provide was_successful or review_option.")
        resolved = resolve_success(was_successful, option)
        if resolved is None:
            raise serializers.ValidationError(
                f"review_option '{option.value}' contradicts was_successful={was_successful}."
            )
        attrs["was_successful"] = resolved
        attrs["review_option"] = option
        return attrs


def history_entry_data(entry):
    data = {
        "date": entry.date.isoformat(),
        "was_successful": entry.was_successful,
        "level_before": entry.level_before,
        "level_after": entry.level_after,
        "review_option": entry.review_option,
    }
    if hasattr(entry, "retention_percent"):
        data["retention_percent"] = entry.retention_percent
    return data


def schedule_item_data(item):
    ref = getattr(item, "reviewable", None)
    data = {
        "id": str(item.pk),
        "reviewable": ref.as_dict() if ref else {
            "id": str(item.reviewable_id), "slug": item.reviewable_slug,
        },
        "review_level": item.review_level,
        "retention_percent": retention_estimate(item.review_level),
        "interval_days": interval_days(item.review_level),
        "strength": strength_label(item.review_level),
        "last_reviewed_at": item.last_reviewed_at.isoformat() if item.last_reviewed_at else None,
        "due_date": item.due_date.isoformat() if item.due_date else None,
        "due_date_local": to_local_iso(item.due_date),
    }
    if hasattr(item, "history_entries"):
        data["review_history"] = [history_entry_data(e) for e in item.history_entries]
    return data


def outcome_data(outcome):
    return {
        "level_before": outcome.level_before,
        "review_level": outcome.level_after,
        "interval_days": outcome.interval_days,
        "due_date": outcome.due_date.isoformat(),
        "due_date_local": to_local_iso(outcome.due_date),
    }
