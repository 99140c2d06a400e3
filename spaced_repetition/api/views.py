from rest_framework import views, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.utils import timezone
import structlog
import uuid
from ..domain.buckets import Buckets
from ..domain.enums import REVIEW_OPTION_LABELS
from ..domain.ladder import ladder
from ..services import schedule
from ..services.reviews import preview_review, submit_review
from .serializers import (
    AddItemSerializer,
    ReviewInSerializer,
    history_entry_data,
    outcome_data,
    schedule_item_data,
)

base_logger = structlog.get_logger()


class SchedulerView(views.APIView):
    permission_classes = [IsAuthenticated]

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        # Create a unique request_id
        self.logger = base_logger.bind(
            request_id=str(uuid.uuid4()), user_id=str(request.user.id)
        )


class ScheduleItemsView(SchedulerView):
    def post(self, request):
        s = AddItemSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        item = schedule.add_item(request.user.id, s.validated_data["identifier"])
        self.logger.info("add_item_api_response", schedule_item_id=str(item.pk))
        return Response(schedule_item_data(item), status=status.HTTP_201_CREATED)


class ScheduleItemDetailView(SchedulerView):
    def delete(self, request, identifier):
        schedule.remove_item(request.user.id, identifier)
        self.logger.info("remove_item_api_response", identifier=identifier)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ItemHistoryView(SchedulerView):
    def get(self, request, identifier):
        item, entries = schedule.get_item_history(request.user.id, identifier)
        return Response(
            {
                "item": schedule_item_data(item),
                "history": [history_entry_data(e) for e in entries],
            }
        )


class ReviewPreviewView(SchedulerView):
    def get(self, request, identifier):
        item, outcomes = preview_review(request.user.id, identifier)
        return Response(
            {
                "schedule_item_id": str(item.pk),
                "review_level": item.review_level,
                "if_successful": outcome_data(outcomes["success"]),
                "if_failed": outcome_data(outcomes["failure"]),
            }
        )


class AvailableItemsView(SchedulerView):
    def get(self, request):
        refs = schedule.available_items(request.user.id)
        self.logger.info("available_items_api_response", item_count=len(refs))
        return Response([ref.as_dict() for ref in refs])


class DueReviewsView(SchedulerView):
    def get(self, request):
        items = schedule.get_due_reviews(request.user.id, timezone.now())
        self.logger.info("due_reviews_api_response", item_count=len(items))
        return Response([schedule_item_data(item) for item in items])


class AllScheduledView(SchedulerView):
    def get(self, request):
        buckets = schedule.get_all_scheduled(request.user.id, timezone.now())
        payload = {
            name: [schedule_item_data(item) for item in getattr(buckets, name)]
            for name in Buckets.NAMES + ("all",)
        }
        self.logger.info(
            "all_scheduled_api_response",
            **{f"{name}_count": len(payload[name]) for name in payload},
        )
        return Response(payload)


class ReviewView(SchedulerView):
    def post(self, request):
        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        identifier = s.validated_data["identifier"]
        was_successful = s.validated_data["was_successful"]
        option = s.validated_data["review_option"]

        item, outcome = submit_review(request.user.id, identifier, was_successful, option)

        # Log with request_id & relevant context
        self.logger.info(
            "review_api_response",
            schedule_item_id=str(item.pk),
            was_successful=was_successful,
            review_option=option.value if option else None,
            level_after=outcome.level_after,
            due_date_utc=outcome.due_date.isoformat(),
        )

        data = outcome_data(outcome)
        data.update(
            {
                "schedule_item_id": str(item.pk),
                "was_successful": was_successful,
                "review_option": option.value if option else None,
                "review_option_label": REVIEW_OPTION_LABELS.get(option),
            }
        )
        return Response(data, status=status.HTTP_201_CREATED)


class StatsView(SchedulerView):
    def get(self, request):
        return Response(schedule.get_stats(request.user.id, timezone.now()))


class LadderView(views.APIView):
    permission_classes = []

    def get(self, request):
        return Response(ladder())
