from django.urls import path
from .views import (
    AllScheduledView,
    AvailableItemsView,
    DueReviewsView,
    ItemHistoryView,
    LadderView,
    ReviewPreviewView,
    ReviewView,
    ScheduleItemDetailView,
    ScheduleItemsView,
    StatsView,
)

urlpatterns = [
    path("items", ScheduleItemsView.as_view(), name="schedule-items"),
    path("items/<str:identifier>", ScheduleItemDetailView.as_view(), name="schedule-item"),
    path("items/<str:identifier>/history", ItemHistoryView.as_view(), name="item-history"),
    path("items/<str:identifier>/preview", ReviewPreviewView.as_view(), name="review-preview"),
    path("available", AvailableItemsView.as_view(), name="available-items"),
    path("due", DueReviewsView.as_view(), name="due-reviews"),
    path("all-scheduled", AllScheduledView.as_view(), name="all-scheduled"),
    path("reviews", ReviewView.as_view(), name="review"),
    path("stats", StatsView.as_view(), name="review-stats"),
    path("ladder", LadderView.as_view(), name="level-ladder"),
]
