from django.urls import include, path

urlpatterns = [
    path("api/", include("accounts.urls")),
    path("api/spaced-repetition/", include("spaced_repetition.api.urls")),
]
