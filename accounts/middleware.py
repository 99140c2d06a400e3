from django.contrib.auth import login
from django.core.exceptions import ValidationError
from django.http import HttpResponse

from accounts.models import User

import logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


class MockLoginUserMiddleware:
    """
    Development stand-in for real authentication on API paths.

    ``X-User-NAME`` (username) or ``X-User-ID`` (user UUID) selects the acting
    user; unknown or inactive users are rejected before the view runs.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith(API_PREFIX):
            lookup = self._lookup(request)
            if lookup:
                logger.info("Mock login for user: %s", lookup)
                try:
                    user = User.objects.get(is_active=True, **lookup)
                except (User.DoesNotExist, ValidationError):
                    return HttpResponse(
                        "User not found or invalid credentials.", status=401
                    )
                if request.user != user:
                    login(request, user)
        return self.get_response(request)

    def _lookup(self, request):
        username = request.headers.get("X-User-NAME")
        if username:
            return {"username": username}
        user_id = request.headers.get("X-User-ID")
        if user_id:
            return {"pk": user_id}
        return None
