from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """
    Accept the user that MockLoginUserMiddleware (or a session) already put
    on the underlying Django request.
    """

    def authenticate(self, request):
        user = getattr(request._request, "user", None)
        if user is None or not user.is_authenticated:
            return None
        return user, None

    def authenticate_header(self, request):
        return "X-User-NAME"
