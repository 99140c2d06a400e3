from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response


class UserViewSet(viewsets.ViewSet):
    """
    ViewSet for user-related operations.
    """

    @action(detail=False, methods=["get"])
    def me(self, request):
        """
        Returns the id and username of the logged-in user.
        """
        if request.user.is_authenticated:
            return Response(
                {"id": str(request.user.id), "username": request.user.username},
                status=status.HTTP_200_OK,
            )
        else:
            return Response(
                {"error": "User not authenticated"}, status=status.HTTP_401_UNAUTHORIZED
            )
