from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
import structlog

from ..domain.errors import AlreadyExists, InvalidState, NotFound, SchedulingError, Unauthorized

logger = structlog.get_logger()

STATUS_BY_ERROR = {
    NotFound: status.HTTP_404_NOT_FOUND,
    AlreadyExists: status.HTTP_409_CONFLICT,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    InvalidState: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def scheduling_exception_handler(exc, context):
    if not isinstance(exc, SchedulingError):
        return exception_handler(exc, context)

    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    log = logger.error if status_code >= 500 else logger.info
    log("scheduling_error", code=exc.code, error=exc.message, **{
        k: str(v) for k, v in exc.context.items()
    })
    return Response({"error": exc.message, "code": exc.code}, status=status_code)
