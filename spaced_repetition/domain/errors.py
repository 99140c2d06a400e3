class SchedulingError(Exception):
    code = "scheduling_error"
    default_message = "Scheduling error"

    def __init__(self, message: str = "", **context):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.context = context


class NotFound(SchedulingError):
    """Unknown schedule item, reviewable item or identifier."""

    code = "not_found"
    default_message = "Item not found"


class AlreadyExists(SchedulingError):
    """The (user, reviewable) pair is already scheduled.

    Callers are expected to treat this as a benign no-op signal.
    """

    code = "already_exists"
    default_message = "Item is already scheduled for review"


class Unauthorized(SchedulingError):
    code = "unauthorized"
    default_message = "Item belongs to another user"


class InvalidState(SchedulingError):
    """History and schedule state disagree. Always a bug."""

    code = "invalid_state"
    default_message = "Review history does not match schedule state"
