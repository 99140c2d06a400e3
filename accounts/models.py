import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user with a UUID primary key, so its id can be handed to the
    scheduler as an opaque owner identifier.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
