import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class Seller(AbstractUser):
    """Tenant identity. Owns clients and orders; products are shared."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        app_label = "authentication"
        verbose_name = "seller"
        verbose_name_plural = "sellers"

    def __str__(self):
        return self.email
