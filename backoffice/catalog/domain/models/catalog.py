import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Catalog entry shared by every seller.

    ``stock_quantity`` is the contended resource; only the inventory service
    changes it after creation, and the column is non-negative at DB level.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Pricing and Inventory
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    stock_quantity = models.PositiveIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        app_label = "backoffice"
        indexes = [
            models.Index(fields=["name"], name="backoffice__name_2c6a51_idx"),
        ]

    def __str__(self):
        return self.name
