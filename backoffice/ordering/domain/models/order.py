import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from backoffice.catalog.domain.models.catalog import Product
from backoffice.clients.domain.models.client import Client


class Order(models.Model):
    STATE_PENDING = "pending"
    STATE_COMPLETED = "completed"
    STATE_CANCELLED = "cancelled"

    # A label only; no transition rules beyond stock held by cancelled orders
    STATE_CHOICES = [
        (STATE_PENDING, "Pending"),
        (STATE_COMPLETED, "Completed"),
        (STATE_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders")
    client = models.ForeignKey(Client, on_delete=models.RESTRICT, related_name="orders")

    total = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default=STATE_PENDING)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "backoffice"
        indexes = [
            models.Index(fields=["seller", "state"], name="backoffice__seller__9b1c7a_idx"),
            models.Index(fields=["state", "client"], name="backoffice__state_5e2f80_idx"),
        ]

    @property
    def holds_stock(self):
        return self.state != self.STATE_CANCELLED

    def line_items(self):
        """Lines as ``(product_id, quantity)`` pairs in insertion order."""
        return [(line.product_id, line.quantity) for line in self.lines.all()]

    def __str__(self):
        return f"Order {str(self.id)[:8]} ({self.state})"


class OrderLine(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="lines")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="order_lines")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    # Insertion order inside the order
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        app_label = "backoffice"

    def __str__(self):
        return f"{self.quantity}x {self.product_id} in order {str(self.order_id)[:8]}"
