from django.db import models
from django.utils import timezone

from apps.catalog.models import Product
from apps.users.models import User


class Cart(models.Model):
    """One line of a customer's cart: a product and how many of it."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="cart_items")
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="cart_items"
    )
    quantity = models.PositiveIntegerField(default=1)
    added_time = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "cart"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"], name="cart_unique_user_product"
            ),
        ]
        indexes = [
            models.Index(fields=["user", "added_time"], name="cart_user_added_idx"),
        ]

    def __str__(self):
        return f"Cart line {self.id}: {self.quantity} x {self.product_id} for {self.user_id}"
