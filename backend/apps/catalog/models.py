from django.db import models
from django.utils import timezone

from apps.users.models import User


class Product(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    # Stock on hand; shown to shoppers, never checked when reading carts.
    quantity = models.PositiveIntegerField(default=0)
    image = models.TextField(blank=True, default="")
    seller = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="products"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["seller"], name="product_seller_idx"),
        ]

    def __str__(self):
        return self.title
