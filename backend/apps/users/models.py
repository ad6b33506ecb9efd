from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        CUSTOMER = "customer", "Customer"
        SELLER = "seller", "Seller"
        ADMIN = "admin", "Admin"

    # id, username, password, is_staff, is_superuser and friends come from AbstractUser
    firstname = models.CharField(max_length=100)
    lastname = models.CharField(max_length=100)
    phone = models.CharField(max_length=50, blank=True, null=True)
    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=20, choices=Role.choices, default=Role.CUSTOMER
    )

    @property
    def display_name(self) -> str:
        full = f"{self.firstname} {self.lastname}".strip()
        return full or self.username

    @property
    def can_own_cart(self) -> bool:
        """Only plain customer accounts hold cart lines."""
        if self.is_staff or self.is_superuser:
            return False
        return self.role == self.Role.CUSTOMER

    @property
    def can_view_any_cart(self) -> bool:
        """Staff, superusers and admin-role accounts may read other customers' carts."""
        return bool(self.is_staff or self.is_superuser or self.role == self.Role.ADMIN)

    def __str__(self):
        return self.username
