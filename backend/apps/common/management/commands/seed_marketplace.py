from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import Cart
from apps.catalog.models import Product
from apps.users.models import User

DEFAULT_PASSWORD = "marketplace123"

SELLERS = [
    ("northwind", "Northwind", "Traders", "sales@northwind.example"),
    ("acme", "Acme", "Goods", "hello@acme.example"),
]

CUSTOMERS = [
    ("johnd", "John", "Doe", "john@customer.example"),
    ("mor_2314", "Morrison", "Reed", "morrison@customer.example"),
    ("kevinryan", "Kevin", "Ryan", "kevin@customer.example"),
]

# (seller username, title, price, stock, description)
PRODUCTS = [
    ("northwind", "Foldsack Backpack", "109.95", 40, "Fits 15 inch laptops."),
    ("northwind", "Slim Fit T-Shirt", "22.30", 120, "Light weight, soft fabric."),
    ("northwind", "Cotton Jacket", "55.99", 25, "Outerwear for spring and autumn."),
    ("acme", "Dragon Station Chain Bracelet", "695.00", 5, "Gold and silver."),
    ("acme", "Solid Gold Petite Micropave", "168.00", 8, "Satisfaction guaranteed."),
    ("acme", "Portable External Hard Drive 2TB", "64.00", 60, "USB 3.0."),
]

# (customer username, product title, quantity)
CART_LINES = [
    ("johnd", "Foldsack Backpack", 1),
    ("johnd", "Slim Fit T-Shirt", 3),
    ("mor_2314", "Solid Gold Petite Micropave", 1),
    ("mor_2314", "Portable External Hard Drive 2TB", 2),
]


class Command(BaseCommand):
    help = "Seed sellers, products, customers and cart lines for local use."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing data before seeding"
        )

    def _upsert_user(self, username, firstname, lastname, email, role):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                "firstname": firstname,
                "lastname": lastname,
                "email": email,
                "role": role,
            },
        )
        if created:
            user.set_password(DEFAULT_PASSWORD)
            user.save()
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            Cart.objects.all().delete()
            Product.objects.all().delete()
            User.objects.filter(is_superuser=False).delete()

        self.stdout.write("Seeding sellers...")
        sellers = {
            username: self._upsert_user(username, first, last, email, User.Role.SELLER)
            for username, first, last, email in SELLERS
        }

        self.stdout.write("Seeding customers...")
        customers = {
            username: self._upsert_user(username, first, last, email, User.Role.CUSTOMER)
            for username, first, last, email in CUSTOMERS
        }

        self.stdout.write("Seeding products...")
        products = {}
        for seller_name, title, price, stock, description in PRODUCTS:
            product, _ = Product.objects.get_or_create(
                title=title,
                seller=sellers[seller_name],
                defaults={
                    "price": Decimal(price),
                    "quantity": stock,
                    "description": description,
                },
            )
            products[title] = product

        self.stdout.write("Seeding cart lines...")
        for username, title, quantity in CART_LINES:
            Cart.objects.update_or_create(
                user=customers[username],
                product=products[title],
                defaults={"quantity": quantity},
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Marketplace seed completed (password for seeded users: {DEFAULT_PASSWORD})."
            )
        )
