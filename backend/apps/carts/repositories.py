from apps.common.repository import ReadRepository
from .models import Cart


class CartRepository(ReadRepository[Cart]):
    # Insertion order; id breaks ties between lines added in the same instant.
    ordering = ("added_time", "id")

    def __init__(self):
        super().__init__(Cart)

    def _base_queryset(self):
        return self.model.objects.select_related("product", "product__seller")

    def list_for_user(self, user_id: int):
        return self.list(user_id=user_id)
