from typing import Generic, Iterable, Optional, Sequence, Type, TypeVar

from django.db import models

T = TypeVar("T", bound=models.Model)


class ReadRepository(Generic[T]):
    """Read-only access to one model. Cart lines are never written through the API."""

    ordering: Sequence[str] = ()

    def __init__(self, model: Type[T]):
        self.model = model

    def _base_queryset(self):
        return self.model.objects.all()

    def get(self, **filters) -> Optional[T]:
        return self._base_queryset().filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        qs = self._base_queryset().filter(**filters)
        if self.ordering:
            qs = qs.order_by(*self.ordering)
        return qs

    def exists(self, **filters) -> bool:
        return self._base_queryset().filter(**filters).exists()
