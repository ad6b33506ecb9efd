from django.urls import path

from .views import CartByUserView, CartFetchView

urlpatterns = [
    path("", CartFetchView.as_view(), name="api-carts-fetch"),
    path(
        "users/<int:user_id>/",
        CartByUserView.as_view(),
        name="api-carts-by-user",
    ),
]
