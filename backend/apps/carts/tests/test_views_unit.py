import unittest
from decimal import Decimal
from unittest.mock import Mock, patch

from rest_framework.test import APIRequestFactory, force_authenticate

from apps.api.envelope import ResponseEnvelope
from apps.api.validation import validate_request_context
from apps.carts.dtos import CartResponseDTO
from apps.carts.views import CartByUserView, CartFetchView
from apps.users.models import User


def make_cart_response(total="19.98"):
    return CartResponseDTO(
        items=[{"id": "c1"}, {"id": "c2"}],
        total_amount=Decimal(total),
        envelope=ResponseEnvelope.success("Cart fetched successfully"),
    )


class CartViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def dispatch(self, request, view_cls, **kwargs):
        pre_response = validate_request_context(request, view_cls, kwargs)
        if pre_response is not None:
            return pre_response
        view = view_cls.as_view()
        return view(request, **kwargs)

    def authenticate(self, request, user):
        request.user = user
        force_authenticate(request, user=user)

    @staticmethod
    def _user(user_id, *, staff=False, superuser=False, role=User.Role.CUSTOMER):
        return User(
            id=user_id,
            username=f"user{user_id}",
            role=role,
            is_staff=staff,
            is_superuser=superuser,
        )

    def test_fetch_own_cart(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (make_cart_response(), None)
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "success")
        self.assertEqual(response.data["carts"], [{"id": "c1"}, {"id": "c2"}])
        self.assertEqual(response.data["totalCartAmount"], "19.98")
        service_mock.fetch_cart_with_access.assert_called_once_with(
            actor_id=7, target_user_id=7, is_privileged=False
        )

    def test_fetch_empty_cart_serializes_defaults(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (CartResponseDTO(), None)
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["carts"], [])
        self.assertEqual(response.data["totalCartAmount"], "0.00")

    def test_staff_can_target_other_user(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (make_cart_response(), None)
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/", {"userId": 5})
            self.authenticate(request, self._user(1, staff=True))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 200)
        service_mock.fetch_cart_with_access.assert_called_once_with(
            actor_id=1, target_user_id=5, is_privileged=True
        )

    def test_customer_cannot_target_other_user(self):
        service_mock = Mock()
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/", {"userId": 5})
            self.authenticate(request, self._user(1))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"]["code"], "FORBIDDEN")
        service_mock.fetch_cart_with_access.assert_not_called()

    def test_invalid_user_id_returns_validation_error(self):
        service_mock = Mock()
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/", {"userId": "bad"})
            self.authenticate(request, self._user(1, staff=True))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        service_mock.fetch_cart_with_access.assert_not_called()

    def test_unauthenticated_request_is_rejected(self):
        service_mock = Mock()
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/")
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["error"]["code"], "UNAUTHORIZED")

    def test_service_error_maps_onto_failure_envelope(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (
            None,
            ("NOT_FOUND", "User not found", {"userId": "5"}),
        )
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/", {"userId": 5})
            self.authenticate(request, self._user(1, superuser=True))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["status"], "failed")
        self.assertEqual(response.data["message"], "User not found")
        self.assertEqual(response.data["carts"], [])
        self.assertEqual(response.data["totalCartAmount"], "0.00")

    def test_non_customer_maps_onto_forbidden_envelope(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (
            None,
            ("FORBIDDEN", "Only customer accounts can own carts", None),
        )
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/")
            self.authenticate(request, self._user(3))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["status"], "failed")

    def test_cart_by_user_path(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (make_cart_response("5.00"), None)
        with patch.object(CartByUserView, "service", service_mock):
            request = self.factory.get("/api/carts/users/4/")
            self.authenticate(request, self._user(4))
            response = self.dispatch(request, CartByUserView, user_id=4)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["totalCartAmount"], "5.00")
        service_mock.fetch_cart_with_access.assert_called_once_with(
            actor_id=4, target_user_id=4, is_privileged=False
        )

    def test_cart_by_user_forbidden_for_other_customer(self):
        service_mock = Mock()
        with patch.object(CartByUserView, "service", service_mock):
            request = self.factory.get("/api/carts/users/9/")
            self.authenticate(request, self._user(4))
            response = self.dispatch(request, CartByUserView, user_id=9)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"]["code"], "FORBIDDEN")

    def test_admin_role_can_target_other_user(self):
        service_mock = Mock()
        service_mock.fetch_cart_with_access.return_value = (make_cart_response(), None)
        with patch.object(CartFetchView, "service", service_mock):
            request = self.factory.get("/api/carts/", {"userId": 5})
            self.authenticate(request, self._user(2, role=User.Role.ADMIN))
            response = self.dispatch(request, CartFetchView)
        self.assertEqual(response.status_code, 200)
        service_mock.fetch_cart_with_access.assert_called_once_with(
            actor_id=2, target_user_id=5, is_privileged=True
        )
