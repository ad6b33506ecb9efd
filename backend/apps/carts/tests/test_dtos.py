import dataclasses
import unittest
from decimal import Decimal

from apps.api.envelope import STATUS_FAILED, STATUS_SUCCESS, ResponseEnvelope
from apps.carts.dtos import CartResponseDTO, as_amount


class CartResponseDTOTests(unittest.TestCase):
    def test_fresh_instance_is_empty_with_zero_total(self):
        dto = CartResponseDTO()
        self.assertEqual(dto.items, [])
        self.assertIsInstance(dto.total_amount, Decimal)
        self.assertEqual(dto.total_amount, 0)
        self.assertEqual(dto.envelope, ResponseEnvelope())

    def test_fresh_instances_do_not_share_item_lists(self):
        first = CartResponseDTO()
        second = CartResponseDTO()
        self.assertIsNot(first.items, second.items)

    def test_none_values_fall_back_to_defaults(self):
        dto = CartResponseDTO(items=None, total_amount=None, envelope=None)
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.total_amount, Decimal("0"))
        self.assertTrue(dto.envelope.is_success)

    def test_with_items_keeps_content_and_order(self):
        lines = [{"id": "c2"}, {"id": "c1"}, {"id": "c2"}]
        dto = CartResponseDTO().with_items(lines)
        self.assertEqual(dto.items, lines)

    def test_with_items_accepts_empty_sequence(self):
        dto = CartResponseDTO(items=[{"id": "c1"}]).with_items([])
        self.assertEqual(dto.items, [])

    def test_with_items_returns_a_new_value(self):
        original = CartResponseDTO()
        updated = original.with_items([{"id": "c1"}])
        self.assertEqual(original.items, [])
        self.assertEqual(updated.item_count, 1)

    def test_with_total_amount_is_exact(self):
        for amount in (
            Decimal("19.98"),
            Decimal("0"),
            Decimal("-5.25"),
            Decimal("0.0000001"),
            Decimal("123456789.123456789"),
        ):
            with self.subTest(amount=amount):
                dto = CartResponseDTO().with_total_amount(amount)
                self.assertIs(dto.total_amount, amount)

    def test_total_is_not_derived_from_items(self):
        dto = CartResponseDTO(items=[{"id": "c1", "price": "5.00"}], total_amount="1.00")
        self.assertEqual(dto.total_amount, Decimal("1.00"))

    def test_instances_are_frozen(self):
        dto = CartResponseDTO()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            dto.total_amount = Decimal("1")

    def test_failure_carries_failed_envelope_and_empty_payload(self):
        dto = CartResponseDTO.failure("User not found")
        self.assertEqual(dto.envelope.status, STATUS_FAILED)
        self.assertEqual(dto.envelope.message, "User not found")
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.total_amount, 0)

    def test_with_envelope_replaces_only_the_envelope(self):
        dto = CartResponseDTO(items=[{"id": "c1"}], total_amount=Decimal("2"))
        updated = dto.with_envelope(ResponseEnvelope.success("ok"))
        self.assertEqual(updated.envelope.status, STATUS_SUCCESS)
        self.assertEqual(updated.envelope.message, "ok")
        self.assertEqual(updated.items, [{"id": "c1"}])
        self.assertEqual(updated.total_amount, Decimal("2"))


class AsAmountTests(unittest.TestCase):
    def test_float_keeps_printed_digits(self):
        self.assertEqual(as_amount(19.98), Decimal("19.98"))

    def test_int_and_str(self):
        self.assertEqual(as_amount(3), Decimal("3"))
        self.assertEqual(as_amount("-0.50"), Decimal("-0.50"))

    def test_none_is_zero(self):
        self.assertEqual(as_amount(None), Decimal("0"))
