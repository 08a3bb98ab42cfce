"""
Tests for PromotionOrder payment facts.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from src.domain.exceptions import InvalidPromotionOrderError
from src.domain.value_objects import OrderStatusType, PaymentType
from tests.factories import make_order


class TestPromotionOrder:
    """Test cases for PromotionOrder."""

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidPromotionOrderError):
            make_order(final_payment_price=-1)

    def test_zero_price_allowed(self):
        assert make_order(final_payment_price=0).final_payment_price == Decimal("0")

    def test_payment_status_predicates(self):
        order = make_order()

        assert order.is_payment_completed()
        assert not order.is_refunded()

    def test_partial_refund(self):
        order = make_order(order_status=OrderStatusType.PARTIAL_REFUND_COMPLETED)

        assert order.is_refunded()
        assert order.is_partially_refunded()
        assert not order.is_fully_refunded()
        assert not order.is_payment_completed()

    def test_full_refund(self):
        order = make_order(order_status=OrderStatusType.REFUND_COMPLETED)

        assert order.is_refunded()
        assert order.is_fully_refunded()

    def test_payment_type_predicates(self):
        assert make_order().is_line_pay()
        assert make_order(payment_type=PaymentType.CREDIT_CARD).is_credit_card()

    def test_days_since_payment_rounds_down(self):
        order = make_order(payment_date=datetime(2023, 1, 1))

        assert order.days_since_payment(datetime(2023, 1, 3, 12)) == 2
        assert order.days_since_payment(datetime(2022, 12, 31)) == -1

    def test_validate_payment_amount_tolerance(self):
        order = make_order(final_payment_price=5000)

        assert order.validate_payment_amount(5000)
        assert order.validate_payment_amount("5000.005")
        assert not order.validate_payment_amount("5000.02")

    def test_payment_info_accessors(self):
        order = make_order()

        assert order.order_id == "ORD-0001"
        assert order.total_order_amount == Decimal("5000")
