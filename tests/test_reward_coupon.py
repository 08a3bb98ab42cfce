"""
Tests for RewardCoupon grant rules and validity window.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from src.domain.exceptions import (
    InsufficientBudgetError,
    InvalidPromotionError,
    MinimumPaymentNotMetError,
    PromotionNotActiveError,
)
from src.domain.promotions import PromotionKind
from src.domain.value_objects import DistributionType, FlexibleDaysType, YesNo
from tests.factories import MID_YEAR, make_reward_coupon


class TestRewardCouponGrant:
    """Test cases for automatic grant qualification."""

    def test_defaults(self, reward_coupon):
        coupon = reward_coupon

        assert coupon.kind is PromotionKind.REWARD_COUPON
        assert coupon.distribution_type is DistributionType.REWARD
        assert coupon.is_automatic_grant_enabled()

    def test_qualifies_with_minimum(self):
        coupon = make_reward_coupon(coupon_grant_min_price=1000)

        assert not coupon.qualifies_for_auto_grant(999)
        assert coupon.qualifies_for_auto_grant(1000)

    def test_qualifies_without_minimum(self):
        coupon = make_reward_coupon(coupon_grant_min_price=None)
        assert coupon.qualifies_for_auto_grant(1)

    def test_disabled_grant_never_qualifies(self):
        coupon = make_reward_coupon(coupon_grant_yn=YesNo.N)
        assert not coupon.qualifies_for_auto_grant(100000)

    def test_grant_until_purchased_quantity(self):
        coupon = make_reward_coupon(
            purchased_coupon_quantity=2, remaining_coupon_quantity=2
        )

        assert coupon.grant_coupon(1500, MID_YEAR) == 1
        assert coupon.grant_coupon(1500, MID_YEAR) == 2
        with pytest.raises(InsufficientBudgetError):
            coupon.grant_coupon(1500, MID_YEAR)
        assert coupon.received_coupon_quantity == 2

    def test_grant_below_minimum(self):
        coupon = make_reward_coupon()

        with pytest.raises(MinimumPaymentNotMetError):
            coupon.grant_coupon(999, MID_YEAR)
        assert coupon.received_coupon_quantity == 0

    def test_grant_disabled(self):
        coupon = make_reward_coupon(coupon_grant_yn=YesNo.N)

        with pytest.raises(InvalidPromotionError):
            coupon.grant_coupon(1500, MID_YEAR)

    def test_grant_outside_window(self):
        coupon = make_reward_coupon()

        with pytest.raises(PromotionNotActiveError):
            coupon.grant_coupon(1500, datetime(2024, 3, 1))


class TestRewardCouponValidity:
    """Test cases for the issue-date based validity window."""

    def setup_method(self):
        self.coupon = make_reward_coupon(validity_period_days=10)

    def test_expiration_from_issue_date(self):
        assert self.coupon.calculate_coupon_expiration_date("2023-06-01") == datetime(2023, 6, 11)

    def test_fixed_date_type_still_counts_from_issue(self):
        coupon = make_reward_coupon(
            validity_period_type=FlexibleDaysType.FIXED_DATE, validity_period_days=10
        )
        assert coupon.calculate_coupon_expiration_date("2023-06-01") == datetime(2023, 6, 11)

    def test_is_coupon_valid(self):
        assert self.coupon.is_coupon_valid("2023-06-01", datetime(2023, 6, 11))
        assert not self.coupon.is_coupon_valid("2023-06-01", datetime(2023, 6, 12))

    def test_discount_with_validity(self):
        assert self.coupon.calculate_discount_with_validity(
            "2023-06-01", 200, datetime(2023, 6, 5)
        ) == Decimal("50")
        assert self.coupon.calculate_discount_with_validity(
            "2023-06-01", 200, datetime(2023, 6, 12)
        ) == Decimal("0")

    def test_days_until_expiration(self):
        coupon = make_reward_coupon(validity_period_days=20)

        assert coupon.days_until_expiration("2023-08-01", datetime(2023, 8, 11)) == 10
        assert coupon.days_until_expiration("2023-08-01", datetime(2023, 8, 11, 12)) == 10

    def test_expiring_soon(self):
        assert self.coupon.is_expiring_soon("2023-09-01", 3, datetime(2023, 9, 9))
        assert not self.coupon.is_expiring_soon("2023-09-01", 3, datetime(2023, 9, 5))
        assert not self.coupon.is_expiring_soon("2023-09-01", 3, datetime(2023, 9, 15))

    def test_zero_days_left_is_not_expiring_soon(self):
        assert self.coupon.is_coupon_valid("2023-09-01", datetime(2023, 9, 11))
        assert not self.coupon.is_expiring_soon("2023-09-01", 3, datetime(2023, 9, 11))

    def test_validity_period_info(self):
        info = self.coupon.validity_period_info()

        assert info["days"] == 10
        assert info["type"] is FlexibleDaysType.FLEXIBLE_DAYS
        assert info["description"] == "Valid for 10 days from issue date"
