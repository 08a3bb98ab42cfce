"""
Tests for PointPromotion reward calculation and budget tracking.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from src.domain.exceptions import (
    InsufficientBudgetError,
    InvalidPercentageError,
    InvalidPointCalculationError,
    MinimumPaymentNotMetError,
    PromotionNotActiveError,
)
from src.domain.promotions import PromotionKind
from src.domain.value_objects import (
    ClientLimitType,
    DistributionType,
    PromotionSavingType,
    PromotionType,
    YesNo,
)
from tests.factories import MID_YEAR, make_point_promotion


class TestPointPromotionConstruction:
    """Test cases for construction defaults and validation."""

    def test_defaults(self, point_promotion):
        promotion = point_promotion

        assert promotion.kind is PromotionKind.POINT
        assert promotion.promotion_type is PromotionType.POINT_PROMOTION
        assert promotion.distribution_type is DistributionType.NA
        assert promotion.used_point == Decimal("0")
        assert promotion.remaining_point == Decimal("1000")
        assert promotion.used_point_percentage == Decimal("0")
        assert promotion.remaining_point_percentage == Decimal("100")

    def test_remaining_derived_from_used(self):
        promotion = make_point_promotion(used_point=250)

        assert promotion.remaining_point == Decimal("750")
        assert promotion.calculate_usage_percentage() == Decimal("25")

    def test_rate_out_of_range(self):
        with pytest.raises(InvalidPercentageError):
            make_point_promotion(promotion_saving_rate=150)

        with pytest.raises(InvalidPercentageError):
            make_point_promotion(promotion_saving_rate=-1)

    def test_budget_must_be_positive(self):
        with pytest.raises(InvalidPointCalculationError):
            make_point_promotion(promotion_budget=0)

    def test_usage_beyond_budget_rejected(self):
        with pytest.raises(InvalidPointCalculationError):
            make_point_promotion(used_point=1200)


class TestPointRewardCalculation:
    """Test cases for calculate_point_reward caps."""

    def test_rate_reward(self):
        promotion = make_point_promotion()
        assert promotion.calculate_point_reward(500) == Decimal("50")

    def test_capped_by_maximum_saving_point(self):
        promotion = make_point_promotion()
        assert promotion.calculate_point_reward(5000) == Decimal("200")

    def test_capped_by_remaining_budget(self):
        promotion = make_point_promotion(remaining_point=50)
        assert promotion.calculate_point_reward(1000) == Decimal("50")

    def test_non_numeric_amount_rejected(self):
        promotion = make_point_promotion()

        with pytest.raises(ValueError, match="Invalid amount"):
            promotion.calculate_point_reward("abc")

    def test_fixed_point_reward(self):
        promotion = make_point_promotion(
            promotion_saving_type=PromotionSavingType.FIXED_POINT,
            promotion_saving_rate=None,
            promotion_saving_point=30,
        )
        assert promotion.calculate_point_reward(10) == Decimal("30")

    def test_minimum_payment_gate(self):
        promotion = make_point_promotion(
            minimum_payment_price_yn=YesNo.Y, minimum_payment_price=500
        )

        assert promotion.calculate_point_reward(499) == Decimal("0")
        assert promotion.calculate_point_reward(500) == Decimal("50")


class TestApplyPointReward:
    """Test cases for the budget-mutating reward path."""

    def test_reward_drains_remaining_budget(self):
        promotion = make_point_promotion(remaining_point=50)

        reward = promotion.apply_point_reward(1000, current_date=MID_YEAR)

        assert reward == Decimal("50")
        assert promotion.used_point == Decimal("1000")
        assert promotion.remaining_point == Decimal("0")
        assert promotion.used_point_percentage == Decimal("100")
        assert promotion.remaining_point_percentage == Decimal("0")

    def test_percentages_follow_each_reward(self):
        promotion = make_point_promotion()

        assert promotion.apply_point_reward(500, current_date=MID_YEAR) == Decimal("50")
        assert promotion.remaining_point == Decimal("950")
        assert promotion.used_point_percentage == Decimal("5")
        assert promotion.remaining_point_percentage == Decimal("95")

    def test_used_plus_remaining_stays_at_budget(self):
        promotion = make_point_promotion()

        for amount in (500, 1234.5, 3000, 80):
            promotion.apply_point_reward(amount, current_date=MID_YEAR)
            assert promotion.used_point + promotion.remaining_point == promotion.promotion_budget

    def test_outside_window_leaves_state(self):
        promotion = make_point_promotion()

        with pytest.raises(PromotionNotActiveError):
            promotion.apply_point_reward(500, current_date=datetime(2024, 2, 1))

        assert promotion.used_point == Decimal("0")

    def test_minimum_not_met(self):
        promotion = make_point_promotion(
            minimum_payment_price_yn=YesNo.Y, minimum_payment_price=500
        )

        with pytest.raises(MinimumPaymentNotMetError) as exc_info:
            promotion.apply_point_reward(100, current_date=MID_YEAR)

        assert exc_info.value.minimum_required == Decimal("500")
        assert promotion.remaining_point == Decimal("1000")

    def test_exhausted_budget(self):
        promotion = make_point_promotion(remaining_point=0)

        with pytest.raises(InsufficientBudgetError) as exc_info:
            promotion.apply_point_reward(1000, current_date=MID_YEAR)

        assert exc_info.value.message == "No points available for reward"


class TestPointPromotionEligibility:
    """Test cases for can_apply and per-client limits."""

    def test_can_apply_mirrors_guards(self):
        promotion = make_point_promotion()

        assert promotion.can_apply(500, MID_YEAR)
        assert not promotion.can_apply(500, datetime(2024, 2, 1))
        assert promotion.used_point == Decimal("0")

    def test_can_apply_with_exhausted_budget(self):
        promotion = make_point_promotion(remaining_point=0)
        assert not promotion.can_apply(500, MID_YEAR)

    def test_no_client_limit(self):
        promotion = make_point_promotion(client_limit_type=ClientLimitType.NONE, client_limit_count=1)
        assert promotion.can_user_apply(10, 10000)

    def test_count_limit_reached(self):
        promotion = make_point_promotion(
            client_limit_type=ClientLimitType.DAILY, client_limit_term=1, client_limit_count=3
        )

        assert promotion.can_user_apply(2, 0)
        assert not promotion.can_user_apply(3, 0)

    def test_point_limit_reached(self):
        promotion = make_point_promotion(
            client_limit_type=ClientLimitType.MONTHLY, client_limit_point=100
        )

        assert promotion.can_user_apply(0, 99)
        assert not promotion.can_user_apply(0, 100)
