"""
AI Promotion Presets

Recommended promotion setups produced for a merchant: three budget tiers,
the insights that explain them, a base application to copy from and the
in-service applications the recommendation was matched against.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, FrozenSet, Optional, Tuple

from .entities import PromotionApplication
from .exceptions import (
    InvalidCouponQuantityError,
    InvalidPercentageError,
    InvalidPointCalculationError,
    InvalidPromotionError,
)
from .value_objects import (
    DistributionType,
    ProductType,
    PromotionType,
    YesNo,
    to_decimal,
)


DEFAULT_CURRENCY = "TWD"


class BudgetOption(str, Enum):
    """Budget tier of a recommendation."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass(frozen=True)
class ContentTemplate:
    """Title and body of an insight shown next to a recommendation."""

    title: str
    description: str


@dataclass(frozen=True)
class AIBudgetSettings:
    """
    Budget settings of one recommendation tier.

    Subclasses narrow the distribution types they accept; the base class
    accepts any of them.
    """

    allowed_distribution_types: ClassVar[FrozenSet[DistributionType]] = frozenset(DistributionType)

    distribution_type: DistributionType

    def __post_init__(self):
        object.__setattr__(self, "distribution_type", DistributionType(self.distribution_type))
        if self.distribution_type not in self.allowed_distribution_types:
            raise InvalidPromotionError(
                f"{type(self).__name__} does not accept distribution type "
                f"{self.distribution_type.value}",
                field="distribution_type",
            )

    def is_point_promotion_budget(self) -> bool:
        return self.distribution_type is DistributionType.NA

    def is_coupon_promotion_budget(self) -> bool:
        return self.distribution_type in (DistributionType.DOWNLOAD, DistributionType.REWARD)

    def is_downloadable_coupon_promotion_budget(self) -> bool:
        return self.distribution_type is DistributionType.DOWNLOAD

    def is_reward_coupon_promotion_budget(self) -> bool:
        return self.distribution_type is DistributionType.REWARD


@dataclass(frozen=True)
class AIPointBudgetSettings(AIBudgetSettings):
    """Budget settings for a point promotion tier."""

    allowed_distribution_types: ClassVar[FrozenSet[DistributionType]] = frozenset(
        {DistributionType.NA}
    )

    promotion_budget: Decimal = Decimal("0")
    promotion_saving_rate: Optional[Decimal] = None
    promotion_saving_point: Optional[Decimal] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "promotion_budget", to_decimal(self.promotion_budget))
        if self.promotion_budget <= 0:
            raise InvalidPointCalculationError("Promotion budget must be positive")

        if self.promotion_saving_rate is not None:
            rate = to_decimal(self.promotion_saving_rate)
            if rate < 0 or rate > 100:
                raise InvalidPercentageError(rate)
            object.__setattr__(self, "promotion_saving_rate", rate)

        if self.promotion_saving_point is not None:
            object.__setattr__(
                self, "promotion_saving_point", to_decimal(self.promotion_saving_point)
            )


@dataclass(frozen=True)
class AICouponBudgetSettings(AIBudgetSettings):
    """Budget settings shared by downloadable and reward coupon tiers."""

    allowed_distribution_types: ClassVar[FrozenSet[DistributionType]] = frozenset(
        {DistributionType.DOWNLOAD, DistributionType.REWARD}
    )

    purchased_coupon_quantity: int = 0
    coupon_discount_price: Decimal = Decimal("0")
    full_payment_yn: YesNo = YesNo.N
    minimum_payment_price: Decimal = Decimal("0")

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "full_payment_yn", YesNo(self.full_payment_yn))
        object.__setattr__(self, "coupon_discount_price", to_decimal(self.coupon_discount_price))
        object.__setattr__(self, "minimum_payment_price", to_decimal(self.minimum_payment_price))

        if self.purchased_coupon_quantity < 0:
            raise InvalidCouponQuantityError(
                "Purchased coupon quantity cannot be negative",
                field="purchased_coupon_quantity",
            )
        if self.coupon_discount_price <= 0:
            raise InvalidCouponQuantityError(
                "Coupon discount price must be positive", field="coupon_discount_price"
            )
        if self.minimum_payment_price < 0:
            raise InvalidCouponQuantityError(
                "Minimum payment price cannot be negative", field="minimum_payment_price"
            )


@dataclass(frozen=True)
class AIDownloadableCouponBudgetSettings(AICouponBudgetSettings):
    allowed_distribution_types: ClassVar[FrozenSet[DistributionType]] = frozenset(
        {DistributionType.DOWNLOAD}
    )


@dataclass(frozen=True)
class AIRewardCouponBudgetSettings(AICouponBudgetSettings):
    """Budget settings for a reward coupon tier, with its grant rule."""

    allowed_distribution_types: ClassVar[FrozenSet[DistributionType]] = frozenset(
        {DistributionType.REWARD}
    )

    coupon_grant_yn: YesNo = YesNo.N
    coupon_grant_min_price: Optional[Decimal] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "coupon_grant_yn", YesNo(self.coupon_grant_yn))
        if self.coupon_grant_min_price is not None:
            object.__setattr__(
                self, "coupon_grant_min_price", to_decimal(self.coupon_grant_min_price)
            )


@dataclass(frozen=True)
class AIBudgetOptions:
    """The low, mid and high budget tiers of one recommendation."""

    low_budget: AIBudgetSettings
    mid_budget: AIBudgetSettings
    high_budget: AIBudgetSettings
    recommended_option: BudgetOption
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        object.__setattr__(self, "recommended_option", BudgetOption(self.recommended_option))
        distribution_types = {
            budget.distribution_type
            for budget in (self.low_budget, self.mid_budget, self.high_budget)
        }
        if len(distribution_types) != 1:
            raise InvalidPromotionError(
                "All budget tiers must share one distribution type",
                field="budget_options",
            )

    def budget_for(self, option: BudgetOption) -> AIBudgetSettings:
        option = BudgetOption(option)
        if option is BudgetOption.LOW:
            return self.low_budget
        if option is BudgetOption.MID:
            return self.mid_budget
        return self.high_budget

    @property
    def recommended_budget(self) -> AIBudgetSettings:
        return self.budget_for(self.recommended_option)


@dataclass(frozen=True)
class AIPromotionMetaData:
    """Insights explaining a recommendation and each of its budget tiers."""

    promotion_general_insight: ContentTemplate
    low_budget_insight: ContentTemplate
    mid_budget_insight: ContentTemplate
    high_budget_insight: ContentTemplate

    def insight_for(self, option: BudgetOption) -> ContentTemplate:
        option = BudgetOption(option)
        if option is BudgetOption.LOW:
            return self.low_budget_insight
        if option is BudgetOption.MID:
            return self.mid_budget_insight
        return self.high_budget_insight


@dataclass(frozen=True)
class AIPromotionPreset:
    """
    A recommended promotion setup.

    The promotion and distribution types tell which promotion variant the
    preset builds; ``matched_apply_seqs`` lists the in-service applications
    the recommendation was derived from.
    """

    id: str
    promotion_type: PromotionType
    product_type: ProductType
    distribution_type: DistributionType
    budget_options: AIBudgetOptions
    base_promotion_application: PromotionApplication
    metadata: AIPromotionMetaData
    matched_apply_seqs: Tuple[int, ...] = ()

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise InvalidPromotionError("Preset id cannot be empty", field="id")
        object.__setattr__(self, "promotion_type", PromotionType(self.promotion_type))
        object.__setattr__(self, "product_type", ProductType(self.product_type))
        object.__setattr__(self, "distribution_type", DistributionType(self.distribution_type))
        object.__setattr__(self, "matched_apply_seqs", tuple(self.matched_apply_seqs))

    def is_preset_for_point_coupon_promotion(self) -> bool:
        return self.promotion_type is PromotionType.POINT_COUPON

    def is_preset_for_reward_coupon_promotion(self) -> bool:
        return (
            self.is_preset_for_point_coupon_promotion()
            and self.distribution_type is DistributionType.REWARD
        )

    def is_preset_for_downloadable_coupon_promotion(self) -> bool:
        return (
            self.is_preset_for_point_coupon_promotion()
            and self.distribution_type is DistributionType.DOWNLOAD
        )

    def is_preset_for_point_promotion(self) -> bool:
        return self.promotion_type is PromotionType.POINT_PROMOTION

    def has_matched_apply_seqs(self) -> bool:
        return len(self.matched_apply_seqs) > 0

    def is_matched_with(self, apply_seq: int) -> bool:
        return apply_seq in self.matched_apply_seqs
