"""
Promotion Variants

The promotion hierarchy: a shared Promotion contract, the Coupon bookkeeping
layer, and the three concrete variants (point promotion, downloadable coupon,
reward coupon). The variant set is closed and registered in PROMOTION_VARIANTS.
"""

import math
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Type
from uuid import uuid4

from .exceptions import (
    CouponExpiredError,
    DownloadLimitExceededError,
    InsufficientBudgetError,
    InvalidCouponQuantityError,
    InvalidPercentageError,
    InvalidPointCalculationError,
    InvalidPromotionDateError,
    InvalidPromotionError,
    MinimumPaymentNotMetError,
    PromotionNotActiveError,
)
from .value_objects import (
    EXHAUSTION_ALARM_PERCENTAGES,
    AmountInput,
    ClientLimitType,
    DateInput,
    DistributionType,
    ExposureProduct,
    ExposureType,
    FlexibleDaysType,
    ImageType,
    ProductType,
    PromotionSavingType,
    PromotionType,
    YesNo,
    to_datetime,
    to_decimal,
    utc_now,
)

MAX_TITLE_LENGTH = 300
MAX_RESCHEDULE_DAYS = 365
SECONDS_PER_DAY = 24 * 60 * 60


class PromotionKind(str, Enum):
    """Tag identifying each concrete promotion variant."""

    POINT = "POINT"
    DOWNLOADABLE_COUPON = "DOWNLOADABLE_COUPON"
    REWARD_COUPON = "REWARD_COUPON"


PROMOTION_VARIANTS: Dict[PromotionKind, Type["Promotion"]] = {}


def register_variant(cls: Type["Promotion"]) -> Type["Promotion"]:
    """Class decorator adding a concrete variant to the closed registry."""
    if cls.kind is None:
        raise TypeError(f"{cls.__name__} must declare a promotion kind")
    if cls.kind in PROMOTION_VARIANTS:
        raise TypeError(f"Promotion kind {cls.kind.value} is already registered")
    PROMOTION_VARIANTS[cls.kind] = cls
    return cls


def promotion_variant(kind: PromotionKind) -> Type["Promotion"]:
    """Look up the class implementing a promotion kind."""
    try:
        return PROMOTION_VARIANTS[PromotionKind(kind)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown promotion kind: {kind}")


def _now(current_date: Optional[DateInput]) -> datetime:
    return utc_now() if current_date is None else to_datetime(current_date)


class Promotion(ABC):
    """
    Base contract for every promotion variant.

    Holds identity, the scheduling window, the classification tuple, image and
    exposure metadata. Equality is based on identity only.
    """

    kind: ClassVar[Optional[PromotionKind]] = None

    def __init__(
        self,
        promotion_id: Optional[str],
        title: str,
        start_date: DateInput,
        end_date: DateInput,
        promotion_type: PromotionType,
        distribution_type: DistributionType,
        product_type: ProductType = ProductType.STANDARD,
        image_type: ImageType = ImageType.DEFAULT_TEMPLATE,
        image_obs_id: str = "",
        image_obs_hash: str = "",
        image_url: str = "",
        exhaustion_alarm_yn: YesNo = YesNo.N,
        exhaustion_alarm_percentage_list: Optional[Iterable[int]] = None,
        exposure_product_list: Optional[Iterable[ExposureProduct]] = None,
    ):
        start = to_datetime(start_date)
        end = to_datetime(end_date)
        self._validate_dates(start, end)

        self._promotion_id = promotion_id or str(uuid4())
        self._title = self._validate_title(title)
        self._start_date = start
        self._end_date = end
        self._promotion_type = PromotionType(promotion_type)
        self._distribution_type = DistributionType(distribution_type)
        self._product_type = ProductType(product_type)

        self._image_type = ImageType(image_type)
        self._image_obs_id = image_obs_id
        self._image_obs_hash = image_obs_hash
        self._image_url = image_url

        self._exhaustion_alarm_yn = YesNo(exhaustion_alarm_yn)
        self._exhaustion_alarm_percentage_list = self._validate_alarm_percentages(
            exhaustion_alarm_percentage_list or []
        )

        self._exposure_product_list: List[ExposureProduct] = list(
            exposure_product_list or []
        )

    @staticmethod
    def _validate_dates(start_date: datetime, end_date: datetime) -> None:
        if start_date >= end_date:
            raise InvalidPromotionDateError(
                f"Start date ({start_date.isoformat()}) must be before "
                f"end date ({end_date.isoformat()})",
                start_date=start_date.isoformat(),
                end_date=end_date.isoformat(),
            )

    def _validate_title(self, title: str) -> str:
        if not title or not title.strip():
            raise InvalidPromotionError(
                "Title cannot be empty",
                promotion_id=getattr(self, "_promotion_id", None),
                field="title",
            )
        if len(title) > MAX_TITLE_LENGTH:
            raise InvalidPromotionError(
                f"Title cannot exceed {MAX_TITLE_LENGTH} characters",
                promotion_id=getattr(self, "_promotion_id", None),
                field="title",
            )
        return title

    @staticmethod
    def _validate_alarm_percentages(percentages: Iterable[int]) -> List[int]:
        validated = []
        for value in percentages:
            if value not in EXHAUSTION_ALARM_PERCENTAGES:
                raise InvalidPercentageError(value)
            validated.append(int(value))
        return validated

    # Period checks

    def is_within_valid_period(self, current_date: Optional[DateInput] = None) -> bool:
        """Check if a moment falls within [start_date, end_date] (inclusive)."""
        current = _now(current_date)
        return self._start_date <= current <= self._end_date

    def has_started(self, current_date: Optional[DateInput] = None) -> bool:
        return _now(current_date) >= self._start_date

    def has_ended(self, current_date: Optional[DateInput] = None) -> bool:
        return _now(current_date) > self._end_date

    def ensure_active(self, current_date: Optional[DateInput] = None) -> None:
        """Raise PromotionNotActiveError when outside the valid period."""
        if not self.is_within_valid_period(current_date):
            raise PromotionNotActiveError(
                f"Promotion is not active. Valid period: "
                f"{self._start_date.isoformat()} - {self._end_date.isoformat()}",
                promotion_id=self._promotion_id,
            )

    def duration_in_days(self) -> int:
        """Length of the promotion window in days, partial days rounded up."""
        seconds = (self._end_date - self._start_date).total_seconds()
        return math.ceil(seconds / SECONDS_PER_DAY)

    # Guarded mutation

    def update_title(self, title: str) -> None:
        """Replace the title after validating it."""
        self._title = self._validate_title(title)

    def update_image(
        self,
        image_type: ImageType,
        image_obs_id: str,
        image_obs_hash: str,
        image_url: str,
    ) -> None:
        self._image_type = ImageType(image_type)
        self._image_obs_id = image_obs_id
        self._image_obs_hash = image_obs_hash
        self._image_url = image_url

    def update_exhaustion_alarm(
        self, exhaustion_alarm_yn: YesNo, percentages: Iterable[int]
    ) -> None:
        validated = self._validate_alarm_percentages(percentages)
        self._exhaustion_alarm_yn = YesNo(exhaustion_alarm_yn)
        self._exhaustion_alarm_percentage_list = validated

    def reschedule_promotion(
        self,
        new_start_date: DateInput,
        new_end_date: DateInput,
        today: Optional[DateInput] = None,
    ) -> None:
        """
        Move the promotion window.

        The new start must be after today, the new end no more than 365 days
        from today, and the new start before the new end. Both dates are
        replaced together or not at all.
        """
        current = _now(today)
        start = to_datetime(new_start_date)
        end = to_datetime(new_end_date)

        if start <= current:
            raise InvalidPromotionDateError(
                "New start date must be in the future.",
                start_date=start.isoformat(),
                end_date=end.isoformat(),
            )

        if end > current + timedelta(days=MAX_RESCHEDULE_DAYS):
            raise InvalidPromotionDateError(
                f"New end date cannot be more than {MAX_RESCHEDULE_DAYS} days from today.",
                start_date=start.isoformat(),
                end_date=end.isoformat(),
            )

        self._validate_dates(start, end)

        self._start_date = start
        self._end_date = end

    # Exposure products

    def get_active_exposure_products(
        self, current_date: Optional[DateInput] = None
    ) -> List[ExposureProduct]:
        current = _now(current_date)
        return [p for p in self._exposure_product_list if p.is_active_on(current)]

    def has_active_exposure_products(self, current_date: Optional[DateInput] = None) -> bool:
        return len(self.get_active_exposure_products(current_date)) > 0

    def get_exposure_products_by_type(self, exposure_type: ExposureType) -> List[ExposureProduct]:
        exposure_type = ExposureType(exposure_type)
        return [p for p in self._exposure_product_list if p.exposure_type is exposure_type]

    @abstractmethod
    def calculate_usage_percentage(self) -> Decimal:
        """Percentage of the budget or quantity already consumed."""

    # Read-only attributes

    @property
    def promotion_id(self) -> str:
        return self._promotion_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def start_date(self) -> datetime:
        return self._start_date

    @property
    def end_date(self) -> datetime:
        return self._end_date

    @property
    def promotion_type(self) -> PromotionType:
        return self._promotion_type

    @property
    def distribution_type(self) -> DistributionType:
        return self._distribution_type

    @property
    def product_type(self) -> ProductType:
        return self._product_type

    @property
    def image_type(self) -> ImageType:
        return self._image_type

    @property
    def image_obs_id(self) -> str:
        return self._image_obs_id

    @property
    def image_obs_hash(self) -> str:
        return self._image_obs_hash

    @property
    def image_url(self) -> str:
        return self._image_url

    @property
    def exhaustion_alarm_yn(self) -> YesNo:
        return self._exhaustion_alarm_yn

    @property
    def exhaustion_alarm_percentage_list(self) -> List[int]:
        return self._exhaustion_alarm_percentage_list.copy()

    @property
    def exposure_product_list(self) -> List[ExposureProduct]:
        return self._exposure_product_list.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Promotion):
            return False
        return self._promotion_id == other._promotion_id

    def __hash__(self) -> int:
        return hash(self._promotion_id)

    def __str__(self) -> str:
        return f"{self.__class__.__name__} {self._title}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id='{self._promotion_id}', "
            f"start='{self._start_date.isoformat()}', end='{self._end_date.isoformat()}')"
        )


class Coupon(Promotion):
    """
    Shared coupon bookkeeping: discount price, purchased/used/remaining
    quantities, the full-payment gate and the validity-period policy.

    Quantities are validated once at construction only.
    """

    def __init__(
        self,
        *,
        coupon_discount_price: AmountInput,
        purchased_coupon_quantity: int,
        used_coupon_quantity: int,
        remaining_coupon_quantity: int,
        full_payment_yn: YesNo = YesNo.N,
        full_payment_min_price: AmountInput = 0,
        validity_period_type: FlexibleDaysType = FlexibleDaysType.FLEXIBLE_DATE,
        validity_period_days: int = 0,
        received_coupon_quantity: int = 0,
        **promotion_fields: Any,
    ):
        super().__init__(**promotion_fields)

        discount_price = to_decimal(coupon_discount_price)
        min_price = to_decimal(full_payment_min_price)
        self._validate_coupon_quantities(
            purchased_coupon_quantity, used_coupon_quantity, remaining_coupon_quantity
        )
        if discount_price <= 0:
            raise InvalidCouponQuantityError(
                "Discount price must be positive", field="coupon_discount_price"
            )
        if min_price < 0:
            raise InvalidCouponQuantityError(
                "Minimum price cannot be negative", field="full_payment_min_price"
            )

        self._coupon_discount_price = discount_price
        self._purchased_coupon_quantity = purchased_coupon_quantity
        self._used_coupon_quantity = used_coupon_quantity
        self._remaining_coupon_quantity = remaining_coupon_quantity
        self._full_payment_yn = YesNo(full_payment_yn)
        self._full_payment_min_price = min_price
        self._validity_period_type = FlexibleDaysType(validity_period_type)
        self._validity_period_days = validity_period_days
        self._received_coupon_quantity = received_coupon_quantity or 0

    @staticmethod
    def _validate_coupon_quantities(purchased: int, used: int, remaining: int) -> None:
        if purchased < 0 or used < 0 or remaining < 0:
            raise InvalidCouponQuantityError("Coupon quantities cannot be negative")

        if used > purchased:
            raise InvalidCouponQuantityError(
                f"Used quantity ({used}) cannot exceed purchased quantity ({purchased})",
                field="used_coupon_quantity",
            )

        if remaining > purchased:
            raise InvalidCouponQuantityError(
                f"Remaining quantity ({remaining}) cannot exceed purchased quantity ({purchased})",
                field="remaining_coupon_quantity",
            )

    @property
    def required_minimum_payment(self) -> Decimal:
        """Minimum payment reported when the gate rejects an amount."""
        return self._full_payment_min_price

    def has_available_coupons(self) -> bool:
        return self._remaining_coupon_quantity > 0

    def meets_minimum_payment(self, payment_amount: AmountInput) -> bool:
        if self._full_payment_yn.is_yes:
            return to_decimal(payment_amount) >= self._full_payment_min_price
        return True

    def validate_coupon_usage(self, payment_amount: AmountInput) -> None:
        """Raise unless a coupon is available and the payment clears the gate."""
        if not self.has_available_coupons():
            raise InsufficientBudgetError(
                "No coupons available",
                available=self._remaining_coupon_quantity,
                requested=1,
            )

        if not self.meets_minimum_payment(payment_amount):
            raise MinimumPaymentNotMetError(
                self.required_minimum_payment, to_decimal(payment_amount)
            )

    def calculate_discount(self, payment_amount: AmountInput) -> Decimal:
        """Discount for a payment; never more than the payment itself."""
        amount = to_decimal(payment_amount)
        if not self.meets_minimum_payment(amount):
            return Decimal("0")
        return min(self._coupon_discount_price, amount)

    def calculate_usage_percentage(self) -> Decimal:
        if self._purchased_coupon_quantity == 0:
            return Decimal("0")
        return (
            Decimal(self._used_coupon_quantity)
            / Decimal(self._purchased_coupon_quantity)
            * 100
        )

    def get_final_payment_amount(self, payment_amount: AmountInput) -> Decimal:
        amount = to_decimal(payment_amount)
        return max(Decimal("0"), amount - self.calculate_discount(amount))

    def increment_received_coupon_quantity(self) -> None:
        """Count one more issued/downloaded coupon. Capacity is not re-checked."""
        self._received_coupon_quantity += 1

    @abstractmethod
    def calculate_coupon_expiration_date(
        self, reference_date: Optional[DateInput] = None
    ) -> datetime:
        """Expiration of a coupon issued or downloaded at reference_date."""

    @property
    def coupon_discount_price(self) -> Decimal:
        return self._coupon_discount_price

    @property
    def purchased_coupon_quantity(self) -> int:
        return self._purchased_coupon_quantity

    @property
    def used_coupon_quantity(self) -> int:
        return self._used_coupon_quantity

    @property
    def remaining_coupon_quantity(self) -> int:
        return self._remaining_coupon_quantity

    @property
    def full_payment_yn(self) -> YesNo:
        return self._full_payment_yn

    @property
    def full_payment_min_price(self) -> Decimal:
        return self._full_payment_min_price

    @property
    def validity_period_type(self) -> FlexibleDaysType:
        return self._validity_period_type

    @property
    def validity_period_days(self) -> int:
        return self._validity_period_days

    @property
    def received_coupon_quantity(self) -> int:
        return self._received_coupon_quantity


@register_variant
class PointPromotion(Promotion):
    """
    Point promotion paying a rate- or fixed-point reward per purchase out of
    a fixed point budget.

    used_point and remaining_point always sum to the budget when the instance
    is built from consistent data; both percentages are kept in sync by
    apply_point_reward.
    """

    kind = PromotionKind.POINT

    def __init__(
        self,
        *,
        promotion_name: str,
        promotion_budget: AmountInput,
        promotion_saving_type: PromotionSavingType,
        maximum_saving_point: AmountInput,
        promotion_saving_rate: Optional[AmountInput] = None,
        promotion_saving_point: Optional[AmountInput] = None,
        minimum_payment_price_yn: YesNo = YesNo.N,
        minimum_payment_price: AmountInput = 0,
        client_limit_type: ClientLimitType = ClientLimitType.NONE,
        client_limit_term: Optional[int] = None,
        client_limit_count: Optional[int] = None,
        client_limit_point: Optional[AmountInput] = None,
        used_point: Optional[AmountInput] = None,
        used_point_percentage: Optional[AmountInput] = None,
        remaining_point: Optional[AmountInput] = None,
        remaining_point_percentage: Optional[AmountInput] = None,
        **promotion_fields: Any,
    ):
        promotion_fields.setdefault("promotion_type", PromotionType.POINT_PROMOTION)
        promotion_fields.setdefault("distribution_type", DistributionType.NA)
        super().__init__(**promotion_fields)

        saving_type = PromotionSavingType(promotion_saving_type)
        rate = None if promotion_saving_rate is None else to_decimal(promotion_saving_rate)
        budget = to_decimal(promotion_budget)

        if saving_type is PromotionSavingType.FIXED_RATE and rate is not None:
            if rate < 0 or rate > 100:
                raise InvalidPercentageError(rate)
        if budget <= 0:
            raise InvalidPointCalculationError("Promotion budget must be positive")

        self._promotion_name = promotion_name
        self._promotion_budget = budget
        self._promotion_saving_type = saving_type
        self._promotion_saving_rate = rate
        self._promotion_saving_point = (
            None if promotion_saving_point is None else to_decimal(promotion_saving_point)
        )
        self._minimum_payment_price_yn = YesNo(minimum_payment_price_yn)
        self._minimum_payment_price = to_decimal(minimum_payment_price)
        self._maximum_saving_point = to_decimal(maximum_saving_point)
        self._client_limit_type = ClientLimitType(client_limit_type)
        self._client_limit_term = client_limit_term
        self._client_limit_count = client_limit_count
        self._client_limit_point = (
            None if client_limit_point is None else to_decimal(client_limit_point)
        )

        if used_point is None and remaining_point is None:
            used, remaining = Decimal("0"), budget
        elif used_point is None:
            remaining = to_decimal(remaining_point)
            used = budget - remaining
        elif remaining_point is None:
            used = to_decimal(used_point)
            remaining = budget - used
        else:
            used, remaining = to_decimal(used_point), to_decimal(remaining_point)
        if used < 0 or remaining < 0 or used > budget or remaining > budget:
            raise InvalidPointCalculationError(
                f"Point usage (used={used}, remaining={remaining}) "
                f"is inconsistent with budget {budget}"
            )

        self._used_point = used
        self._remaining_point = remaining
        self._used_point_percentage = (
            self._percentage_of_budget(used)
            if used_point_percentage is None
            else to_decimal(used_point_percentage)
        )
        self._remaining_point_percentage = (
            self._percentage_of_budget(remaining)
            if remaining_point_percentage is None
            else to_decimal(remaining_point_percentage)
        )

    def _percentage_of_budget(self, points: Decimal) -> Decimal:
        return points / self._promotion_budget * 100

    def has_sufficient_points(self, required_points: AmountInput) -> bool:
        return self._remaining_point >= to_decimal(required_points)

    def meets_minimum_payment(self, payment_amount: AmountInput) -> bool:
        if self._minimum_payment_price_yn.is_yes:
            return to_decimal(payment_amount) >= self._minimum_payment_price
        return True

    def calculate_point_reward(self, payment_amount: AmountInput) -> Decimal:
        """
        Points earned for a payment.

        Capped first by maximum_saving_point, then by the remaining budget.
        """
        amount = to_decimal(payment_amount)
        if not self.meets_minimum_payment(amount):
            return Decimal("0")

        points = Decimal("0")
        if (
            self._promotion_saving_type is PromotionSavingType.FIXED_RATE
            and self._promotion_saving_rate is not None
        ):
            points = amount * self._promotion_saving_rate / 100
        elif (
            self._promotion_saving_type is PromotionSavingType.FIXED_POINT
            and self._promotion_saving_point is not None
        ):
            points = self._promotion_saving_point

        points = min(points, self._maximum_saving_point)
        return min(points, self._remaining_point)

    def apply_point_reward(
        self, payment_amount: AmountInput, current_date: Optional[DateInput] = None
    ) -> Decimal:
        """
        Grant the reward for a payment and move it from remaining to used.

        Returns the granted points.
        """
        self.ensure_active(current_date)
        amount = to_decimal(payment_amount)

        if not self.meets_minimum_payment(amount):
            raise MinimumPaymentNotMetError(self._minimum_payment_price, amount)

        reward = self.calculate_point_reward(amount)

        if reward == 0:
            raise InsufficientBudgetError(
                "No points available for reward",
                available=float(self._remaining_point),
                requested=0,
            )

        if not self.has_sufficient_points(reward):
            raise InsufficientBudgetError(
                f"Insufficient points. Required: {reward}, Available: {self._remaining_point}",
                available=float(self._remaining_point),
                requested=float(reward),
            )

        self._used_point += reward
        self._remaining_point -= reward
        self._used_point_percentage = self._percentage_of_budget(self._used_point)
        self._remaining_point_percentage = self._percentage_of_budget(self._remaining_point)

        return reward

    def calculate_usage_percentage(self) -> Decimal:
        return self._used_point_percentage

    def can_apply(
        self, payment_amount: AmountInput, current_date: Optional[DateInput] = None
    ) -> bool:
        """Side-effect free mirror of the apply_point_reward guards."""
        reward = self.calculate_point_reward(payment_amount)
        return (
            self.is_within_valid_period(current_date)
            and self.meets_minimum_payment(payment_amount)
            and reward > 0
            and self.has_sufficient_points(reward)
        )

    def can_user_apply(self, user_usage_count: int, user_used_points: AmountInput) -> bool:
        """Check the per-client limit. A cap is reached once the counter hits it."""
        if self._client_limit_type is ClientLimitType.NONE:
            return True

        if (
            self._client_limit_count is not None
            and user_usage_count >= self._client_limit_count
        ):
            return False

        if (
            self._client_limit_point is not None
            and to_decimal(user_used_points) >= self._client_limit_point
        ):
            return False

        return True

    @property
    def promotion_name(self) -> str:
        return self._promotion_name

    @property
    def promotion_budget(self) -> Decimal:
        return self._promotion_budget

    @property
    def promotion_saving_type(self) -> PromotionSavingType:
        return self._promotion_saving_type

    @property
    def promotion_saving_rate(self) -> Optional[Decimal]:
        return self._promotion_saving_rate

    @property
    def promotion_saving_point(self) -> Optional[Decimal]:
        return self._promotion_saving_point

    @property
    def minimum_payment_price_yn(self) -> YesNo:
        return self._minimum_payment_price_yn

    @property
    def minimum_payment_price(self) -> Decimal:
        return self._minimum_payment_price

    @property
    def maximum_saving_point(self) -> Decimal:
        return self._maximum_saving_point

    @property
    def client_limit_type(self) -> ClientLimitType:
        return self._client_limit_type

    @property
    def client_limit_term(self) -> Optional[int]:
        return self._client_limit_term

    @property
    def client_limit_count(self) -> Optional[int]:
        return self._client_limit_count

    @property
    def client_limit_point(self) -> Optional[Decimal]:
        return self._client_limit_point

    @property
    def used_point(self) -> Decimal:
        return self._used_point

    @property
    def remaining_point(self) -> Decimal:
        return self._remaining_point

    @property
    def used_point_percentage(self) -> Decimal:
        return self._used_point_percentage

    @property
    def remaining_point_percentage(self) -> Decimal:
        return self._remaining_point_percentage


@register_variant
class DownloadableCoupon(Coupon):
    """
    Coupon that users download before use.

    Payment gating uses minimum_payment_price only; the inherited
    full_payment_yn flag is ignored.
    """

    kind = PromotionKind.DOWNLOADABLE_COUPON

    def __init__(
        self,
        *,
        coupon_name: str,
        minimum_payment_price: AmountInput,
        downloadable_coupon_quantity: int,
        downloaded_coupon_quantity: int = 0,
        coupon_issuance_quantity: int = 0,
        general_quantity_per_day: int = 0,
        multiple_issued_yn: YesNo = YesNo.N,
        flexible_days_type: FlexibleDaysType = FlexibleDaysType.FLEXIBLE_DATE,
        flexible_days: int = 0,
        **coupon_fields: Any,
    ):
        coupon_fields["distribution_type"] = DistributionType.DOWNLOAD
        coupon_fields.setdefault("promotion_type", PromotionType.POINT_COUPON)
        coupon_fields["validity_period_type"] = flexible_days_type
        coupon_fields["validity_period_days"] = flexible_days
        coupon_fields["received_coupon_quantity"] = downloaded_coupon_quantity
        super().__init__(**coupon_fields)

        if downloadable_coupon_quantity < 0 or downloaded_coupon_quantity < 0:
            raise InvalidCouponQuantityError("Download quantities cannot be negative")
        if downloaded_coupon_quantity > downloadable_coupon_quantity:
            raise InvalidCouponQuantityError(
                f"Downloaded quantity ({downloaded_coupon_quantity}) cannot exceed "
                f"downloadable quantity ({downloadable_coupon_quantity})",
                field="downloaded_coupon_quantity",
            )
        minimum_price = to_decimal(minimum_payment_price)
        if minimum_price < 0:
            raise InvalidCouponQuantityError(
                "Minimum price cannot be negative", field="minimum_payment_price"
            )

        self._coupon_name = coupon_name
        self._coupon_issuance_quantity = coupon_issuance_quantity
        self._minimum_payment_price = minimum_price
        self._downloadable_coupon_quantity = downloadable_coupon_quantity
        self._general_quantity_per_day = general_quantity_per_day
        self._multiple_issued_yn = YesNo(multiple_issued_yn)

    @property
    def required_minimum_payment(self) -> Decimal:
        return self._minimum_payment_price

    def meets_minimum_payment(self, payment_amount: AmountInput) -> bool:
        return to_decimal(payment_amount) >= self._minimum_payment_price

    def has_available_downloads(self) -> bool:
        return self._received_coupon_quantity < self._downloadable_coupon_quantity

    def allows_multiple_downloads(self) -> bool:
        return self._multiple_issued_yn.is_yes

    def remaining_downloadable_quantity(self) -> int:
        return self._downloadable_coupon_quantity - self._received_coupon_quantity

    def calculate_download_percentage(self) -> Decimal:
        if self._downloadable_coupon_quantity == 0:
            return Decimal("0")
        return (
            Decimal(self._received_coupon_quantity)
            / Decimal(self._downloadable_coupon_quantity)
            * 100
        )

    def calculate_coupon_expiration_date(
        self, reference_date: Optional[DateInput] = None
    ) -> datetime:
        """
        FIXED_DATE coupons expire with the promotion; flexible ones a fixed
        number of days after download.
        """
        if not self._validity_period_type.is_flexible:
            return self._end_date
        return _now(reference_date) + timedelta(days=self._validity_period_days)

    def is_coupon_expired(
        self, download_date: DateInput, current_date: Optional[DateInput] = None
    ) -> bool:
        return _now(current_date) > self.calculate_coupon_expiration_date(download_date)

    def validate_coupon_for_use(
        self,
        download_date: DateInput,
        payment_amount: AmountInput,
        current_date: Optional[DateInput] = None,
    ) -> None:
        if self.is_coupon_expired(download_date, current_date):
            expired_at = self.calculate_coupon_expiration_date(download_date)
            raise CouponExpiredError(
                f"Coupon expired on {expired_at.isoformat()}",
                expired_at=expired_at.isoformat(),
            )

        self.validate_coupon_usage(payment_amount)

    def record_download(self, current_date: Optional[DateInput] = None) -> int:
        """Register one download and return the new downloaded count."""
        self.ensure_active(current_date)
        if not self.has_available_downloads():
            raise DownloadLimitExceededError(
                downloadable_quantity=self._downloadable_coupon_quantity
            )
        self.increment_received_coupon_quantity()
        return self._received_coupon_quantity

    def daily_download_limit(self) -> int:
        return self._general_quantity_per_day

    def calculate_total_downloadable_from_daily(self) -> int:
        return self._general_quantity_per_day * self.duration_in_days()

    @property
    def coupon_name(self) -> str:
        return self._coupon_name

    @property
    def coupon_issuance_quantity(self) -> int:
        return self._coupon_issuance_quantity

    @property
    def minimum_payment_price(self) -> Decimal:
        return self._minimum_payment_price

    @property
    def downloadable_coupon_quantity(self) -> int:
        return self._downloadable_coupon_quantity

    @property
    def downloaded_coupon_quantity(self) -> int:
        return self._received_coupon_quantity

    @property
    def general_quantity_per_day(self) -> int:
        return self._general_quantity_per_day

    @property
    def multiple_issued_yn(self) -> YesNo:
        return self._multiple_issued_yn


@register_variant
class RewardCoupon(Coupon):
    """Coupon granted automatically after a qualifying payment."""

    kind = PromotionKind.REWARD_COUPON

    def __init__(
        self,
        *,
        coupon_grant_yn: YesNo,
        coupon_grant_min_price: Optional[AmountInput] = None,
        **coupon_fields: Any,
    ):
        coupon_fields.setdefault("promotion_type", PromotionType.POINT_COUPON)
        coupon_fields.setdefault("distribution_type", DistributionType.REWARD)
        super().__init__(**coupon_fields)

        self._coupon_grant_yn = YesNo(coupon_grant_yn)
        self._coupon_grant_min_price = (
            None if coupon_grant_min_price is None else to_decimal(coupon_grant_min_price)
        )

    def is_automatic_grant_enabled(self) -> bool:
        return self._coupon_grant_yn.is_yes

    def qualifies_for_auto_grant(self, payment_amount: AmountInput) -> bool:
        if not self.is_automatic_grant_enabled():
            return False
        if self._coupon_grant_min_price is None:
            return True
        return to_decimal(payment_amount) >= self._coupon_grant_min_price

    def calculate_coupon_expiration_date(
        self, reference_date: Optional[DateInput] = None
    ) -> datetime:
        # Reward coupons always run for validity_period_days from issue
        return _now(reference_date) + timedelta(days=self._validity_period_days)

    def is_coupon_valid(
        self, issue_date: DateInput, current_date: Optional[DateInput] = None
    ) -> bool:
        return _now(current_date) <= self.calculate_coupon_expiration_date(issue_date)

    def calculate_discount_with_validity(
        self,
        issue_date: DateInput,
        payment_amount: AmountInput,
        current_date: Optional[DateInput] = None,
    ) -> Decimal:
        if not self.is_coupon_valid(issue_date, current_date):
            return Decimal("0")
        return self.calculate_discount(payment_amount)

    def days_until_expiration(
        self, issue_date: DateInput, current_date: Optional[DateInput] = None
    ) -> int:
        """Whole days left before expiry, partial days rounded up."""
        expires_at = self.calculate_coupon_expiration_date(issue_date)
        seconds = (expires_at - _now(current_date)).total_seconds()
        return math.ceil(seconds / SECONDS_PER_DAY)

    def is_expiring_soon(
        self,
        issue_date: DateInput,
        threshold_days: int = 3,
        current_date: Optional[DateInput] = None,
    ) -> bool:
        """
        True for a still-valid coupon with 1..threshold_days left.

        A coupon with 0 days left is not flagged.
        """
        if not self.is_coupon_valid(issue_date, current_date):
            return False
        days_left = self.days_until_expiration(issue_date, current_date)
        return 0 < days_left <= threshold_days

    def grant_coupon(
        self, payment_amount: AmountInput, current_date: Optional[DateInput] = None
    ) -> int:
        """Issue one coupon for a qualifying payment and return the issued count."""
        self.ensure_active(current_date)
        if not self.is_automatic_grant_enabled():
            raise InvalidPromotionError(
                "Automatic coupon grant is disabled",
                promotion_id=self._promotion_id,
                field="coupon_grant_yn",
            )
        if not self.qualifies_for_auto_grant(payment_amount):
            raise MinimumPaymentNotMetError(
                self._coupon_grant_min_price, to_decimal(payment_amount)
            )
        if self._received_coupon_quantity >= self._purchased_coupon_quantity:
            raise InsufficientBudgetError(
                "No coupons left to grant",
                available=self._purchased_coupon_quantity - self._received_coupon_quantity,
                requested=1,
            )
        self.increment_received_coupon_quantity()
        return self._received_coupon_quantity

    def validity_period_info(self) -> Dict[str, Any]:
        return {
            "type": self._validity_period_type,
            "days": self._validity_period_days,
            "description": f"Valid for {self._validity_period_days} days from issue date",
        }

    @property
    def coupon_grant_yn(self) -> YesNo:
        return self._coupon_grant_yn

    @property
    def coupon_grant_min_price(self) -> Optional[Decimal]:
        return self._coupon_grant_min_price
