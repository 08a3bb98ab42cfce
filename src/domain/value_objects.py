"""
Domain Value Objects

Immutable value objects and enumerations shared by promotions, orders and
applications. Value objects are compared by their value, not identity.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union


DateInput = Union[date, datetime, str]
AmountInput = Union[int, float, Decimal, str]


def to_decimal(amount: AmountInput) -> Decimal:
    """Convert a numeric input to Decimal without float artefacts."""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValueError(f"Invalid amount: {amount}")
    if isinstance(amount, (int, float)):
        return Decimal(str(amount))
    if isinstance(amount, str):
        try:
            return Decimal(amount.strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {amount}")
    raise ValueError(f"Invalid amount type: {type(amount)}")


def utc_now() -> datetime:
    """Current moment as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_datetime(date_input: DateInput) -> datetime:
    """
    Normalize a date-like input to a naive datetime.

    Plain dates are interpreted as midnight of that day. Offset-aware
    values are converted to UTC and their offset dropped, so every date
    in the domain compares against every other.
    """
    if isinstance(date_input, datetime):
        return _as_naive_utc(date_input)
    if isinstance(date_input, date):
        return datetime.combine(date_input, time.min)
    if isinstance(date_input, str):
        try:
            return _as_naive_utc(datetime.fromisoformat(date_input.replace("Z", "+00:00")))
        except ValueError:
            for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y"):
                try:
                    return datetime.strptime(date_input, fmt)
                except ValueError:
                    continue
            raise ValueError(f"Unable to parse date: {date_input}")
    raise ValueError(f"Invalid date type: {type(date_input)}")


class PromotionType(str, Enum):
    """Kind of promotion product sold to the merchant."""

    POINT_COUPON = "POINT_COUPON"
    POINT_PROMOTION = "POINT_PROMOTION"


class DistributionType(str, Enum):
    """How the benefit reaches the end user."""

    DOWNLOAD = "DOWNLOAD"
    REWARD = "REWARD"
    NA = "NA"


class ProductType(str, Enum):
    STANDARD = "STANDARD"
    ADVANCED = "ADVANCED"


class ImageType(str, Enum):
    DEFAULT_TEMPLATE = "DEFAULT_TEMPLATE"
    DIRECT_UPLOAD = "DIRECT_UPLOAD"


class YesNo(str, Enum):
    Y = "Y"
    N = "N"

    @property
    def is_yes(self) -> bool:
        return self is YesNo.Y


class FlexibleDaysType(str, Enum):
    """Coupon validity period policy."""

    FIXED_DATE = "FIXED_DATE"
    FLEXIBLE_DATE = "FLEXIBLE_DATE"
    FLEXIBLE_DAYS = "FLEXIBLE_DAYS"

    @property
    def is_flexible(self) -> bool:
        return self is not FlexibleDaysType.FIXED_DATE


class PromotionSavingType(str, Enum):
    FIXED_RATE = "FIXED_RATE"
    FIXED_POINT = "FIXED_POINT"


class ClientLimitType(str, Enum):
    """Per-client usage limit period. NONE disables the limit."""

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class OrderStatusType(str, Enum):
    PAYMENT_COMPLETED = "PAYMENT_COMPLETED"
    REFUND_COMPLETED = "REFUND_COMPLETED"
    PARTIAL_REFUND_COMPLETED = "PARTIAL_REFUND_COMPLETED"


class PaymentType(str, Enum):
    LINE_PAY = "LINE_PAY"
    CREDIT_CARD = "CREDIT_CARD"


class CountryType(str, Enum):
    TW = "TW"
    JP = "JP"
    TH = "TH"
    ID = "ID"


class ApplicationRouteType(str, Enum):
    MERCHANT_CENTER = "MERCHANT_CENTER"
    GOOD_PARTNER = "GOOD_PARTNER"
    ADMIN = "ADMIN"


class ExposureStatus(str, Enum):
    ON = "ON"
    OFF = "OFF"


class ExposureType(str, Enum):
    CAROUSEL = "CAROUSEL"
    BANNER = "BANNER"
    LIST = "LIST"
    FILTER = "FILTER"
    REWARD_INFO = "REWARD_INFO"


class ReviewDetailCategoryType(str, Enum):
    DESIGN = "DESIGN"
    TEXT = "TEXT"
    OTHER = "OTHER"


class EarlyEndRequestStatusType(str, Enum):
    PROCESSING_REQUIRED = "PROCESSING_REQUIRED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    WITHDRAWN = "WITHDRAWN"
    INVALID_REQUEST = "INVALID_REQUEST"


class EarlyEndRequestRouteType(str, Enum):
    MERCHANT_CENTER = "MERCHANT_CENTER"
    GOOD_PARTNER = "GOOD_PARTNER"


class EarlyEndRequestType(str, Enum):
    AD_CONTENT = "AD_CONTENT"
    EARLY_END = "EARLY_END"
    OA_PUSH_CONTENT = "OA_PUSH_CONTENT"


# Thresholds at which a budget/quantity exhaustion alarm may fire
EXHAUSTION_ALARM_PERCENTAGES: FrozenSet[int] = frozenset({50, 75, 95})


class ApplicationStatus(str, Enum):
    """
    Promotion application lifecycle status.

    APPLYING -> IN_SERVICE -> COMPLETED, with CANCELLED reachable from
    every state except CANCELLED itself.
    """

    APPLYING = "APPLYING"
    IN_SERVICE = "IN_SERVICE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    def can_transition_to(self, new_status: "ApplicationStatus") -> bool:
        """Check if transition to new status is valid."""
        return ApplicationStatus(new_status) in _VALID_TRANSITIONS[self]


_VALID_TRANSITIONS = {
    ApplicationStatus.APPLYING: {ApplicationStatus.IN_SERVICE, ApplicationStatus.CANCELLED},
    ApplicationStatus.IN_SERVICE: {ApplicationStatus.COMPLETED, ApplicationStatus.CANCELLED},
    ApplicationStatus.COMPLETED: {ApplicationStatus.CANCELLED},
    ApplicationStatus.CANCELLED: set(),
}


@dataclass(frozen=True)
class ExposureProduct:
    """A paid exposure slot attached to a promotion, with its own on/off window."""

    exposure_product_apply_seq: int
    exposure_product_seq: int
    exposure_type: ExposureType
    exposure_area_type: str
    start_date: datetime
    end_date: datetime
    exposure_status: ExposureStatus = ExposureStatus.ON
    image_type: Optional[ImageType] = None
    image_obs_id: Optional[str] = None
    image_obs_hash: Optional[str] = None
    image_url: Optional[str] = None
    banner_text: str = ""
    banner_text2: str = ""
    merchant_name: Optional[str] = None
    service_channel_type: Optional[str] = None
    unit_price: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "exposure_type", ExposureType(self.exposure_type))
        object.__setattr__(self, "exposure_status", ExposureStatus(self.exposure_status))
        object.__setattr__(self, "start_date", to_datetime(self.start_date))
        object.__setattr__(self, "end_date", to_datetime(self.end_date))
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))

    def is_active_on(self, current_date: datetime) -> bool:
        """Check if the slot is switched on and covers the given moment."""
        return (
            self.exposure_status is ExposureStatus.ON
            and self.start_date <= current_date <= self.end_date
        )


@dataclass(frozen=True)
class PaymentInfo:
    """Order facts recorded at payment time, used to cross-check the promotion."""

    order_id: str
    payment_date: str
    promotion_type: PromotionType
    distribution_type: DistributionType
    total_order_amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "promotion_type", PromotionType(self.promotion_type))
        object.__setattr__(
            self, "distribution_type", DistributionType(self.distribution_type)
        )
        object.__setattr__(
            self, "total_order_amount", to_decimal(self.total_order_amount)
        )


@dataclass(frozen=True)
class EarlyEndInfo:
    """A single early termination request against an application."""

    marketing_edit_request_seq: int
    apply_seq: int
    merchant_id: str
    request_status: EarlyEndRequestStatusType = EarlyEndRequestStatusType.PROCESSING_REQUIRED
    request_route_type: EarlyEndRequestRouteType = EarlyEndRequestRouteType.MERCHANT_CENTER
    request_type: EarlyEndRequestType = EarlyEndRequestType.EARLY_END
    reject_reason: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[str] = None
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None


@dataclass(frozen=True)
class ReferenceFile:
    name: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class ReviewDetail:
    """Review feedback attached to an application."""

    exposure_type: ExposureType
    exposure_area_type: str
    exposure_area_type_desc: str
    category: ReviewDetailCategoryType
    title: Optional[str] = None
    description: Optional[str] = None
    reference_files: Tuple[ReferenceFile, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "reference_files", tuple(self.reference_files))
