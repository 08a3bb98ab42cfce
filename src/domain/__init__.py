"""
Domain Layer

The domain layer contains the promotion business rules: promotion variants,
their financial calculations and the application lifecycle.
It is independent of external concerns like databases, frameworks, and UI.
"""

# Value Objects
from .value_objects import (
    EXHAUSTION_ALARM_PERCENTAGES,
    ApplicationRouteType,
    ApplicationStatus,
    ClientLimitType,
    CountryType,
    DistributionType,
    EarlyEndInfo,
    EarlyEndRequestRouteType,
    EarlyEndRequestStatusType,
    EarlyEndRequestType,
    ExposureProduct,
    ExposureStatus,
    ExposureType,
    FlexibleDaysType,
    ImageType,
    OrderStatusType,
    PaymentInfo,
    PaymentType,
    ProductType,
    PromotionSavingType,
    PromotionType,
    ReferenceFile,
    ReviewDetail,
    ReviewDetailCategoryType,
    YesNo,
    to_datetime,
    to_decimal,
    utc_now,
)

# Promotions
from .promotions import (
    PROMOTION_VARIANTS,
    Coupon,
    DownloadableCoupon,
    PointPromotion,
    Promotion,
    PromotionKind,
    RewardCoupon,
    promotion_variant,
)

# Entities
from .entities import (
    PromotionApplication,
    PromotionOrder,
)

# AI Presets
from .ai_presets import (
    AIBudgetOptions,
    AIBudgetSettings,
    AICouponBudgetSettings,
    AIDownloadableCouponBudgetSettings,
    AIPointBudgetSettings,
    AIPromotionMetaData,
    AIPromotionPreset,
    AIRewardCouponBudgetSettings,
    BudgetOption,
    ContentTemplate,
)

# Repository Interfaces
from .interfaces import PromotionApplicationRepositoryInterface

# Domain Exceptions
from .exceptions import (
    ApplicationAlreadyCancelledError,
    ApplicationStatusError,
    CouponExpiredError,
    DownloadLimitExceededError,
    InsufficientBudgetError,
    InvalidCancelReasonError,
    InvalidCouponQuantityError,
    InvalidEarlyEndDateError,
    InvalidPercentageError,
    InvalidPointCalculationError,
    InvalidPromotionDateError,
    InvalidPromotionError,
    InvalidPromotionOrderError,
    MinimumPaymentNotMetError,
    PaymentNotCompletedError,
    PromotionApplicationNotFoundError,
    PromotionDomainError,
    PromotionNotActiveError,
)

__all__ = [
    # Value Objects
    "EXHAUSTION_ALARM_PERCENTAGES",
    "ApplicationRouteType",
    "ApplicationStatus",
    "ClientLimitType",
    "CountryType",
    "DistributionType",
    "EarlyEndInfo",
    "EarlyEndRequestRouteType",
    "EarlyEndRequestStatusType",
    "EarlyEndRequestType",
    "ExposureProduct",
    "ExposureStatus",
    "ExposureType",
    "FlexibleDaysType",
    "ImageType",
    "OrderStatusType",
    "PaymentInfo",
    "PaymentType",
    "ProductType",
    "PromotionSavingType",
    "PromotionType",
    "ReferenceFile",
    "ReviewDetail",
    "ReviewDetailCategoryType",
    "YesNo",
    "to_datetime",
    "to_decimal",
    "utc_now",
    # Promotions
    "PROMOTION_VARIANTS",
    "Coupon",
    "DownloadableCoupon",
    "PointPromotion",
    "Promotion",
    "PromotionKind",
    "RewardCoupon",
    "promotion_variant",
    # Entities
    "PromotionApplication",
    "PromotionOrder",
    # AI Presets
    "AIBudgetOptions",
    "AIBudgetSettings",
    "AICouponBudgetSettings",
    "AIDownloadableCouponBudgetSettings",
    "AIPointBudgetSettings",
    "AIPromotionMetaData",
    "AIPromotionPreset",
    "AIRewardCouponBudgetSettings",
    "BudgetOption",
    "ContentTemplate",
    # Repository Interfaces
    "PromotionApplicationRepositoryInterface",
    # Domain Exceptions
    "ApplicationAlreadyCancelledError",
    "ApplicationStatusError",
    "CouponExpiredError",
    "DownloadLimitExceededError",
    "InsufficientBudgetError",
    "InvalidCancelReasonError",
    "InvalidCouponQuantityError",
    "InvalidEarlyEndDateError",
    "InvalidPercentageError",
    "InvalidPointCalculationError",
    "InvalidPromotionDateError",
    "InvalidPromotionError",
    "InvalidPromotionOrderError",
    "MinimumPaymentNotMetError",
    "PaymentNotCompletedError",
    "PromotionApplicationNotFoundError",
    "PromotionDomainError",
    "PromotionNotActiveError",
]
