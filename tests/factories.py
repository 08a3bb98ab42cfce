"""
Builders for domain objects used across the test suite.

Every builder takes keyword overrides so a test only spells out the fields
it cares about.
"""

from datetime import datetime
from typing import Dict, List, Optional

from src.domain.entities import PromotionApplication, PromotionOrder
from src.domain.interfaces import PromotionApplicationRepositoryInterface
from src.domain.promotions import DownloadableCoupon, PointPromotion, Promotion, RewardCoupon
from src.domain.value_objects import (
    ApplicationRouteType,
    ApplicationStatus,
    CountryType,
    FlexibleDaysType,
    OrderStatusType,
    PaymentInfo,
    PaymentType,
    PromotionSavingType,
    YesNo,
)

START = datetime(2023, 1, 1)
END = datetime(2023, 12, 31)
MID_YEAR = datetime(2023, 6, 1)


def make_point_promotion(**overrides) -> PointPromotion:
    fields = dict(
        promotion_id="PROMO-POINT-1",
        title="Spring point bonus",
        start_date=START,
        end_date=END,
        promotion_name="Spring bonus",
        promotion_budget=1000,
        promotion_saving_type=PromotionSavingType.FIXED_RATE,
        promotion_saving_rate=10,
        maximum_saving_point=200,
    )
    fields.update(overrides)
    return PointPromotion(**fields)


def make_downloadable_coupon(**overrides) -> DownloadableCoupon:
    fields = dict(
        promotion_id="PROMO-DL-1",
        title="Download and save",
        start_date=START,
        end_date=END,
        coupon_discount_price=100,
        purchased_coupon_quantity=100,
        used_coupon_quantity=0,
        remaining_coupon_quantity=100,
        coupon_name="100 off",
        minimum_payment_price=500,
        downloadable_coupon_quantity=100,
        downloaded_coupon_quantity=0,
        general_quantity_per_day=5,
        flexible_days_type=FlexibleDaysType.FLEXIBLE_DAYS,
        flexible_days=30,
    )
    fields.update(overrides)
    return DownloadableCoupon(**fields)


def make_reward_coupon(**overrides) -> RewardCoupon:
    fields = dict(
        promotion_id="PROMO-RW-1",
        title="Thank-you coupon",
        start_date=START,
        end_date=END,
        coupon_discount_price=50,
        purchased_coupon_quantity=10,
        used_coupon_quantity=0,
        remaining_coupon_quantity=10,
        coupon_grant_yn=YesNo.Y,
        coupon_grant_min_price=1000,
        validity_period_type=FlexibleDaysType.FLEXIBLE_DAYS,
        validity_period_days=10,
    )
    fields.update(overrides)
    return RewardCoupon(**fields)


def make_order(promotion: Optional[Promotion] = None, **overrides) -> PromotionOrder:
    promotion = promotion or make_point_promotion()
    payment_info = overrides.pop(
        "payment_info",
        PaymentInfo(
            order_id="ORD-0001",
            payment_date="2023-01-01",
            promotion_type=promotion.promotion_type,
            distribution_type=promotion.distribution_type,
            total_order_amount=5000,
        ),
    )
    fields = dict(
        order_status=OrderStatusType.PAYMENT_COMPLETED,
        payment_type=PaymentType.LINE_PAY,
        payment_date=START,
        final_payment_price=5000,
        payment_info=payment_info,
    )
    fields.update(overrides)
    return PromotionOrder(**fields)


def make_application(
    promotion: Optional[Promotion] = None,
    promotion_order: Optional[PromotionOrder] = None,
    **overrides,
) -> PromotionApplication:
    promotion = promotion or make_point_promotion()
    fields = dict(
        apply_seq=1,
        country_type=CountryType.TW,
        merchant_id="M-001",
        merchant_name="Corner Cafe",
        manager_email="manager@example.com",
        application_route_type=ApplicationRouteType.MERCHANT_CENTER,
        applied_at=datetime(2022, 12, 20),
        application_status=ApplicationStatus.APPLYING,
        promotion=promotion,
        promotion_order=promotion_order or make_order(promotion),
    )
    fields.update(overrides)
    return PromotionApplication(**fields)


class InMemoryPromotionApplicationRepository(PromotionApplicationRepositoryInterface):
    """Dictionary backed repository keyed by apply sequence."""

    def __init__(self, applications: Optional[List[PromotionApplication]] = None):
        self._store: Dict[int, PromotionApplication] = {}
        self.save_count = 0
        for application in applications or []:
            self._store[application.apply_seq] = application

    async def save(self, application: PromotionApplication) -> PromotionApplication:
        self._store[application.apply_seq] = application
        self.save_count += 1
        return application

    async def find_by_id(self, apply_seq: int) -> Optional[PromotionApplication]:
        return self._store.get(apply_seq)

    async def find_all(self) -> List[PromotionApplication]:
        return list(self._store.values())

    async def delete(self, apply_seq: int) -> bool:
        return self._store.pop(apply_seq, None) is not None
