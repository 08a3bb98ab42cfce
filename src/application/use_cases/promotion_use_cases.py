"""
Promotion Use Cases for the Promotion Platform.

Read-side workflows over promotion applications: listing with filters,
detail lookup and reward coupon expiry checks.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.core.config import get_settings
from src.domain.entities import PromotionApplication
from src.domain.exceptions import InvalidPromotionError, PromotionApplicationNotFoundError
from src.domain.interfaces import PromotionApplicationRepositoryInterface
from src.domain.promotions import RewardCoupon
from src.domain.value_objects import ApplicationStatus, DateInput, utc_now

from ..services.cross_cutting import application_logger, performance_monitor

logger = logging.getLogger(__name__)


class GetAllPromotionsUseCase:
    """
    Use case for retrieving promotion applications.

    Pure query operations; every method reads the full set from the
    repository and filters in memory.
    """

    def __init__(self, repository: PromotionApplicationRepositoryInterface):
        self.repository = repository

    @performance_monitor(application_logger)
    async def execute(self) -> List[PromotionApplication]:
        """Get every promotion application."""
        return await self.repository.find_all()

    async def get_active_promotions(
        self, current_date: Optional[datetime] = None
    ) -> List[PromotionApplication]:
        """Get applications in service whose promotion window covers current_date."""
        current_date = current_date or utc_now()
        applications = await self.repository.find_all()
        return [a for a in applications if a.is_active(current_date)]

    async def get_by_status(self, status: ApplicationStatus) -> List[PromotionApplication]:
        status = ApplicationStatus(status)
        applications = await self.repository.find_all()
        return [a for a in applications if a.application_status is status]

    async def get_by_merchant(self, merchant_id: str) -> List[PromotionApplication]:
        applications = await self.repository.find_all()
        return [a for a in applications if a.merchant_id == merchant_id]


class GetPromotionApplicationDetailsUseCase:
    """Use case for retrieving a single promotion application."""

    def __init__(self, repository: PromotionApplicationRepositoryInterface):
        self.repository = repository

    @staticmethod
    def _validate_apply_seq(apply_seq: Any) -> None:
        if isinstance(apply_seq, bool) or not isinstance(apply_seq, int) or apply_seq <= 0:
            raise ValueError(
                "Invalid application sequence number. Must be a positive integer."
            )

    @performance_monitor(application_logger)
    async def execute(self, apply_seq: int) -> Optional[PromotionApplication]:
        """
        Get an application by apply sequence.

        Returns None when the application does not exist.

        Raises:
            ValueError: If apply_seq is not a positive integer
        """
        self._validate_apply_seq(apply_seq)
        return await self.repository.find_by_id(apply_seq)

    async def execute_or_throw(self, apply_seq: int) -> PromotionApplication:
        """Get an application that is expected to exist."""
        application = await self.execute(apply_seq)
        if application is None:
            logger.warning(f"Promotion application not found: {apply_seq}")
            raise PromotionApplicationNotFoundError(apply_seq)
        return application


class CheckRewardCouponExpiryUseCase:
    """
    Use case for checking a reward coupon issued under an application.

    The expiring-soon threshold comes from EXPIRING_SOON_THRESHOLD_DAYS.
    """

    def __init__(self, repository: PromotionApplicationRepositoryInterface):
        self.repository = repository

    async def execute(
        self,
        apply_seq: int,
        issue_date: DateInput,
        current_date: Optional[DateInput] = None,
    ) -> Dict[str, Any]:
        application = await self.repository.find_by_id(apply_seq)
        if application is None:
            raise PromotionApplicationNotFoundError(apply_seq)

        coupon = application.promotion
        if not isinstance(coupon, RewardCoupon):
            raise InvalidPromotionError(
                f"Application {apply_seq} does not own a reward coupon",
                promotion_id=coupon.promotion_id,
                field="promotion",
            )

        threshold_days = get_settings().EXPIRING_SOON_THRESHOLD_DAYS
        return {
            "apply_seq": apply_seq,
            "expires_at": coupon.calculate_coupon_expiration_date(issue_date),
            "is_valid": coupon.is_coupon_valid(issue_date, current_date),
            "days_until_expiration": coupon.days_until_expiration(issue_date, current_date),
            "is_expiring_soon": coupon.is_expiring_soon(
                issue_date, threshold_days, current_date
            ),
        }
