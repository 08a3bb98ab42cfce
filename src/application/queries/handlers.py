"""
Query handlers for read operations in the Promotion Platform.

Handlers read applications from the repository and project them into
response models. They never mutate an application.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from src.domain.entities import PromotionApplication
from src.domain.exceptions import PromotionApplicationNotFoundError, PromotionDomainError
from src.domain.interfaces import PromotionApplicationRepositoryInterface

from ..services.cross_cutting import ApplicationLogger, application_logger
from .dto import (
    GetPromotionApplicationQuery,
    ListPromotionApplicationsQuery,
    PromotionApplicationListResponse,
    PromotionApplicationResponse,
    PromotionSummaryResponse,
)

logger = logging.getLogger(__name__)


def to_application_response(
    application: PromotionApplication, as_of: Optional[datetime] = None
) -> PromotionApplicationResponse:
    """Project an application aggregate into its read model."""
    promotion = application.promotion
    return PromotionApplicationResponse(
        apply_seq=application.apply_seq,
        merchant_id=application.merchant_id,
        merchant_name=application.merchant_name,
        application_status=application.application_status,
        applied_at=application.applied_at,
        cancel_reason=application.cancel_reason,
        is_active=application.is_active(as_of),
        is_consistent=application.validate_consistency(),
        final_payment_price=application.promotion_order.final_payment_price,
        early_end_date=application.early_end_date,
        early_end_requests=len(application.early_end_info),
        promotion=PromotionSummaryResponse(
            promotion_id=promotion.promotion_id,
            kind=promotion.kind,
            title=promotion.title,
            promotion_type=promotion.promotion_type,
            distribution_type=promotion.distribution_type,
            start_date=promotion.start_date,
            end_date=promotion.end_date,
            usage_percentage=promotion.calculate_usage_percentage(),
        ),
    )


class GetPromotionApplicationHandler:
    """Handler for retrieving a single application."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, query: GetPromotionApplicationQuery) -> PromotionApplicationResponse:
        logger.debug(f"Getting application: {query.apply_seq}")

        try:
            application = await self.repository.find_by_id(query.apply_seq)
            if application is None:
                raise PromotionApplicationNotFoundError(query.apply_seq)
            return to_application_response(application, query.as_of)

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "get_application", query.apply_seq)
            raise PromotionDomainError(f"Application retrieval failed: {str(e)}")


class ListPromotionApplicationsHandler:
    """Handler for listing applications with filters and pagination."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, query: ListPromotionApplicationsQuery) -> PromotionApplicationListResponse:
        """
        Handle list query.

        Filters are combined with AND; results are ordered by apply sequence.
        """
        logger.debug(f"Listing applications: {query.model_dump(exclude_none=True)}")

        try:
            applications = await self.repository.find_all()

            if query.status is not None:
                applications = [a for a in applications if a.application_status is query.status]
            if query.merchant_id is not None:
                applications = [a for a in applications if a.merchant_id == query.merchant_id]
            if query.promotion_kind is not None:
                applications = [a for a in applications if a.promotion.kind is query.promotion_kind]
            if query.active_on is not None:
                applications = [a for a in applications if a.is_active(query.active_on)]

            applications.sort(key=lambda a: a.apply_seq)

            total = len(applications)
            offset = (query.page - 1) * query.page_size
            page_items = applications[offset:offset + query.page_size]

            return PromotionApplicationListResponse(
                items=[to_application_response(a, query.active_on) for a in page_items],
                total=total,
                page=query.page,
                page_size=query.page_size,
                total_pages=math.ceil(total / query.page_size) if total else 0,
            )

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(
                e, "list_applications", filters=query.model_dump(mode="json", exclude_none=True)
            )
            raise PromotionDomainError(f"Application listing failed: {str(e)}")
