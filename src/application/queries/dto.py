"""
Query DTOs for read operations in the Promotion Platform.

Data Transfer Objects that represent queries for data retrieval operations
following CQRS pattern principles.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from src.core.config import get_settings
from src.domain.promotions import PromotionKind
from src.domain.value_objects import ApplicationStatus, DistributionType, PromotionType


class GetPromotionApplicationQuery(BaseModel):
    """Query to get a specific application by apply sequence."""

    apply_seq: int = Field(..., gt=0, description="Application to retrieve")
    as_of: Optional[datetime] = Field(None, description="Reference moment for activity flags")


class ListPromotionApplicationsQuery(BaseModel):
    """Query to list applications with filtering and pagination."""

    # Pagination
    page: int = Field(default=1, ge=1, description="Page number")
    page_size: int = Field(
        default_factory=lambda: get_settings().DEFAULT_PAGE_SIZE,
        ge=1,
        description="Items per page"
    )

    # Filtering
    status: Optional[ApplicationStatus] = Field(None, description="Filter by application status")
    merchant_id: Optional[str] = Field(None, description="Filter by merchant")
    promotion_kind: Optional[PromotionKind] = Field(None, description="Filter by promotion variant")
    active_on: Optional[datetime] = Field(None, description="Only applications active at this moment")

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Cap page size at the configured maximum."""
        max_page_size = get_settings().MAX_PAGE_SIZE
        if v > max_page_size:
            raise ValueError(f"Page size cannot exceed {max_page_size}")
        return v


class PromotionSummaryResponse(BaseModel):
    """Read model of the promotion owned by an application."""

    promotion_id: str
    kind: PromotionKind
    title: str
    promotion_type: PromotionType
    distribution_type: DistributionType
    start_date: datetime
    end_date: datetime
    usage_percentage: Decimal


class PromotionApplicationResponse(BaseModel):
    """Read model of a promotion application."""

    apply_seq: int
    merchant_id: str
    merchant_name: str
    application_status: ApplicationStatus
    applied_at: datetime
    cancel_reason: Optional[str] = None
    is_active: bool
    is_consistent: bool
    final_payment_price: Decimal
    early_end_date: Optional[datetime] = None
    early_end_requests: int = 0
    promotion: PromotionSummaryResponse


class PromotionApplicationListResponse(BaseModel):
    """Paginated list of applications."""

    items: List[PromotionApplicationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
