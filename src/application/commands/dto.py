"""
Command DTOs for write operations in the Promotion Platform.

Data Transfer Objects that represent commands for state-changing operations
on promotion applications, following CQRS pattern principles.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.domain.value_objects import EarlyEndRequestRouteType, EarlyEndRequestType


class ApproveApplicationCommand(BaseModel):
    """Command to approve an application and put it in service."""

    apply_seq: int = Field(..., gt=0, description="Application to approve")
    approved_by: str = Field(..., min_length=1, description="Reviewer approving the application")


class CompleteApplicationCommand(BaseModel):
    """Command to mark an in-service application as completed."""

    apply_seq: int = Field(..., gt=0, description="Application to complete")
    completed_by: str = Field(default="system", description="Who completes the application")


class CancelApplicationCommand(BaseModel):
    """Command to cancel an application."""

    apply_seq: int = Field(..., gt=0, description="Application to cancel")
    reason: str = Field(..., max_length=1000, description="Cancel reason")
    cancelled_by: str = Field(..., min_length=1, description="Who cancels the application")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "apply_seq": 1024,
                "reason": "Merchant withdrew the campaign",
                "cancelled_by": "ops@example.com",
            }
        }
    )


class RequestEarlyEndCommand(BaseModel):
    """Command to request early termination of an in-service promotion."""

    apply_seq: int = Field(..., gt=0, description="Application to end early")
    marketing_edit_request_seq: int = Field(..., gt=0, description="Edit request identifier")
    merchant_id: str = Field(..., min_length=1, description="Requesting merchant")
    early_end_date: datetime = Field(..., description="Requested end date")
    request_route_type: EarlyEndRequestRouteType = Field(
        default=EarlyEndRequestRouteType.MERCHANT_CENTER, description="Channel the request came from"
    )
    request_type: EarlyEndRequestType = Field(
        default=EarlyEndRequestType.EARLY_END, description="Kind of edit request"
    )
    requested_by: str = Field(..., min_length=1, description="Who requests the early end")
    requested_at: Optional[datetime] = Field(None, description="Moment of the request, defaults to now")


class ReschedulePromotionCommand(BaseModel):
    """Command to move the promotion window of an application."""

    apply_seq: int = Field(..., gt=0, description="Application whose promotion moves")
    new_start_date: datetime = Field(..., description="New promotion start")
    new_end_date: datetime = Field(..., description="New promotion end")
    requested_by: str = Field(..., min_length=1, description="Who reschedules the promotion")
    today: Optional[datetime] = Field(None, description="Reference date, defaults to now")

    @model_validator(mode="after")
    def end_date_after_start_date(self):
        """Ensure end date is after start date."""
        if self.new_end_date <= self.new_start_date:
            raise ValueError("End date must be after start date")
        return self


class ApplyPointRewardCommand(BaseModel):
    """Command to grant points for a purchase under a point promotion."""

    apply_seq: int = Field(..., gt=0, description="Application owning the point promotion")
    payment_amount: Decimal = Field(..., gt=0, description="Purchase amount")
    paid_at: Optional[datetime] = Field(None, description="Purchase moment, defaults to now")
