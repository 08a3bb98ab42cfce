"""
Domain Exceptions

Custom exceptions for the promotion platform domain layer.
These exceptions represent business rule violations and domain-specific errors.
"""

from typing import Any, Dict, Optional


class PromotionDomainError(Exception):
    """Base exception for all promotion domain errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class InvalidPromotionDateError(PromotionDomainError):
    """Raised when a promotion scheduling window is invalid."""

    def __init__(
        self,
        message: str = "Invalid promotion date: start date must be before end date",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ):
        details = {"start_date": start_date, "end_date": end_date}
        super().__init__(
            message=message, error_code="INVALID_PROMOTION_DATE", details=details
        )


class PromotionNotActiveError(PromotionDomainError):
    """Raised when an operation requires an active promotion."""

    def __init__(
        self,
        message: str = "Promotion is not currently active",
        promotion_id: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="PROMOTION_NOT_ACTIVE",
            details={"promotion_id": promotion_id},
        )


class InsufficientBudgetError(PromotionDomainError):
    """Raised when budget or quantity constraints are violated."""

    def __init__(
        self,
        message: str = "Insufficient budget or quantity remaining",
        available: Optional[float] = None,
        requested: Optional[float] = None,
    ):
        details = {"available": available, "requested": requested}
        super().__init__(
            message=message, error_code="INSUFFICIENT_BUDGET", details=details
        )


class MinimumPaymentNotMetError(PromotionDomainError):
    """Raised when a payment amount doesn't meet the minimum requirement."""

    def __init__(self, minimum_required: Any, actual_amount: Any):
        self.minimum_required = minimum_required
        self.actual_amount = actual_amount
        super().__init__(
            message=(
                f"Payment amount {actual_amount} does not meet "
                f"minimum requirement of {minimum_required}"
            ),
            error_code="MINIMUM_PAYMENT_NOT_MET",
            details={
                "minimum_required": str(minimum_required),
                "actual_amount": str(actual_amount),
            },
        )


class InvalidPercentageError(PromotionDomainError):
    """Raised when a percentage value is out of the 0-100 range."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            message=f"Invalid percentage value: {value}. Must be between 0 and 100.",
            error_code="INVALID_PERCENTAGE",
            details={"value": str(value)},
        )


class InvalidCouponQuantityError(PromotionDomainError):
    """Raised when coupon quantities or prices are inconsistent."""

    def __init__(
        self,
        message: str = "Invalid coupon quantity",
        field: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="INVALID_COUPON_QUANTITY",
            details={"field": field},
        )


class CouponExpiredError(PromotionDomainError):
    """Raised when attempting to use an expired coupon."""

    def __init__(
        self,
        message: str = "Coupon has expired",
        expired_at: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="COUPON_EXPIRED",
            details={"expired_at": expired_at},
        )


class DownloadLimitExceededError(PromotionDomainError):
    """Raised when the download limit has been reached."""

    def __init__(
        self,
        message: str = "Download limit has been exceeded",
        downloadable_quantity: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            error_code="DOWNLOAD_LIMIT_EXCEEDED",
            details={"downloadable_quantity": downloadable_quantity},
        )


class InvalidPointCalculationError(PromotionDomainError):
    """Raised when point budget or calculation inputs are invalid."""

    def __init__(self, message: str = "Invalid point calculation"):
        super().__init__(message=message, error_code="INVALID_POINT_CALCULATION")


class InvalidPromotionError(PromotionDomainError):
    """Raised when promotion attribute validation fails."""

    def __init__(
        self,
        message: str,
        promotion_id: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="INVALID_PROMOTION",
            details={"promotion_id": promotion_id, "field": field},
        )


class InvalidPromotionOrderError(PromotionDomainError):
    """Raised when promotion order validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="INVALID_PROMOTION_ORDER",
            details={"field": field},
        )


class ApplicationStatusError(PromotionDomainError):
    """Raised when invalid application status transitions are attempted."""

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        requested_status: Optional[str] = None,
        apply_seq: Optional[int] = None,
        error_code: str = "INVALID_STATUS_TRANSITION",
    ):
        details = {
            "current_status": current_status,
            "requested_status": requested_status,
            "apply_seq": apply_seq,
        }
        super().__init__(message=message, error_code=error_code, details=details)


class PaymentNotCompletedError(ApplicationStatusError):
    """Raised when approving an application whose payment isn't completed."""

    def __init__(
        self,
        message: str = "Cannot approve application without completed payment",
        current_status: Optional[str] = None,
        apply_seq: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            current_status=current_status,
            requested_status="IN_SERVICE",
            apply_seq=apply_seq,
            error_code="PAYMENT_NOT_COMPLETED",
        )


class ApplicationAlreadyCancelledError(ApplicationStatusError):
    """Raised when cancelling an application that is already cancelled."""

    def __init__(
        self,
        message: str = "Application is already cancelled",
        apply_seq: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            current_status="CANCELLED",
            requested_status="CANCELLED",
            apply_seq=apply_seq,
            error_code="ALREADY_CANCELLED",
        )


class InvalidCancelReasonError(PromotionDomainError):
    """Raised when a cancel reason is missing."""

    def __init__(
        self,
        message: str = "Cancel reason cannot be empty",
        apply_seq: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            error_code="INVALID_CANCEL_REASON",
            details={"apply_seq": apply_seq},
        )


class InvalidEarlyEndDateError(PromotionDomainError):
    """Raised when an early end date is not in the future."""

    def __init__(
        self,
        message: str = "Early end date must be in the future",
        early_end_date: Optional[str] = None,
        apply_seq: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            error_code="INVALID_EARLY_END_DATE",
            details={"early_end_date": early_end_date, "apply_seq": apply_seq},
        )


class PromotionApplicationNotFoundError(PromotionDomainError):
    """Raised when a promotion application cannot be found."""

    def __init__(self, apply_seq: int):
        self.apply_seq = apply_seq
        super().__init__(
            message=f"Promotion application with ID {apply_seq} not found",
            error_code="APPLICATION_NOT_FOUND",
            details={"apply_seq": apply_seq},
        )
