"""
Domain Entities

The payment order and the PromotionApplication aggregate root. The aggregate
owns one promotion variant and one order, and governs the application
lifecycle through guarded transitions.
"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from .exceptions import (
    ApplicationAlreadyCancelledError,
    ApplicationStatusError,
    InvalidCancelReasonError,
    InvalidEarlyEndDateError,
    InvalidPromotionError,
    InvalidPromotionOrderError,
    PaymentNotCompletedError,
)
from .promotions import PROMOTION_VARIANTS, SECONDS_PER_DAY, Promotion
from .value_objects import (
    AmountInput,
    ApplicationRouteType,
    ApplicationStatus,
    CountryType,
    DateInput,
    EarlyEndInfo,
    OrderStatusType,
    PaymentInfo,
    PaymentType,
    ReviewDetail,
    YesNo,
    to_datetime,
    to_decimal,
    utc_now,
)

PAYMENT_AMOUNT_TOLERANCE = Decimal("0.01")


def _now(current_date: Optional[DateInput]) -> datetime:
    return utc_now() if current_date is None else to_datetime(current_date)


class PromotionOrder:
    """Payment facts attached to an application. Immutable once built."""

    __slots__ = (
        "_order_status",
        "_payment_type",
        "_payment_date",
        "_final_payment_price",
        "_payment_info",
    )

    def __init__(
        self,
        order_status: OrderStatusType,
        payment_type: PaymentType,
        payment_date: DateInput,
        final_payment_price: AmountInput,
        payment_info: PaymentInfo,
    ):
        price = to_decimal(final_payment_price)
        if price < 0:
            raise InvalidPromotionOrderError(
                "Payment price cannot be negative", field="final_payment_price"
            )

        self._order_status = OrderStatusType(order_status)
        self._payment_type = PaymentType(payment_type)
        self._payment_date = to_datetime(payment_date)
        self._final_payment_price = price
        self._payment_info = payment_info

    def is_payment_completed(self) -> bool:
        return self._order_status is OrderStatusType.PAYMENT_COMPLETED

    def is_refunded(self) -> bool:
        return self._order_status in (
            OrderStatusType.REFUND_COMPLETED,
            OrderStatusType.PARTIAL_REFUND_COMPLETED,
        )

    def is_partially_refunded(self) -> bool:
        return self._order_status is OrderStatusType.PARTIAL_REFUND_COMPLETED

    def is_fully_refunded(self) -> bool:
        return self._order_status is OrderStatusType.REFUND_COMPLETED

    def is_line_pay(self) -> bool:
        return self._payment_type is PaymentType.LINE_PAY

    def is_credit_card(self) -> bool:
        return self._payment_type is PaymentType.CREDIT_CARD

    def days_since_payment(self, current_date: Optional[DateInput] = None) -> int:
        """Whole days elapsed since payment, rounded down. Negative before payment."""
        seconds = (_now(current_date) - self._payment_date).total_seconds()
        return math.floor(seconds / SECONDS_PER_DAY)

    def validate_payment_amount(self, expected_amount: AmountInput) -> bool:
        """Check the final price against an expected amount within 0.01."""
        return abs(self._final_payment_price - to_decimal(expected_amount)) < PAYMENT_AMOUNT_TOLERANCE

    @property
    def order_status(self) -> OrderStatusType:
        return self._order_status

    @property
    def payment_type(self) -> PaymentType:
        return self._payment_type

    @property
    def payment_date(self) -> datetime:
        return self._payment_date

    @property
    def final_payment_price(self) -> Decimal:
        return self._final_payment_price

    @property
    def payment_info(self) -> PaymentInfo:
        return self._payment_info

    @property
    def order_id(self) -> str:
        return self._payment_info.order_id

    @property
    def total_order_amount(self) -> Decimal:
        return self._payment_info.total_order_amount

    def __repr__(self) -> str:
        return (
            f"PromotionOrder(order_id='{self.order_id}', status='{self._order_status.value}', "
            f"price={self._final_payment_price})"
        )


class PromotionApplication:
    """
    PromotionApplication aggregate root.

    Wraps a merchant's promotion submission together with its payment order,
    review feedback and early termination history. Status changes only go
    through approve, complete and cancel; a rejected transition leaves the
    application untouched.
    """

    def __init__(
        self,
        apply_seq: int,
        country_type: CountryType,
        merchant_id: str,
        merchant_name: str,
        manager_email: str,
        application_route_type: ApplicationRouteType,
        applied_at: DateInput,
        application_status: ApplicationStatus,
        promotion: Promotion,
        promotion_order: PromotionOrder,
        applied_by_admin: YesNo = YesNo.N,
        cancel_reason: Optional[str] = None,
        review_detail: Optional[ReviewDetail] = None,
        early_end_info: Optional[Iterable[EarlyEndInfo]] = None,
        early_end_date: Optional[DateInput] = None,
    ):
        self._validate_promotion(promotion)

        self._apply_seq = apply_seq
        self._country_type = CountryType(country_type)
        self._merchant_id = merchant_id
        self._merchant_name = merchant_name
        self._manager_email = manager_email
        self._application_route_type = ApplicationRouteType(application_route_type)
        self._applied_at = to_datetime(applied_at)
        self._application_status = ApplicationStatus(application_status)
        self._cancel_reason = cancel_reason
        self._applied_by_admin = YesNo(applied_by_admin)

        self._promotion = promotion
        self._promotion_order = promotion_order

        self._review_detail = review_detail
        self._early_end_info: List[EarlyEndInfo] = list(early_end_info or [])
        self._early_end_date = None if early_end_date is None else to_datetime(early_end_date)

    @staticmethod
    def _validate_promotion(promotion: Promotion) -> None:
        variant = PROMOTION_VARIANTS.get(getattr(promotion, "kind", None))
        if variant is None or not isinstance(promotion, variant):
            raise InvalidPromotionError(
                f"Unsupported promotion variant: {type(promotion).__name__}",
                promotion_id=getattr(promotion, "promotion_id", None),
                field="promotion",
            )

    def _transition_to(self, new_status: ApplicationStatus, message: str) -> None:
        if not self._application_status.can_transition_to(new_status):
            raise ApplicationStatusError(
                message,
                current_status=self._application_status.value,
                requested_status=new_status.value,
                apply_seq=self._apply_seq,
            )
        self._application_status = new_status

    # Lifecycle transitions

    def approve(self) -> None:
        """Move an APPLYING application with a completed payment into service."""
        if not self.is_applying():
            raise ApplicationStatusError(
                "Can only approve applications with APPLYING status",
                current_status=self._application_status.value,
                requested_status=ApplicationStatus.IN_SERVICE.value,
                apply_seq=self._apply_seq,
            )

        if not self._promotion_order.is_payment_completed():
            raise PaymentNotCompletedError(
                current_status=self._application_status.value,
                apply_seq=self._apply_seq,
            )

        self._transition_to(
            ApplicationStatus.IN_SERVICE,
            "Can only approve applications with APPLYING status",
        )

    def complete(self) -> None:
        if not self.is_in_service():
            raise ApplicationStatusError(
                "Can only complete applications that are in service",
                current_status=self._application_status.value,
                requested_status=ApplicationStatus.COMPLETED.value,
                apply_seq=self._apply_seq,
            )

        self._transition_to(
            ApplicationStatus.COMPLETED,
            "Can only complete applications that are in service",
        )

    def cancel(self, reason: str) -> None:
        """Cancel from any non-cancelled status and record the reason."""
        if not reason or not reason.strip():
            raise InvalidCancelReasonError(apply_seq=self._apply_seq)

        if self.is_cancelled():
            raise ApplicationAlreadyCancelledError(apply_seq=self._apply_seq)

        self._transition_to(
            ApplicationStatus.CANCELLED,
            f"Cannot cancel application in {self._application_status.value} status",
        )
        self._cancel_reason = reason

    def request_early_end(
        self,
        early_end_info: EarlyEndInfo,
        early_end_date: DateInput,
        now: Optional[DateInput] = None,
    ) -> None:
        """
        Record an early termination request for an in-service application.

        The end date must be strictly after now. The request is appended to
        the history and replaces the current early end date.
        """
        if not self.is_in_service():
            raise ApplicationStatusError(
                "Can only request early end for applications in service",
                current_status=self._application_status.value,
                apply_seq=self._apply_seq,
            )

        end_date = to_datetime(early_end_date)
        if end_date <= _now(now):
            raise InvalidEarlyEndDateError(
                early_end_date=end_date.isoformat(), apply_seq=self._apply_seq
            )

        self._early_end_info.append(early_end_info)
        self._early_end_date = end_date

    def add_review(self, review_detail: ReviewDetail) -> None:
        self._review_detail = review_detail

    # Queries

    def is_active(self, current_date: Optional[DateInput] = None) -> bool:
        """In service and within the promotion window."""
        return self.is_in_service() and self._promotion.is_within_valid_period(current_date)

    def is_in_service(self) -> bool:
        return self._application_status is ApplicationStatus.IN_SERVICE

    def is_applying(self) -> bool:
        return self._application_status is ApplicationStatus.APPLYING

    def is_cancelled(self) -> bool:
        return self._application_status is ApplicationStatus.CANCELLED

    def is_completed(self) -> bool:
        return self._application_status is ApplicationStatus.COMPLETED

    def is_applied_by_admin(self) -> bool:
        return self._applied_by_admin.is_yes

    def has_review(self) -> bool:
        return self._review_detail is not None

    def has_early_end_date(self) -> bool:
        return self._early_end_date is not None

    def has_early_end_requests(self) -> bool:
        return len(self._early_end_info) > 0

    def days_since_application(self, current_date: Optional[DateInput] = None) -> int:
        seconds = (_now(current_date) - self._applied_at).total_seconds()
        return math.floor(seconds / SECONDS_PER_DAY)

    def validate_consistency(self) -> bool:
        """
        Cross-check the promotion classification against the order's payment info.

        Returns False on mismatch instead of raising; the caller decides.
        """
        payment_info = self._promotion_order.payment_info
        if self._promotion.promotion_type is not payment_info.promotion_type:
            return False
        if self._promotion.distribution_type is not payment_info.distribution_type:
            return False
        return True

    # Read-only attributes

    @property
    def apply_seq(self) -> int:
        return self._apply_seq

    @property
    def country_type(self) -> CountryType:
        return self._country_type

    @property
    def merchant_id(self) -> str:
        return self._merchant_id

    @property
    def merchant_name(self) -> str:
        return self._merchant_name

    @property
    def manager_email(self) -> str:
        return self._manager_email

    @property
    def application_route_type(self) -> ApplicationRouteType:
        return self._application_route_type

    @property
    def applied_at(self) -> datetime:
        return self._applied_at

    @property
    def application_status(self) -> ApplicationStatus:
        return self._application_status

    @property
    def cancel_reason(self) -> Optional[str]:
        return self._cancel_reason

    @property
    def applied_by_admin(self) -> YesNo:
        return self._applied_by_admin

    @property
    def promotion(self) -> Promotion:
        return self._promotion

    @property
    def promotion_order(self) -> PromotionOrder:
        return self._promotion_order

    @property
    def review_detail(self) -> Optional[ReviewDetail]:
        return self._review_detail

    @property
    def early_end_info(self) -> List[EarlyEndInfo]:
        return self._early_end_info.copy()

    @property
    def early_end_date(self) -> Optional[datetime]:
        return self._early_end_date

    def __eq__(self, other) -> bool:
        if not isinstance(other, PromotionApplication):
            return False
        return self._apply_seq == other._apply_seq

    def __hash__(self) -> int:
        return hash(self._apply_seq)

    def __repr__(self) -> str:
        return (
            f"PromotionApplication(apply_seq={self._apply_seq}, "
            f"status='{self._application_status.value}', merchant='{self._merchant_id}')"
        )
