"""
Tests for the PromotionApplication lifecycle.
"""

from datetime import datetime

import pytest

from src.domain.exceptions import (
    ApplicationAlreadyCancelledError,
    ApplicationStatusError,
    InvalidCancelReasonError,
    InvalidEarlyEndDateError,
    InvalidPromotionError,
    PaymentNotCompletedError,
)
from src.domain.value_objects import (
    ApplicationStatus,
    DistributionType,
    EarlyEndInfo,
    ExposureType,
    OrderStatusType,
    PaymentInfo,
    PromotionType,
    ReviewDetail,
    ReviewDetailCategoryType,
)
from tests.factories import (
    MID_YEAR,
    make_application,
    make_downloadable_coupon,
    make_order,
    make_point_promotion,
)


def _early_end_info(seq: int = 1) -> EarlyEndInfo:
    return EarlyEndInfo(marketing_edit_request_seq=seq, apply_seq=1, merchant_id="M-001")


class TestApplicationTransitions:
    """Test cases for approve and complete."""

    def test_approve_paid_application(self, application):
        application.approve()

        assert application.application_status is ApplicationStatus.IN_SERVICE

    def test_approve_requires_completed_payment(self):
        promotion = make_point_promotion()
        order = make_order(promotion, order_status=OrderStatusType.REFUND_COMPLETED)
        application = make_application(promotion, order)

        with pytest.raises(PaymentNotCompletedError):
            application.approve()

        assert application.application_status is ApplicationStatus.APPLYING

    def test_approve_only_from_applying(self):
        application = make_application(application_status=ApplicationStatus.IN_SERVICE)

        with pytest.raises(ApplicationStatusError) as exc_info:
            application.approve()

        assert exc_info.value.error_code == "INVALID_STATUS_TRANSITION"
        assert application.application_status is ApplicationStatus.IN_SERVICE

    def test_complete_in_service(self):
        application = make_application(application_status=ApplicationStatus.IN_SERVICE)
        application.complete()

        assert application.is_completed()

    def test_complete_requires_in_service(self):
        application = make_application()

        with pytest.raises(ApplicationStatusError):
            application.complete()

        assert application.is_applying()


class TestApplicationCancel:
    """Test cases for cancel."""

    @pytest.mark.parametrize("reason", ["", "   "])
    def test_blank_reason_rejected(self, reason):
        application = make_application()

        with pytest.raises(InvalidCancelReasonError):
            application.cancel(reason)

        assert application.is_applying()
        assert application.cancel_reason is None

    @pytest.mark.parametrize(
        "status",
        [ApplicationStatus.APPLYING, ApplicationStatus.IN_SERVICE, ApplicationStatus.COMPLETED],
    )
    def test_cancel_from_any_live_status(self, status):
        application = make_application(application_status=status)
        application.cancel("Merchant request")

        assert application.is_cancelled()
        assert application.cancel_reason == "Merchant request"

    def test_cancel_twice_rejected(self):
        application = make_application()
        application.cancel("Merchant request")

        with pytest.raises(ApplicationAlreadyCancelledError):
            application.cancel("Again")

        assert application.cancel_reason == "Merchant request"


class TestApplicationEarlyEnd:
    """Test cases for early end requests."""

    def setup_method(self):
        self.application = make_application(application_status=ApplicationStatus.IN_SERVICE)
        self.now = datetime(2023, 6, 1, 9)

    def test_requires_in_service(self):
        application = make_application()

        with pytest.raises(ApplicationStatusError):
            application.request_early_end(_early_end_info(), datetime(2023, 7, 1), now=self.now)

        assert not application.has_early_end_requests()

    def test_date_must_be_in_future(self):
        with pytest.raises(InvalidEarlyEndDateError):
            self.application.request_early_end(_early_end_info(), self.now, now=self.now)

        assert not self.application.has_early_end_date()

    def test_requests_accumulate_and_date_is_replaced(self):
        self.application.request_early_end(_early_end_info(1), datetime(2023, 7, 1), now=self.now)
        self.application.request_early_end(_early_end_info(2), datetime(2023, 6, 20), now=self.now)

        assert self.application.early_end_date == datetime(2023, 6, 20)
        assert [i.marketing_edit_request_seq for i in self.application.early_end_info] == [1, 2]

    def test_early_end_info_is_a_copy(self):
        self.application.request_early_end(_early_end_info(), datetime(2023, 7, 1), now=self.now)

        self.application.early_end_info.clear()

        assert len(self.application.early_end_info) == 1


class TestApplicationQueries:
    """Test cases for read-only checks."""

    def test_is_active_requires_service_and_window(self):
        application = make_application(application_status=ApplicationStatus.IN_SERVICE)

        assert application.is_active(MID_YEAR)
        assert not application.is_active(datetime(2024, 6, 1))
        assert not make_application().is_active(MID_YEAR)

    def test_consistent_application(self):
        assert make_application().validate_consistency()

    def test_distribution_mismatch(self):
        promotion = make_point_promotion()
        order = make_order(
            promotion,
            payment_info=PaymentInfo(
                order_id="ORD-0002",
                payment_date="2023-01-01",
                promotion_type=PromotionType.POINT_PROMOTION,
                distribution_type=DistributionType.DOWNLOAD,
                total_order_amount=5000,
            ),
        )

        assert not make_application(promotion, order).validate_consistency()

    def test_promotion_type_mismatch(self):
        coupon = make_downloadable_coupon()
        order = make_order(make_point_promotion())

        assert not make_application(coupon, order).validate_consistency()

    def test_days_since_application(self):
        application = make_application(applied_at=datetime(2022, 12, 20))
        assert application.days_since_application(datetime(2022, 12, 30, 18)) == 10

    def test_review(self):
        application = make_application()
        assert not application.has_review()

        application.add_review(
            ReviewDetail(
                exposure_type=ExposureType.BANNER,
                exposure_area_type="MAIN_TOP",
                exposure_area_type_desc="Main page top banner",
                category=ReviewDetailCategoryType.DESIGN,
                title="Logo too small",
            )
        )

        assert application.has_review()
        assert application.review_detail.title == "Logo too small"

    def test_unregistered_promotion_rejected(self):
        with pytest.raises(InvalidPromotionError):
            make_application(promotion=object(), promotion_order=make_order())
