"""
Command handlers for write operations in the Promotion Platform.

Each handler loads one PromotionApplication, applies a single domain
transition and saves it back, following CQRS pattern principles.
"""

import logging
from typing import Any, Dict, Optional

from src.domain.entities import PromotionApplication
from src.domain.exceptions import (
    ApplicationStatusError,
    InvalidPromotionError,
    PromotionApplicationNotFoundError,
    PromotionDomainError,
)
from src.domain.interfaces import PromotionApplicationRepositoryInterface
from src.domain.promotions import PointPromotion
from src.domain.value_objects import EarlyEndInfo

from ..services.cross_cutting import ApplicationLogger, AuditEvent, application_logger
from .dto import (
    ApplyPointRewardCommand,
    ApproveApplicationCommand,
    CancelApplicationCommand,
    CompleteApplicationCommand,
    RequestEarlyEndCommand,
    ReschedulePromotionCommand,
)

logger = logging.getLogger(__name__)


async def _load_application(
    repository: PromotionApplicationRepositoryInterface, apply_seq: int
) -> PromotionApplication:
    application = await repository.find_by_id(apply_seq)
    if application is None:
        raise PromotionApplicationNotFoundError(apply_seq)
    return application


class ApproveApplicationHandler:
    """Handler for approving applications."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, command: ApproveApplicationCommand) -> Dict[str, Any]:
        """
        Handle application approval command.

        Moves an APPLYING application with a completed payment into service.
        Applications whose promotion and order disagree are still approved,
        but the mismatch is reported in the audit trail and the result.
        """
        self.app_logger.log_operation("approve_application", command.apply_seq, command.approved_by)

        try:
            application = await _load_application(self.repository, command.apply_seq)

            is_consistent = application.validate_consistency()
            if not is_consistent:
                logger.warning(
                    f"Application {command.apply_seq} promotion and order types do not match"
                )
                self.app_logger.log_audit_event(
                    AuditEvent.INCONSISTENT_APPLICATION,
                    command.apply_seq,
                    command.approved_by,
                    {
                        "promotion_type": application.promotion.promotion_type.value,
                        "order_promotion_type": application.promotion_order.payment_info.promotion_type.value,
                    }
                )

            application.approve()
            await self.repository.save(application)

            self.app_logger.log_audit_event(
                AuditEvent.APPLICATION_APPROVED, command.apply_seq, command.approved_by
            )
            logger.info(f"Application approved successfully: {command.apply_seq}")

            return {
                "apply_seq": application.apply_seq,
                "status": application.application_status.value,
                "is_consistent": is_consistent,
                "message": "Application approved successfully"
            }

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "approve_application", command.apply_seq, command.approved_by)
            raise PromotionDomainError(f"Application approval failed: {str(e)}")


class CompleteApplicationHandler:
    """Handler for completing in-service applications."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, command: CompleteApplicationCommand) -> Dict[str, Any]:
        """Handle application completion command."""
        self.app_logger.log_operation("complete_application", command.apply_seq, command.completed_by)

        try:
            application = await _load_application(self.repository, command.apply_seq)
            application.complete()
            await self.repository.save(application)

            self.app_logger.log_audit_event(
                AuditEvent.APPLICATION_COMPLETED, command.apply_seq, command.completed_by
            )
            logger.info(f"Application completed successfully: {command.apply_seq}")

            return {
                "apply_seq": application.apply_seq,
                "status": application.application_status.value,
                "message": "Application completed successfully"
            }

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "complete_application", command.apply_seq, command.completed_by)
            raise PromotionDomainError(f"Application completion failed: {str(e)}")


class CancelApplicationHandler:
    """Handler for cancelling applications."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, command: CancelApplicationCommand) -> Dict[str, Any]:
        """Handle application cancel command."""
        self.app_logger.log_operation("cancel_application", command.apply_seq, command.cancelled_by)

        try:
            application = await _load_application(self.repository, command.apply_seq)
            previous_status = application.application_status
            application.cancel(command.reason)
            await self.repository.save(application)

            self.app_logger.log_audit_event(
                AuditEvent.APPLICATION_CANCELLED,
                command.apply_seq,
                command.cancelled_by,
                {"previous_status": previous_status.value, "reason": command.reason}
            )
            logger.info(f"Application cancelled successfully: {command.apply_seq}")

            return {
                "apply_seq": application.apply_seq,
                "status": application.application_status.value,
                "previous_status": previous_status.value,
                "cancel_reason": application.cancel_reason,
                "message": "Application cancelled successfully"
            }

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "cancel_application", command.apply_seq, command.cancelled_by)
            raise PromotionDomainError(f"Application cancellation failed: {str(e)}")


class RequestEarlyEndHandler:
    """Handler for early termination requests."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, command: RequestEarlyEndCommand) -> Dict[str, Any]:
        """Handle early end request command."""
        self.app_logger.log_operation(
            "request_early_end",
            command.apply_seq,
            command.requested_by,
            early_end_date=command.early_end_date.isoformat(),
        )

        try:
            application = await _load_application(self.repository, command.apply_seq)

            early_end_info = EarlyEndInfo(
                marketing_edit_request_seq=command.marketing_edit_request_seq,
                apply_seq=command.apply_seq,
                merchant_id=command.merchant_id,
                request_route_type=command.request_route_type,
                request_type=command.request_type,
                created_by=command.requested_by,
            )
            application.request_early_end(
                early_end_info, command.early_end_date, now=command.requested_at
            )
            await self.repository.save(application)

            self.app_logger.log_audit_event(
                AuditEvent.EARLY_END_REQUESTED,
                command.apply_seq,
                command.requested_by,
                {"early_end_date": command.early_end_date.isoformat()}
            )

            return {
                "apply_seq": application.apply_seq,
                "early_end_date": application.early_end_date,
                "early_end_requests": len(application.early_end_info),
                "message": "Early end requested successfully"
            }

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "request_early_end", command.apply_seq, command.requested_by)
            raise PromotionDomainError(f"Early end request failed: {str(e)}")


class ReschedulePromotionHandler:
    """Handler for moving a promotion window."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, command: ReschedulePromotionCommand) -> Dict[str, Any]:
        """Handle promotion reschedule command."""
        self.app_logger.log_operation("reschedule_promotion", command.apply_seq, command.requested_by)

        try:
            application = await _load_application(self.repository, command.apply_seq)
            promotion = application.promotion
            previous_window = (promotion.start_date, promotion.end_date)

            promotion.reschedule_promotion(
                command.new_start_date, command.new_end_date, today=command.today
            )
            await self.repository.save(application)

            self.app_logger.log_audit_event(
                AuditEvent.PROMOTION_RESCHEDULED,
                command.apply_seq,
                command.requested_by,
                {
                    "previous_start_date": previous_window[0].isoformat(),
                    "previous_end_date": previous_window[1].isoformat(),
                    "start_date": promotion.start_date.isoformat(),
                    "end_date": promotion.end_date.isoformat(),
                }
            )

            return {
                "apply_seq": application.apply_seq,
                "promotion_id": promotion.promotion_id,
                "start_date": promotion.start_date,
                "end_date": promotion.end_date,
                "message": "Promotion rescheduled successfully"
            }

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "reschedule_promotion", command.apply_seq, command.requested_by)
            raise PromotionDomainError(f"Promotion reschedule failed: {str(e)}")


class ApplyPointRewardHandler:
    """Handler for granting points under an in-service point promotion."""

    def __init__(
        self,
        repository: PromotionApplicationRepositoryInterface,
        app_logger: Optional[ApplicationLogger] = None
    ):
        self.repository = repository
        self.app_logger = app_logger or application_logger

    async def handle(self, command: ApplyPointRewardCommand) -> Dict[str, Any]:
        """Handle point reward command."""
        self.app_logger.log_operation(
            "apply_point_reward",
            command.apply_seq,
            payment_amount=str(command.payment_amount),
        )

        try:
            application = await _load_application(self.repository, command.apply_seq)

            if not application.is_in_service():
                raise ApplicationStatusError(
                    "Point rewards can only be applied to applications in service",
                    current_status=application.application_status.value,
                    apply_seq=application.apply_seq,
                )

            promotion = application.promotion
            if not isinstance(promotion, PointPromotion):
                raise InvalidPromotionError(
                    f"Application {command.apply_seq} does not own a point promotion",
                    promotion_id=promotion.promotion_id,
                    field="promotion",
                )

            points = promotion.apply_point_reward(
                command.payment_amount, current_date=command.paid_at
            )
            await self.repository.save(application)

            self.app_logger.log_audit_event(
                AuditEvent.POINT_REWARD_APPLIED,
                command.apply_seq,
                details={
                    "payment_amount": str(command.payment_amount),
                    "points": str(points),
                    "remaining_point": str(promotion.remaining_point),
                }
            )

            return {
                "apply_seq": application.apply_seq,
                "points_awarded": points,
                "used_point": promotion.used_point,
                "remaining_point": promotion.remaining_point,
                "used_point_percentage": promotion.used_point_percentage,
                "remaining_point_percentage": promotion.remaining_point_percentage,
                "message": "Point reward applied successfully"
            }

        except PromotionDomainError:
            raise
        except Exception as e:
            self.app_logger.log_error(e, "apply_point_reward", command.apply_seq)
            raise PromotionDomainError(f"Point reward failed: {str(e)}")
