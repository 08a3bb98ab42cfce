"""
Tests for logging services and configuration.
"""

from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from src.application.services.cross_cutting import (
    ApplicationLogger,
    AuditEvent,
    performance_monitor,
)
from src.core.config import Settings, get_settings
from src.domain.exceptions import InsufficientBudgetError


class TestApplicationLogger:
    """Test cases for ApplicationLogger."""

    def setup_method(self):
        self.app_logger = ApplicationLogger("promotion_platform_test")

    def test_audit_event_record(self, caplog):
        with caplog.at_level("INFO", logger="promotion_platform_test"):
            record = self.app_logger.log_audit_event(
                AuditEvent.APPLICATION_CANCELLED, 7, "ops", {"reason": "Budget cut"}
            )

        assert record["audit_event"] == "application_cancelled"
        assert record["apply_seq"] == 7
        assert record["details"] == {"reason": "Budget cut"}
        assert "AUDIT: application_cancelled | Application: 7 | Actor: ops" in caplog.text

    def test_error_record_carries_domain_code(self):
        record = self.app_logger.log_error(
            InsufficientBudgetError("No coupons available"), "grant_coupon", apply_seq=3
        )

        assert record["error_type"] == "InsufficientBudgetError"
        assert record["error_code"] == "INSUFFICIENT_BUDGET"

    def test_operation_record(self):
        record = self.app_logger.log_operation("approve", 1, "reviewer", note="fast track")

        assert record["operation"] == "approve"
        assert record["note"] == "fast track"

    def test_slow_operation_flagged(self, caplog):
        with caplog.at_level("INFO", logger="promotion_platform_test"):
            self.app_logger.log_performance("list_applications", 5000.0)

        assert "SLOW_OPERATION" in caplog.text


class TestPerformanceMonitor:
    """Test cases for the performance_monitor decorator."""

    def setup_method(self):
        self.app_logger = Mock()

    def test_sync_success(self):
        @performance_monitor(self.app_logger)
        def compute(value):
            return value * 2

        assert compute(21) == 42
        _, kwargs = self.app_logger.log_performance.call_args
        assert kwargs["success"] is True

    def test_sync_failure_is_reraised(self):
        @performance_monitor(self.app_logger)
        def explode():
            raise InsufficientBudgetError()

        with pytest.raises(InsufficientBudgetError):
            explode()

        _, kwargs = self.app_logger.log_performance.call_args
        assert kwargs["success"] is False

    @pytest.mark.asyncio
    async def test_async_success(self):
        @performance_monitor(self.app_logger)
        async def fetch():
            return "done"

        assert await fetch() == "done"
        args, kwargs = self.app_logger.log_performance.call_args
        assert args[0].endswith("fetch")
        assert kwargs["success"] is True


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.EXPIRING_SOON_THRESHOLD_DAYS == 3
        assert settings.MAX_PAGE_SIZE == 100

    def test_debug_parsing(self):
        assert Settings(_env_file=None, DEBUG="yes").DEBUG is True
        assert Settings(_env_file=None, DEBUG="off").DEBUG is False

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="chatty")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("EXPIRING_SOON_THRESHOLD_DAYS", "5")
        assert Settings(_env_file=None).EXPIRING_SOON_THRESHOLD_DAYS == 5

    def test_get_settings_returns_shared_instance(self):
        assert get_settings() is get_settings()
