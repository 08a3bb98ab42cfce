"""
Cross-cutting concern services for the Promotion Platform.

Provides structured logging, audit trail and performance monitoring used
throughout the application layer.
"""

import inspect
import json
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Optional

from src.core.config import get_settings


class LogLevel(str, Enum):
    """Application log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AuditEvent(str, Enum):
    """Types of audit events."""
    APPLICATION_APPROVED = "application_approved"
    APPLICATION_COMPLETED = "application_completed"
    APPLICATION_CANCELLED = "application_cancelled"
    EARLY_END_REQUESTED = "early_end_requested"
    PROMOTION_RESCHEDULED = "promotion_rescheduled"
    POINT_REWARD_APPLIED = "point_reward_applied"
    INCONSISTENT_APPLICATION = "inconsistent_application"


SYSTEM_ACTOR = "system"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ApplicationLogger:
    """
    Structured logging service for application layer operations.

    Provides consistent logging format with audit trail capabilities
    and performance monitoring.
    """

    def __init__(self, logger_name: str = "promotion_platform"):
        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

    def _configure_logger(self):
        """Configure structured logging format."""
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(get_settings().LOG_LEVEL)

    def log_operation(
        self,
        operation: str,
        apply_seq: Optional[int],
        actor: str = SYSTEM_ACTOR,
        level: LogLevel = LogLevel.INFO,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Log application operation with structured data.

        Args:
            operation: Operation being performed
            apply_seq: Application the operation targets
            actor: Who performs the operation
            level: Log level
            **kwargs: Additional structured data

        Returns:
            The structured record that was logged
        """
        log_data = {
            "operation": operation,
            "apply_seq": apply_seq,
            "actor": actor,
            "timestamp": _timestamp(),
            **kwargs
        }

        message = f"Operation: {operation} | Application: {apply_seq} | Actor: {actor}"
        if kwargs:
            message += f" | Data: {json.dumps(kwargs, default=str)}"

        getattr(self.logger, level.lower())(message)
        return log_data

    def log_performance(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        **kwargs
    ) -> Dict[str, Any]:
        """Log performance metrics for operations."""
        performance_data = {
            "operation": operation,
            "duration_ms": round(duration_ms, 2),
            "success": success,
            "timestamp": _timestamp(),
            **kwargs
        }

        level = LogLevel.INFO if success else LogLevel.WARNING
        message = f"Performance: {operation} | Duration: {duration_ms:.2f}ms | Success: {success}"

        if duration_ms > get_settings().SLOW_OPERATION_THRESHOLD_MS:
            level = LogLevel.WARNING
            message += " | SLOW_OPERATION"

        getattr(self.logger, level.lower())(message)
        return performance_data

    def log_audit_event(
        self,
        event: AuditEvent,
        apply_seq: Optional[int],
        actor: str = SYSTEM_ACTOR,
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log audit events for application lifecycle changes.

        Args:
            event: Type of audit event
            apply_seq: Application being acted upon
            actor: Who performs the action
            details: Additional audit details
        """
        audit_data = {
            "audit_event": event.value,
            "apply_seq": apply_seq,
            "actor": actor,
            "timestamp": _timestamp(),
            "details": details or {}
        }

        message = f"AUDIT: {event.value} | Application: {apply_seq} | Actor: {actor}"
        if details:
            message += f" | Details: {json.dumps(details, default=str)}"

        # Audit events are always INFO
        self.logger.info(message)
        return audit_data

    def log_error(
        self,
        error: Exception,
        operation: str,
        apply_seq: Optional[int] = None,
        actor: str = SYSTEM_ACTOR,
        **kwargs
    ) -> Dict[str, Any]:
        """Log application errors with context."""
        error_data = {
            "error_type": type(error).__name__,
            "error_message": str(error),
            "error_code": getattr(error, "error_code", None),
            "operation": operation,
            "apply_seq": apply_seq,
            "actor": actor,
            "timestamp": _timestamp(),
            **kwargs
        }

        message = f"ERROR: {operation} | {type(error).__name__}: {str(error)}"
        self.logger.error(message)
        return error_data


def performance_monitor(logger: ApplicationLogger):
    """
    Decorator for monitoring operation performance.

    Logs operation duration and success/failure for sync and async callables.
    """
    def decorator(func: Callable) -> Callable:
        operation_name = f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.log_performance(operation_name, duration_ms, success=False, error=str(e))
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.log_performance(operation_name, duration_ms, success=True)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.log_performance(operation_name, duration_ms, success=False, error=str(e))
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.log_performance(operation_name, duration_ms, success=True)
            return result

        return async_wrapper if inspect.iscoroutinefunction(func) else sync_wrapper

    return decorator


# Shared instance for the application layer
application_logger = ApplicationLogger()
