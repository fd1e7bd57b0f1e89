"""
Validators Module for the Multicore Scheduler Core

This module provides the exception hierarchy and the validation helpers used
at the scheduler's boundary.

Validation Categories:
1. Configuration Validation: core count and policy, checked at start-up
2. Event Validation: driver preconditions (time order, core ranges,
   occupied cores), checked only when SchedulerConfig.validate_events is set

"No scheduling change" is never an error: the core reports it by returning
None. Exceptions are reserved for calls that break the driver contract.
"""

import logging
from typing import Optional, Any, List, Sequence
from dataclasses import dataclass, field

from config import SchedulingPolicy, SchedulerConfig


# Configure logger
logger = logging.getLogger(__name__)


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================

class ValidationError(Exception):
    """
    Base exception for rejected scheduler input.

    Attributes:
        message: What was wrong
        field: Name of the offending argument, if known
        value: The rejected value, if it helps to show it
    """

    def __init__(self, message: str, field: str = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def __str__(self) -> str:
        if self.field is None:
            return self.message
        if self.value is None:
            return f"{self.field}: {self.message}"
        return f"{self.field}={self.value!r}: {self.message}"


class ConfigurationError(ValidationError):
    """Exception for invalid core counts, policies or configs."""
    pass


class SchedulingError(ValidationError):
    """Exception for events that violate the driver's preconditions."""
    pass


class SchedulerStateError(ValidationError):
    """Exception for calls made after the scheduler was cleaned up."""
    pass


# =============================================================================
# VALIDATION RESULT
# =============================================================================

@dataclass
class ValidationResult:
    """
    Problems found while checking one call's arguments.

    A result with no errors is valid; warnings never make it invalid.
    The first rejected argument names the field reported by
    raise_if_invalid().
    """
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    field: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def reject(self, error: str, field_name: str = None) -> 'ValidationResult':
        """Record an error and return self, so checks can end with it."""
        self.errors.append(error)
        if self.field is None:
            self.field = field_name
        return self

    def warn(self, warning: str) -> 'ValidationResult':
        self.warnings.append(warning)
        return self

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Fold another check's problems into this one."""
        for error in other.errors:
            self.reject(error, other.field)
        self.warnings.extend(other.warnings)
        return self

    def log(self, context: str = "") -> None:
        """Report every problem at WARNING, prefixed with context."""
        prefix = f"[{context}] " if context else ""
        for error in self.errors:
            logger.warning(f"{prefix}rejected: {error}")
        for warning in self.warnings:
            logger.warning(f"{prefix}{warning}")

    def raise_if_invalid(self, error_cls: type = ValidationError, value: Any = None):
        """
        Raise error_cls carrying every collected error.

        Warnings never raise; report them with log().
        """
        if self.errors:
            raise error_cls("; ".join(self.errors), self.field, value)


# =============================================================================
# CONFIGURATION VALIDATORS
# =============================================================================

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validator for scheduler start-up parameters."""

    MIN_CORES = 1

    @classmethod
    def validate_config(cls, config: SchedulerConfig) -> ValidationResult:
        """
        Validate an entire scheduler configuration.

        Args:
            config: SchedulerConfig to validate

        Returns:
            ValidationResult with all errors and warnings
        """
        result = ValidationResult()
        result.merge(cls.validate_num_cores(config.num_cores, config.max_cores))
        result.merge(cls.validate_policy(config.policy))

        core_logger = logging.getLogger("scheduler_core")
        if config.log_queue_after_event and not core_logger.isEnabledFor(logging.DEBUG):
            result.warn("log_queue_after_event is set but DEBUG logging is disabled")

        return result

    @classmethod
    def validate_num_cores(cls, value: int, max_cores: int = 1024) -> ValidationResult:
        """Cores must be a whole number in [MIN_CORES, max_cores]."""
        result = ValidationResult()
        if not _is_int(value):
            return result.reject(f"expected an integer core count, got {value!r}", "num_cores")
        if not cls.MIN_CORES <= value <= max_cores:
            result.reject(f"{value} cores is outside {cls.MIN_CORES}..{max_cores}", "num_cores")
        return result

    @classmethod
    def validate_policy(cls, value: Any) -> ValidationResult:
        result = ValidationResult()
        if not isinstance(value, SchedulingPolicy):
            result.reject(
                f"unknown policy {value!r}, expected one of {[p.name for p in SchedulingPolicy]}",
                "policy"
            )
        return result


# =============================================================================
# EVENT VALIDATORS
# =============================================================================

class EventValidator:
    """Validator for the driver's event preconditions."""

    @classmethod
    def validate_event_time(cls, time: int, current_time: int) -> ValidationResult:
        """Event times must never go backwards."""
        result = ValidationResult()
        if not _is_int(time):
            return result.reject(f"event time must be an integer, got {time!r}", "time")
        if time < current_time:
            result.reject(f"event at time {time} arrives after time {current_time}", "time")
        return result

    @classmethod
    def validate_core_id(cls, core_id: int, num_cores: int) -> ValidationResult:
        """Validate that a core id is in [0, num_cores)."""
        result = ValidationResult()
        if not _is_int(core_id) or not 0 <= core_id < num_cores:
            result.reject(f"no core {core_id!r} among cores 0..{num_cores - 1}", "core_id")
        return result

    @classmethod
    def validate_core_occupied(cls, core_id: int, cores: Sequence) -> ValidationResult:
        """The core named by a finish or quantum event must be running a job."""
        result = cls.validate_core_id(core_id, len(cores))
        if result.is_valid and cores[core_id] is None:
            result.reject(f"core {core_id} is idle", "core_id")
        return result

    @classmethod
    def validate_job_matches(cls, job, job_id: int, core_id: int) -> ValidationResult:
        """The job reported as finished must be the one on the core."""
        result = ValidationResult()
        if job is None or job.job_id != job_id:
            running = job.job_id if job is not None else None
            result.reject(f"job {job_id} is not running on core {core_id} (found {running})", "job_id")
        return result

    @classmethod
    def validate_new_job(
        cls,
        job_id: int,
        running_time: int,
        priority: int,
        known_ids: Sequence[int] = ()
    ) -> ValidationResult:
        """Validate the attributes of an arriving job."""
        result = ValidationResult()

        if not _is_int(job_id):
            result.reject(f"job_id must be an integer, got {job_id!r}", "job_id")
        elif job_id in known_ids:
            result.reject(f"job {job_id} is already known to the scheduler", "job_id")

        if not _is_int(running_time) or running_time <= 0:
            result.reject(f"running_time must be a positive integer, got {running_time!r}",
                          "running_time")

        if not _is_int(priority):
            result.reject(f"priority must be an integer, got {priority!r}", "priority")

        return result
