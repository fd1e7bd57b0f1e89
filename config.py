"""
Configuration Module for the Multicore Scheduler Core

This module contains the enumerations, configuration dataclasses and constants
used by the scheduling core. Centralizing configuration keeps the decision
logic free of magic values and makes it easy to switch policies in tests.

In Operating Systems, the scheduling policy is chosen once when the
scheduler boots and never changes afterwards, so everything here is
read-only once a scheduler has been started.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Any
import logging


# =============================================================================
# ENUMERATIONS - Define categorical constants
# =============================================================================

class SchedulingPolicy(Enum):
    """
    Supported scheduling policies.

    Non-preemptive:
    - FCFS: First Come First Served, ordered by arrival time
    - SJF: Shortest Job First, ordered by total running time
    - PRI: Priority, lower number runs first
    - RR: Round Robin, plain FIFO rotated on quantum expiry

    Preemptive:
    - PSJF: Preemptive Shortest Job First, ordered by remaining time
    - PPRI: Preemptive Priority
    """
    FCFS = "FCFS (First Come First Served)"
    SJF = "SJF (Shortest Job First)"
    PSJF = "PSJF (Preemptive Shortest Job First)"
    PRI = "PRI (Priority)"
    PPRI = "PPRI (Preemptive Priority)"
    RR = "RR (Round Robin)"


class JobState(Enum):
    """
    Lifecycle of a job inside the scheduling core.

    A job is always in exactly one of these states:
    - WAITING: held by the wait queue
    - RUNNING: occupying exactly one core slot
    - COMPLETED: finished, no longer referenced by the core
    """
    WAITING = "waiting"
    RUNNING = "running"
    COMPLETED = "completed"


# =============================================================================
# SCHEDULER CONFIGURATION
# =============================================================================

@dataclass
class SchedulerConfig:
    """
    Main configuration for a scheduler instance.

    Attributes:
        num_cores: Number of cores managed by the scheduler
        policy: Scheduling policy, fixed for the scheduler's lifetime
        validate_events: Re-check driver preconditions on every event
            (event time order, core ranges, occupied cores)
        log_queue_after_event: Log the full queue layout at DEBUG level
            after every event
        max_cores: Upper bound accepted for num_cores
    """
    num_cores: int = 1
    policy: SchedulingPolicy = SchedulingPolicy.FCFS
    validate_events: bool = False
    log_queue_after_event: bool = False
    max_cores: int = 1024

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary for serialization.

        Returns:
            Dict containing all configuration parameters
        """
        return {
            'num_cores': self.num_cores,
            'policy': self.policy.name,
            'validate_events': self.validate_events,
            'log_queue_after_event': self.log_queue_after_event,
            'max_cores': self.max_cores,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchedulerConfig':
        """
        Create configuration from dictionary.

        The policy may be given either as an enum member name ("PSJF")
        or as its descriptive value.

        Args:
            data: Dictionary containing configuration parameters

        Returns:
            SchedulerConfig instance
        """
        config = cls()
        for key, value in data.items():
            if key == 'policy' and not isinstance(value, SchedulingPolicy):
                if value in SchedulingPolicy.__members__:
                    value = SchedulingPolicy[value]
                else:
                    value = SchedulingPolicy(value)
            if hasattr(config, key):
                setattr(config, key, value)
        return config


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

@dataclass
class LoggingConfig:
    """
    Configuration for the logging system.

    The core only emits records through module loggers; handlers are
    attached by utils.setup_logging() using these settings.
    """
    level: int = logging.INFO
    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "scheduler.log"

    # Log format
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# DEFAULT INSTANCES
# =============================================================================

DEFAULT_SCHEDULER_CONFIG = SchedulerConfig()
DEFAULT_LOGGING_CONFIG = LoggingConfig()


# =============================================================================
# CONSTANTS
# =============================================================================

VERSION = "1.0.0"
APP_NAME = "Multicore Scheduler Core"

# Help text for policies
POLICY_DESCRIPTIONS = {
    SchedulingPolicy.FCFS: """
First Come First Served:
- Jobs run in the order they arrived
- A running job keeps its core until it finishes
- Suffers from the convoy effect behind long jobs
    """.strip(),

    SchedulingPolicy.SJF: """
Shortest Job First:
- The waiting job with the smallest total running time runs next
- Ties go to the earlier arrival
- Never interrupts a running job
    """.strip(),

    SchedulingPolicy.PSJF: """
Preemptive Shortest Job First:
- Ordered by remaining running time
- An arrival shorter than some running job's remaining time takes its core
- The evicted job returns to the wait queue with its progress kept
    """.strip(),

    SchedulingPolicy.PRI: """
Priority:
- Lower priority number runs first, ties go to the earlier arrival
- Never interrupts a running job
    """.strip(),

    SchedulingPolicy.PPRI: """
Preemptive Priority:
- Same ordering as Priority
- A more important arrival evicts the least important running job
    """.strip(),

    SchedulingPolicy.RR: """
Round Robin:
- Jobs wait in plain FIFO order
- On quantum expiry the running job goes to the back of the queue
  and the head of the queue takes the core
    """.strip(),
}
