"""
Job Module for the Multicore Scheduler Core

This module defines the Job record: the identity and scheduling state of one
unit of work handed to the scheduler by the event driver.

Key OS Concepts Demonstrated:
- Process Control Block (PCB): the fields a scheduler needs per job
- Job States: WAITING, RUNNING, COMPLETED
- Timing: arrival, first start, running and remaining time
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from config import JobState


@dataclass
class Job:
    """
    Represents one job known to the scheduler.

    Attributes:
        job_id (int): Caller-supplied unique identifier
        arrival_time (int): Time the job became known; never changes
        running_time (int): Total CPU time required; never changes
        priority (int): Lower number = more important; never changes
        remaining_time (int): CPU time still required, starts at running_time
        start_time (Optional[int]): Time the job first occupied a core,
            None until then
        state (JobState): WAITING, RUNNING or COMPLETED
        core_id (Optional[int]): Core currently running the job
    """

    job_id: int
    arrival_time: int
    running_time: int
    priority: int = 0
    remaining_time: int = field(init=False)
    start_time: Optional[int] = None
    state: JobState = JobState.WAITING
    core_id: Optional[int] = None

    def __post_init__(self):
        """A fresh job has not run yet, so all of its running time remains."""
        self.remaining_time = self.running_time

    def __str__(self) -> str:
        return (
            f"Job[ID={self.job_id}, State={self.state.name}, "
            f"Arrival={self.arrival_time}, Start={self.start_time}, "
            f"Remaining={self.remaining_time}/{self.running_time}, "
            f"Priority={self.priority}, Core={self.core_id}]"
        )

    def __eq__(self, other: object) -> bool:
        """
        Jobs are identical when their ids match.

        Scheduling keys play no part here; two different jobs with the
        same running time are still different jobs.
        """
        if not isinstance(other, Job):
            return False
        return self.job_id == other.job_id

    def __hash__(self) -> int:
        return hash(self.job_id)

    # =========================================================================
    # State Management Methods
    # =========================================================================

    @property
    def has_started(self) -> bool:
        """Whether the job has been credited with a first start."""
        return self.start_time is not None

    def dispatch(self, core_id: int, current_time: int) -> None:
        """
        Put the job on a core.

        The first dispatch records start_time; later dispatches of a
        preempted job keep the original one.

        Args:
            core_id: Core the job now occupies
            current_time: Current simulation time
        """
        self.state = JobState.RUNNING
        self.core_id = core_id
        if self.start_time is None:
            self.start_time = current_time

    def release(self) -> None:
        """Take the job off its core and send it back to waiting."""
        self.state = JobState.WAITING
        self.core_id = None

    def preempt(self, current_time: int) -> None:
        """
        Evict the job in favour of an arrival.

        A job that was installed in this very tick never executed, so it
        loses the start it was credited with.

        Args:
            current_time: Current simulation time
        """
        self.release()
        if self.start_time == current_time:
            self.start_time = None

    def complete(self) -> None:
        """Mark the job finished and detach it from its core."""
        self.state = JobState.COMPLETED
        self.core_id = None

    # =========================================================================
    # Execution Methods
    # =========================================================================

    def record_run(self, elapsed: int) -> None:
        """
        Charge elapsed time to a job occupying a core.

        Args:
            elapsed: Time units since the previous event
        """
        self.remaining_time -= elapsed

    # =========================================================================
    # Metrics
    # =========================================================================

    def waiting_time(self, finish_time: int) -> int:
        """Time in the system not spent executing."""
        return finish_time - self.running_time - self.arrival_time

    def response_time(self) -> int:
        """Time from arrival until first execution."""
        return self.start_time - self.arrival_time

    def turnaround_time(self, finish_time: int) -> int:
        """Total time in the system."""
        return finish_time - self.arrival_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary for logging and inspection."""
        return {
            'job_id': self.job_id,
            'arrival_time': self.arrival_time,
            'running_time': self.running_time,
            'remaining_time': self.remaining_time,
            'priority': self.priority,
            'start_time': self.start_time,
            'state': self.state.name,
            'core_id': self.core_id,
        }
