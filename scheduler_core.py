"""
Multicore Scheduler Core

This module implements the decision core of a discrete-event CPU scheduling
simulator. An external driver reports three kinds of events in
non-decreasing time order:

1. A job arrives                 -> on_arrival()
2. A job finishes on a core      -> on_finish()
3. A round-robin quantum expires -> on_quantum_expired()

and the core answers each one with a scheduling decision: which core the
new job should run on, which job should take a freed core, or None when
nothing changes. Along the way it accumulates waiting, response and
turnaround time so the driver can read the averages at the end.

OS Concepts Demonstrated:
- Preemptive vs Non-preemptive scheduling
- Victim selection on multiprocessor preemption
- Round robin rotation on quantum expiry
- Waiting / response / turnaround accounting

The core never blocks, never spawns work and holds no locks. All state
lives on one SchedulerCore instance created by start_up().
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Dict, Any, Tuple, Union
import logging

from config import (
    SchedulingPolicy,
    SchedulerConfig,
    DEFAULT_SCHEDULER_CONFIG
)
from job import Job
from policies import get_comparator, is_preemptive, policy_from_name
from validators import (
    ConfigValidator,
    EventValidator,
    ValidationResult,
    ConfigurationError,
    SchedulingError,
    SchedulerStateError
)
from wait_queue import OrderedWaitQueue

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# METRICS
# =============================================================================

@dataclass
class SchedulingMetrics:
    """
    Running sums for evaluating a scheduling run.

    The three time sums only grow, and only when a job completes.
    Averages divide by every job that arrived, so they are meaningful
    once all arrived jobs have finished.
    """
    total_jobs: int = 0
    completed_jobs: int = 0
    waiting_time_sum: float = 0.0
    response_time_sum: float = 0.0
    turnaround_time_sum: float = 0.0
    preemptions: int = 0
    context_switches: int = 0

    def record_completion(self, job: Job, finish_time: int) -> None:
        """Add a finished job's contribution to the sums."""
        self.completed_jobs += 1
        self.waiting_time_sum += job.waiting_time(finish_time)
        self.response_time_sum += job.response_time()
        self.turnaround_time_sum += job.turnaround_time(finish_time)

    def _per_job(self, total: float) -> float:
        # No arrivals yet means nothing to average
        if self.total_jobs == 0:
            return 0.0
        return total / self.total_jobs

    @property
    def avg_waiting_time(self) -> float:
        """Average waiting time per job."""
        return self._per_job(self.waiting_time_sum)

    @property
    def avg_turnaround_time(self) -> float:
        """Average turnaround time per job."""
        return self._per_job(self.turnaround_time_sum)

    @property
    def avg_response_time(self) -> float:
        """Average response time per job."""
        return self._per_job(self.response_time_sum)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            'total_jobs': self.total_jobs,
            'completed_jobs': self.completed_jobs,
            'waiting_time_sum': self.waiting_time_sum,
            'response_time_sum': self.response_time_sum,
            'turnaround_time_sum': self.turnaround_time_sum,
            'avg_waiting_time': self.avg_waiting_time,
            'avg_turnaround_time': self.avg_turnaround_time,
            'avg_response_time': self.avg_response_time,
            'preemptions': self.preemptions,
            'context_switches': self.context_switches
        }


# =============================================================================
# SCHEDULER CORE
# =============================================================================

class SchedulerCore:
    """
    Per-core assignment table, wait queue and statistics for one run.

    Attributes:
        num_cores: Number of cores, fixed at start-up
        policy: Scheduling policy, fixed at start-up
        is_preemptive: Whether arrivals may evict running jobs
        comparator: Ordering function for the policy
        wait_queue: Waiting jobs in policy order
        cores: One slot per core, None when the core is idle
        current_time: Time of the most recent event
        metrics: Accumulated statistics
    """

    def __init__(self, cores: int, policy: Union[SchedulingPolicy, str],
                 config: SchedulerConfig = None):
        """
        Start up the scheduler.

        Args:
            cores: Number of cores, known as core 0 .. cores-1
            policy: SchedulingPolicy or its short name ("psjf", "RR", ...)
            config: Optional settings; its num_cores and policy are
                overridden by the explicit arguments

        Raises:
            ConfigurationError: If cores or policy are invalid
        """
        if isinstance(policy, str):
            policy = policy_from_name(policy)

        self.config = replace(config or DEFAULT_SCHEDULER_CONFIG,
                              num_cores=cores, policy=policy)
        result = ConfigValidator.validate_config(self.config)
        result.log("start_up")
        result.raise_if_invalid(ConfigurationError)

        self.num_cores = cores
        self.policy = policy
        self.is_preemptive = is_preemptive(policy)
        self.comparator = get_comparator(policy)
        self.wait_queue = OrderedWaitQueue(self.comparator)
        self.cores: List[Optional[Job]] = [None] * cores
        self.current_time = 0
        self.metrics = SchedulingMetrics()
        self._closed = False

        logger.info(f"Scheduler started: {cores} core(s), policy {policy.name}, "
                    f"preemptive={self.is_preemptive}")

    def __repr__(self) -> str:
        return (f"SchedulerCore(cores={self.num_cores}, policy={self.policy.name}, "
                f"time={self.current_time}, queue={self.wait_queue.job_ids()})")

    # =========================================================================
    # Events
    # =========================================================================

    def on_arrival(self, job_id: int, time: int, running_time: int,
                   priority: int) -> Optional[int]:
        """
        Handle a newly arrived job.

        The lowest-numbered idle core takes the job. With every core busy,
        a non-preemptive policy queues it. A preemptive policy compares it
        against all running jobs and evicts whichever sorts last; if that
        is the new job itself, it is queued instead.

        Args:
            job_id: Globally unique id of the arriving job
            time: Current simulation time (also the job's arrival time)
            running_time: Total time units the job needs
            priority: Lower value = more important

        Returns:
            Index of the core the job should run on, or None if no
            scheduling change should be made
        """
        self._check_open()
        if self.config.validate_events:
            self._require(EventValidator.validate_new_job(
                job_id, running_time, priority, self.live_job_ids()), job_id)
        self._sync(time)

        job = Job(job_id=job_id, arrival_time=time,
                  running_time=running_time, priority=priority)
        self.metrics.total_jobs += 1

        core_id = self._first_idle_core()
        if core_id is not None:
            self._install(job, core_id, time)
            logger.debug(f"t={time}: job {job_id} dispatched to idle core {core_id}")
            return self._decided(core_id)

        if not self.is_preemptive:
            position = self.wait_queue.insert(job)
            logger.debug(f"t={time}: all cores busy, job {job_id} waits at position {position}")
            return self._decided(None)

        core_id = self._find_victim_core(job)
        if core_id is None:
            position = self.wait_queue.insert(job)
            logger.debug(f"t={time}: job {job_id} does not preempt, waits at position {position}")
            return self._decided(None)

        victim = self.cores[core_id]
        victim.preempt(time)
        self.cores[core_id] = None
        self._install(job, core_id, time)
        self.wait_queue.insert(victim)
        self.metrics.preemptions += 1
        logger.debug(f"t={time}: job {job_id} preempts job {victim.job_id} on core {core_id} "
                     f"(victim remaining={victim.remaining_time})")
        return self._decided(core_id)

    def on_finish(self, core_id: int, job_id: int, time: int) -> Optional[int]:
        """
        Handle a job completing on a core.

        The finished job's statistics are accumulated, it is released, and
        the head of the wait queue (if any) takes the freed core.

        Args:
            core_id: Core where the job ran
            job_id: Id of the finished job
            time: Current simulation time

        Returns:
            Id of the job to run on core_id next, or None if the core
            should stay idle
        """
        self._check_open()
        if self.config.validate_events:
            self._require(EventValidator.validate_core_occupied(core_id, self.cores), core_id)
            self._require(EventValidator.validate_job_matches(
                self.cores[core_id], job_id, core_id), job_id)
        self._sync(time)

        finished = self.cores[core_id]
        self.metrics.record_completion(finished, time)
        finished.complete()
        self.cores[core_id] = None
        logger.debug(f"t={time}: job {finished.job_id} finished on core {core_id}")

        next_job = self.wait_queue.poll_front()
        if next_job is None:
            return self._decided(None)

        self._install(next_job, core_id, time)
        logger.debug(f"t={time}: job {next_job.job_id} dispatched to core {core_id}")
        return self._decided(next_job.job_id)

    def on_quantum_expired(self, core_id: int, time: int) -> int:
        """
        Handle the end of a time slice on a core.

        With other jobs waiting, the running job goes back into the queue
        (the tail, under RR) and the head takes the core. With nobody
        waiting, the same job keeps running.

        Args:
            core_id: Core whose quantum expired
            time: Current simulation time

        Returns:
            Id of the job that should run on core_id; never None
        """
        self._check_open()
        if self.config.validate_events:
            self._require(EventValidator.validate_core_occupied(core_id, self.cores), core_id)
        self._sync(time)

        current = self.cores[core_id]
        if not self.wait_queue:
            logger.debug(f"t={time}: quantum expired on core {core_id}, job {current.job_id} continues")
            return self._decided(current.job_id)

        current.release()
        self.cores[core_id] = None
        self.wait_queue.insert(current)
        next_job = self.wait_queue.poll_front()
        self._install(next_job, core_id, time, switch=next_job is not current)
        logger.debug(f"t={time}: quantum expired on core {core_id}, "
                     f"job {current.job_id} -> job {next_job.job_id}")
        return self._decided(next_job.job_id)

    # =========================================================================
    # Statistics
    # =========================================================================

    def average_waiting_time(self) -> float:
        """
        Average waiting time of all jobs scheduled.

        Only meaningful once every arrived job has finished.
        """
        return self.metrics.avg_waiting_time

    def average_turnaround_time(self) -> float:
        """Average turnaround time of all jobs scheduled."""
        return self.metrics.avg_turnaround_time

    def average_response_time(self) -> float:
        """Average response time of all jobs scheduled."""
        return self.metrics.avg_response_time

    def get_statistics(self) -> Dict[str, Any]:
        """Get scheduler statistics."""
        return {
            'policy': self.policy.name,
            'is_preemptive': self.is_preemptive,
            'num_cores': self.num_cores,
            'current_time': self.current_time,
            'queue_size': self.wait_queue.size(),
            'running': self.running_job_ids(),
            **self.metrics.to_dict()
        }

    # =========================================================================
    # Shutdown
    # =========================================================================

    def cleanup(self) -> None:
        """
        Release every job still held and close the scheduler.

        This is the last call of a run; any further event or cleanup
        raises SchedulerStateError. Statistics stay readable.
        """
        self._check_open()
        leftover = self.wait_queue.clear()
        running = [job for job in self.cores if job is not None]
        if leftover or running:
            logger.warning(f"Cleanup with {len(leftover)} waiting and "
                           f"{len(running)} running job(s) still held")
        for job in running:
            job.release()
        self.cores = []
        self._closed = True
        logger.info(f"Scheduler closed after {self.metrics.completed_jobs}/"
                    f"{self.metrics.total_jobs} completed job(s)")

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Inspection
    # =========================================================================

    def job_on_core(self, core_id: int) -> Optional[Job]:
        """Job currently occupying a core, or None if it is idle."""
        if core_id < 0 or core_id >= len(self.cores):
            return None
        return self.cores[core_id]

    def waiting_jobs(self) -> List[Job]:
        """Waiting jobs, front of the queue first."""
        return list(self.wait_queue)

    def running_job_ids(self) -> List[Optional[int]]:
        """Id of the job on each core, None for idle cores."""
        return [job.job_id if job is not None else None for job in self.cores]

    def idle_cores(self) -> List[int]:
        """Indexes of idle cores, ascending."""
        return [core_id for core_id, job in enumerate(self.cores) if job is None]

    def live_job_ids(self) -> List[int]:
        """Ids of every job currently running or waiting."""
        running = [job.job_id for job in self.cores if job is not None]
        return running + self.wait_queue.job_ids()

    def queue_snapshot(self) -> List[Tuple[int, Optional[int]]]:
        """
        Every live job with its core.

        Running jobs come first in core order, then waiting jobs in the
        order they will be scheduled (core None).
        """
        snapshot = [(job.job_id, core_id) for core_id, job in enumerate(self.cores)
                    if job is not None]
        snapshot.extend((job.job_id, None) for job in self.wait_queue)
        return snapshot

    def describe_queue(self) -> str:
        """Render queue_snapshot() as "4(0) 2(-1) 1(-1)"."""
        return " ".join(
            f"{job_id}({core_id if core_id is not None else -1})"
            for job_id, core_id in self.queue_snapshot()
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _sync(self, time: int) -> None:
        """
        Charge the time since the previous event to every running job.

        Keeps remaining_time current on all cores, not just the one the
        event concerns, so preemptive comparisons see true values.
        """
        if self.config.validate_events:
            self._require(EventValidator.validate_event_time(time, self.current_time), time)
        elapsed = time - self.current_time
        for job in self.cores:
            if job is not None:
                job.record_run(elapsed)
        self.current_time = time

    def _first_idle_core(self) -> Optional[int]:
        for core_id, job in enumerate(self.cores):
            if job is None:
                return core_id
        return None

    def _find_victim_core(self, new_job: Job) -> Optional[int]:
        """
        Find the core running the least preferable job.

        Starts from the new job as the worst candidate and only moves
        on a strict comparator improvement, so among equally bad running
        jobs the lowest core index wins.

        Returns:
            Core index to preempt, or None if the new job is the worst
        """
        worst = new_job
        victim_core = None
        for core_id, job in enumerate(self.cores):
            if self.comparator(worst, job) < 0:
                worst = job
                victim_core = core_id
        return victim_core

    def _install(self, job: Job, core_id: int, time: int, switch: bool = True) -> None:
        job.dispatch(core_id, time)
        self.cores[core_id] = job
        if switch:
            self.metrics.context_switches += 1

    def _decided(self, decision: Optional[int]) -> Optional[int]:
        if self.config.log_queue_after_event:
            logger.debug(f"t={self.current_time}: queue {self.describe_queue()}")
        return decision

    def _check_open(self) -> None:
        if self._closed:
            raise SchedulerStateError("scheduler has been cleaned up")

    def _require(self, result: ValidationResult, value: Any = None) -> None:
        if not result.is_valid:
            result.log(f"t={self.current_time}")
        result.raise_if_invalid(SchedulingError, value)


def start_up(cores: int, policy: Union[SchedulingPolicy, str],
             config: SchedulerConfig = None) -> SchedulerCore:
    """
    Create the scheduler for one simulation run.

    Args:
        cores: Number of cores available to the scheduler
        policy: Scheduling policy for the whole run
        config: Optional extra settings (event validation, queue logging)

    Returns:
        A fresh SchedulerCore with every core idle
    """
    return SchedulerCore(cores, policy, config)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    'SchedulingMetrics',
    'SchedulerCore',
    'start_up',
]


# =============================================================================
# MODULE TEST
# =============================================================================

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(message)s")

    # Two jobs on one core under FCFS
    scheduler = start_up(1, SchedulingPolicy.FCFS,
                         SchedulerConfig(validate_events=True, log_queue_after_event=True))
    scheduler.on_arrival(0, 0, 5, 0)
    scheduler.on_arrival(1, 1, 3, 0)
    scheduler.on_finish(0, 0, 5)
    scheduler.on_finish(0, 1, 8)

    stats = scheduler.get_statistics()
    print(f"Avg Waiting:    {stats['avg_waiting_time']:.2f}")
    print(f"Avg Turnaround: {stats['avg_turnaround_time']:.2f}")
    print(f"Avg Response:   {stats['avg_response_time']:.2f}")
    scheduler.cleanup()
