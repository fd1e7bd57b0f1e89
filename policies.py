"""
Scheduling Policy Comparators

One pure comparison function per scheduling policy. Each returns a negative
number when the first job should run before the second, zero when the two
are the same job, and a positive number otherwise.

Every comparator checks job identity first. That check is what the wait
queue relies on when removing a specific job, and it is unrelated to two
different jobs having equal scheduling keys.

Policy          Primary key             Tie-break       Preemptive
FCFS            arrival time            -               no
SJF             running time            arrival time    no
PSJF            remaining time          arrival time    yes
PRI             priority                arrival time    no
PPRI            priority                arrival time    yes
RR              none (always after)     -               no
"""

from typing import Callable, Dict, Any, List

from config import SchedulingPolicy, POLICY_DESCRIPTIONS
from job import Job
from validators import ConfigurationError


Comparator = Callable[[Job, Job], int]


# =============================================================================
# COMPARATORS
# =============================================================================

def fcfs(a: Job, b: Job) -> int:
    """Earlier arrival runs first."""
    if a.job_id == b.job_id:
        return 0
    return a.arrival_time - b.arrival_time


def sjf(a: Job, b: Job) -> int:
    """Shorter total running time runs first."""
    if a.job_id == b.job_id:
        return 0
    if a.running_time != b.running_time:
        return a.running_time - b.running_time
    return a.arrival_time - b.arrival_time


def psjf(a: Job, b: Job) -> int:
    """Shorter remaining time runs first."""
    if a.job_id == b.job_id:
        return 0
    if a.remaining_time != b.remaining_time:
        return a.remaining_time - b.remaining_time
    return a.arrival_time - b.arrival_time


def pri(a: Job, b: Job) -> int:
    """Lower priority number runs first."""
    if a.job_id == b.job_id:
        return 0
    if a.priority != b.priority:
        return a.priority - b.priority
    return a.arrival_time - b.arrival_time


def ppri(a: Job, b: Job) -> int:
    """Same ordering as pri; the policy differs only in preemption."""
    if a.job_id == b.job_id:
        return 0
    if a.priority != b.priority:
        return a.priority - b.priority
    return a.arrival_time - b.arrival_time


def rr(a: Job, b: Job) -> int:
    """
    Any other job sorts ahead of a.

    With the wait queue's front-to-back insertion scan this sends every
    insert to the tail, so the ordered queue behaves as a plain FIFO.
    """
    if a.job_id == b.job_id:
        return 0
    return 1


# =============================================================================
# DISPATCH TABLES
# =============================================================================

POLICY_COMPARATORS: Dict[SchedulingPolicy, Comparator] = {
    SchedulingPolicy.FCFS: fcfs,
    SchedulingPolicy.SJF: sjf,
    SchedulingPolicy.PSJF: psjf,
    SchedulingPolicy.PRI: pri,
    SchedulingPolicy.PPRI: ppri,
    SchedulingPolicy.RR: rr,
}

PREEMPTIVE_POLICIES = frozenset({SchedulingPolicy.PSJF, SchedulingPolicy.PPRI})


def get_comparator(policy: SchedulingPolicy) -> Comparator:
    """Return the comparator for a policy."""
    try:
        return POLICY_COMPARATORS[policy]
    except KeyError:
        raise ConfigurationError("unknown scheduling policy", "policy", policy) from None


def is_preemptive(policy: SchedulingPolicy) -> bool:
    """Whether arrivals under this policy may evict running jobs."""
    return policy in PREEMPTIVE_POLICIES


def policy_from_name(name: str) -> SchedulingPolicy:
    """
    Look up a policy by its short name, case-insensitively.

    Args:
        name: "fcfs", "PSJF", "rr", ...

    Returns:
        The matching SchedulingPolicy

    Raises:
        ConfigurationError: If no policy has that name
    """
    key = str(name).strip().upper()
    if key not in SchedulingPolicy.__members__:
        raise ConfigurationError(
            f"expected one of {get_policy_names()}",
            "policy",
            name
        )
    return SchedulingPolicy[key]


def get_policy_names() -> List[str]:
    """Short names of all policies, in declaration order."""
    return [policy.name for policy in SchedulingPolicy]


def get_policy_info() -> Dict[str, Dict[str, Any]]:
    """Get detailed info about all policies."""
    info = {
        SchedulingPolicy.FCFS: {
            'sort_key': 'arrival_time',
            'tie_break': None,
            'pros': ['Simple', 'No starvation'],
            'cons': ['Convoy effect', 'Poor waiting time'],
        },
        SchedulingPolicy.SJF: {
            'sort_key': 'running_time',
            'tie_break': 'arrival_time',
            'pros': ['Optimal average waiting time for a fixed job set'],
            'cons': ['Long jobs can starve', 'Needs running time up front'],
        },
        SchedulingPolicy.PSJF: {
            'sort_key': 'remaining_time',
            'tie_break': 'arrival_time',
            'pros': ['Short arrivals start immediately'],
            'cons': ['Frequent preemption', 'Long jobs can starve'],
        },
        SchedulingPolicy.PRI: {
            'sort_key': 'priority',
            'tie_break': 'arrival_time',
            'pros': ['Important work first'],
            'cons': ['Low priority jobs can starve'],
        },
        SchedulingPolicy.PPRI: {
            'sort_key': 'priority',
            'tie_break': 'arrival_time',
            'pros': ['Important arrivals never wait behind less important work'],
            'cons': ['Low priority jobs can starve', 'Frequent preemption'],
        },
        SchedulingPolicy.RR: {
            'sort_key': None,
            'tie_break': None,
            'pros': ['Fair time sharing', 'Good response time'],
            'cons': ['Context switch overhead', 'Poor turnaround for equal jobs'],
        },
    }
    return {
        policy.value: {
            'name': policy.name,
            'preemptive': is_preemptive(policy),
            'description': POLICY_DESCRIPTIONS[policy],
            **details,
        }
        for policy, details in info.items()
    }
