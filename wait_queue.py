"""
Ordered Wait Queue

The waiting collection of the scheduler: a list of jobs kept sorted by the
active policy's comparator.

Insertion is an O(n) insertion-sort step rather than a heap push because the
scheduler and its callers need positional access (at, remove_at) and a stable
order, not just the head. Jobs that compare equal keep the order in which
they were inserted, and no operation other than insert ever moves an element
relative to the others.
"""

import logging
from typing import Iterator, List, Optional

from job import Job
from policies import Comparator


logger = logging.getLogger(__name__)


class OrderedWaitQueue:
    """
    Comparator-ordered, indexable sequence of waiting jobs.

    The queue owns its jobs while they wait. It never checks for
    duplicates: the scheduler guarantees a job lives in exactly one place.

    Attributes:
        comparator: Ordering function selected from the scheduling policy
    """

    def __init__(self, comparator: Comparator):
        self.comparator = comparator
        self._jobs: List[Job] = []

    def __len__(self) -> int:
        return len(self._jobs)

    def __bool__(self) -> bool:
        return bool(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(list(self._jobs))

    def __repr__(self) -> str:
        return f"OrderedWaitQueue({self.job_ids()})"

    # =========================================================================
    # Insertion
    # =========================================================================

    def insert(self, job: Job) -> int:
        """
        Insert a job at the position its comparator dictates.

        Scans from the front and places the job in front of the first
        element it strictly precedes. Elements it ties with stay ahead of
        it, which keeps equal-ranked jobs in insertion order. Under RR the
        comparator never reports "precedes", so every job lands at the tail.

        Args:
            job: Job to enqueue

        Returns:
            Zero-based index where the job was stored (0 = front)
        """
        for index, queued in enumerate(self._jobs):
            if self.comparator(job, queued) < 0:
                self._jobs.insert(index, job)
                logger.debug(f"Job {job.job_id} queued at position {index}")
                return index

        self._jobs.append(job)
        index = len(self._jobs) - 1
        logger.debug(f"Job {job.job_id} queued at position {index}")
        return index

    offer = insert

    # =========================================================================
    # Head access
    # =========================================================================

    def peek_front(self) -> Optional[Job]:
        """Return the head without removing it, or None if empty."""
        if not self._jobs:
            return None
        return self._jobs[0]

    def poll_front(self) -> Optional[Job]:
        """Remove and return the head, or None if empty."""
        if not self._jobs:
            return None
        return self._jobs.pop(0)

    # =========================================================================
    # Positional access
    # =========================================================================

    def at(self, index: int) -> Optional[Job]:
        """Return the job at a zero-based position, or None if out of range."""
        if index < 0 or index >= len(self._jobs):
            return None
        return self._jobs[index]

    def remove_at(self, index: int) -> Optional[Job]:
        """
        Remove and return the job at a position.

        Later elements shift up one place to fill the gap.

        Returns:
            The removed job, or None if index is out of range
        """
        if index < 0 or index >= len(self._jobs):
            return None
        return self._jobs.pop(index)

    def remove_all_equal(self, job: Job) -> int:
        """
        Remove every entry that is the same job (matched by id).

        The comparator is not consulted: two different jobs with equal
        scheduling keys are both kept.

        Returns:
            Number of entries removed
        """
        kept = [queued for queued in self._jobs if queued.job_id != job.job_id]
        removed = len(self._jobs) - len(kept)
        self._jobs = kept
        if removed:
            logger.debug(f"Removed {removed} entr{'y' if removed == 1 else 'ies'} for job {job.job_id}")
        return removed

    # =========================================================================
    # Inspection
    # =========================================================================

    def size(self) -> int:
        """Number of waiting jobs."""
        return len(self._jobs)

    def is_empty(self) -> bool:
        return not self._jobs

    def job_ids(self) -> List[int]:
        """Ids of the waiting jobs, front to back."""
        return [job.job_id for job in self._jobs]

    def clear(self) -> List[Job]:
        """Remove every job and return them, front to back."""
        drained = self._jobs
        self._jobs = []
        return drained
