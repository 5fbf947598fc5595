"""List scheduling with priority (dispatching) rules.

Each round walks the jobs and commits operations greedily at
``max(machine free time, job ready time)``. FIFO commits during the walk
itself, so a job's next operation becomes ready as soon as its predecessor
is placed. SPT and LPT first collect the *ready* operations (every same-job
predecessor by ``operation_id`` already scheduled), order them by duration
and then commit them. Nothing is ever moved once placed, so precedence and
machine exclusivity hold after every commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .models import Job, Operation, ProblemInstance

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 1000


@dataclass(frozen=True)
class PriorityRule:
    """Ordering applied to the ready operations of a round.

    Fields:
        name: Short rule name (``FIFO``, ``SPT``, ``LPT``).
        key: Sort key; ``None`` keeps the ready-set order.
        descending: Sort largest key first.
        chained: Commit while traversing each job instead of from a
            ready-set snapshot.
    """

    name: str
    key: Callable[[Operation], int] | None = None
    descending: bool = False
    chained: bool = False

    def order(self, ready: list[Operation]) -> list[Operation]:
        if self.key is None:
            return list(ready)
        # sorted() is stable, so equal keys keep their ready-set order.
        return sorted(ready, key=self.key, reverse=self.descending)


def _processing_time(operation: Operation) -> int:
    return operation.processing_time


FIFO_RULE = PriorityRule("FIFO", chained=True)
SPT_RULE = PriorityRule("SPT", key=_processing_time)
LPT_RULE = PriorityRule("LPT", key=_processing_time, descending=True)

RULES: dict[str, PriorityRule] = {rule.name: rule for rule in (FIFO_RULE, SPT_RULE, LPT_RULE)}


def collect_ready_operations(problem: ProblemInstance) -> list[Operation]:
    """Unscheduled operations whose same-job predecessors are all scheduled.

    Jobs are visited in order and, inside a job, operations by
    ``operation_id``; the returned list keeps that order.
    """
    ready: list[Operation] = []
    for job in problem.jobs:
        for operation in job.ordered_operations():
            if operation.is_scheduled():
                continue
            if all(prev.is_scheduled() for prev in job.predecessors(operation)):
                ready.append(operation)
    return ready


def job_ready_time(job: Job | None, operation: Operation) -> int:
    """Latest completion among the predecessors of ``operation`` (0 if none)."""
    if job is None:
        return 0
    return max((prev.end_time for prev in job.predecessors(operation)), default=0)


def _commit(problem: ProblemInstance, operation: Operation) -> bool:
    """Place ``operation`` as early as its machine and job allow."""
    machine = problem.get_machine(operation.machine_id)
    if machine is None:
        return False
    start = max(
        machine.available_time,
        job_ready_time(problem.get_job(operation.job_id), operation),
    )
    machine.schedule_operation(operation, start)
    logger.debug(
        "Scheduled job %d operation %d on machine %d [%d-%d]",
        operation.job_id,
        operation.operation_id,
        operation.machine_id,
        operation.start_time,
        operation.end_time,
    )
    return True


def _chained_round(problem: ProblemInstance) -> bool:
    # Readiness is checked live, so commits earlier in the walk unblock later ones.
    committed = False
    for job in problem.jobs:
        for operation in job.ordered_operations():
            if operation.is_scheduled():
                continue
            if all(prev.is_scheduled() for prev in job.predecessors(operation)):
                committed |= _commit(problem, operation)
    return committed


def _ready_set_round(problem: ProblemInstance, rule: PriorityRule) -> bool:
    committed = False
    for operation in rule.order(collect_ready_operations(problem)):
        committed |= _commit(problem, operation)
    return committed


def schedule(
    problem: ProblemInstance,
    rule: PriorityRule,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
) -> int:
    """Schedule ``problem`` in place with the given priority rule.

    Args:
        problem: Instance to schedule; all previous assignments are reset.
        rule: Ordering used among the ready operations of each round.
        max_rounds: Safety cap on the number of rounds.

    Returns:
        Number of rounds executed.
    """
    logger.info("Scheduling with %s", rule.name)
    problem.reset_schedule()

    rounds = 0
    committed = True
    while committed and rounds < max_rounds:
        rounds += 1
        if rule.chained:
            committed = _chained_round(problem)
        else:
            committed = _ready_set_round(problem, rule)

    unscheduled = sum(1 for op in problem.operations() if not op.is_scheduled())
    if unscheduled:
        if rounds >= max_rounds:
            logger.warning(
                "Round limit %d reached with %d operation(s) unscheduled",
                max_rounds,
                unscheduled,
            )
        else:
            logger.warning("%d operation(s) could not be scheduled", unscheduled)
    return rounds
