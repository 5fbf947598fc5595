"""Feasibility checks for a scheduled problem instance."""

from __future__ import annotations

from .models import Operation, ProblemInstance


def check_precedence(problem: ProblemInstance) -> bool:
    """Ensure every job's operations respect their ``operation_id`` order.

    For each pair of scheduled operations of one job with ids a < b, the
    first must finish no later than the second starts.

    Args:
        problem: Scheduled instance.

    Returns:
        True if no violation is found.

    Raises:
        AssertionError: On the first precedence violation.
    """
    for job in problem.jobs:
        scheduled = [op for op in job.operations if op.is_scheduled()]
        for later in scheduled:
            for earlier in scheduled:
                if earlier.operation_id < later.operation_id and earlier.end_time > later.start_time:
                    raise AssertionError(
                        f"Precedence violated in job {job.job_id}: operation "
                        f"{earlier.operation_id} ends at {earlier.end_time} after operation "
                        f"{later.operation_id} starts at {later.start_time}"
                    )
    return True


def check_no_machine_overlap(problem: ProblemInstance) -> bool:
    """Ensure no two operations overlap on the same machine.

    Operations are grouped by the machine they were assigned to, ordered by
    start, and each must start no earlier than the previous one ended.

    Raises:
        AssertionError: On the first detected overlap.
    """
    for machine in problem.machines:
        machine_ops: list[Operation] = sorted(
            machine.scheduled_operations, key=lambda op: op.start_time
        )
        prev_end = 0
        for op in machine_ops:
            if op.start_time < prev_end:
                raise AssertionError(
                    f"Overlap on machine {machine.machine_id} between end {prev_end} "
                    f"and start {op.start_time}"
                )
            prev_end = op.end_time
    return True


def check_schedule(problem: ProblemInstance) -> bool:
    """Run every feasibility check."""
    return check_precedence(problem) and check_no_machine_overlap(problem)
