"""Summary metrics of a completed schedule (makespan, flow time).

Pure functions of the current end times; nothing here schedules anything.
"""

from __future__ import annotations

from .models import ProblemInstance, ScheduleResult


def job_completion_times(problem: ProblemInstance) -> list[int]:
    """Completion time of every job (0 for a job with nothing scheduled)."""
    return [
        max((op.end_time for op in job.operations if op.is_scheduled()), default=0)
        for job in problem.jobs
    ]


def calculate_metrics(result: ScheduleResult) -> None:
    """Populate makespan, total completion time and average flow time.

    Args:
        result: Result whose ``problem`` already carries the schedule.
    """
    completions = job_completion_times(result.problem)
    result.makespan = max(completions, default=0)
    result.total_completion_time = sum(completions)
    if completions:
        result.avg_flow_time = result.total_completion_time / len(completions)
    else:
        result.avg_flow_time = 0.0
