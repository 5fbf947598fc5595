import pytest

from jobshop.dispatch import FIFO_RULE, schedule
from jobshop.metrics import calculate_metrics, job_completion_times
from jobshop.models import ProblemInstance, ScheduleResult


def _scheduled_result(problem) -> ScheduleResult:
    schedule(problem, FIFO_RULE)
    result = ScheduleResult(problem=problem)
    calculate_metrics(result)
    return result


def test_three_jobs_on_one_machine(make_problem):
    result = _scheduled_result(make_problem([[(0, 2)], [(0, 3)], [(0, 1)]]))
    assert result.makespan == 6
    assert result.total_completion_time == 13
    assert result.avg_flow_time == pytest.approx(13 / 3)


def test_metric_definitions_hold(simple_problem):
    result = _scheduled_result(simple_problem)
    ends = [op.end_time for op in simple_problem.operations()]
    per_job = job_completion_times(simple_problem)
    assert result.makespan == max(ends)
    assert result.total_completion_time == sum(per_job)
    assert result.avg_flow_time == pytest.approx(sum(per_job) / 3)


def test_metrics_are_idempotent(simple_problem):
    result = _scheduled_result(simple_problem)
    first = (result.makespan, result.total_completion_time, result.avg_flow_time)
    result.calculate_metrics()
    assert (result.makespan, result.total_completion_time, result.avg_flow_time) == first


def test_empty_problem_metrics_are_zero():
    result = ScheduleResult(problem=ProblemInstance())
    calculate_metrics(result)
    assert result.makespan == 0
    assert result.total_completion_time == 0
    assert result.avg_flow_time == 0.0


def test_unscheduled_operations_are_ignored(make_problem):
    problem = make_problem([[(0, 4)], [(0, 2)]])
    result = ScheduleResult(problem=problem)
    calculate_metrics(result)
    assert job_completion_times(problem) == [0, 0]
    assert result.makespan == 0
    assert result.avg_flow_time == 0.0


def test_job_without_operations_counts_towards_average(make_problem):
    result = _scheduled_result(make_problem([[(0, 4)], []]))
    assert result.total_completion_time == 4
    assert result.avg_flow_time == 2.0
