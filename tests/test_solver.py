import pytest

from jobshop.models import ProblemInstance
from jobshop.solver import SchedulingAlgorithm, Solver, compare_all, compare_solutions
from jobshop.validation import check_schedule


@pytest.mark.parametrize("algo", list(SchedulingAlgorithm))
def test_solve_schedules_every_operation(simple_problem, algo):
    result = Solver(algo).solve(simple_problem)
    ops = list(result.problem.operations())
    assert len(ops) == 9
    assert all(op.is_scheduled() and op.end_time > op.start_time >= 0 for op in ops)
    assert result.makespan == max(op.end_time for op in ops)
    assert result.algorithm_name == algo.display_name
    assert check_schedule(result.problem)


def test_solve_does_not_touch_the_input(simple_problem):
    Solver.create_spt_solver().solve(simple_problem)
    assert not any(op.is_scheduled() for op in simple_problem.operations())
    assert all(m.available_time == 0 for m in simple_problem.machines)


def test_result_is_a_snapshot(simple_problem):
    solver = Solver()
    result = solver.solve(simple_problem)
    makespan = result.makespan
    simple_problem.jobs[0].operations[0].processing_time = 100
    solver.solve(simple_problem)
    assert result.problem.jobs[0].operations[0].processing_time == 2
    assert result.makespan == makespan


def test_solve_none_raises():
    with pytest.raises(ValueError, match="Problem instance is null"):
        Solver().solve(None)


def test_single_operation_metrics(make_problem):
    result = Solver().solve(make_problem([[(0, 5)]]))
    op = result.problem.jobs[0].operations[0]
    assert (op.start_time, op.end_time) == (0, 5)
    assert result.makespan == 5
    assert result.total_completion_time == 5
    assert result.avg_flow_time == 5.0


def test_single_job_three_machines(make_problem):
    result = Solver.create_fifo_solver().solve(make_problem([[(0, 2), (1, 3), (2, 1)]]))
    assert result.makespan == 6
    assert result.total_completion_time == 6
    assert result.avg_flow_time == 6.0


def test_empty_problem():
    result = Solver().solve(ProblemInstance())
    assert result.makespan == 0
    assert result.total_completion_time == 0
    assert result.avg_flow_time == 0.0


def test_factories_and_names():
    assert Solver.create_fifo_solver().algorithm is SchedulingAlgorithm.FIFO
    assert Solver.create_spt_solver().algorithm is SchedulingAlgorithm.SPT
    assert Solver.create_lpt_solver().get_algorithm() is SchedulingAlgorithm.LPT
    assert Solver.algorithm_name(SchedulingAlgorithm.FIFO) == "FIFO (First-In-First-Out)"
    assert Solver.algorithm_name(SchedulingAlgorithm.SPT) == "SPT (Shortest Processing Time)"
    assert Solver.algorithm_name(SchedulingAlgorithm.LPT) == "LPT (Longest Processing Time)"

    solver = Solver(SchedulingAlgorithm.SPT)
    assert solver.current_algorithm_name() == "SPT (Shortest Processing Time)"
    solver.set_algorithm(SchedulingAlgorithm.LPT)
    assert solver.algorithm is SchedulingAlgorithm.LPT


def test_from_name():
    assert SchedulingAlgorithm.from_name(" SPT ") is SchedulingAlgorithm.SPT
    with pytest.raises(ValueError, match="Unknown algorithm"):
        SchedulingAlgorithm.from_name("edd")


def test_compare_solutions_reports_lower_makespan(make_problem):
    results = compare_all(make_problem([[(0, 10)], [(0, 2)]]))
    spt, lpt = results[SchedulingAlgorithm.SPT], results[SchedulingAlgorithm.LPT]
    assert spt.total_completion_time == 14
    assert lpt.total_completion_time == 22

    report = compare_solutions(spt, lpt, "SPT", "LPT")
    assert "Tie (equal makespan)" in report
    assert "Average Flow Time" in report
    assert "7.00" in report and "11.00" in report
    assert spt.avg_flow_time == 7.0


def test_compare_solutions_names_winner(simple_problem, make_problem):
    better = Solver().solve(make_problem([[(0, 1)]]))
    worse = Solver().solve(simple_problem)
    assert "Better Solution: A (lower makespan)" in compare_solutions(better, worse, "A", "B")
    assert "Better Solution: B (lower makespan)" in compare_solutions(worse, better, "A", "B")


def test_fifo_commits_in_index_order(simple_problem):
    result = Solver.create_fifo_solver().solve(simple_problem)
    assert result.makespan == 14
    assert result.total_completion_time == 6 + 11 + 14
    assert result.avg_flow_time == pytest.approx(31 / 3)
