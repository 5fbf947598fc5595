from pathlib import Path

from jobshop.models import ProblemInstance, ScheduleResult
from jobshop.solver import Solver, compare_all
from jobshop.visualization import next_unique_path, save_comparison_chart, save_gantt_chart


def test_gantt_chart_is_written(simple_problem, tmp_path: Path):
    result = Solver().solve(simple_problem)
    out = save_gantt_chart(result, tmp_path / "charts" / "gantt.png")
    assert Path(out).is_file()
    assert Path(out).stat().st_size > 0


def test_gantt_chart_for_empty_result(tmp_path: Path):
    result = ScheduleResult(problem=ProblemInstance())
    out = save_gantt_chart(result, tmp_path / "empty.png", show_legend=False)
    assert Path(out).is_file()


def test_comparison_chart(simple_problem, tmp_path: Path):
    results = {algo.name: r for algo, r in compare_all(simple_problem).items()}
    out = save_comparison_chart(results, tmp_path / "cmp.png")
    assert Path(out).is_file()


def test_next_unique_path(tmp_path: Path):
    target = tmp_path / "gantt.png"
    assert next_unique_path(target) == str(target)
    target.write_bytes(b"")
    assert next_unique_path(target) == str(tmp_path / "gantt_1.png")
    (tmp_path / "gantt_1.png").write_bytes(b"")
    assert next_unique_path(target) == str(tmp_path / "gantt_2.png")
