import json

import pytest

from jobshop.serializer import (
    ExportFormat,
    SolutionFormatError,
    detect_format,
    export_solution,
    load_solution,
)
from jobshop.solver import SchedulingAlgorithm, Solver


@pytest.fixture
def result(simple_problem):
    return Solver(SchedulingAlgorithm.SPT).solve(simple_problem)


def _machine_schedule(res):
    return [
        [(op.job_id, op.operation_id, op.start_time, op.end_time) for op in m.scheduled_operations]
        for m in res.problem.machines
    ]


def test_detect_format():
    assert detect_format("a/b.json") is ExportFormat.JSON
    assert detect_format("B.XML") is ExportFormat.XML
    assert detect_format("c.txt") is ExportFormat.TEXT
    assert detect_format("noext") is ExportFormat.TEXT
    assert ExportFormat.JSON.display_name == "JSON (.json)"
    assert ExportFormat.from_name("text") is ExportFormat.TEXT
    with pytest.raises(ValueError):
        ExportFormat.from_name("csv")


def test_export_none_raises(tmp_path):
    with pytest.raises(ValueError, match="Cannot export null solution"):
        export_solution(None, tmp_path / "x.json")


def test_text_report_layout(result, tmp_path):
    path = export_solution(result, tmp_path / "sol.txt")
    lines = path.read_text().splitlines()
    assert lines[0] == "JSSP SOLUTION EXPORT"
    assert "Jobs: 3" in lines
    assert "Total Operations: 9" in lines
    assert f"Makespan: {result.makespan}" in lines
    first = result.problem.jobs[0].operations[0]
    assert (
        f"  Operation 0: Machine 0 [{first.start_time}-{first.end_time}]" in lines
    )


def test_json_layout(result, tmp_path):
    path = export_solution(result, tmp_path / "sol.json")
    data = json.loads(path.read_text())
    assert set(data) == {"problem", "operations", "machines", "metrics"}
    assert data["problem"] == {"numJobs": 3, "numMachines": 3, "totalOperations": 9}
    assert len(data["operations"]) == 9
    assert all(op["scheduled"] for op in data["operations"])
    assert data["metrics"]["makespan"] == result.makespan
    assert data["metrics"]["averageFlowTime"] == pytest.approx(result.avg_flow_time)


def test_xml_starts_with_declaration(result, tmp_path):
    path = export_solution(result, tmp_path / "sol.xml")
    text = path.read_text()
    assert text.startswith("<?xml")
    assert "<jssp_solution>" in text
    assert "<scheduled>true</scheduled>" in text


@pytest.mark.parametrize("suffix", ["txt", "json", "xml"])
def test_export_then_load(result, tmp_path, suffix):
    path = export_solution(result, tmp_path / f"sol.{suffix}")
    loaded = load_solution(path)

    assert loaded.makespan == result.makespan
    assert loaded.total_completion_time == result.total_completion_time
    assert loaded.avg_flow_time == pytest.approx(result.avg_flow_time, rel=1e-5)
    assert _machine_schedule(loaded) == _machine_schedule(result)
    assert [m.available_time for m in loaded.problem.machines] == [
        m.available_time for m in result.problem.machines
    ]
    # machine entries are the very operations held by the jobs
    job_ops = {id(op) for op in loaded.problem.operations()}
    assert all(
        id(op) in job_ops for m in loaded.problem.machines for op in m.scheduled_operations
    )


def test_unknown_format_raises(tmp_path):
    path = tmp_path / "sol.dat"
    path.write_text("hello\n")
    with pytest.raises(SolutionFormatError):
        load_solution(path)


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "sol.json"
    path.write_text('{"problem": {"numJobs": 1}}\n')
    with pytest.raises(SolutionFormatError):
        load_solution(path)
