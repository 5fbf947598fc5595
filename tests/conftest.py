"""Pytest configuration & custom summary hook.

Also puts the project root on sys.path for imports.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'import jobshop' works without installing
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from jobshop.models import Operation, ProblemInstance  # noqa: E402
from jobshop.parser import generate_simple_problem  # noqa: E402


def build_problem(
    routes: list[list[tuple[int, int]]],
    machines: int | None = None,
) -> ProblemInstance:
    """Instance from per-job routes of (machine, processing_time) tuples.

    Operation ids are assigned globally in declaration order.
    """
    if machines is None:
        machines = 1 + max((m for route in routes for m, _ in route), default=-1)
    problem = ProblemInstance()
    problem.create_jobs(len(routes))
    problem.create_machines(machines)
    op_id = 0
    for job_id, route in enumerate(routes):
        for machine_id, p in route:
            problem.jobs[job_id].add_operation(Operation(job_id, machine_id, p, op_id))
            op_id += 1
    return problem


@pytest.fixture
def make_problem():
    return build_problem


@pytest.fixture
def simple_problem() -> ProblemInstance:
    return generate_simple_problem()


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    collected = terminalreporter._numcollected  # type: ignore[attr-defined]
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))
    xfailed = len(stats.get("xfailed", []))
    xpassed = len(stats.get("xpassed", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        "Collected: "
        f"{collected} | Passed: {passed} | Failed: {failed} | "
        f"Errors: {errors} | Skipped: {skipped} | "
        f"xfailed: {xfailed} | xpassed: {xpassed}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
