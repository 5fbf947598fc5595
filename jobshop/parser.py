"""Reading, writing and generating problem instances.

File format (whitespace separated integers)::

    numJobs numMachines
    jobId machineId processingTime
    ...

One triple per operation. Job membership comes from ``jobId``; order inside
a job comes from the order of appearance, recorded as a global
``operation_id`` counter over all accepted rows.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from .models import Operation, ProblemInstance

logger = logging.getLogger(__name__)


class ProblemFormatError(ValueError):
    pass


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ProblemFormatError(f"Expected an integer, got {token!r}") from None


def _parse_tokens(tokens: list[str]) -> ProblemInstance:
    if len(tokens) < 2:
        raise ProblemFormatError("Missing header 'numJobs numMachines'")
    num_jobs, num_machines = _to_int(tokens[0]), _to_int(tokens[1])
    if num_jobs <= 0 or num_machines <= 0:
        raise ProblemFormatError("Invalid number of jobs or machines")

    problem = ProblemInstance()
    problem.create_jobs(num_jobs)
    problem.create_machines(num_machines)

    body = tokens[2:]
    if len(body) % 3:
        logger.warning("Ignoring %d trailing token(s) of an incomplete row", len(body) % 3)
    operation_count = 0
    for i in range(0, len(body) - len(body) % 3, 3):
        job_id, machine_id, processing_time = (_to_int(t) for t in body[i : i + 3])
        valid_ids = 0 <= job_id < num_jobs and 0 <= machine_id < num_machines
        if not valid_ids or processing_time <= 0:
            logger.warning(
                "Invalid operation data (job=%d, machine=%d, time=%d) skipped",
                job_id,
                machine_id,
                processing_time,
            )
            continue
        problem.jobs[job_id].add_operation(
            Operation(job_id, machine_id, processing_time, operation_count)
        )
        operation_count += 1

    if operation_count == 0:
        raise ProblemFormatError("No valid operations found")

    logger.info(
        "Parsed problem: %d jobs, %d machines, %d operations",
        num_jobs,
        num_machines,
        operation_count,
    )
    return problem


def parse_string(data: str) -> ProblemInstance:
    """Parse problem text.

    Raises:
        ProblemFormatError: Bad header, non-integer token or no valid row.
    """
    return _parse_tokens(data.split())


def parse_file(file_path: str | Path) -> ProblemInstance:
    """Parse a ``.jssp`` problem file.

    Args:
        file_path: Path to the problem file.

    Returns:
        ProblemInstance with operations in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ProblemFormatError: If the content is not a valid problem.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        return parse_string(f.read())


def save_to_file(problem: ProblemInstance, file_path: str | Path) -> None:
    """Write ``problem`` back in the text format read by :func:`parse_file`."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{problem.num_jobs} {problem.num_machines}\n")
        for job in problem.jobs:
            for op in job.ordered_operations():
                f.write(f"{job.job_id} {op.machine_id} {op.processing_time}\n")


def generate_simple_problem() -> ProblemInstance:
    """Fixed 3x3 demo instance."""
    routes = [
        [(0, 2), (1, 3), (2, 1)],
        [(1, 1), (2, 2), (0, 3)],
        [(2, 3), (0, 1), (1, 2)],
    ]
    problem = ProblemInstance()
    problem.create_jobs(3)
    problem.create_machines(3)
    operation_id = 0
    for job_id, route in enumerate(routes):
        for machine_id, processing_time in route:
            problem.jobs[job_id].add_operation(
                Operation(job_id, machine_id, processing_time, operation_id)
            )
            operation_id += 1
    return problem


def generate_random_problem(
    jobs: int,
    machines: int,
    min_time: int = 1,
    max_time: int = 10,
    seed: Optional[int] = None,
) -> ProblemInstance:
    """Random instance: every job visits every machine once.

    Args:
        jobs: Number of jobs.
        machines: Number of machines.
        min_time: Smallest processing time (inclusive, >= 1).
        max_time: Largest processing time (inclusive).
        seed: Seed for ``random.Random``; None gives a fresh random stream.

    Raises:
        ValueError: On non-positive sizes or an empty time range.
    """
    if jobs <= 0 or machines <= 0:
        raise ValueError("jobs and machines must be positive")
    if min_time < 1 or max_time < min_time:
        raise ValueError(f"Invalid processing time range [{min_time}, {max_time}]")

    rng = random.Random(seed)
    problem = ProblemInstance()
    problem.create_jobs(jobs)
    problem.create_machines(machines)
    operation_id = 0
    for job in problem.jobs:
        route = list(range(machines))
        rng.shuffle(route)
        for machine_id in route:
            job.add_operation(
                Operation(job.job_id, machine_id, rng.randint(min_time, max_time), operation_id)
            )
            operation_id += 1
    return problem
