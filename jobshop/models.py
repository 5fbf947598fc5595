"""Core data structures for Job Shop dispatch scheduling.

This module defines:
    Operation       -- one unit of work bound to a single machine.
    Job             -- operations of one job, ordered by ``operation_id``.
    Machine         -- resource with its scheduled operations and free time.
    ProblemInstance -- all jobs and machines of one problem.
    ScheduleResult  -- scheduled snapshot of a problem plus summary metrics.

Operations are shared by reference between ``Job.operations`` and
``Machine.scheduled_operations``; the machine list never owns anything the
job list does not already hold.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator


@dataclass(eq=False)
class Operation:
    """Single operation of a job.

    Attributes:
        job_id: Owning job.
        machine_id: Machine the operation must run on.
        processing_time: Duration in time units.
        operation_id: Precedence index; inside a job a smaller id runs first.
        start_time: Assigned start (0 until scheduled).
        end_time: Assigned completion (0 until scheduled).
        scheduled: Explicit scheduled flag, independent of the times.
    """

    job_id: int
    machine_id: int
    processing_time: int
    operation_id: int
    start_time: int = 0
    end_time: int = 0
    scheduled: bool = False

    @property
    def duration(self) -> int:
        return self.processing_time

    def set_scheduled(self, start: int, end: int) -> None:
        self.start_time = start
        self.end_time = end
        self.scheduled = True

    def is_scheduled(self) -> bool:
        return self.scheduled

    def reset(self) -> None:
        self.start_time = 0
        self.end_time = 0
        self.scheduled = False


@dataclass(eq=False)
class Job:
    """Ordered collection of operations belonging to one job id."""

    job_id: int
    operations: list[Operation] = field(default_factory=list)

    def add_operation(self, operation: Operation | None) -> None:
        if operation is not None:
            self.operations.append(operation)

    def operation_count(self) -> int:
        return len(self.operations)

    def get_operation(self, index: int) -> Operation | None:
        """Return the operation stored at ``index`` or None when out of range."""
        if 0 <= index < len(self.operations):
            return self.operations[index]
        return None

    def ordered_operations(self) -> list[Operation]:
        """Operations sorted by ``operation_id`` (stable for equal ids)."""
        return sorted(self.operations, key=lambda op: op.operation_id)

    def predecessors(self, operation: Operation) -> list[Operation]:
        """Siblings that must finish before ``operation`` may start."""
        return [op for op in self.operations if op.operation_id < operation.operation_id]

    def clear(self) -> None:
        self.operations.clear()


@dataclass(eq=False)
class Machine:
    """Machine with the operations assigned to it in scheduling order."""

    machine_id: int
    scheduled_operations: list[Operation] = field(default_factory=list)
    available_time: int = 0

    def schedule_operation(self, operation: Operation | None, start_time: int) -> None:
        """Commit ``operation`` at ``start_time`` and advance the free time.

        A ``None`` operation is ignored.
        """
        if operation is None:
            return
        end_time = start_time + operation.duration
        operation.set_scheduled(start_time, end_time)
        self.scheduled_operations.append(operation)
        self.available_time = end_time

    def reset(self) -> None:
        self.scheduled_operations.clear()
        self.available_time = 0

    def is_available(self) -> bool:
        return not self.scheduled_operations


@dataclass(eq=False)
class ProblemInstance:
    """Complete problem: jobs, machines and their declared counts.

    Attributes:
        jobs: Jobs indexed by job id.
        machines: Machines indexed by machine id.
        num_jobs: Declared number of jobs.
        num_machines: Declared number of machines.
    """

    jobs: list[Job] = field(default_factory=list)
    machines: list[Machine] = field(default_factory=list)
    num_jobs: int = 0
    num_machines: int = 0

    def create_jobs(self, count: int) -> None:
        self.num_jobs = count
        self.jobs = [Job(i) for i in range(count)]

    def create_machines(self, count: int) -> None:
        self.num_machines = count
        self.machines = [Machine(i) for i in range(count)]

    def get_job(self, job_id: int) -> Job | None:
        if 0 <= job_id < len(self.jobs):
            return self.jobs[job_id]
        return None

    def get_machine(self, machine_id: int) -> Machine | None:
        if 0 <= machine_id < len(self.machines):
            return self.machines[machine_id]
        return None

    def clear(self) -> None:
        """Drop every operation and reset all machines."""
        for job in self.jobs:
            job.clear()
        for machine in self.machines:
            machine.reset()

    def total_operations(self) -> int:
        return sum(len(job.operations) for job in self.jobs)

    def operations(self) -> Iterator[Operation]:
        for job in self.jobs:
            yield from job.operations

    def reset_schedule(self) -> None:
        """Forget every assignment so the instance can be scheduled again."""
        for machine in self.machines:
            machine.reset()
        for operation in self.operations():
            operation.reset()

    def copy(self) -> ProblemInstance:
        """Deep copy; machine lists keep pointing at the copied operations."""
        return copy.deepcopy(self)


@dataclass(eq=False)
class ScheduleResult:
    """Scheduled problem snapshot plus metrics.

    Metrics stay at zero until :meth:`calculate_metrics` is called and are not
    refreshed automatically afterwards.
    """

    problem: ProblemInstance = field(default_factory=ProblemInstance)
    algorithm_name: str = ""
    makespan: int = 0
    total_completion_time: int = 0
    avg_flow_time: float = 0.0

    def calculate_metrics(self) -> None:
        from jobshop.metrics import calculate_metrics

        calculate_metrics(self)
