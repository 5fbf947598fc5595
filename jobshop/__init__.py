"""Job shop dispatch scheduling.

Exports the data model, the scheduler entry points and problem parsing.
"""

from jobshop.dispatch import FIFO_RULE, LPT_RULE, SPT_RULE, PriorityRule, schedule  # noqa: F401
from jobshop.metrics import calculate_metrics  # noqa: F401
from jobshop.models import (  # noqa: F401
    Job,
    Machine,
    Operation,
    ProblemInstance,
    ScheduleResult,
)
from jobshop.parser import parse_file, parse_string  # noqa: F401
from jobshop.solver import SchedulingAlgorithm, Solver, compare_solutions  # noqa: F401

__all__ = [
    "FIFO_RULE",
    "LPT_RULE",
    "SPT_RULE",
    "Job",
    "Machine",
    "Operation",
    "PriorityRule",
    "ProblemInstance",
    "ScheduleResult",
    "SchedulingAlgorithm",
    "Solver",
    "calculate_metrics",
    "compare_solutions",
    "parse_file",
    "parse_string",
    "schedule",
]
