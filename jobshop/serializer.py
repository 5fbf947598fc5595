"""Export and import of schedule results (text report, JSON, XML).

All three formats carry the same content: problem size, every operation with
its assignment, each machine's ordered schedule and the summary metrics.
Loading rebuilds a ``ScheduleResult`` whose machine lists reference the same
``Operation`` objects as the job lists.
"""

from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import Any

from .models import Operation, ProblemInstance, ScheduleResult

logger = logging.getLogger(__name__)

TEXT_HEADER = "JSSP SOLUTION EXPORT"


class SolutionFormatError(ValueError):
    pass


class ExportFormat(Enum):
    TEXT = "txt"
    JSON = "json"
    XML = "xml"

    @property
    def display_name(self) -> str:
        return {
            ExportFormat.TEXT: "Text (.txt)",
            ExportFormat.JSON: "JSON (.json)",
            ExportFormat.XML: "XML (.xml)",
        }[self]

    @classmethod
    def from_name(cls, name: str) -> ExportFormat:
        key = str(name).strip().lower().lstrip(".")
        if key == "text":
            key = "txt"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown export format: {name}") from None


def detect_format(file_path: str | Path) -> ExportFormat:
    """Pick the format from the extension; anything unknown is TEXT."""
    ext = Path(file_path).suffix.lower()
    if ext == ".json":
        return ExportFormat.JSON
    if ext == ".xml":
        return ExportFormat.XML
    return ExportFormat.TEXT


# --------------------------------------------------------------------------- export


def _format_float(value: float) -> str:
    return f"{value:g}"


def solution_to_dict(result: ScheduleResult) -> dict[str, Any]:
    problem = result.problem
    return {
        "problem": {
            "numJobs": problem.num_jobs,
            "numMachines": problem.num_machines,
            "totalOperations": problem.total_operations(),
        },
        "operations": [
            {
                "jobId": op.job_id,
                "machineId": op.machine_id,
                "processingTime": op.processing_time,
                "operationId": op.operation_id,
                "startTime": op.start_time,
                "endTime": op.end_time,
                "scheduled": op.is_scheduled(),
            }
            for op in problem.operations()
        ],
        "machines": [
            {
                "machineId": machine.machine_id,
                "availableTime": machine.available_time,
                "scheduledOperations": [
                    {
                        "jobId": op.job_id,
                        "operationId": op.operation_id,
                        "startTime": op.start_time,
                        "endTime": op.end_time,
                    }
                    for op in machine.scheduled_operations
                ],
            }
            for machine in problem.machines
        ],
        "metrics": {
            "makespan": result.makespan,
            "totalCompletionTime": result.total_completion_time,
            "averageFlowTime": result.avg_flow_time,
        },
    }


def solution_to_text(result: ScheduleResult) -> str:
    problem = result.problem
    lines = [
        TEXT_HEADER,
        "===================",
        "",
        "PROBLEM METADATA:",
        f"Jobs: {problem.num_jobs}",
        f"Machines: {problem.num_machines}",
        f"Total Operations: {problem.total_operations()}",
        "",
        "SCHEDULING RESULTS:",
        "===================",
        "",
    ]
    for job in problem.jobs:
        lines.append(f"Job {job.job_id}:")
        for op in job.operations:
            if op.is_scheduled():
                lines.append(
                    f"  Operation {op.operation_id}: Machine {op.machine_id} "
                    f"[{op.start_time}-{op.end_time}]"
                )
        lines.append("")

    lines += ["MACHINE SCHEDULES:", "==================", ""]
    for machine in problem.machines:
        lines.append(f"Machine {machine.machine_id}:")
        for op in machine.scheduled_operations:
            lines.append(
                f"  Job {op.job_id} Operation {op.operation_id} [{op.start_time}-{op.end_time}]"
            )
        lines.append("")

    lines += [
        "PERFORMANCE METRICS:",
        "====================",
        f"Makespan: {result.makespan}",
        f"Total Completion Time: {result.total_completion_time}",
        f"Average Flow Time: {_format_float(result.avg_flow_time)}",
        "",
    ]
    return "\n".join(lines) + "\n"


def solution_to_xml(result: ScheduleResult) -> ET.ElementTree:
    data = solution_to_dict(result)
    root = ET.Element("jssp_solution")

    problem_el = ET.SubElement(root, "problem")
    for key, value in data["problem"].items():
        ET.SubElement(problem_el, key).text = str(value)

    operations_el = ET.SubElement(root, "operations")
    for op in data["operations"]:
        op_el = ET.SubElement(operations_el, "operation")
        for key, value in op.items():
            text = ("true" if value else "false") if isinstance(value, bool) else str(value)
            ET.SubElement(op_el, key).text = text

    machines_el = ET.SubElement(root, "machines")
    for machine in data["machines"]:
        machine_el = ET.SubElement(machines_el, "machine")
        ET.SubElement(machine_el, "machineId").text = str(machine["machineId"])
        ET.SubElement(machine_el, "availableTime").text = str(machine["availableTime"])
        scheduled_el = ET.SubElement(machine_el, "scheduledOperations")
        for op in machine["scheduledOperations"]:
            op_el = ET.SubElement(scheduled_el, "scheduledOperation")
            for key, value in op.items():
                ET.SubElement(op_el, key).text = str(value)

    metrics_el = ET.SubElement(root, "metrics")
    ET.SubElement(metrics_el, "makespan").text = str(result.makespan)
    ET.SubElement(metrics_el, "totalCompletionTime").text = str(result.total_completion_time)
    ET.SubElement(metrics_el, "averageFlowTime").text = _format_float(result.avg_flow_time)

    tree = ET.ElementTree(root)
    ET.indent(tree, space="  ")
    return tree


def export_solution(
    result: ScheduleResult | None,
    file_path: str | Path,
    fmt: ExportFormat | None = None,
) -> Path:
    """Write ``result`` to ``file_path``.

    Args:
        result: Result to export.
        file_path: Destination; parent directories are created.
        fmt: Output format; detected from the extension when None.

    Returns:
        The written path.

    Raises:
        ValueError: If ``result`` is None.
    """
    if result is None:
        raise ValueError("Cannot export null solution")
    if fmt is None:
        fmt = detect_format(file_path)
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt is ExportFormat.JSON:
        path.write_text(json.dumps(solution_to_dict(result), indent=4) + "\n", encoding="utf-8")
    elif fmt is ExportFormat.XML:
        solution_to_xml(result).write(path, encoding="UTF-8", xml_declaration=True)
    else:
        path.write_text(solution_to_text(result), encoding="utf-8")
    logger.info("%s solution saved as: %s", fmt.display_name, path)
    return path


# --------------------------------------------------------------------------- import


def _empty_result(num_jobs: int, num_machines: int) -> ScheduleResult:
    problem = ProblemInstance()
    problem.create_jobs(num_jobs)
    problem.create_machines(num_machines)
    return ScheduleResult(problem=problem)


def _find_operation(problem: ProblemInstance, job_id: int, operation_id: int) -> Operation | None:
    job = problem.get_job(job_id)
    if job is None:
        return None
    for op in job.operations:
        if op.operation_id == operation_id:
            return op
    return None


def _attach_machine_schedule(
    result: ScheduleResult,
    machine_id: int,
    available_time: int,
    entries: list[tuple[int, int, int, int]],
) -> None:
    """Append (job, operation, start, end) entries to a machine's schedule."""
    machine = result.problem.get_machine(machine_id)
    if machine is None:
        logger.warning("Solution references unknown machine %d", machine_id)
        return
    for job_id, operation_id, start, end in entries:
        op = _find_operation(result.problem, job_id, operation_id)
        if op is None:
            op = Operation(job_id, machine_id, end - start, operation_id)
            job = result.problem.get_job(job_id)
            if job is not None:
                job.add_operation(op)
        op.set_scheduled(start, end)
        machine.scheduled_operations.append(op)
    machine.available_time = available_time


_JOB_LINE = re.compile(r"^Job (\d+):")
_JOB_OP_LINE = re.compile(r"^\s+Operation (\d+): Machine (\d+) \[(-?\d+)-(-?\d+)\]")
_MACHINE_LINE = re.compile(r"^Machine (\d+):")
_MACHINE_OP_LINE = re.compile(r"^\s+Job (\d+) Operation (\d+) \[(-?\d+)-(-?\d+)\]")


def _header_int(lines: list[str], label: str) -> int:
    for line in lines:
        if line.startswith(label):
            try:
                return int(line.split(":", 1)[1])
            except ValueError:
                raise SolutionFormatError(f"Invalid value in line {line!r}") from None
    raise SolutionFormatError(f"Missing '{label}' line")


def load_text_solution(file_path: str | Path) -> ScheduleResult:
    lines = Path(file_path).read_text(encoding="utf-8").splitlines()
    if not lines or TEXT_HEADER not in lines[0]:
        raise SolutionFormatError(f"Not a text solution: {file_path}")

    result = _empty_result(_header_int(lines, "Jobs:"), _header_int(lines, "Machines:"))
    section = None
    current_job = None
    current_machine: int | None = None
    machine_entries: dict[int, list[tuple[int, int, int, int]]] = {}

    for line in lines:
        if line in ("SCHEDULING RESULTS:", "MACHINE SCHEDULES:", "PERFORMANCE METRICS:"):
            section = line
            continue
        if section == "SCHEDULING RESULTS:":
            if m := _JOB_LINE.match(line):
                current_job = result.problem.get_job(int(m.group(1)))
            elif (m := _JOB_OP_LINE.match(line)) and current_job is not None:
                operation_id, machine_id, start, end = (int(g) for g in m.groups())
                op = Operation(current_job.job_id, machine_id, end - start, operation_id)
                op.set_scheduled(start, end)
                current_job.add_operation(op)
        elif section == "MACHINE SCHEDULES:":
            if m := _MACHINE_LINE.match(line):
                current_machine = int(m.group(1))
                machine_entries.setdefault(current_machine, [])
            elif (m := _MACHINE_OP_LINE.match(line)) and current_machine is not None:
                job_id, operation_id, start, end = (int(g) for g in m.groups())
                machine_entries[current_machine].append((job_id, operation_id, start, end))
        elif section == "PERFORMANCE METRICS:":
            key, _, value = line.partition(": ")
            try:
                if key == "Makespan":
                    result.makespan = int(value)
                elif key == "Total Completion Time":
                    result.total_completion_time = int(value)
                elif key == "Average Flow Time":
                    result.avg_flow_time = float(value)
            except ValueError:
                raise SolutionFormatError(f"Invalid metric line {line!r}") from None

    for machine_id, entries in machine_entries.items():
        available = entries[-1][3] if entries else 0
        _attach_machine_schedule(result, machine_id, available, entries)
    return result


def _result_from_dict(data: dict[str, Any]) -> ScheduleResult:
    try:
        result = _empty_result(int(data["problem"]["numJobs"]), int(data["problem"]["numMachines"]))
        for item in data.get("operations", []):
            op = Operation(
                int(item["jobId"]),
                int(item["machineId"]),
                int(item["processingTime"]),
                int(item["operationId"]),
            )
            if item.get("scheduled", True):
                op.set_scheduled(int(item["startTime"]), int(item["endTime"]))
            job = result.problem.get_job(op.job_id)
            if job is not None:
                job.add_operation(op)
        for machine in data.get("machines", []):
            entries = [
                (int(e["jobId"]), int(e["operationId"]), int(e["startTime"]), int(e["endTime"]))
                for e in machine.get("scheduledOperations", [])
            ]
            _attach_machine_schedule(
                result, int(machine["machineId"]), int(machine["availableTime"]), entries
            )
        metrics = data["metrics"]
        result.makespan = int(metrics["makespan"])
        result.total_completion_time = int(metrics["totalCompletionTime"])
        result.avg_flow_time = float(metrics["averageFlowTime"])
    except (KeyError, TypeError, ValueError) as e:
        raise SolutionFormatError(f"Malformed solution data: {e}") from e
    return result


def load_json_solution(file_path: str | Path) -> ScheduleResult:
    try:
        data = json.loads(Path(file_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SolutionFormatError(f"Invalid JSON solution: {e}") from e
    return _result_from_dict(data)


def _xml_value(element: ET.Element) -> Any:
    text = (element.text or "").strip()
    if text in ("true", "false"):
        return text == "true"
    return text


def load_xml_solution(file_path: str | Path) -> ScheduleResult:
    try:
        root = ET.parse(file_path).getroot()
    except ET.ParseError as e:
        raise SolutionFormatError(f"Invalid XML solution: {e}") from e

    def fields(element: ET.Element | None) -> dict[str, Any]:
        if element is None:
            return {}
        return {child.tag: _xml_value(child) for child in element if len(child) == 0}

    data: dict[str, Any] = {
        "problem": fields(root.find("problem")),
        "operations": [fields(el) for el in root.iterfind("operations/operation")],
        "machines": [
            {
                **fields(el),
                "scheduledOperations": [
                    fields(op) for op in el.iterfind("scheduledOperations/scheduledOperation")
                ],
            }
            for el in root.iterfind("machines/machine")
        ],
        "metrics": fields(root.find("metrics")),
    }
    return _result_from_dict(data)


def load_solution(file_path: str | Path) -> ScheduleResult:
    """Load a solution file, sniffing the format from its first line.

    Raises:
        SolutionFormatError: Unknown format or malformed content.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        first_line = f.readline()

    if TEXT_HEADER in first_line:
        result = load_text_solution(file_path)
    elif "<?xml" in first_line:
        result = load_xml_solution(file_path)
    elif "{" in first_line or '"problem"' in first_line:
        result = load_json_solution(file_path)
    else:
        raise SolutionFormatError("Unknown solution file format")
    logger.info("Loaded solution from %s", file_path)
    return result
