import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from .models import ScheduleResult  # noqa: E402

logger = logging.getLogger(__name__)


def save_gantt_chart(
    result: ScheduleResult,
    filepath: str | Path,
    show_legend: Optional[bool] = None,
    title: Optional[str] = None,
) -> str:
    """Create and save a Gantt chart of a scheduled result.

    - One row per machine, one bar per scheduled operation, coloured by job.
    - Adaptive figure size based on number of machines and makespan.
    - Legend shown automatically for up to 40 jobs unless forced.
    """
    problem = result.problem
    m = max(problem.num_machines, len(problem.machines), 1)
    n = max(problem.num_jobs, len(problem.jobs), 1)

    base_w, base_h = 10, 0.5 * m + 2
    fig, ax = plt.subplots(
        figsize=(min(base_w + result.makespan * 0.02, 18), min(base_h, 16)),
        constrained_layout=True,
    )
    cmap = plt.get_cmap("tab20")
    colors = [cmap(i % 20) for i in range(n)]
    for machine in problem.machines:
        for op in machine.scheduled_operations:
            ax.barh(
                machine.machine_id,
                op.end_time - op.start_time,
                left=op.start_time,
                height=0.8,
                color=colors[op.job_id % n],
                alpha=0.85,
                edgecolor="black",
                linewidth=0.6,
            )
            if op.end_time > op.start_time:
                ax.text(
                    (op.start_time + op.end_time) / 2,
                    machine.machine_id,
                    f"J{op.job_id}",
                    ha="center",
                    va="center",
                    fontsize=8,
                )
    if title is None:
        name = result.algorithm_name or "Schedule"
        title = f"{name} - Makespan = {result.makespan}"
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Machine", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_yticks(range(m))
    ax.set_yticklabels([f"M{i}" for i in range(m)])
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.set_ylim(-0.5, m - 0.5)
    ax.set_xlim(0, max(result.makespan, 1))

    if show_legend is None:
        show_legend = n <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=colors[i], alpha=0.85, edgecolor="black", label=f"Job {i}"
            )
            for i in range(n)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if n <= 25 else 2,
        )

    filepath = str(filepath)
    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    logger.info("Gantt chart saved as: %s", filepath)
    return filepath


def save_comparison_chart(results: Mapping[str, ScheduleResult], filepath: str | Path) -> str:
    """Grouped bar chart of makespan, total completion and average flow time."""
    names = list(results)
    metrics = [
        ("Makespan", [results[k].makespan for k in names]),
        ("Total completion", [results[k].total_completion_time for k in names]),
        ("Avg flow time", [results[k].avg_flow_time for k in names]),
    ]
    fig, axes = plt.subplots(1, len(metrics), figsize=(12, 4), constrained_layout=True)
    cmap = plt.get_cmap("tab10")
    for ax, (label, values) in zip(axes, metrics):
        bars = ax.bar(range(len(names)), values, color=[cmap(i % 10) for i in range(len(names))])
        ax.set_title(label, fontsize=12, fontweight="bold")
        ax.set_xticks(range(len(names)))
        ax.set_xticklabels(names, fontsize=9)
        ax.grid(True, alpha=0.25, axis="y", linestyle="--", linewidth=0.7)
        for bar, value in zip(bars, values):
            ax.annotate(
                f"{value:.2f}" if isinstance(value, float) else f"{value}",
                xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                xytext=(0, 3),
                textcoords="offset points",
                ha="center",
                fontsize=9,
            )

    filepath = str(filepath)
    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    logger.info("Comparison chart saved as: %s", filepath)
    return filepath


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """Return ``path`` itself, or the first free ``<stem>_<n><suffix>`` sibling.

    Used when re-rendering a loaded solution so an earlier chart is kept.
    """
    base = Path(path)
    target, n = base, 0
    while target.exists():
        n += 1
        target = base.with_name(f"{base.stem}_{n}{base.suffix}")
    return str(target)

