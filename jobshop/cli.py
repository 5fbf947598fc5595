from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from .config import COMPARE, AppConfig, config_from_dict, load_config, parse_formats
from .models import ProblemInstance, ScheduleResult
from .parser import generate_random_problem, generate_simple_problem, parse_file
from .serializer import export_solution, load_solution
from .solver import SchedulingAlgorithm, Solver, compare_solutions
from .validation import check_schedule
from .visualization import next_unique_path, save_comparison_chart, save_gantt_chart

logger = logging.getLogger("jobshop")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jobshop", description="Job shop dispatch scheduler (FIFO / SPT / LPT)"
    )
    p.add_argument("--config", type=str, help="YAML/JSON config file")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--instance", type=str, help="Problem file (.jssp)")
    src.add_argument(
        "--generate",
        type=str,
        metavar="JOBSxMACHINES",
        help="Generate a random instance, e.g. 5x4",
    )
    src.add_argument("--load-solution", type=str, help="Re-render an exported solution")
    p.add_argument("--seed", type=int, help="Seed for --generate")
    p.add_argument("--algorithm", choices=["fifo", "spt", "lpt", COMPARE])
    p.add_argument("--out-dir", type=str)
    p.add_argument("--formats", type=str, help="Comma separated: txt,json,xml")
    p.add_argument("--no-gantt", action="store_true")
    p.add_argument("--max-rounds", type=int)
    p.add_argument("--log-level", type=str)
    p.add_argument("--check", action="store_true", help="Verify precedence and machine overlap")
    return p


def _parse_size(value: str) -> tuple[int, int]:
    try:
        jobs, machines = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise ValueError(f"Invalid size {value!r}, expected JOBSxMACHINES") from None
    return jobs, machines


def resolve_config(args: argparse.Namespace) -> AppConfig:
    """Config file values with command line overrides applied."""
    cfg = load_config(args.config) if args.config else config_from_dict({})
    if args.instance:
        cfg.instance = args.instance
        cfg.generator.enabled = False
    if args.generate:
        cfg.generator.jobs, cfg.generator.machines = _parse_size(args.generate)
        cfg.generator.enabled = True
    if args.seed is not None:
        cfg.generator.seed = args.seed
    if args.algorithm:
        cfg.algorithm = args.algorithm
    if args.out_dir:
        cfg.output.dir = args.out_dir
    if args.formats is not None:
        cfg.output.formats = parse_formats(args.formats)
    if args.no_gantt:
        cfg.output.gantt = False
    if args.max_rounds is not None:
        cfg.max_rounds = args.max_rounds
    if args.log_level:
        cfg.log_level = args.log_level.upper()
    return cfg


def build_problem(cfg: AppConfig) -> tuple[ProblemInstance, str]:
    """Problem to solve plus a short name used for output files."""
    gen = cfg.generator
    if gen.enabled:
        problem = generate_random_problem(
            gen.jobs, gen.machines, gen.min_time, gen.max_time, seed=gen.seed
        )
        name = f"generated_j{gen.jobs}_m{gen.machines}"
        if gen.seed is not None:
            name += f"_seed{gen.seed}"
        return problem, name
    if cfg.instance:
        return parse_file(cfg.instance), Path(cfg.instance).stem
    logger.info("No instance given, using the built-in 3x3 demo problem")
    return generate_simple_problem(), "demo"


def write_outputs(cfg: AppConfig, result: ScheduleResult, stem: str) -> list[str]:
    written = []
    for fmt in cfg.output.formats:
        path = os.path.join(cfg.output.dir, f"{stem}.{fmt.value}")
        written.append(str(export_solution(result, path, fmt)))
    if cfg.output.gantt:
        written.append(
            save_gantt_chart(
                result,
                os.path.join(cfg.output.dir, f"gantt_{stem}.png"),
                show_legend=cfg.output.show_legend,
            )
        )
    return written


def run(cfg: AppConfig, check: bool = False) -> dict[SchedulingAlgorithm, ScheduleResult]:
    problem, name = build_problem(cfg)
    logger.info(
        "Instance: %s jobs=%d machines=%d ops=%d",
        name,
        problem.num_jobs,
        problem.num_machines,
        problem.total_operations(),
    )
    results: dict[SchedulingAlgorithm, ScheduleResult] = {}
    for algo in cfg.algorithms():
        result = Solver(algo, max_rounds=cfg.max_rounds).solve(problem)
        if check:
            check_schedule(result.problem)
            logger.info("%s schedule is feasible", algo.name)
        write_outputs(cfg, result, f"{name}_{algo.value}")
        results[algo] = result

    if len(results) > 1:
        baseline = SchedulingAlgorithm.FIFO
        for algo, result in results.items():
            if algo is not baseline and baseline in results:
                compare_solutions(results[baseline], result, baseline.name, algo.name)
        if cfg.output.gantt:
            save_comparison_chart(
                {algo.name: r for algo, r in results.items()},
                os.path.join(cfg.output.dir, f"comparison_{name}.png"),
            )
    return results


def show_solution(cfg: AppConfig, path: str) -> ScheduleResult:
    result = load_solution(path)
    logger.info(
        "Loaded solution: makespan=%d total_completion=%d avg_flow=%.2f",
        result.makespan,
        result.total_completion_time,
        result.avg_flow_time,
    )
    if cfg.output.gantt:
        save_gantt_chart(
            result,
            next_unique_path(
                os.path.join(cfg.output.dir, f"gantt_{Path(path).stem}_loaded.png")
            ),
            show_legend=cfg.output.show_legend,
        )
    return result


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        cfg = resolve_config(args)
    except (OSError, ValueError) as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        return 1

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.load_solution:
            show_solution(cfg, args.load_solution)
        else:
            run(cfg, check=args.check)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0
