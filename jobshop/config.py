"""Run configuration loaded from YAML (or JSON) files.

This module isolates the light data containers holding everything a CLI run
needs (`AppConfig`, `GeneratorConfig`, `OutputConfig`) and the loader that
fills them from a config file, so the command line only has to apply its
overrides on top.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict

import yaml

from .dispatch import DEFAULT_MAX_ROUNDS
from .serializer import ExportFormat
from .solver import SchedulingAlgorithm

COMPARE = "compare"


@dataclass(slots=True)
class GeneratorConfig:
    enabled: bool = False
    jobs: int = 3
    machines: int = 3
    min_time: int = 1
    max_time: int = 10
    seed: int | None = None


@dataclass(slots=True)
class OutputConfig:
    dir: str = "results"
    formats: list[ExportFormat] = field(
        default_factory=lambda: [ExportFormat.TEXT, ExportFormat.JSON, ExportFormat.XML]
    )
    gantt: bool = True
    show_legend: bool | None = None


@dataclass(slots=True)
class AppConfig:
    """Resolved settings of one run.

    ``algorithm`` is either one of the short rule names (``fifo``, ``spt``,
    ``lpt``) or ``compare`` to run every rule.
    """

    instance: str | None = None
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    algorithm: str = "fifo"
    max_rounds: int = DEFAULT_MAX_ROUNDS
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"

    def algorithms(self) -> list[SchedulingAlgorithm]:
        if self.algorithm == COMPARE:
            return list(SchedulingAlgorithm)
        return [SchedulingAlgorithm.from_name(self.algorithm)]


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def parse_formats(value: Any) -> list[ExportFormat]:
    if isinstance(value, str):
        value = [v for v in value.split(",") if v.strip()]
    return [ExportFormat.from_name(v) for v in value]


def config_from_dict(raw: Dict[str, Any]) -> AppConfig:
    """Build an :class:`AppConfig` from a parsed config mapping.

    Unknown keys are ignored.

    Raises:
        ValueError: On an unknown algorithm or format, or ``max_rounds < 1``.
    """
    gen = _section(raw, "generator")
    out = _section(raw, "output")
    sched = _section(raw, "scheduler")

    defaults = OutputConfig()
    cfg = AppConfig(
        instance=raw.get("instance"),
        generator=GeneratorConfig(
            enabled=bool(gen.get("enabled", False)),
            jobs=int(gen.get("jobs", 3)),
            machines=int(gen.get("machines", 3)),
            min_time=int(gen.get("min_time", 1)),
            max_time=int(gen.get("max_time", 10)),
            seed=gen.get("seed"),
        ),
        algorithm=str(raw.get("algorithm", "fifo")).strip().lower(),
        max_rounds=int(sched.get("max_rounds", DEFAULT_MAX_ROUNDS)),
        output=OutputConfig(
            dir=str(out.get("dir", defaults.dir)),
            formats=parse_formats(out["formats"]) if "formats" in out else defaults.formats,
            gantt=bool(out.get("gantt", True)),
            show_legend=out.get("show_legend"),
        ),
        log_level=str(raw.get("log_level", "INFO")).upper(),
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: AppConfig) -> None:
    if cfg.algorithm != COMPARE:
        SchedulingAlgorithm.from_name(cfg.algorithm)
    if cfg.max_rounds < 1:
        raise ValueError(f"scheduler.max_rounds must be >= 1 (got {cfg.max_rounds})")


def load_config(config_file: str) -> AppConfig:
    """Load configuration from a YAML (``.yml``/``.yaml``) or JSON file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        raw = yaml.safe_load(text) or {}
    else:
        raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {config_file}")
    return config_from_dict(raw)
