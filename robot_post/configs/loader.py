"""Configuration loader for the post-processor.

Loads and validates ``postprocessor.yaml`` into typed, frozen dataclasses.
Robot limits and dialect syntax are *not* configuration; they live in the
rule tables of :mod:`robot_post.domain.rules`.  This file only holds
runtime behaviour: logging, the workspace reach policy, output naming and
parallelism.

Usage::

    from robot_post.configs.loader import load_config
    cfg = load_config()                              # default path
    cfg = load_config("/custom/postprocessor.yaml")  # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from robot_post.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "postprocessor.yaml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


class ReachPolicy(Enum):
    """Handling of linear targets beyond the robot's nominal reach."""

    WARN = "warn"
    REJECT = "reject"
    IGNORE = "ignore"


@dataclass(frozen=True)
class LoggingConfig:
    """Arguments for :func:`robot_post.utils.logging_config.setup_logging`."""

    level: str = "INFO"
    json: bool = False
    color: bool = True
    file: str | None = None
    rotate: dict[str, Any] | None = None


@dataclass(frozen=True)
class WorkspaceConfig:
    reach_policy: ReachPolicy = ReachPolicy.WARN


@dataclass(frozen=True)
class OutputConfig:
    """Output file naming.

    ``suffix`` replaces the input suffix when no explicit output path is
    given, e.g. ``job.json`` -> ``job.txt``.
    """

    suffix: str = ".txt"
    overwrite: bool = True


@dataclass(frozen=True)
class ProcessingConfig:
    max_workers: int = 4


@dataclass(frozen=True)
class PostProcessorConfig:
    """Complete runtime configuration loaded from ``postprocessor.yaml``."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data[name]
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping, got {section!r}")
    return section


def _parse_bool(section: str, key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be true or false, got {value!r}")
    return value


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data["level"]).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {list(_LOG_LEVELS)}, got {data['level']!r}"
        )
    rotate = data.get("rotate")
    if rotate is not None:
        if not isinstance(rotate, dict):
            raise ConfigError(f"logging.rotate must be a mapping, got {rotate!r}")
        if rotate.get("mode", "size") not in ("size", "time"):
            raise ConfigError(
                f"logging.rotate.mode must be 'size' or 'time', got {rotate['mode']!r}"
            )
    log_file = data.get("file")
    return LoggingConfig(
        level=level,
        json=_parse_bool("logging", "json", data["json"]),
        color=_parse_bool("logging", "color", data["color"]),
        file=str(log_file) if log_file is not None else None,
        rotate=dict(rotate) if rotate is not None else None,
    )


def _parse_workspace(data: dict[str, Any]) -> WorkspaceConfig:
    raw = data["reach_policy"]
    try:
        policy = ReachPolicy(str(raw).lower())
    except ValueError:
        raise ConfigError(
            f"workspace.reach_policy must be one of "
            f"{[p.value for p in ReachPolicy]}, got {raw!r}"
        ) from None
    return WorkspaceConfig(reach_policy=policy)


def _parse_output(data: dict[str, Any]) -> OutputConfig:
    suffix = str(data["suffix"])
    if not suffix.startswith(".") or len(suffix) < 2:
        raise ConfigError(f"output.suffix must look like '.txt', got {suffix!r}")
    return OutputConfig(
        suffix=suffix,
        overwrite=_parse_bool("output", "overwrite", data["overwrite"]),
    )


def _parse_processing(data: dict[str, Any]) -> ProcessingConfig:
    workers = data["max_workers"]
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ConfigError(
            f"processing.max_workers must be a positive integer, got {workers!r}"
        )
    return ProcessingConfig(max_workers=workers)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> PostProcessorConfig:
    """Load and validate post-processor configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``postprocessor.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    PostProcessorConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        config = PostProcessorConfig(
            logging=_parse_logging(_section(data, "logging")),
            workspace=_parse_workspace(_section(data, "workspace")),
            output=_parse_output(_section(data, "output")),
            processing=_parse_processing(_section(data, "processing")),
        )
    except KeyError as exc:
        raise ConfigError(f"Missing required configuration key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration value: {exc}") from exc

    logger.debug("Configuration loaded successfully: %s", config)
    return config
