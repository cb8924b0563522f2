"""Processing pipeline: document -> validated trajectory -> program text.

Three levels, each built on the one before:

* :func:`build_trajectory` turns a validated document into a
  :class:`TrajectoryAggregate` (fail fast, ``Point <i>: `` prefix).
* :func:`postprocess` applies the workspace reach policy and generates
  the program, returning ``Ok(ProgramOutput)`` or ``Err``.
* :func:`postprocess_file` / :func:`postprocess_files` add file I/O and
  return one :class:`FileReport` per input, never raising for bad input.

Usage::

    from robot_post.pipeline import postprocess_files
    reports = postprocess_files(["a.json", "b.yaml"], output_dir="out")
"""

from __future__ import annotations

import contextvars
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from robot_post.configs.loader import PostProcessorConfig, ReachPolicy
from robot_post.dialect.generator import CodeGenerator
from robot_post.documents import DocumentError, TrajectoryDocument, load_document
from robot_post.domain.motion import LinearPoint
from robot_post.domain.result import Err, Ok, Result
from robot_post.domain.trajectory import TrajectoryAggregate
from robot_post.utils import fs
from robot_post.utils.logging_config import log_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramOutput:
    """Generated program plus the metadata reported alongside it."""

    code: str
    robot: str
    firmware_version: str
    point_count: int
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileReport:
    """Outcome of processing one input file."""

    input_path: Path
    success: bool
    message: str
    output_path: Path | None = None
    warnings: tuple[str, ...] = ()

    def __str__(self) -> str:
        status = "OK" if self.success else "FAILED"
        target = f" -> {self.output_path}" if self.output_path else ""
        return f"[{status}] {self.input_path}{target}: {self.message}"


# ---------------------------------------------------------------------------
# In-memory processing
# ---------------------------------------------------------------------------


def build_trajectory(document: TrajectoryDocument) -> Result[TrajectoryAggregate]:
    """Create the aggregate, insert every point, then validate the whole.

    Insertion stops at the first rejected point; its error is prefixed
    with ``Point <index>: ``.
    """
    created = TrajectoryAggregate.create(
        document.robot,
        document.firmware_version,
        document.base_frame,
        document.tool_frame,
    )
    if not created.ok:
        logger.warning("Trajectory rejected: %s", created.error.message)
        return created
    trajectory = created.value

    for index, record in enumerate(document.trajectory):
        added = trajectory.add_trajectory_point(
            record.type,
            position=record.position,
            joints=record.joints,
            speed=record.speed,
            acceleration=record.acceleration,
        )
        if not added.ok:
            logger.warning("Failed to add point %d: %s", index, added.error.message)
            return Err(added.error.with_prefix(f"Point {index}: "))

    validated = trajectory.validate_trajectory()
    if not validated.ok:
        logger.warning("Trajectory validation failed: %s", validated.error.message)
        return validated
    return Ok(trajectory)


def _apply_reach_policy(
    trajectory: TrajectoryAggregate, policy: ReachPolicy
) -> Result[tuple[str, ...]]:
    """Check linear targets against the robot's nominal reach.

    ``warn`` collects the advisories, ``reject`` fails on the first one,
    ``ignore`` skips the check.
    """
    if policy is ReachPolicy.IGNORE:
        return Ok(())

    profile = trajectory.robot.profile
    warnings = []
    for index, point in enumerate(trajectory.points):
        if not isinstance(point, LinearPoint):
            continue
        reach = point.frame.check_workspace(profile)
        if reach.ok:
            continue
        error = reach.error.with_prefix(f"Point {index}: ")
        if policy is ReachPolicy.REJECT:
            logger.warning("Workspace check failed: %s", error.message)
            return Err(error)
        logger.warning("Workspace advisory: %s", error.message)
        warnings.append(error.message)
    return Ok(tuple(warnings))


def postprocess(
    document: TrajectoryDocument, config: PostProcessorConfig | None = None
) -> Result[ProgramOutput]:
    """Validate *document* and generate its controller program.

    Parameters
    ----------
    document : TrajectoryDocument
        Schema-valid input document.
    config : PostProcessorConfig, optional
        Runtime configuration; defaults apply when omitted.

    Returns
    -------
    Result[ProgramOutput]
        The program and its metadata, or the first domain error.
    """
    config = config or PostProcessorConfig()

    with log_context(run=uuid.uuid4().hex[:8]):
        start = time.perf_counter()
        logger.info(
            "Processing trajectory: robot=%s firmware=%s points=%d",
            document.robot, document.firmware_version, len(document.trajectory),
        )

        built = build_trajectory(document)
        if not built.ok:
            return built
        trajectory = built.value

        reach = _apply_reach_policy(trajectory, config.workspace.reach_policy)
        if not reach.ok:
            return reach

        code = CodeGenerator().generate(trajectory)
        output = ProgramOutput(
            code=code,
            robot=trajectory.robot.model,
            firmware_version=trajectory.firmware.text,
            point_count=len(trajectory),
            warnings=reach.value,
        )
        logger.info(
            "Generated %d motion commands in %.1f ms",
            output.point_count, (time.perf_counter() - start) * 1000.0,
        )
        return Ok(output)


# ---------------------------------------------------------------------------
# File processing
# ---------------------------------------------------------------------------


def default_output_path(
    input_path: Path, config: PostProcessorConfig, output_dir: Path | None = None
) -> Path:
    """``<stem><output.suffix>`` next to the input, or inside *output_dir*."""
    name = input_path.stem + config.output.suffix
    return (output_dir / name) if output_dir is not None else input_path.with_name(name)


def postprocess_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    config: PostProcessorConfig | None = None,
) -> FileReport:
    """Load one document, generate its program and write it atomically."""
    config = config or PostProcessorConfig()
    input_path = Path(input_path)
    output_path = (
        Path(output_path) if output_path is not None
        else default_output_path(input_path, config)
    )

    with log_context(input=input_path.name):
        if output_path.resolve() == input_path.resolve():
            message = f"Output path {output_path} would overwrite the input document"
            logger.error(message)
            return FileReport(input_path, False, message)

        try:
            document = load_document(input_path)
        except (DocumentError, FileNotFoundError) as e:
            logger.error("%s", e)
            return FileReport(input_path, False, str(e))

        result = postprocess(document, config)
        if not result.ok:
            logger.error("Processing failed: %s", result.error.message)
            return FileReport(input_path, False, result.error.message)
        program = result.value

        if output_path.exists() and not config.output.overwrite:
            message = f"Output file already exists: {output_path}"
            logger.error(message)
            return FileReport(input_path, False, message, warnings=program.warnings)

        try:
            fs.atomic_write_text(output_path, program.code)
        except RuntimeError as e:
            logger.error("%s", e)
            return FileReport(input_path, False, str(e), warnings=program.warnings)

        logger.info("Wrote %s", output_path)
        return FileReport(
            input_path,
            True,
            f"Generated {program.point_count} motion commands",
            output_path,
            program.warnings,
        )


def postprocess_files(
    inputs: Iterable[str | Path],
    output_dir: str | Path | None = None,
    config: PostProcessorConfig | None = None,
) -> list[FileReport]:
    """Process independent documents in parallel.

    Reports come back in input order.  Two inputs that would write the
    same output file are not both processed: the later one fails.
    """
    config = config or PostProcessorConfig()
    inputs = [Path(p) for p in inputs]
    if not inputs:
        return []
    out_dir = Path(output_dir) if output_dir is not None else None

    reports: dict[int, FileReport] = {}
    jobs: dict[int, Path] = {}
    claimed: dict[Path, Path] = {}
    for i, input_path in enumerate(inputs):
        target = default_output_path(input_path, config, out_dir)
        key = target.resolve()
        if key in claimed:
            reports[i] = FileReport(
                input_path,
                False,
                f"Output path {target} is already used by {claimed[key]}",
            )
            continue
        claimed[key] = input_path
        jobs[i] = target

    workers = max(1, min(config.processing.max_workers, len(jobs)))
    logger.info("Processing %d document(s) with %d worker(s)", len(jobs), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            i: executor.submit(
                contextvars.copy_context().run,
                postprocess_file, inputs[i], target, config,
            )
            for i, target in jobs.items()
        }

        for i, future in futures.items():
            try:
                reports[i] = future.result()
            except Exception as e:
                logger.exception("Unexpected error processing %s", inputs[i])
                reports[i] = FileReport(inputs[i], False, f"Unexpected error: {e}")

    ok = sum(1 for r in reports.values() if r.success)
    logger.info("Finished: %d succeeded, %d failed", ok, len(inputs) - ok)
    return [reports[i] for i in range(len(inputs))]
