"""Program generator -- trajectory aggregate to controller program text.

Emission order is fixed::

    // Generated code for <robot>
    // Firmware version: <firmware>

    BASE P[...]
    TOOL P[...]

    <one MOVL / MOVJ line per point, in insertion order>

The base and tool frames must precede every motion command because the
controller interprets motion targets relative to them.

Validation happens upstream.  The generator assumes a validated
aggregate and never re-checks domain rules; it only refuses objects it
does not know how to format, which is a programming error.
"""

from __future__ import annotations

import logging
from io import StringIO

from robot_post.domain.motion import JointPoint, LinearPoint, MotionPoint
from robot_post.domain.trajectory import TrajectoryAggregate
from robot_post.domain.values import CoordinateFrame, FirmwareVersion

logger = logging.getLogger(__name__)

BASE_COMMAND = "BASE"
TOOL_COMMAND = "TOOL"


class CodeGenerationError(Exception):
    """Raised when the generator is handed something it cannot format."""

    pass


class CodeGenerator:
    """Render a :class:`TrajectoryAggregate` as NovaTech program text.

    The generator holds no state between calls, so one instance can be
    shared and :meth:`generate` is idempotent.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, trajectory: TrajectoryAggregate) -> str:
        """Generate the complete program.

        Parameters
        ----------
        trajectory : TrajectoryAggregate
            Aggregate that already passed ``validate_trajectory()``.

        Returns
        -------
        str
            Program text, every line newline-terminated.

        Raises
        ------
        CodeGenerationError
            If *trajectory* is not an aggregate or holds an unknown point type.
        """
        if not isinstance(trajectory, TrajectoryAggregate):
            raise CodeGenerationError(
                f"Expected a TrajectoryAggregate, got {type(trajectory).__name__}"
            )

        buf = StringIO()
        self._write_header(trajectory, buf)
        self._write_frames(trajectory, buf)

        firmware = trajectory.firmware
        for index, point in enumerate(trajectory.points):
            buf.write(self._format_point(point, firmware, index))
            buf.write("\n")

        logger.debug(
            "Generated %d motion commands for %s (firmware %s, %s speed syntax)",
            len(trajectory),
            trajectory.robot.model,
            firmware.text,
            firmware.speed_syntax.name.lower(),
        )
        return buf.getvalue()

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _write_header(self, trajectory: TrajectoryAggregate, buf: StringIO) -> None:
        buf.write(f"// Generated code for {trajectory.robot.model}\n")
        buf.write(f"// Firmware version: {trajectory.firmware.text}\n")
        buf.write("\n")

    def _write_frames(self, trajectory: TrajectoryAggregate, buf: StringIO) -> None:
        buf.write(f"{_frame_command(BASE_COMMAND, trajectory.base_frame)}\n")
        buf.write(f"{_frame_command(TOOL_COMMAND, trajectory.tool_frame)}\n")
        buf.write("\n")

    def _format_point(
        self, point: MotionPoint, firmware: FirmwareVersion, index: int
    ) -> str:
        if isinstance(point, (LinearPoint, JointPoint)):
            return point.format(firmware)
        raise CodeGenerationError(
            f"Point {index}: unsupported point type {type(point).__name__}"
        )


def _frame_command(command: str, frame: CoordinateFrame) -> str:
    return f"{command} {frame.format()}"


def generate_program(trajectory: TrajectoryAggregate) -> str:
    """Functional shorthand for ``CodeGenerator().generate(trajectory)``."""
    return CodeGenerator().generate(trajectory)
