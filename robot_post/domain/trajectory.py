"""Trajectory aggregate -- the validated whole handed to the code generator.

Lifecycle::

    created = TrajectoryAggregate.create(robot, firmware, base, tool)
    traj = created.value
    traj.add_trajectory_point("linear", position=[...], speed=100)   # repeat
    traj.validate_trajectory()
    CodeGenerator().generate(traj)

Insertion is fail-fast and atomic: a rejected point leaves the aggregate
exactly as it was.  Whole-trajectory validation is a separate read-only
pass that reports every failing point at once.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from robot_post.domain.motion import JointPoint, LinearPoint, MotionPoint
from robot_post.domain.result import ErrorKind, Ok, Result, combine, fail
from robot_post.domain.rules import RobotProfile
from robot_post.domain.values import CoordinateFrame, FirmwareVersion, RobotIdentity

logger = logging.getLogger(__name__)


def check_point_for_robot(point: MotionPoint, profile: RobotProfile) -> Result[None]:
    """Apply robot-specific limits to an already valid point.

    Joint moves must keep J6 inside ``profile.joint6_limits_deg``.
    """
    if isinstance(point, JointPoint):
        angle = point.joints.j6
        if not profile.joint6_allows(angle):
            return fail(
                ErrorKind.RANGE,
                f"Joint 6 angle {angle:g}° exceeds {profile.model} range "
                f"({profile.joint6_range_label})",
            )
    return Ok(None)


class TrajectoryAggregate:
    """Ordered, append-only collection of motion points for one robot.

    Use :meth:`create` to build one from raw input.  The constructor
    accepts already validated value objects only.
    """

    def __init__(
        self,
        robot: RobotIdentity,
        firmware: FirmwareVersion,
        base_frame: CoordinateFrame,
        tool_frame: CoordinateFrame,
    ) -> None:
        for name, value, expected in (
            ("robot", robot, RobotIdentity),
            ("firmware", firmware, FirmwareVersion),
            ("base_frame", base_frame, CoordinateFrame),
            ("tool_frame", tool_frame, CoordinateFrame),
        ):
            if not isinstance(value, expected):
                raise TypeError(
                    f"{name} must be a {expected.__name__}, got {type(value).__name__}"
                )
        self._robot = robot
        self._firmware = firmware
        self._base_frame = base_frame
        self._tool_frame = tool_frame
        self._points: list[MotionPoint] = []

    @classmethod
    def create(
        cls,
        robot: Any,
        firmware_version: Any,
        base_frame: Any,
        tool_frame: Any,
    ) -> Result[TrajectoryAggregate]:
        """Validate robot, firmware and both frames, then build the aggregate."""
        robot_r = RobotIdentity.create(robot)
        if not robot_r.ok:
            return robot_r

        firmware_r = FirmwareVersion.create(firmware_version)
        if not firmware_r.ok:
            return firmware_r

        base_r = CoordinateFrame.create(base_frame)
        if not base_r.ok:
            return fail(base_r.error.kind, f"Invalid base frame: {base_r.error.message}")

        tool_r = CoordinateFrame.create(tool_frame)
        if not tool_r.ok:
            return fail(tool_r.error.kind, f"Invalid tool frame: {tool_r.error.message}")

        return Ok(cls(robot_r.value, firmware_r.value, base_r.value, tool_r.value))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def robot(self) -> RobotIdentity:
        return self._robot

    @property
    def firmware(self) -> FirmwareVersion:
        return self._firmware

    @property
    def base_frame(self) -> CoordinateFrame:
        return self._base_frame

    @property
    def tool_frame(self) -> CoordinateFrame:
        return self._tool_frame

    @property
    def points(self) -> tuple[MotionPoint, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[MotionPoint]:
        return iter(tuple(self._points))

    def __repr__(self) -> str:
        return (
            f"TrajectoryAggregate(robot={self._robot.model!r}, "
            f"firmware={self._firmware.text!r}, points={len(self._points)})"
        )

    # ------------------------------------------------------------------
    # Mutation (append only)
    # ------------------------------------------------------------------

    def add_trajectory_point(
        self,
        movement_type: Any,
        position: Any = None,
        joints: Any = None,
        speed: Any = None,
        acceleration: Any = None,
    ) -> Result[MotionPoint]:
        """Build a point from raw fields and append it if valid.

        Returns the appended point, or the first error.  On error the
        point sequence is unchanged.
        """
        point_r = MotionPoint.create(movement_type, position, joints, speed, acceleration)
        if not point_r.ok:
            return point_r
        return self.append(point_r.value)

    def append(self, point: MotionPoint) -> Result[MotionPoint]:
        """Append an already constructed point after robot-specific checks."""
        if not isinstance(point, MotionPoint):
            raise TypeError(f"point must be a MotionPoint, got {type(point).__name__}")
        robot_r = check_point_for_robot(point, self._robot.profile)
        if not robot_r.ok:
            return robot_r
        self._points.append(point)
        return Ok(point)

    # ------------------------------------------------------------------
    # Whole-trajectory validation
    # ------------------------------------------------------------------

    def validate_trajectory(self) -> Result[None]:
        """Check the complete trajectory, reporting every failing point.

        Fails when no points were added.  Otherwise each point is checked
        for speed positivity and type/payload consistency, and all
        failures are joined into one newline-separated message.
        """
        if not self._points:
            return fail(ErrorKind.STRUCTURAL, "Trajectory must contain at least one point")
        result = combine(
            _validate_point(point, index) for index, point in enumerate(self._points)
        )
        if not result.ok:
            logger.debug("Trajectory validation failed: %s", result.error.message)
        return result


def _validate_point(point: MotionPoint, index: int) -> Result[None]:
    if point.speed.value <= 0:
        return fail(
            ErrorKind.RANGE,
            f"Point {index}: Speed must be positive, got {point.speed.value}",
        )
    if isinstance(point, LinearPoint) and not isinstance(point.frame, CoordinateFrame):
        return fail(
            ErrorKind.STRUCTURAL, f"Point {index}: Linear movement requires position data"
        )
    if isinstance(point, JointPoint) and len(point.joints.angles) != 6:
        return fail(
            ErrorKind.STRUCTURAL,
            f"Point {index}: Joint movement requires 6-element joints array",
        )
    if not isinstance(point, (LinearPoint, JointPoint)):
        return fail(
            ErrorKind.STRUCTURAL,
            f"Point {index}: Unsupported point type {type(point).__name__}",
        )
    return Ok(None)
