"""Motion points -- one validated move of a trajectory.

A motion point is a sum type: :class:`LinearPoint` carries a Cartesian
:class:`CoordinateFrame`, :class:`JointPoint` carries a
:class:`JointAngleSet`.  A point with both payloads, or with neither, is
unrepresentable.  Both variants share :class:`Speed` and
:class:`Acceleration`.

Command grammar
---------------
::

    MOVL P[x,y,z,rx,ry,rz] <speed> ACC=<a>
    MOVJ J[j1,j2,j3,j4,j5,j6] <speed>% ACC=<a>

``<speed>`` is ``SPD(v)`` on legacy firmware and ``SPD=v`` on modern
firmware.  Joint speed is a percentage of max velocity, so ``MOVJ``
always appends ``%``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from robot_post.domain.result import ErrorKind, Ok, Result, fail
from robot_post.domain.values import (
    Acceleration,
    CoordinateFrame,
    FirmwareVersion,
    JointAngleSet,
    Speed,
)

LINEAR_COMMAND = "MOVL"
JOINT_COMMAND = "MOVJ"


class MovementType(Enum):
    LINEAR = "linear"
    JOINT = "joint"

    @classmethod
    def parse(cls, raw: Any) -> Result[MovementType]:
        """Case-insensitive lookup of ``"linear"`` / ``"joint"``."""
        supported = ", ".join(m.value for m in cls)
        if not isinstance(raw, str) or not raw.strip():
            return fail(
                ErrorKind.STRUCTURAL,
                f"Movement type cannot be empty. Supported types: {supported}",
            )
        try:
            return Ok(cls(raw.lower()))
        except ValueError:
            return fail(
                ErrorKind.STRUCTURAL,
                f"Unsupported movement type: {raw}. Supported types: {supported}",
            )


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MotionPoint(ABC):
    """Common part of every move: speed and acceleration."""

    speed: Speed
    acceleration: Acceleration

    @property
    @abstractmethod
    def movement_type(self) -> MovementType: ...

    @abstractmethod
    def format(self, firmware: FirmwareVersion) -> str:
        """Render this point as one command line (no trailing newline)."""

    @classmethod
    def create(
        cls,
        movement_type: Any,
        position: Any = None,
        joints: Any = None,
        speed: Any = None,
        acceleration: Any = None,
    ) -> Result[MotionPoint]:
        """Build a validated point from raw document fields.

        Parameters
        ----------
        movement_type : str
            ``"linear"`` or ``"joint"`` (any case).
        position : sequence of 6 numbers | None
            Required for linear moves, ignored for joint moves.
        joints : sequence of 6 numbers | None
            Required for joint moves, ignored for linear moves.
        speed : int
            Raw speed, see :class:`Speed`.
        acceleration : int | None
            Raw acceleration; ``None`` selects ``Acceleration.default()``.

        Returns
        -------
        Result[MotionPoint]
            The first failure encountered, or the new point.
        """
        kind = MovementType.parse(movement_type)
        if not kind.ok:
            return kind

        spd = Speed.create(speed)
        if not spd.ok:
            return spd

        if acceleration is None:
            acc: Result[Acceleration] = Ok(Acceleration.default())
        else:
            acc = Acceleration.create(acceleration)
            if not acc.ok:
                return acc

        if kind.value is MovementType.LINEAR:
            if position is None:
                return fail(
                    ErrorKind.STRUCTURAL, "Linear movement requires position data"
                )
            frame = CoordinateFrame.create(position)
            if not frame.ok:
                return fail(
                    frame.error.kind, f"Invalid position data: {frame.error.message}"
                )
            return Ok(LinearPoint(spd.value, acc.value, frame.value))

        if joints is None:
            return fail(ErrorKind.STRUCTURAL, "Joint movement requires joints data")
        angles = JointAngleSet.create(joints)
        if not angles.ok:
            return angles
        return Ok(JointPoint(spd.value, acc.value, angles.value))


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LinearPoint(MotionPoint):
    """Straight-line Cartesian move of the tool to ``frame``."""

    frame: CoordinateFrame

    def __post_init__(self) -> None:
        _require_types(self, CoordinateFrame, self.frame)

    @property
    def movement_type(self) -> MovementType:
        return MovementType.LINEAR

    def format(self, firmware: FirmwareVersion) -> str:
        speed = firmware.speed_syntax.render(self.speed.value)
        return (
            f"{LINEAR_COMMAND} {self.frame.format()} {speed} "
            f"ACC={self.acceleration.value}"
        )


@dataclass(frozen=True, slots=True)
class JointPoint(MotionPoint):
    """Joint-space move to ``joints``; the path shape is not guaranteed."""

    joints: JointAngleSet

    def __post_init__(self) -> None:
        _require_types(self, JointAngleSet, self.joints)

    @property
    def movement_type(self) -> MovementType:
        return MovementType.JOINT

    def format(self, firmware: FirmwareVersion) -> str:
        speed = firmware.speed_syntax.render(self.speed.value)
        return (
            f"{JOINT_COMMAND} {self.joints.format()} {speed}% "
            f"ACC={self.acceleration.value}"
        )


def _require_types(point: MotionPoint, payload_type: type, payload: Any) -> None:
    """Reject hand-built points whose fields are raw primitives."""
    if not isinstance(point.speed, Speed):
        raise TypeError(f"speed must be a Speed, got {type(point.speed).__name__}")
    if not isinstance(point.acceleration, Acceleration):
        raise TypeError(
            f"acceleration must be an Acceleration, "
            f"got {type(point.acceleration).__name__}"
        )
    if not isinstance(payload, payload_type):
        raise TypeError(
            f"{type(point).__name__} payload must be a {payload_type.__name__}, "
            f"got {type(payload).__name__}"
        )
