"""Self-validating scalar value types.

Each type has a single smart constructor, ``create()``, that takes raw
primitive input and returns ``Ok(instance)`` or ``Err(DomainError)``.
The error message names the failed constraint and the offending value.

Instances are frozen.  Constructing one directly with invalid data is a
programming error and raises ``ValueError`` from ``__post_init__``, so an
invalid instance can never be observed downstream.

Units: millimetres for positions, degrees for rotations and joint angles.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from numbers import Real
from typing import Any

from robot_post.domain.result import DomainError, ErrorKind, Ok, Result, fail
from robot_post.domain.rules import (
    J6_EXTENDED_LIMIT_DEG,
    JOINT_COUNT,
    LEGACY_SYNTAX_CUTOFF,
    ROBOT_PROFILES,
    RobotProfile,
    SpeedSyntax,
    speed_syntax_for,
    supported_models,
)

FRAME_AXES = ("X", "Y", "Z", "Rx", "Ry", "Rz")
JOINT_AXES = tuple(f"J{i}" for i in range(1, JOINT_COUNT + 1))

_VERSION_RE = re.compile(r"[0-9]{1,9}(?:\.[0-9]{1,9}){1,3}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _guard(error: DomainError | None) -> None:
    if error is not None:
        raise ValueError(error.message)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def format_value(value: float) -> str:
    """Fixed one-decimal rendering used for every coordinate and joint.

    ``-0.0`` (including values that round to it) is printed as ``0.0``.
    """
    text = f"{value:.1f}"
    return "0.0" if text == "-0.0" else text


def _parse_six(
    values: Any, axes: tuple[str, ...], what: str, item: str
) -> tuple[tuple[float, ...] | None, DomainError | None]:
    """Copy *values* into a tuple of six finite floats, or explain why not."""
    if values is None:
        return None, DomainError(ErrorKind.FORMAT, f"{what} cannot be null")
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        return None, DomainError(
            ErrorKind.FORMAT,
            f"{what} must be a sequence of {len(axes)} numbers, "
            f"got {type(values).__name__}",
        )
    values = list(values)
    if len(values) != len(axes):
        return None, DomainError(
            ErrorKind.FORMAT,
            f"{what} must have {len(axes)} elements [{','.join(axes)}], "
            f"got {len(values)}",
        )
    parsed = []
    for axis, v in zip(axes, values):
        if not _is_number(v):
            return None, DomainError(
                ErrorKind.FORMAT, f"Invalid {item} value for {axis}: {v!r}"
            )
        try:
            number = float(v)
        except OverflowError:
            return None, DomainError(
                ErrorKind.FORMAT,
                f"Invalid {item} value for {axis}: out of floating-point range",
            )
        if not math.isfinite(number):
            return None, DomainError(
                ErrorKind.FORMAT, f"Invalid {item} value for {axis}: {v}"
            )
        parsed.append(number)
    return tuple(parsed), None


# ---------------------------------------------------------------------------
# Robot identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RobotIdentity:
    """One of the supported robot models (see ``rules.ROBOT_PROFILES``)."""

    model: str

    def __post_init__(self) -> None:
        _guard(self._check(self.model))

    @staticmethod
    def _check(model: Any) -> DomainError | None:
        if not isinstance(model, str) or model not in ROBOT_PROFILES:
            shown = "" if model is None else model
            return DomainError(
                ErrorKind.STRUCTURAL,
                f"Unsupported robot model: {shown}. "
                f"Supported models: {', '.join(supported_models())}",
            )
        return None

    @classmethod
    def create(cls, model: Any) -> Result[RobotIdentity]:
        error = cls._check(model)
        if error is not None:
            return fail(error.kind, error.message)
        return Ok(cls(model))

    @property
    def profile(self) -> RobotProfile:
        return ROBOT_PROFILES[self.model]

    def __str__(self) -> str:
        return self.model


# ---------------------------------------------------------------------------
# Firmware version
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class FirmwareVersion:
    """Numeric dotted firmware version (``major.minor[.patch[.build]]``).

    Ordering and equality use the numeric value only, so ``"3.1"``,
    ``"03.1"`` and ``"3.1.0"`` compare equal.  ``text`` keeps the string
    as given.
    """

    version: tuple[int, ...] = field(compare=False)
    text: str = field(compare=False)
    # version without trailing zero components
    _key: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not 2 <= len(self.version) <= 4 or any(
            not isinstance(p, int) or p < 0 for p in self.version
        ):
            raise ValueError(
                f"Invalid firmware version components: {self.version!r}"
            )
        key = list(self.version)
        while key and key[-1] == 0:
            key.pop()
        object.__setattr__(self, "_key", tuple(key))

    @classmethod
    def create(cls, text: Any) -> Result[FirmwareVersion]:
        if not isinstance(text, str) or not _VERSION_RE.fullmatch(text):
            shown = "" if text is None else text
            return fail(
                ErrorKind.FORMAT, f"Invalid firmware version format: {shown}"
            )
        version = tuple(int(part) for part in text.split("."))
        return Ok(cls(version, text))

    @property
    def major(self) -> int:
        return self.version[0]

    @property
    def minor(self) -> int:
        return self.version[1]

    @property
    def patch(self) -> int:
        return self.version[2] if len(self.version) > 2 else 0

    @property
    def uses_legacy_syntax(self) -> bool:
        """True for firmware older than 3.1 (``SPD(v)`` speed syntax)."""
        return self.version < LEGACY_SYNTAX_CUTOFF

    @property
    def speed_syntax(self) -> SpeedSyntax:
        return speed_syntax_for(self.version)

    def __str__(self) -> str:
        return self.text


# ---------------------------------------------------------------------------
# Speed / acceleration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Speed:
    """Commanded speed, an integer in ``(0, MAX]``.

    Linear moves read it as mm/s, joint moves as percent of max velocity.
    """

    MAX = 10000

    value: int

    def __post_init__(self) -> None:
        _guard(self._check(self.value))

    @classmethod
    def _check(cls, value: Any) -> DomainError | None:
        if not isinstance(value, int) or isinstance(value, bool):
            return DomainError(
                ErrorKind.FORMAT, f"Speed must be an integer, got: {value!r}"
            )
        if value <= 0:
            return DomainError(
                ErrorKind.RANGE,
                f"Speed must be positive for safety reasons, got: {value}",
            )
        if value > cls.MAX:
            return DomainError(
                ErrorKind.RANGE,
                f"Speed {value} exceeds maximum safe limit ({cls.MAX})",
            )
        return None

    @classmethod
    def create(cls, value: Any) -> Result[Speed]:
        error = cls._check(value)
        if error is not None:
            return fail(error.kind, error.message)
        return Ok(cls(value))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Acceleration:
    """Acceleration as a percentage in ``[MIN, MAX]``."""

    DEFAULT = 50
    MIN = 10
    MAX = 100

    value: int

    def __post_init__(self) -> None:
        _guard(self._check(self.value))

    @classmethod
    def _check(cls, value: Any) -> DomainError | None:
        if not isinstance(value, int) or isinstance(value, bool):
            return DomainError(
                ErrorKind.FORMAT,
                f"Acceleration must be an integer, got: {value!r}",
            )
        if not cls.MIN <= value <= cls.MAX:
            return DomainError(
                ErrorKind.RANGE,
                f"Acceleration must be between {cls.MIN}-{cls.MAX}%, got: {value}",
            )
        return None

    @classmethod
    def create(cls, value: Any) -> Result[Acceleration]:
        error = cls._check(value)
        if error is not None:
            return fail(error.kind, error.message)
        return Ok(cls(value))

    @classmethod
    def default(cls) -> Acceleration:
        return cls(cls.DEFAULT)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# Six-value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CoordinateFrame:
    """6-DOF pose ``[X, Y, Z, Rx, Ry, Rz]`` in mm / degrees.

    The input sequence is copied into a tuple of floats, so later changes
    to the caller's list do not reach the frame.
    """

    coordinates: tuple[float, ...]

    def __post_init__(self) -> None:
        coords, error = self._parse(self.coordinates)
        _guard(error)
        object.__setattr__(self, "coordinates", coords)

    @staticmethod
    def _parse(coordinates: Any):
        return _parse_six(coordinates, FRAME_AXES, "Coordinate frame", "coordinate")

    @classmethod
    def create(cls, coordinates: Any) -> Result[CoordinateFrame]:
        coords, error = cls._parse(coordinates)
        if error is not None:
            return fail(error.kind, error.message)
        return Ok(cls(coords))

    @property
    def x(self) -> float:
        return self.coordinates[0]

    @property
    def y(self) -> float:
        return self.coordinates[1]

    @property
    def z(self) -> float:
        return self.coordinates[2]

    @property
    def rx(self) -> float:
        return self.coordinates[3]

    @property
    def ry(self) -> float:
        return self.coordinates[4]

    @property
    def rz(self) -> float:
        return self.coordinates[5]

    @property
    def reach_mm(self) -> float:
        """Euclidean distance of the XYZ position from the origin."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def check_workspace(self, profile: RobotProfile) -> Result[None]:
        """Advisory reach check against the robot's nominal workspace.

        Returns ``Err`` when the position lies beyond ``profile.max_reach_mm``.
        The caller decides whether that blocks generation.
        """
        reach = self.reach_mm
        if reach > profile.max_reach_mm:
            return fail(
                ErrorKind.RANGE,
                f"Position [{self.x:.1f}, {self.y:.1f}, {self.z:.1f}] exceeds "
                f"{profile.model} workspace (reach: {reach:.1f}mm, "
                f"limit: {profile.max_reach_mm:.1f}mm)",
            )
        return Ok(None)

    def format(self) -> str:
        """``P[x,y,z,rx,ry,rz]`` with one decimal place per value."""
        return f"P[{','.join(format_value(c) for c in self.coordinates)}]"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, slots=True)
class JointAngleSet:
    """Six joint angles ``[J1..J6]`` in degrees.

    J1-J5 are limited mechanically elsewhere.  J6 has the extended
    ``±J6_EXTENDED_LIMIT_DEG`` range.
    """

    angles: tuple[float, ...]

    def __post_init__(self) -> None:
        angles, error = self._parse(self.angles)
        _guard(error)
        object.__setattr__(self, "angles", angles)

    @staticmethod
    def _parse(angles: Any):
        parsed, error = _parse_six(angles, JOINT_AXES, "Joint array", "joint")
        if error is not None:
            return None, error
        j6 = parsed[5]
        if not -J6_EXTENDED_LIMIT_DEG <= j6 <= J6_EXTENDED_LIMIT_DEG:
            return None, DomainError(
                ErrorKind.RANGE,
                f"Joint 6 angle {j6:g}° exceeds extended range "
                f"(±{J6_EXTENDED_LIMIT_DEG:g}°)",
            )
        return parsed, None

    @classmethod
    def create(cls, angles: Any) -> Result[JointAngleSet]:
        parsed, error = cls._parse(angles)
        if error is not None:
            return fail(error.kind, error.message)
        return Ok(cls(parsed))

    @property
    def j6(self) -> float:
        return self.angles[5]

    def format(self) -> str:
        """``J[j1,j2,j3,j4,j5,j6]`` with one decimal place per value."""
        return f"J[{','.join(format_value(a) for a in self.angles)}]"

    def __str__(self) -> str:
        return self.format()
