"""Dialect rule tables.

Robot- and firmware-specific behaviour is data, not branches:

* ``ROBOT_PROFILES`` maps each supported model name to its limits
  (joint 6 rotation policy, advisory reach).
* ``SPEED_SYNTAX_RULES`` maps firmware thresholds to the speed-term
  syntax.  The rule with the highest threshold not above the firmware
  version wins.

Adding a robot or a firmware syntax change means adding a row here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Robot profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RobotProfile:
    """Limits that depend on the robot model.

    Parameters
    ----------
    model : str
        Exact model name as it appears in input documents.
    joint6_limits_deg : tuple[float, float]
        Inclusive ``(min, max)`` rotation of joint 6 in degrees.
    max_reach_mm : float
        Advisory Cartesian reach (norm of X, Y, Z) in mm.
    """

    model: str
    joint6_limits_deg: tuple[float, float]
    max_reach_mm: float

    def __post_init__(self) -> None:
        lo, hi = self.joint6_limits_deg
        if lo > hi:
            raise ValueError(
                f"joint6_limits_deg min must be <= max, got {self.joint6_limits_deg}"
            )
        if self.max_reach_mm <= 0:
            raise ValueError(
                f"max_reach_mm must be positive, got {self.max_reach_mm}"
            )

    def joint6_allows(self, angle_deg: float) -> bool:
        lo, hi = self.joint6_limits_deg
        return lo <= angle_deg <= hi

    @property
    def joint6_range_label(self) -> str:
        """``"±720°"`` for symmetric limits, ``"[lo°, hi°]"`` otherwise."""
        lo, hi = self.joint6_limits_deg
        if lo == -hi:
            return f"±{hi:g}°"
        return f"[{lo:g}°, {hi:g}°]"


NOVATECH_RT500 = RobotProfile(
    model="NovaTech RT-500",
    joint6_limits_deg=(-720.0, 720.0),
    max_reach_mm=2000.0,
)

ROBOT_PROFILES: dict[str, RobotProfile] = {
    NOVATECH_RT500.model: NOVATECH_RT500,
}


def supported_models() -> tuple[str, ...]:
    return tuple(ROBOT_PROFILES)


# ---------------------------------------------------------------------------
# Joint limits shared by every robot
# ---------------------------------------------------------------------------

JOINT_COUNT = 6
J6_EXTENDED_LIMIT_DEG = 720.0
"""J6 may rotate two full turns either way; J1-J5 are limited mechanically."""

# ---------------------------------------------------------------------------
# Firmware speed syntax
# ---------------------------------------------------------------------------


class SpeedSyntax(Enum):
    """Textual form of the speed term."""

    LEGACY = "SPD({speed})"
    MODERN = "SPD={speed}"

    def render(self, speed: int) -> str:
        return self.value.format(speed=speed)


LEGACY_SYNTAX_CUTOFF: tuple[int, ...] = (3, 1)
"""First firmware version that uses the modern ``SPD=`` syntax."""

SPEED_SYNTAX_RULES: tuple[tuple[tuple[int, ...], SpeedSyntax], ...] = (
    ((0,), SpeedSyntax.LEGACY),
    (LEGACY_SYNTAX_CUTOFF, SpeedSyntax.MODERN),
)


def speed_syntax_for(version: tuple[int, ...]) -> SpeedSyntax:
    """Pick the speed syntax for a numeric firmware version."""
    chosen = SPEED_SYNTAX_RULES[0][1]
    for threshold, syntax in SPEED_SYNTAX_RULES:
        if version >= threshold:
            chosen = syntax
    return chosen
