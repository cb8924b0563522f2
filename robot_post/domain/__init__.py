"""
Trajectory domain module.

Validated value types, motion points and the trajectory aggregate.  This
vocabulary is the contract between input documents and code generation.

All positions are in millimetres, all rotations and joint angles in degrees.
"""

from robot_post.domain.motion import (
    JointPoint,
    LinearPoint,
    MotionPoint,
    MovementType,
)
from robot_post.domain.result import (
    DomainError,
    Err,
    ErrorKind,
    Ok,
    Result,
    combine,
)
from robot_post.domain.rules import ROBOT_PROFILES, RobotProfile, SpeedSyntax
from robot_post.domain.trajectory import TrajectoryAggregate, check_point_for_robot
from robot_post.domain.values import (
    Acceleration,
    CoordinateFrame,
    FirmwareVersion,
    JointAngleSet,
    RobotIdentity,
    Speed,
)

__all__ = [
    "Acceleration",
    "CoordinateFrame",
    "DomainError",
    "Err",
    "ErrorKind",
    "FirmwareVersion",
    "JointAngleSet",
    "JointPoint",
    "LinearPoint",
    "MotionPoint",
    "MovementType",
    "Ok",
    "ROBOT_PROFILES",
    "Result",
    "RobotIdentity",
    "RobotProfile",
    "Speed",
    "SpeedSyntax",
    "TrajectoryAggregate",
    "check_point_for_robot",
    "combine",
]
