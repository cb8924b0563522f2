"""Input document schema.

Shape only: required fields, field types and nesting.  Value semantics
(arity of the six-value arrays, finiteness, safety ranges, supported
robots) belong to :mod:`robot_post.domain`, which reports them with
domain error messages.

Document layout (JSON or YAML)::

    robot: NovaTech RT-500
    firmware_version: "3.2"
    base_frame: [0, 0, 0, 0, 0, 0]
    tool_frame: [0, 0, 100, 0, 0, 0]
    trajectory:
      - {type: linear, position: [500, 200, 300, 0, 90, 0], speed: 100}
      - {type: joint, joints: [0, -45, 90, 0, 45, 0], speed: 50, acceleration: 80}

Validation is strict: ``"100"`` is not a speed and ``3.1`` (a YAML
float) is not a firmware version string.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PointRecord(BaseModel):
    """One raw trajectory entry as it appears in the document."""
    model_config = ConfigDict(strict=True, frozen=True)

    type: str = Field(..., description="Movement type: 'linear' or 'joint'")
    position: Optional[List[float]] = Field(
        None, description="[X, Y, Z, Rx, Ry, Rz] in mm/deg, linear moves"
    )
    joints: Optional[List[float]] = Field(
        None, description="[J1..J6] in degrees, joint moves"
    )
    speed: int = Field(..., description="mm/s (linear) or % of max velocity (joint)")
    acceleration: Optional[int] = Field(
        None, description="Percent; omitted selects the default"
    )


class TrajectoryDocument(BaseModel):
    """Complete post-processor input."""
    model_config = ConfigDict(strict=True, frozen=True)

    robot: str = Field(..., description="Robot model name")
    firmware_version: str = Field(..., description="Dotted firmware version")
    base_frame: List[float] = Field(..., description="Base frame [X, Y, Z, Rx, Ry, Rz]")
    tool_frame: List[float] = Field(..., description="Tool frame [X, Y, Z, Rx, Ry, Rz]")
    trajectory: List[PointRecord] = Field(..., description="Ordered motion points")
