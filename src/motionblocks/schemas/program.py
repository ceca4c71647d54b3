"""
Program schemas - Pydantic models for the exchanged step records
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


StepKindTag = Literal[
    "moveUp", "moveDown", "moveLeft", "moveRight", "moveForward", "moveBackward",
    "rotateX", "rotateY", "rotateZ",
    "scaleUp", "scaleDown",
    "pause",
]


class StepRecord(BaseModel):
    """One animation step as exchanged with the host"""
    model_config = ConfigDict(
        extra="ignore",
        allow_inf_nan=False,
        json_schema_extra={
            "examples": [
                {"id": "step_0_moveUp", "kind": "moveUp", "duration": 1, "distance": 2},
                {"id": "step_1_rotateY", "kind": "rotateY", "duration": 2, "distance": 3.141592653589793},
                {"id": "step_2_scaleUp", "kind": "scaleUp", "duration": 1, "scale": 1.5},
            ]
        },
    )

    id: str = Field(description="Step id (not stable across recompilations unless positional ids are used)")
    kind: StepKindTag = Field(description="Step tag, e.g. 'moveUp' or 'pause'")
    duration: float = Field(description="Duration in seconds")
    distance: Optional[float] = Field(None, description="Move distance, or rotation in radians")
    scale: Optional[float] = Field(None, description="Scale factor")

    @model_validator(mode="after")
    def validate_kind_fields(self):
        uses_distance = self.kind.startswith(("move", "rotate"))
        uses_scale = self.kind.startswith("scale")
        if uses_distance and self.distance is None:
            raise ValueError(f"distance is required for {self.kind}")
        if uses_scale and self.scale is None:
            raise ValueError(f"scale is required for {self.kind}")
        if not uses_distance and self.distance is not None:
            raise ValueError(f"distance is not allowed for {self.kind}")
        if not uses_scale and self.scale is not None:
            raise ValueError(f"scale is not allowed for {self.kind}")
        return self


ProgramRecords = TypeAdapter(List[StepRecord])
