"""
Schemas for comedian assignment.

GET /v1/comedians/assignment/{option_number} - Voice and length bucket for an option
"""

from pydantic import BaseModel, Field


class ComedianStyleModel(BaseModel):
    key: str
    name: str
    length_range: tuple[int, int]
    delivery_pattern: str
    examples: list[str] = Field(default_factory=list)


class ComedianAssignmentResponse(BaseModel):
    option_number: int
    comedian: ComedianStyleModel
    length_bucket: tuple[int, int] = Field(..., description="Inclusive (min, max) characters")
