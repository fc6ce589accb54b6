# viibe/routers/comedians.py
"""
Comedian assignment endpoints.

GET /v1/comedians/assignment/{option_number} - Voice and length bucket for an option
"""

from fastapi import APIRouter, Path

from viibe.schemas.comedians import ComedianAssignmentResponse, ComedianStyleModel
from viibe.services.comedian_styles import assign_comedian_to_option

router = APIRouter(prefix="/v1/comedians", tags=["comedians"])


@router.get("/assignment/{option_number}", response_model=ComedianAssignmentResponse)
def get_assignment(
    option_number: int = Path(..., ge=0, description="Zero-based option index"),
) -> ComedianAssignmentResponse:
    """Deterministic: the same option number always gets the same voice."""
    assignment = assign_comedian_to_option(option_number)
    comedian = assignment.comedian
    return ComedianAssignmentResponse(
        option_number=option_number,
        comedian=ComedianStyleModel(
            key=comedian.key,
            name=comedian.name,
            length_range=comedian.length_range,
            delivery_pattern=comedian.delivery_pattern,
            examples=list(comedian.examples),
        ),
        length_bucket=assignment.length_bucket,
    )
