# viibe/routers/lines.py
"""
Generated-line post-processing endpoints.

POST /v1/lines/enforce          - Anchor-based hard-tag injection
POST /v1/lines/enforce-fallback - Coverage top-up for fallback lines
POST /v1/lines/strip-soft-echo  - Replace verbatim soft-tag echoes
"""

from fastapi import APIRouter

from viibe.schemas.tags import (
    EnforceLinesRequest,
    EnforceLinesResponse,
    FallbackEnforceRequest,
    FallbackEnforceResponse,
    LinesResponse,
    StripSoftEchoRequest,
)
from viibe.services.hard_tag_enforcer import (
    enforce_hard_tags_post_generation,
    ensure_hard_tags,
    strip_soft_echo,
)

router = APIRouter(prefix="/v1/lines", tags=["lines"])


@router.post("/enforce", response_model=EnforceLinesResponse)
def enforce(payload: EnforceLinesRequest) -> EnforceLinesResponse:
    """
    Inject missing hard tags when too few lines carry them.

    Best effort: a tag is skipped on lines with no verb, conjunction or
    preposition to anchor it.
    """
    enforced = ensure_hard_tags(payload.lines, payload.hard, payload.required)
    return EnforceLinesResponse(lines=enforced, modified=enforced != payload.lines)


@router.post("/enforce-fallback", response_model=FallbackEnforceResponse)
def enforce_fallback(payload: FallbackEnforceRequest) -> FallbackEnforceResponse:
    result = enforce_hard_tags_post_generation(payload.lines, payload.hard_tags, payload.min_tagged_lines)
    return FallbackEnforceResponse(
        enforced_lines=result.enforced_lines,
        was_modified=result.was_modified,
        tag_coverage=result.tag_coverage,
        enforcement_log=result.enforcement_log,
    )


@router.post("/strip-soft-echo", response_model=LinesResponse)
def strip_echo(payload: StripSoftEchoRequest) -> LinesResponse:
    return LinesResponse(lines=strip_soft_echo(payload.lines, payload.soft))
