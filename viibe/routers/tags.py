# viibe/routers/tags.py
"""
Tag endpoints.

POST /v1/tags/parse     - Split raw tags into hard/soft
POST /v1/tags/normalize - Coerce string/list/structured tags into hard/soft
POST /v1/tags/sanitize  - Screen tags against the safety rules
GET  /v1/tags/validate  - As-you-type validation of one tag field
"""

import logging
from dataclasses import asdict

from cachetools import TTLCache
from fastapi import APIRouter, Query

from viibe.constants import CacheConfig
from viibe.schemas.tags import (
    NormalizeTagsRequest,
    ParsedTag,
    ParseTagsRequest,
    ParseTagsResponse,
    SanitizeTagsRequest,
    SanitizeTagsResponse,
    TagArraysResponse,
    TagSuggestionModel,
    ValidateTagResponse,
)
from viibe.services.tag_parser import normalize_tags, parse_tags
from viibe.services.tag_sanitizer import get_tag_sanitizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/tags", tags=["tags"])

# Validation runs on every keystroke; identical inputs are served from cache
_validate_cache: TTLCache = TTLCache(
    maxsize=CacheConfig.VALIDATE_MAX_ENTRIES,
    ttl=CacheConfig.VALIDATE_TTL_SECONDS,
)


def invalidate_validate_cache():
    """Clear cached validation responses. Call after the rule tables change."""
    _validate_cache.clear()


@router.post("/parse", response_model=ParseTagsResponse)
def parse(payload: ParseTagsRequest) -> ParseTagsResponse:
    """
    Parse a comma-separated tag string.

    Quoted ("Reid") and @-prefixed (@Reid) tags are hard and must appear
    verbatim in generated lines. Everything else is soft.
    """
    tags = parse_tags(payload.raw)
    return ParseTagsResponse(
        tags=[ParsedTag(text=t.text, hard=t.hard) for t in tags],
        hard=[t.text for t in tags if t.hard],
        soft=[t.text for t in tags if not t.hard],
    )


@router.post("/normalize", response_model=TagArraysResponse)
def normalize(payload: NormalizeTagsRequest) -> TagArraysResponse:
    arrays = normalize_tags(payload.tags)
    return TagArraysResponse(hard=arrays.hard, soft=arrays.soft)


@router.post("/sanitize", response_model=SanitizeTagsResponse)
def sanitize(payload: SanitizeTagsRequest) -> SanitizeTagsResponse:
    """
    Screen tags before generation.

    Every input tag is returned exactly once: either in safe_tags or as the
    original_tag of a suggestion.
    """
    result = get_tag_sanitizer().sanitize_tag_list(payload.tags)
    if result.suggestions:
        logger.info(f"Flagged {len(result.suggestions)}/{len(payload.tags)} tags")
    return SanitizeTagsResponse(
        safe_tags=result.safe_tags,
        suggestions=[TagSuggestionModel(**asdict(s)) for s in result.suggestions],
    )


@router.get("/validate", response_model=ValidateTagResponse)
def validate(
    input: str = Query("", max_length=500, description="Current value of the tag field"),
) -> ValidateTagResponse:
    if input in _validate_cache:
        return _validate_cache[input]

    validation = get_tag_sanitizer().validate_tag_input(input)
    response = ValidateTagResponse(**asdict(validation))
    _validate_cache[input] = response
    return response
