"""
Schemas for tag parsing, sanitization and line enforcement endpoints.

POST /v1/tags/parse              - Split raw tags into hard/soft
POST /v1/tags/normalize          - Coerce any tag input into hard/soft arrays
POST /v1/tags/sanitize           - Screen tags against the safety rules
GET  /v1/tags/validate           - As-you-type validation of one tag field
POST /v1/lines/enforce           - Anchor-based hard-tag injection
POST /v1/lines/enforce-fallback  - Coverage top-up for fallback lines
POST /v1/lines/strip-soft-echo   - Replace verbatim soft-tag echoes
"""

from typing import Any

from pydantic import BaseModel, Field

from viibe.constants import TagLimits


class ParseTagsRequest(BaseModel):
    raw: str = Field("", description='Comma-separated tags, e.g. \'"Reid", strong, @Alex\'')


class ParsedTag(BaseModel):
    text: str = Field(..., description="Tag text with @ and wrapping quotes removed")
    hard: bool = Field(..., description="True if the tag must appear verbatim")


class TagArraysResponse(BaseModel):
    hard: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)


class ParseTagsResponse(TagArraysResponse):
    tags: list[ParsedTag] = Field(default_factory=list)


class NormalizeTagsRequest(BaseModel):
    tags: str | list[str] | dict[str, Any] | None = Field(
        None,
        description='Raw string, list of tokens, or {"hard": [...], "soft": [...]}',
    )


class SanitizeTagsRequest(BaseModel):
    tags: list[str] = Field(default_factory=list)


class TagSuggestionModel(BaseModel):
    original_tag: str
    suggested_alternatives: list[str] = Field(..., description="Ranked, first is preferred")
    reason: str
    matched_rule: str = ""
    rule_type: str = "phrase"


class SanitizeTagsResponse(BaseModel):
    safe_tags: list[str] = Field(default_factory=list)
    suggestions: list[TagSuggestionModel] = Field(default_factory=list)


class ValidateTagResponse(BaseModel):
    is_valid: bool
    warning: str | None = None
    suggestions: list[str] | None = None


class EnforceLinesRequest(BaseModel):
    lines: list[str] = Field(default_factory=list)
    hard: list[str] = Field(default_factory=list)
    required: int = Field(TagLimits.REQUIRED_TAGGED_LINES, ge=0)


class EnforceLinesResponse(BaseModel):
    lines: list[str]
    modified: bool


class FallbackEnforceRequest(BaseModel):
    lines: list[str] = Field(default_factory=list)
    hard_tags: list[str] = Field(default_factory=list)
    min_tagged_lines: int = Field(TagLimits.REQUIRED_TAGGED_LINES, ge=0)


class FallbackEnforceResponse(BaseModel):
    enforced_lines: list[str]
    was_modified: bool
    tag_coverage: float = Field(..., description="Percent of lines containing a hard tag")
    enforcement_log: list[str] = Field(default_factory=list)


class StripSoftEchoRequest(BaseModel):
    lines: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)


class LinesResponse(BaseModel):
    lines: list[str]
