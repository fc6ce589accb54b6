"""
Pydantic schemas for API request/response validation.
"""

from viibe.schemas.comedians import ComedianAssignmentResponse, ComedianStyleModel
from viibe.schemas.history import (
    DuplicateCheckResponse,
    HistoryAddResponse,
    HistoryClearResponse,
    HistoryLine,
    HistoryLinesRequest,
)
from viibe.schemas.tags import (
    EnforceLinesRequest,
    EnforceLinesResponse,
    FallbackEnforceRequest,
    FallbackEnforceResponse,
    LinesResponse,
    NormalizeTagsRequest,
    ParsedTag,
    ParseTagsRequest,
    ParseTagsResponse,
    SanitizeTagsRequest,
    SanitizeTagsResponse,
    StripSoftEchoRequest,
    TagArraysResponse,
    TagSuggestionModel,
    ValidateTagResponse,
)

__all__ = [
    "ComedianAssignmentResponse",
    "ComedianStyleModel",
    "DuplicateCheckResponse",
    "HistoryAddResponse",
    "HistoryClearResponse",
    "HistoryLine",
    "HistoryLinesRequest",
    "EnforceLinesRequest",
    "EnforceLinesResponse",
    "FallbackEnforceRequest",
    "FallbackEnforceResponse",
    "LinesResponse",
    "NormalizeTagsRequest",
    "ParsedTag",
    "ParseTagsRequest",
    "ParseTagsResponse",
    "SanitizeTagsRequest",
    "SanitizeTagsResponse",
    "StripSoftEchoRequest",
    "TagArraysResponse",
    "TagSuggestionModel",
    "ValidateTagResponse",
]
