"""
Schemas for the duplicate history endpoints.

POST   /v1/history/check - Flag lines that repeat recent history
POST   /v1/history       - Record generated lines
DELETE /v1/history       - Clear all history (admin)
"""

from pydantic import BaseModel, Field


class HistoryLine(BaseModel):
    text: str = Field(..., description="Generated caption line")


class HistoryLinesRequest(BaseModel):
    lines: list[HistoryLine] = Field(default_factory=list)
    category: str = Field(..., description="Category the lines were generated for")
    subcategory: str = Field(..., description="Subcategory the lines were generated for")


class DuplicateCheckResponse(BaseModel):
    has_duplicates: bool
    duplicate_indices: list[int] = Field(default_factory=list, description="Indices into the request lines")


class HistoryAddResponse(BaseModel):
    added: int
    total: int = Field(..., description="Entries retained after the write")


class HistoryClearResponse(BaseModel):
    status: str
