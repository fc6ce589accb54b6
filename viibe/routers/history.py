# viibe/routers/history.py
"""
Duplicate history endpoints.

POST   /v1/history/check - Flag lines that repeat recent history
POST   /v1/history       - Record generated lines
DELETE /v1/history       - Clear all history (requires X-API-Key)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from viibe.auth import require_admin_key
from viibe.schemas.history import (
    DuplicateCheckResponse,
    HistoryAddResponse,
    HistoryClearResponse,
    HistoryLinesRequest,
)
from viibe.services.duplicate_detector import DuplicateDetector, get_duplicate_detector

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/history", tags=["history"])


def get_detector() -> DuplicateDetector:
    """FastAPI dependency; override in tests to inject a store."""
    return get_duplicate_detector()


@router.post("/check", response_model=DuplicateCheckResponse)
def check_duplicates(
    payload: HistoryLinesRequest,
    detector: DuplicateDetector = Depends(get_detector),
) -> DuplicateCheckResponse:
    """
    Flag lines that are near-copies of recent lines in the same
    category/subcategory. Unreadable history counts as empty.
    """
    result = detector.check_for_duplicates(payload.lines, payload.category, payload.subcategory)
    return DuplicateCheckResponse(
        has_duplicates=result.has_duplicates,
        duplicate_indices=result.duplicate_indices,
    )


@router.post("", response_model=HistoryAddResponse)
def add_history(
    payload: HistoryLinesRequest,
    detector: DuplicateDetector = Depends(get_detector),
) -> HistoryAddResponse:
    total = detector.add_to_history(payload.lines, payload.category, payload.subcategory)
    return HistoryAddResponse(added=len(payload.lines) if total else 0, total=total)


@router.delete("", response_model=HistoryClearResponse)
def clear_history(
    detector: DuplicateDetector = Depends(get_detector),
    _: None = Depends(require_admin_key),
) -> HistoryClearResponse:
    if not detector.clear_history():
        raise HTTPException(status_code=503, detail="History store unavailable")
    logger.info("Duplicate history cleared", extra={"event": "history_cleared"})
    return HistoryClearResponse(status="cleared")
