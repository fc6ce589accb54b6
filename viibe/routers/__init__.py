"""
API routers for v1 endpoints.
"""

from viibe.routers.comedians import router as comedians_router
from viibe.routers.history import router as history_router
from viibe.routers.lines import router as lines_router
from viibe.routers.tags import router as tags_router

__all__ = [
    "comedians_router",
    "history_router",
    "lines_router",
    "tags_router",
]
