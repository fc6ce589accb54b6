"""
Business logic services.
"""

from viibe.services.duplicate_detector import DuplicateDetector, get_duplicate_detector
from viibe.services.tag_sanitizer import TagSanitizer, get_tag_sanitizer

__all__ = [
    "DuplicateDetector",
    "get_duplicate_detector",
    "TagSanitizer",
    "get_tag_sanitizer",
]
