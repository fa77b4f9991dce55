"""Utility modules for shared functionality."""

from .constants import (
    CONVENTIONAL_COMMIT_PATTERN,
    DELETE_ALL_TAGS,
    FALLBACK_RELEASE_NOTES_TEMPLATE,
    RELEASE_NOTES_HEADER,
    SYNC_COMMIT_MESSAGE_TEMPLATE,
)

__all__ = [
    "CONVENTIONAL_COMMIT_PATTERN",
    "DELETE_ALL_TAGS",
    "FALLBACK_RELEASE_NOTES_TEMPLATE",
    "RELEASE_NOTES_HEADER",
    "SYNC_COMMIT_MESSAGE_TEMPLATE",
]
