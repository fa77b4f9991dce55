"""Release notes generation module."""

from .categorizer import categorize_commit, group_commits
from .generator import ReleaseNotesGenerator
from .markdown import MarkdownWriter
from .models import CATEGORY_ORDER, CategorizedCommit, CommitCategory

__all__ = [
    "CATEGORY_ORDER",
    "CategorizedCommit",
    "CommitCategory",
    "MarkdownWriter",
    "ReleaseNotesGenerator",
    "categorize_commit",
    "group_commits",
]
