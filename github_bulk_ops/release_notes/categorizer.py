"""Classify commits into release notes categories using conventional commit prefixes."""

from typing import Any, Iterable

from github_bulk_ops.utils.constants import CONVENTIONAL_COMMIT_PATTERN, UNKNOWN_AUTHOR

from .models import CATEGORY_ORDER, COMMIT_TYPE_ALIASES, CategorizedCommit, CommitCategory


def commit_summary(commit: dict[str, Any]) -> str:
    """Return the first line of a commit's message."""
    message: str = (commit.get("commit") or {}).get("message") or ""
    lines = message.strip().splitlines()
    return lines[0].strip() if lines else ""


def commit_author(commit: dict[str, Any]) -> str:
    """Return the GitHub login of a commit's author, falling back to the git author name."""
    github_author = commit.get("author") or {}
    if github_author.get("login"):
        return github_author["login"]
    git_author = (commit.get("commit") or {}).get("author") or {}
    return git_author.get("name") or UNKNOWN_AUTHOR


def categorize_commit(commit: dict[str, Any]) -> CategorizedCommit:
    """File a raw GitHub commit under its release notes category.

    Commits whose summary does not follow the conventional commit format are
    filed under `CommitCategory.OTHER` with their full summary line.
    """
    summary = commit_summary(commit)
    author = commit_author(commit)
    match = CONVENTIONAL_COMMIT_PATTERN.match(summary)
    if match is None:
        return CategorizedCommit(category=CommitCategory.OTHER, description=summary, author=author)

    commit_type = match.group("type")
    category = COMMIT_TYPE_ALIASES.get(commit_type) or CommitCategory(commit_type)
    scope = (match.group("scope") or "").strip() or None
    return CategorizedCommit(category=category, description=match.group("description").strip(), author=author, scope=scope)


def group_commits(commits: Iterable[dict[str, Any]]) -> dict[CommitCategory, list[CategorizedCommit]]:
    """Group commits by category, keeping commit order within each category."""
    grouped: dict[CommitCategory, list[CategorizedCommit]] = {category: [] for category in CATEGORY_ORDER}
    for commit in commits:
        categorized = categorize_commit(commit)
        grouped[categorized.category].append(categorized)
    return grouped
