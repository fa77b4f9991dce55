"""Unit tests for release notes categorization, rendering, and generation."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from github_bulk_ops.release_notes import (
    CategorizedCommit,
    CommitCategory,
    MarkdownWriter,
    ReleaseNotesGenerator,
    categorize_commit,
    group_commits,
)
from github_bulk_ops.release_notes.categorizer import commit_author


def test_categorize_conventional_commit_with_scope(commit_builder: Any) -> None:
    """Test that a scoped feature commit is parsed into its parts."""
    categorized = categorize_commit(commit_builder("feat(api): add endpoint", login="alice"))
    assert categorized == CategorizedCommit(category=CommitCategory.FEATURE, description="add endpoint", author="alice", scope="api")
    assert categorized.to_markdown() == "- add endpoint (api) by @alice"


def test_categorize_uses_first_line_only(commit_builder: Any) -> None:
    """Test that only the summary line of the message is used."""
    categorized = categorize_commit(commit_builder("fix: handle empty body\n\nLonger explanation here.", login="bob"))
    assert categorized.category == CommitCategory.FIX
    assert categorized.to_markdown() == "- handle empty body by @bob"


def test_categorize_non_conventional_commit(commit_builder: Any) -> None:
    """Test that free-form messages are filed under Other."""
    categorized = categorize_commit(commit_builder("randomly formatted", login="bob"))
    assert categorized.category == CommitCategory.OTHER
    assert categorized.to_markdown() == "- randomly formatted by @bob"


def test_categorize_unknown_prefix_is_other(commit_builder: Any) -> None:
    """Test that prefixes outside the known set are not treated as categories."""
    assert categorize_commit(commit_builder("perf: faster", login="carol")).category == CommitCategory.OTHER


def test_commit_author_falls_back_to_git_author(commit_builder: Any) -> None:
    """Test that commits without a linked GitHub user use the git author name."""
    assert commit_author(commit_builder("docs: readme", login=None, author_name="Dana")) == "Dana"
    assert commit_author({"commit": {"message": "x"}}) == "unknown"


def test_render_orders_sections_and_skips_empty(commit_builder: Any) -> None:
    """Test that sections follow the fixed order and empty ones are omitted."""
    commits = [
        commit_builder("randomly formatted", login="bob"),
        commit_builder("fix(core): null check", login="carol"),
        commit_builder("feat(api): add endpoint", login="alice"),
        commit_builder("feat: second feature", login="alice"),
    ]
    notes = MarkdownWriter().render(group_commits(commits))
    assert notes == (
        "# What's Changed\n"
        "\n### Features\n- add endpoint (api) by @alice\n- second feature by @alice\n"
        "\n### Fixes\n- null check (core) by @carol\n"
        "\n### Other\n- randomly formatted by @bob\n"
    )
    assert "### Documentation" not in notes


def test_render_features_before_fixes_before_maintenance(commit_builder: Any) -> None:
    """Test that chore commits are listed after features and fixes regardless of commit order."""
    commits = [
        commit_builder("chore: bump deps", login="bot"),
        commit_builder("fix: typo", login="carol"),
        commit_builder("feature: dark mode", login="alice"),
    ]
    notes = MarkdownWriter().render(group_commits(commits))
    assert notes.index("### Features") < notes.index("### Fixes") < notes.index("### Maintenance")
    for title in ("Documentation", "Styling", "Refactoring", "Testing", "Other"):
        assert f"### {title}" not in notes


def test_render_without_commits() -> None:
    """Test that an empty range renders only the header."""
    assert MarkdownWriter().render(group_commits([])) == "# What's Changed\n"


@pytest.mark.asyncio
async def test_generate_compares_against_previous_tag(commit_builder: Any) -> None:
    """Test that the previous tag bounds the commit range."""
    adapter = MagicMock()
    adapter.compare_commits = AsyncMock(return_value=[commit_builder("feat: shiny", login="alice")])
    adapter.list_commits = AsyncMock()
    notes = await ReleaseNotesGenerator(adapter).generate("v1.0.0", "abc123")
    adapter.compare_commits.assert_awaited_once_with("v1.0.0", "abc123")
    adapter.list_commits.assert_not_awaited()
    assert "### Features\n- shiny by @alice" in notes


@pytest.mark.asyncio
async def test_generate_without_previous_tag_lists_history(commit_builder: Any) -> None:
    """Test that the full history is used when there is no previous tag."""
    adapter = MagicMock()
    adapter.compare_commits = AsyncMock()
    adapter.list_commits = AsyncMock(return_value=[commit_builder("chore: bump", login="bot")])
    notes = await ReleaseNotesGenerator(adapter).generate(None, "abc123")
    adapter.list_commits.assert_awaited_once_with(sha="abc123")
    assert "### Maintenance\n- bump by @bot" in notes


@pytest.mark.asyncio
async def test_generate_falls_back_on_error() -> None:
    """Test that a failed commit fetch yields the placeholder notes."""
    adapter = MagicMock()
    adapter.compare_commits = AsyncMock(side_effect=RuntimeError("boom"))
    notes = await ReleaseNotesGenerator(adapter).generate("v1.0.0", "abc123")
    assert notes == "Release notes for abc123"
