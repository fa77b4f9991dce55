"""Release notes generation for a range of commits."""

from typing import Any

import structlog

from ..github.abc import GitHubClientBase
from ..utils.constants import FALLBACK_RELEASE_NOTES_TEMPLATE
from .categorizer import group_commits
from .markdown import MarkdownWriter

logger = structlog.get_logger(__name__)


class ReleaseNotesGenerator:
    """Generates Markdown release notes from the commits of a repository.

    The generator never raises: when the commit range cannot be fetched, a
    placeholder body is returned so that release creation can proceed.
    """

    def __init__(self, adapter: GitHubClientBase, writer: MarkdownWriter | None = None) -> None:
        """Initialize with a repository-scoped GitHub adapter."""
        self.adapter = adapter
        self.writer = writer or MarkdownWriter()

    async def fetch_commits(self, from_tag: str | None, to_sha: str) -> list[dict[str, Any]]:
        """Fetch the commits between from_tag and to_sha, or all commits reachable from to_sha."""
        if from_tag:
            return await self.adapter.compare_commits(from_tag, to_sha)
        return await self.adapter.list_commits(sha=to_sha)

    async def generate(self, from_tag: str | None, to_sha: str) -> str:
        """Generate release notes for the commits leading up to to_sha.

        Args:
            from_tag: Previous tag bounding the commit range, or None for full history
            to_sha: Commit the new release points at

        Returns:
            Markdown release notes, or a fallback placeholder on failure
        """
        try:
            commits = await self.fetch_commits(from_tag, to_sha)
        except Exception as exc:
            logger.error("Error generating release notes", from_tag=from_tag, to_sha=to_sha, error=str(exc))
            return FALLBACK_RELEASE_NOTES_TEMPLATE.format(sha=to_sha)

        logger.info("Generating release notes", from_tag=from_tag, to_sha=to_sha, commit_count=len(commits))
        return self.writer.render(group_commits(commits))
