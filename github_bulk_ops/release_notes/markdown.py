"""Markdown rendering for release notes."""

from github_bulk_ops.utils.constants import RELEASE_NOTES_HEADER

from .models import CATEGORY_ORDER, CategorizedCommit, CommitCategory


class MarkdownWriter:
    """Renders categorized commits as a release notes document."""

    def __init__(self, header: str = RELEASE_NOTES_HEADER) -> None:
        """Initialize with the document header."""
        self.header = header.strip()

    def render(self, grouped: dict[CommitCategory, list[CategorizedCommit]]) -> str:
        """Render one section per non-empty category, in the fixed category order."""
        document = f"{self.header}\n"
        for category in CATEGORY_ORDER:
            entries = grouped.get(category) or []
            if not entries:
                continue
            lines = "\n".join(entry.to_markdown() for entry in entries)
            document += f"\n### {category.section_title}\n{lines}\n"
        return document
