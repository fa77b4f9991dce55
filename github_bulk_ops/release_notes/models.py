"""Data models for release notes generation."""

from dataclasses import dataclass
from enum import Enum


class CommitCategory(str, Enum):
    """Release notes section a commit is filed under."""

    FEATURE = "feature"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    CHORE = "chore"
    OTHER = "other"

    @property
    def section_title(self) -> str:
        """Heading used for this category's section."""
        return CATEGORY_TITLES[self]


# Sections are always emitted in this order.
CATEGORY_ORDER: tuple[CommitCategory, ...] = (
    CommitCategory.FEATURE,
    CommitCategory.FIX,
    CommitCategory.DOCS,
    CommitCategory.STYLE,
    CommitCategory.REFACTOR,
    CommitCategory.TEST,
    CommitCategory.CHORE,
    CommitCategory.OTHER,
)

CATEGORY_TITLES: dict[CommitCategory, str] = {
    CommitCategory.FEATURE: "Features",
    CommitCategory.FIX: "Fixes",
    CommitCategory.DOCS: "Documentation",
    CommitCategory.STYLE: "Styling",
    CommitCategory.REFACTOR: "Refactoring",
    CommitCategory.TEST: "Testing",
    CommitCategory.CHORE: "Maintenance",
    CommitCategory.OTHER: "Other",
}

# "feat" is the common spelling of the feature prefix.
COMMIT_TYPE_ALIASES: dict[str, CommitCategory] = {
    "feat": CommitCategory.FEATURE,
}


@dataclass(frozen=True)
class CategorizedCommit:
    """A single commit summary filed under a release notes category."""

    category: CommitCategory
    description: str
    author: str
    scope: str | None = None

    def to_markdown(self) -> str:
        """Render the commit as a Markdown list entry."""
        if self.scope:
            return f"- {self.description} ({self.scope}) by @{self.author}"
        return f"- {self.description} by @{self.author}"
