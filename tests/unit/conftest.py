"""Fixtures for unit tests."""

from types import SimpleNamespace
from typing import Any, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Route structlog through the standard library so caplog sees log events."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


def make_adapter(**overrides: Any) -> MagicMock:
    """Build a repository-scoped adapter double whose provider calls all succeed."""
    adapter = MagicMock()
    adapter.get_organization = AsyncMock(return_value=SimpleNamespace(login="acme"))
    adapter.get_repository = AsyncMock(return_value=SimpleNamespace(name="repo"))
    adapter.get_branch = AsyncMock(return_value=SimpleNamespace(name="main"))
    adapter.get_branch_sha = AsyncMock(return_value="head-sha")
    adapter.get_tag_sha = AsyncMock(return_value="tag-sha")
    adapter.tag_exists = AsyncMock(return_value=False)
    adapter.create_tag = AsyncMock()
    adapter.delete_tag = AsyncMock()
    adapter.list_tags = AsyncMock(return_value=[])
    adapter.create_release = AsyncMock(return_value=SimpleNamespace(id=42, html_url="https://github.com/acme/repo/releases/tag/v1.0.0"))
    adapter.list_releases = AsyncMock(return_value=[])
    adapter.delete_release = AsyncMock()
    adapter.compare_commits = AsyncMock(return_value=[])
    adapter.list_commits = AsyncMock(return_value=[])
    for name, value in overrides.items():
        setattr(adapter, name, value)
    return adapter


def make_commit(message: str, login: str | None = None, author_name: str = "Git Author") -> dict[str, Any]:
    """Build a commit dictionary shaped like the GitHub REST API's commit objects."""
    return {
        "sha": "0" * 40,
        "commit": {"message": message, "author": {"name": author_name}},
        "author": {"login": login} if login else None,
    }


@pytest.fixture
def adapter() -> MagicMock:
    """Repository-scoped adapter double."""
    return make_adapter()


@pytest.fixture
def adapter_builder() -> Any:
    """Factory for adapter doubles, for tests that need one per repository."""
    return make_adapter


@pytest.fixture
def commit_builder() -> Any:
    """Factory for GitHub commit dictionaries."""
    return make_commit
