"""Unit tests for the operations.releases module."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from github_bulk_ops.github.errors import NetworkError
from github_bulk_ops.operations.models import ReleaseFilterOptions, ReleaseType
from github_bulk_ops.operations.releases import delete_releases, filter_releases, release_matches


def _release(release_id: int, name: str, created: datetime, prerelease: bool = False) -> SimpleNamespace:
    return SimpleNamespace(id=release_id, name=name, tag_name=f"tag-{release_id}", prerelease=prerelease, created_at=created)


OLD_BETA = _release(1, "v1.0.0-beta", datetime(2022, 6, 1, tzinfo=timezone.utc), prerelease=True)
OLD_STABLE = _release(2, "v1.0.0", datetime(2022, 7, 1, tzinfo=timezone.utc))
NEW_BETA = _release(3, "v2.0.0-beta", datetime(2023, 6, 1, tzinfo=timezone.utc), prerelease=True)
RELEASES = [OLD_BETA, OLD_STABLE, NEW_BETA]


def test_filters_are_combined() -> None:
    """Test that the cutoff and name filters must both match."""
    options = ReleaseFilterOptions.model_validate({"olderThan": "2023-01-01", "nameContains": "beta"})
    assert filter_releases(RELEASES, options) == [OLD_BETA]


def test_type_filter() -> None:
    """Test that the release type filter separates prereleases from releases."""
    assert filter_releases(RELEASES, ReleaseFilterOptions(type=ReleaseType.PRERELEASE)) == [OLD_BETA, NEW_BETA]
    assert filter_releases(RELEASES, ReleaseFilterOptions(type=ReleaseType.RELEASE)) == [OLD_STABLE]
    assert filter_releases(RELEASES, ReleaseFilterOptions()) == RELEASES


def test_cutoff_is_strict() -> None:
    """Test that a release created exactly at the cutoff is kept."""
    options = ReleaseFilterOptions(older_than=datetime(2022, 7, 1, tzinfo=timezone.utc))
    assert release_matches(OLD_STABLE, options) is False
    assert release_matches(OLD_BETA, options) is True


def test_exact_release_name() -> None:
    """Test that a release name selects only the release with that exact name."""
    assert filter_releases(RELEASES, ReleaseFilterOptions(), release_name="v1.0.0") == [OLD_STABLE]


def test_release_without_name() -> None:
    """Test that an unnamed release never matches a name filter."""
    unnamed = SimpleNamespace(id=4, name=None, tag_name="v0.1", prerelease=False, created_at=None)
    assert release_matches(unnamed, ReleaseFilterOptions(name_contains="v0")) is False
    assert release_matches(unnamed, ReleaseFilterOptions()) is True


@pytest.mark.asyncio
async def test_delete_releases_attempts_every_match() -> None:
    """Test that one failed deletion does not stop the others."""
    adapter = MagicMock()
    adapter.list_releases = AsyncMock(return_value=RELEASES)
    adapter.delete_release = AsyncMock(side_effect=[NetworkError("timeout"), None])
    outcome = await delete_releases(adapter, "repo", ReleaseFilterOptions(type=ReleaseType.PRERELEASE))
    assert adapter.delete_release.await_args_list == [call(1), call(3)]
    assert outcome.success is False
    assert outcome.deleted_count == 1
    assert outcome.deleted == ["v2.0.0-beta"]
    assert outcome.failed == ["v1.0.0-beta"]
    assert "timeout" in (outcome.error or "")


@pytest.mark.asyncio
async def test_delete_releases_nothing_matches() -> None:
    """Test that no matching releases is a successful no-op."""
    adapter = MagicMock()
    adapter.list_releases = AsyncMock(return_value=RELEASES)
    adapter.delete_release = AsyncMock()
    outcome = await delete_releases(adapter, "repo", ReleaseFilterOptions(name_contains="rc"))
    adapter.delete_release.assert_not_awaited()
    assert outcome.success is True
    assert outcome.deleted_count == 0
