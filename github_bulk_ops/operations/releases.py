"""Filtered release deletion for a single repository."""

from typing import Any, Iterable

import structlog

from github_bulk_ops.github.abc import GitHubClientBase
from github_bulk_ops.github.errors import GitHubOpsError
from github_bulk_ops.operations.models import ReleaseFilterOptions, ReleaseType, RepositoryOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def release_matches(release: Any, filter_options: ReleaseFilterOptions, release_name: str | None = None) -> bool:
    """Return True when a release passes every configured filter."""
    if filter_options.type == ReleaseType.PRERELEASE and not release.prerelease:
        return False
    if filter_options.type == ReleaseType.RELEASE and release.prerelease:
        return False
    if filter_options.older_than is not None:
        if release.created_at is None or release.created_at >= filter_options.older_than:
            return False
    name: str = release.name or ""
    if filter_options.name_contains is not None and filter_options.name_contains not in name:
        return False
    if release_name is not None and name != release_name:
        return False
    return True


def filter_releases(releases: Iterable[Any], filter_options: ReleaseFilterOptions, release_name: str | None = None) -> list[Any]:
    """Return the releases that pass every filter, keeping their order."""
    return [release for release in releases if release_matches(release, filter_options, release_name)]


async def delete_releases(
    adapter: GitHubClientBase,
    repository: str,
    filter_options: ReleaseFilterOptions,
    release_name: str | None = None,
) -> RepositoryOutcome:
    """Delete every release of a repository that passes the filters.

    Each matching release is attempted even if an earlier deletion failed.
    """
    releases = await adapter.list_releases()
    matching = filter_releases(releases, filter_options, release_name)
    logger.info(
        "Filtered releases for deletion",
        repository=repository,
        total_releases=len(releases),
        matching_releases=len(matching),
        filter_type=filter_options.type.value,
        older_than=filter_options.older_than.isoformat() if filter_options.older_than else None,
        name_contains=filter_options.name_contains,
    )

    deleted: list[str] = []
    failed: list[str] = []
    errors: list[str] = []
    for release in matching:
        label = release.name or release.tag_name
        try:
            await adapter.delete_release(release.id)
        except GitHubOpsError as exc:
            logger.error("Error deleting release", repository=repository, release_id=release.id, error=exc.message)
            failed.append(label)
            errors.append(f"{label}: {exc.message}")
        else:
            deleted.append(label)

    return RepositoryOutcome(
        repository=repository,
        success=not failed,
        error="Failed to delete releases " + "; ".join(errors) if errors else None,
        deleted_count=len(deleted),
        deleted=deleted,
        failed=failed,
    )
