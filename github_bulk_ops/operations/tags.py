"""Tag and release creation and tag deletion for a single repository."""

import structlog

from github_bulk_ops.github.abc import GitHubClientBase
from github_bulk_ops.github.errors import (
    BranchNotFoundError,
    GitHubOpsError,
    NotFoundError,
    RepositoryNotFoundError,
    TagAlreadyExistsError,
    TagNotFoundError,
)
from github_bulk_ops.operations.models import RepositoryOutcome
from github_bulk_ops.release_notes import ReleaseNotesGenerator
from github_bulk_ops.utils.constants import DELETE_ALL_TAGS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def find_previous_tag(adapter: GitHubClientBase, tag_name: str) -> str | None:
    """Return the most recent tag other than tag_name, if the repository has one.

    The previous tag only bounds the release notes range, so a failed tag
    listing is logged and treated as "no previous tag".
    """
    try:
        tags = await adapter.list_tags()
    except GitHubOpsError as exc:
        logger.warning("Could not list tags to find the previous tag", tag=tag_name, error_kind=exc.kind.value, error=exc.message)
        return None
    for tag in tags:
        if tag.name != tag_name:
            return tag.name
    return None


async def create_tag_and_release(
    adapter: GitHubClientBase,
    organization: str,
    repository: str,
    tag_name: str,
    branch: str,
    notes_generator: ReleaseNotesGenerator | None = None,
) -> RepositoryOutcome:
    """Create a tag at the head of branch and publish a release with generated notes.

    Raises:
        RepositoryNotFoundError: If the repository does not exist.
        BranchNotFoundError: If the branch ref cannot be found.
        TagAlreadyExistsError: If a tag of the same name already exists.
    """
    logger.info("Processing repository", repository=repository, tag=tag_name, branch=branch)
    try:
        await adapter.get_repository()
    except NotFoundError as exc:
        raise RepositoryNotFoundError(organization, repository) from exc

    try:
        branch_sha = await adapter.get_branch_sha(branch)
    except NotFoundError as exc:
        raise BranchNotFoundError(repository, branch) from exc

    if await adapter.tag_exists(tag_name):
        logger.warning("Tag already exists, skipping", repository=repository, tag=tag_name)
        raise TagAlreadyExistsError(repository, tag_name)

    await adapter.create_tag(tag_name, branch_sha)

    previous_tag = await find_previous_tag(adapter, tag_name)
    if previous_tag:
        logger.info("Previous tag found", repository=repository, previous_tag=previous_tag)

    generator = notes_generator or ReleaseNotesGenerator(adapter)
    release_notes = await generator.generate(previous_tag, branch_sha)

    release = await adapter.create_release(
        tag_name=tag_name,
        target_commitish=branch_sha,
        name=tag_name,
        body=release_notes,
        draft=False,
        prerelease=False,
    )
    logger.info("Release created", repository=repository, tag=tag_name, release_id=release.id)
    return RepositoryOutcome(
        repository=repository,
        success=True,
        tag_sha=branch_sha,
        release_id=release.id,
        release_url=release.html_url,
    )


async def delete_all_tags(adapter: GitHubClientBase, repository: str) -> RepositoryOutcome:
    """Delete every tag of a repository, attempting each one even if others fail."""
    tags = await adapter.list_tags()
    deleted: list[str] = []
    failed: list[str] = []
    errors: list[str] = []
    for tag in tags:
        try:
            await adapter.delete_tag(tag.name)
        except GitHubOpsError as exc:
            logger.error("Error deleting tag", repository=repository, tag=tag.name, error=exc.message)
            failed.append(tag.name)
            errors.append(f"{tag.name}: {exc.message}")
        else:
            deleted.append(tag.name)

    logger.info("Deleted tags", repository=repository, deleted_count=len(deleted), failed_count=len(failed))
    return RepositoryOutcome(
        repository=repository,
        success=not failed,
        error="Failed to delete tags " + "; ".join(errors) if errors else None,
        deleted_count=len(deleted),
        deleted=deleted,
        failed=failed,
    )


async def delete_tag(adapter: GitHubClientBase, repository: str, tag_name: str) -> RepositoryOutcome:
    """Delete one tag, or every tag when tag_name is "all".

    A missing tag is reported as a failed outcome rather than raised, so the
    rest of the batch is unaffected.
    """
    if tag_name == DELETE_ALL_TAGS:
        return await delete_all_tags(adapter, repository)

    if not await adapter.tag_exists(tag_name):
        logger.warning("Tag not found", repository=repository, tag=tag_name)
        return RepositoryOutcome.from_error(repository, TagNotFoundError(repository, tag_name), deleted_count=0)

    await adapter.delete_tag(tag_name)
    logger.info("Successfully deleted tag", repository=repository, tag=tag_name)
    return RepositoryOutcome(repository=repository, success=True, deleted_count=1, deleted=[tag_name])
