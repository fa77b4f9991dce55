"""Pre-flight checks run before mutating a repository.

Each check is a single read-only provider call. Only a 404 (or 401, for the
organization check) is translated into a specific error; every other error
propagates unchanged.
"""

import structlog

from github_bulk_ops.github.abc import GitHubClientBase
from github_bulk_ops.github.errors import (
    BranchNotFoundError,
    NotFoundError,
    OrganizationNotFoundError,
    RepositoryNotFoundError,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def validate_access(adapter: GitHubClientBase, organization: str) -> None:
    """Validates that the organization exists and the token can access it.

    Raises:
        OrganizationNotFoundError: If the organization lookup returns 404.
        UnauthorizedError: If the token is rejected.
    """
    try:
        await adapter.get_organization()
    except NotFoundError as exc:
        raise OrganizationNotFoundError(organization) from exc
    logger.info("Successfully authenticated and found organization", organization=organization)


async def validate_repository(adapter: GitHubClientBase, organization: str, repository: str) -> None:
    """Validates that the repository exists within the organization."""
    try:
        await adapter.get_repository()
    except NotFoundError as exc:
        raise RepositoryNotFoundError(organization, repository) from exc


async def validate_branch(adapter: GitHubClientBase, repository: str, branch: str) -> None:
    """Validates that the branch exists in the repository."""
    try:
        await adapter.get_branch(branch)
    except NotFoundError as exc:
        raise BranchNotFoundError(repository, branch) from exc
