"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.versions.latest.models import (
    GitRef,
    OrganizationFull,
    Release,
    Tag,
)

from github_bulk_ops.github.errors import NotFoundError, classify_github_exception

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_pat_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])
T = TypeVar("T")


def translate_github_errors(func: F) -> F:
    """Decorator translating githubkit exceptions into the github-bulk-ops error taxonomy."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            translated = classify_github_exception(exc)
            if translated is exc:
                raise
            logger.debug(
                "GitHub request failed",
                function=func.__name__,
                error_kind=translated.kind.value,
                status_code=translated.status_code,
            )
            raise translated from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library.

    An adapter is scoped to an organization and, optionally, one repository.
    Repository-scoped adapters created with `for_repository` share the
    underlying client of their parent.
    """

    def __init__(self, client: GitHubClient, owner: str, repo_name: str | None = None) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    def create(cls, owner: str, github_pat_token: str, github_api_url: str = "https://api.github.com") -> Self:
        """Create a new organization-scoped GitHub client adapter.

        Args:
            owner: Organization that owns the repositories
            github_pat_token: Personal access token forwarded by the caller
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        logger.info("Creating client for GitHub instance and organization", github_api_url=github_api_url, owner=owner)
        client = get_github_pat_client(github_pat_token=github_pat_token, github_api_url=github_api_url)
        return cls(client, owner)

    def for_repository(self, repo_name: str) -> Self:
        """Return an adapter scoped to one repository that shares this adapter's client."""
        return type(self)(self.client, self.owner, repo_name)

    @property
    def repo(self) -> str:
        """Name of the repository this adapter is scoped to."""
        if self.repo_name is None:
            raise RuntimeError("This operation requires a repository-scoped adapter; use for_repository() first.")
        return self.repo_name

    async def _collect_pages(self, fetch_page: Callable[[int], Awaitable[list[T]]], per_page: int, what: str) -> list[T]:
        """Call fetch_page for successive pages until a short or empty page is returned."""
        items: list[T] = []
        page: int = 1
        while True:
            logger.debug(f"Fetching {what} page {page}", owner=self.owner, repo=self.repo_name)
            page_items = await fetch_page(page)
            if not page_items:
                break
            items.extend(page_items)
            if len(page_items) < per_page:
                break
            page += 1
        return items

    # Organization / repository lookups
    @translate_github_errors
    async def get_organization(self) -> OrganizationFull:
        """Get the organization the adapter is scoped to."""
        response: Response[OrganizationFull] = await self.client.rest.orgs.async_get(org=self.owner)
        return response.parsed_data

    @translate_github_errors
    async def get_repository(self) -> Any:
        """Get the repository for the current adapter."""
        response = await self.client.rest.repos.async_get(owner=self.owner, repo=self.repo)
        return response.parsed_data

    @translate_github_errors
    async def get_branch(self, branch_name: str) -> Any:
        """Get a branch of the repository."""
        response = await self.client.rest.repos.async_get_branch(owner=self.owner, repo=self.repo, branch=branch_name)
        return response.parsed_data

    @translate_github_errors
    async def get_branch_sha(self, branch_name: str) -> str:
        """Resolve a branch to the SHA of its head commit through its git ref."""
        response: Response[GitRef] = await self.client.rest.git.async_get_ref(owner=self.owner, repo=self.repo, ref=f"heads/{branch_name}")
        return response.parsed_data.object_.sha

    # Tag Operations
    @translate_github_errors
    async def get_tag_sha(self, tag_name: str) -> str:
        """Resolve a tag reference to the SHA it points at."""
        response: Response[GitRef] = await self.client.rest.git.async_get_ref(owner=self.owner, repo=self.repo, ref=f"tags/{tag_name}")
        return response.parsed_data.object_.sha

    async def tag_exists(self, tag_name: str) -> bool:
        """Check whether a tag reference exists; a 404 means it does not."""
        try:
            await self.get_tag_sha(tag_name)
        except NotFoundError:
            return False
        return True

    @translate_github_errors
    async def create_tag(self, tag_name: str, sha: str) -> GitRef:
        """Create a tag reference pointing at a commit."""
        response: Response[GitRef] = await self.client.rest.git.async_create_ref(
            owner=self.owner,
            repo=self.repo,
            ref=f"refs/tags/{tag_name}",
            sha=sha,
        )
        logger.info("Created tag", repo=self.repo, tag=tag_name, sha=sha)
        return response.parsed_data

    @translate_github_errors
    async def delete_tag(self, tag_name: str) -> None:
        """Delete a tag reference."""
        await self.client.rest.git.async_delete_ref(owner=self.owner, repo=self.repo, ref=f"tags/{tag_name}")
        logger.info("Deleted tag", repo=self.repo, tag=tag_name)

    @translate_github_errors
    async def list_tags(self, per_page: int = 100) -> list[Tag]:
        """List all tags for a repository, handling pagination."""

        async def _fetch_page(page: int) -> list[Tag]:
            response: Response[list[Tag]] = await self.client.rest.repos.async_list_tags(
                owner=self.owner, repo=self.repo, per_page=per_page, page=page
            )
            return response.parsed_data

        tags = await self._collect_pages(_fetch_page, per_page, "tags")
        logger.debug("Fetched all tags", repo=self.repo, total_tags=len(tags))
        return tags

    # Release Operations
    @translate_github_errors
    async def create_release(
        self,
        tag_name: str,
        target_commitish: str,
        name: str,
        body: str,
        draft: bool = False,
        prerelease: bool = False,
    ) -> Release:
        """Create a release bound to a tag."""
        response: Response[Release] = await self.client.rest.repos.async_create_release(
            owner=self.owner,
            repo=self.repo,
            tag_name=tag_name,
            target_commitish=target_commitish,
            name=name,
            body=body,
            draft=draft,
            prerelease=prerelease,
        )
        logger.info("Created release", repo=self.repo, tag=tag_name, release_id=response.parsed_data.id)
        return response.parsed_data

    @translate_github_errors
    async def list_releases(self, per_page: int = 100) -> list[Release]:
        """List all releases for a repository, handling pagination."""

        async def _fetch_page(page: int) -> list[Release]:
            response: Response[list[Release]] = await self.client.rest.repos.async_list_releases(
                owner=self.owner, repo=self.repo, per_page=per_page, page=page
            )
            return response.parsed_data

        releases = await self._collect_pages(_fetch_page, per_page, "releases")
        logger.info(f"Total releases found: {len(releases)}", repo=self.repo)
        return releases

    @translate_github_errors
    async def delete_release(self, release_id: int) -> None:
        """Delete a release by its identifier."""
        await self.client.rest.repos.async_delete_release(owner=self.owner, repo=self.repo, release_id=release_id)
        logger.info("Deleted release", repo=self.repo, release_id=release_id)

    # Commit Operations
    @translate_github_errors
    async def compare_commits(self, base: str, head: str, per_page: int = 100) -> list[dict[str, Any]]:
        """List the commits between two refs as raw dictionaries, handling pagination.

        Raw JSON is returned so that both the git author and the linked GitHub
        user of each commit are available to callers.
        """

        async def _fetch_page(page: int) -> list[dict[str, Any]]:
            response = await self.client.rest.repos.async_compare_commits(
                owner=self.owner, repo=self.repo, basehead=f"{base}...{head}", per_page=per_page, page=page
            )
            return response.json().get("commits", [])

        commits = await self._collect_pages(_fetch_page, per_page, "compared commits")
        logger.debug("Compared commits", repo=self.repo, base=base, head=head, total_commits=len(commits))
        return commits

    @translate_github_errors
    async def list_commits(self, sha: str | None = None, per_page: int = 100) -> list[dict[str, Any]]:
        """List the commits reachable from a ref, handling pagination."""

        async def _fetch_page(page: int) -> list[dict[str, Any]]:
            params: dict[str, Any] = {"per_page": per_page, "page": page}
            if sha is not None:
                params["sha"] = sha
            response = await self.client.rest.repos.async_list_commits(owner=self.owner, repo=self.repo, **params)
            return response.json()

        commits = await self._collect_pages(_fetch_page, per_page, "commits")
        logger.info("Fetched all commits", owner=self.owner, repo=self.repo, total_commits=len(commits))
        return commits


