"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Organization / repository lookups
    @abstractmethod
    async def get_organization(self) -> Any:
        """Get the organization the client is scoped to."""
        pass

    @abstractmethod
    async def get_repository(self) -> Any:
        """Get a repository."""
        pass

    @abstractmethod
    async def get_branch(self, branch_name: str) -> Any:
        """Get a branch of a repository."""
        pass

    @abstractmethod
    async def get_branch_sha(self, branch_name: str) -> str:
        """Resolve a branch to the SHA of its head commit."""
        pass

    # Tag Operations
    @abstractmethod
    async def get_tag_sha(self, tag_name: str) -> str:
        """Resolve a tag reference to the SHA it points at."""
        pass

    @abstractmethod
    async def tag_exists(self, tag_name: str) -> bool:
        """Check whether a tag reference exists."""
        pass

    @abstractmethod
    async def create_tag(self, tag_name: str, sha: str) -> Any:
        """Create a tag reference pointing at a commit."""
        pass

    @abstractmethod
    async def delete_tag(self, tag_name: str) -> None:
        """Delete a tag reference."""
        pass

    @abstractmethod
    async def list_tags(self, per_page: int = 100) -> list[Any]:
        """List all tags for a repository."""
        pass

    # Release Operations
    @abstractmethod
    async def create_release(
        self,
        tag_name: str,
        target_commitish: str,
        name: str,
        body: str,
        draft: bool = False,
        prerelease: bool = False,
    ) -> Any:
        """Create a release bound to a tag."""
        pass

    @abstractmethod
    async def list_releases(self, per_page: int = 100) -> list[Any]:
        """List all releases for a repository."""
        pass

    @abstractmethod
    async def delete_release(self, release_id: int) -> None:
        """Delete a release by its identifier."""
        pass

    # Commit Operations
    @abstractmethod
    async def compare_commits(self, base: str, head: str, per_page: int = 100) -> list[dict[str, Any]]:
        """List the commits between two refs."""
        pass

    @abstractmethod
    async def list_commits(self, sha: str | None = None, per_page: int = 100) -> list[dict[str, Any]]:
        """List the commits reachable from a ref."""
        pass
