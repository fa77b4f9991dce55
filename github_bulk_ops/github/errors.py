"""Error taxonomy shared by every batch operation.

Provider failures are translated into these exceptions once, at the adapter
boundary, so that orchestration code only ever branches on `ErrorKind`.
"""

from enum import Enum
from typing import Any

from githubkit.exception import RateLimitExceeded, RequestError, RequestFailed


class ErrorKind(str, Enum):
    """Closed set of failure kinds reported back to callers."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"
    MERGE_CONFLICT = "merge_conflict"
    NETWORK = "network"
    UNKNOWN = "unknown"


class GitHubOpsError(Exception):
    """Base class for all errors raised by github-bulk-ops."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize the error with a human-readable message and optional HTTP status."""
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RequestValidationError(GitHubOpsError):
    """Raised when an operation request is missing fields or is malformed."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize with the list of field errors reported by the schema check."""
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(GitHubOpsError):
    """Raised when the provider answers 404."""

    kind = ErrorKind.NOT_FOUND


class OrganizationNotFoundError(NotFoundError):
    """Raised when the organization does not exist."""

    def __init__(self, organization: str) -> None:
        super().__init__(f"Organization '{organization}' not found", status_code=404)
        self.organization = organization


class RepositoryNotFoundError(NotFoundError):
    """Raised when a repository does not exist in the organization."""

    def __init__(self, organization: str, repository: str) -> None:
        super().__init__(f"Repository {repository} not found in organization {organization}", status_code=404)
        self.organization = organization
        self.repository = repository


class BranchNotFoundError(NotFoundError):
    """Raised when a branch does not exist in a repository."""

    def __init__(self, repository: str, branch: str) -> None:
        super().__init__(f"Branch {branch} not found in {repository}", status_code=404)
        self.repository = repository
        self.branch = branch


class TagNotFoundError(NotFoundError):
    """Raised when a tag does not exist in a repository."""

    def __init__(self, repository: str, tag_name: str) -> None:
        super().__init__(f"Tag {tag_name} not found in {repository}", status_code=404)
        self.repository = repository
        self.tag_name = tag_name


class UnauthorizedError(GitHubOpsError):
    """Raised when the provider rejects the access token."""

    kind = ErrorKind.UNAUTHORIZED


class ConflictError(GitHubOpsError):
    """Raised when the requested object already exists."""

    kind = ErrorKind.CONFLICT


class TagAlreadyExistsError(ConflictError):
    """Raised when a tag of the same name already exists in the repository."""

    def __init__(self, repository: str, tag_name: str) -> None:
        super().__init__(f"Tag {tag_name} already exists in {repository}", status_code=409)
        self.repository = repository
        self.tag_name = tag_name


class MergeConflictError(GitHubOpsError):
    """Raised when merging the upstream branch leaves unresolved conflicts."""

    kind = ErrorKind.MERGE_CONFLICT


class NetworkError(GitHubOpsError):
    """Raised when the provider is unreachable or rate limits the token."""

    kind = ErrorKind.NETWORK


class UnknownError(GitHubOpsError):
    """Raised for any provider failure outside the other categories."""

    kind = ErrorKind.UNKNOWN


class SyncStepError(GitHubOpsError):
    """Raised when a step of the repository sync pipeline fails."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, step: str) -> None:
        super().__init__(message)
        self.step = step


def _response_message(exc: RequestFailed) -> str:
    try:
        data = exc.response.json()
    except Exception:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(exc)


def classify_github_exception(exc: Exception) -> GitHubOpsError:
    """Translate a githubkit exception into the error taxonomy.

    Errors that are already part of the taxonomy are returned unchanged.
    """
    if isinstance(exc, GitHubOpsError):
        return exc
    if isinstance(exc, RateLimitExceeded):
        return NetworkError(f"GitHub rate limit exceeded: {exc}", status_code=exc.response.status_code)
    if isinstance(exc, RequestFailed):
        status_code = exc.response.status_code
        message = _response_message(exc)
        if status_code == 404:
            return NotFoundError(message, status_code=status_code)
        if status_code == 401:
            return UnauthorizedError("Invalid GitHub token or insufficient permissions", status_code=status_code)
        if status_code in (403, 429):
            return NetworkError(f"GitHub refused the request (possibly rate limited): {message}", status_code=status_code)
        if status_code in (409, 422) and "already exists" in message.lower():
            return ConflictError(message, status_code=status_code)
        return UnknownError(f"GitHub request failed with status {status_code}: {message}", status_code=status_code)
    if isinstance(exc, RequestError):
        return NetworkError(f"Unable to reach GitHub: {exc}")
    return UnknownError(str(exc))
