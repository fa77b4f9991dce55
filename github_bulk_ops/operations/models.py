"""Pydantic models for batch operation requests, per-repository outcomes, and responses."""

from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from github_bulk_ops.github.errors import ErrorKind, GitHubOpsError

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class OperationName(str, Enum):
    """Batch operations, named after the routes callers use to request them."""

    CREATE_TAG = "create-tag"
    DELETE_TAG = "delete-tag"
    SYNC = "merge-conflict"
    DELETE_RELEASES = "delete-releases"


class ReleaseType(str, Enum):
    """Which releases a deletion applies to."""

    ALL = "all"
    PRERELEASE = "prerelease"
    RELEASE = "release"


class ReleaseFilterOptions(BaseModel):
    """Filters applied, combined with logical AND, before deleting releases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: ReleaseType = ReleaseType.ALL
    older_than: datetime | None = Field(default=None, alias="olderThan")
    name_contains: str | None = Field(default=None, alias="nameContains")

    @field_validator("type", mode="before")
    @classmethod
    def accept_filter_type(cls, value: Any) -> Any:
        """Treat the legacy "filter" type as "all", leaving selection to the other filters."""
        if value is None or value == "filter":
            return ReleaseType.ALL
        return value

    @field_validator("older_than", mode="before")
    @classmethod
    def parse_cutoff(cls, value: Any) -> Any:
        """Interpret a bare date (e.g. "2023-01-01") as midnight UTC of that day."""
        if isinstance(value, str) and len(value.strip()) == 10:
            value = date.fromisoformat(value.strip())
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        return value

    @field_validator("older_than")
    @classmethod
    def ensure_timezone(cls, value: datetime | None) -> datetime | None:
        """Assume UTC for naive datetimes so they compare with GitHub timestamps."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class _OperationRequestBase(BaseModel):
    """Fields shared by every batch operation request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    organization: NonEmptyStr = Field(alias="orgName")
    # Duplicates are kept; each entry is processed independently.
    repositories: tuple[NonEmptyStr, ...] = Field(alias="repos", min_length=1)
    access_token: NonEmptyStr = Field(alias="githubToken", repr=False)


class CreateTagRequest(_OperationRequestBase):
    """Create a tag and a release with generated notes in every repository."""

    operation: Literal["create-tag"] = "create-tag"
    tag_name: NonEmptyStr = Field(alias="tagName")
    branch: NonEmptyStr


class DeleteTagRequest(_OperationRequestBase):
    """Delete a tag, or every tag when the tag name is "all", from every repository."""

    operation: Literal["delete-tag"] = "delete-tag"
    tag_name: NonEmptyStr = Field(alias="tagName")


class SyncRequest(_OperationRequestBase):
    """Merge an upstream branch into a local branch of every repository."""

    operation: Literal["merge-conflict"] = "merge-conflict"
    local_branch: NonEmptyStr = Field(alias="localBranch")
    upstream_branch: NonEmptyStr = Field(alias="upstreamBranch")
    # Falls back to the configured default remote name when omitted.
    remote_name: NonEmptyStr | None = Field(default=None, alias="remoteName")
    base_dir: Path | None = Field(default=None, alias="baseDir")


class DeleteReleasesRequest(_OperationRequestBase):
    """Delete the releases matching the filter options from every repository."""

    operation: Literal["delete-releases"] = "delete-releases"
    release_name: str | None = Field(default=None, alias="releaseName")
    filter_options: ReleaseFilterOptions = Field(default_factory=ReleaseFilterOptions, alias="filterOptions")

    @field_validator("filter_options", mode="before")
    @classmethod
    def default_filter_options(cls, value: Any) -> Any:
        """Treat a null filterOptions the same as an absent one."""
        if value is None:
            return ReleaseFilterOptions()
        return value


OperationRequest = Annotated[
    Union[CreateTagRequest, DeleteTagRequest, SyncRequest, DeleteReleasesRequest],
    Field(discriminator="operation"),
]

operation_request_adapter: TypeAdapter[OperationRequest] = TypeAdapter(OperationRequest)


class RepositoryOutcome(BaseModel):
    """Result of applying one operation to one repository."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    repository: str
    success: bool
    error: str | None = None
    error_kind: ErrorKind | None = None

    # create-tag
    tag_sha: str | None = None
    release_id: int | None = None
    release_url: str | None = None

    # delete-tag / delete-releases
    deleted_count: int | None = None
    deleted: list[str] | None = None
    failed: list[str] | None = None

    # merge-conflict
    sync_state: str | None = None

    @classmethod
    def from_error(cls, repository: str, exc: GitHubOpsError, **payload: Any) -> "RepositoryOutcome":
        """Build a failed outcome from an error of the taxonomy."""
        return cls(repository=repository, success=False, error=exc.message, error_kind=exc.kind, **payload)


class BatchResponse(BaseModel):
    """Aggregated response of a batch operation."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    status_code: int
    message: str
    results: list[RepositoryOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[RepositoryOutcome]:
        """Outcomes of the repositories the operation succeeded on."""
        return [outcome for outcome in self.results if outcome.success]

    @property
    def failed(self) -> list[RepositoryOutcome]:
        """Outcomes of the repositories the operation failed on."""
        return [outcome for outcome in self.results if not outcome.success]

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent back to callers."""
        return {
            "message": self.message,
            "results": [outcome.model_dump(mode="json", by_alias=True, exclude_none=True) for outcome in self.results],
        }
