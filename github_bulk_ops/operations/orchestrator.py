"""Orchestrates batch operations across the repositories of an organization."""

import asyncio
import time
from typing import Any, Awaitable, Callable, Sequence

import structlog
from pydantic import ValidationError

from github_bulk_ops.configuration.models import BatchConfig
from github_bulk_ops.github.adapter import GitHubKitAdapter
from github_bulk_ops.github.errors import ErrorKind, GitHubOpsError, RequestValidationError, UnknownError
from github_bulk_ops.operations.models import (
    BatchResponse,
    CreateTagRequest,
    DeleteReleasesRequest,
    DeleteTagRequest,
    OperationName,
    OperationRequest,
    RepositoryOutcome,
    SyncRequest,
    operation_request_adapter,
)
from github_bulk_ops.operations.releases import delete_releases
from github_bulk_ops.operations.sync import RepositorySyncEngine
from github_bulk_ops.operations.tags import create_tag_and_release, delete_tag
from github_bulk_ops.operations.validation import validate_access, validate_branch, validate_repository

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

AdapterFactory = Callable[[str, str, str], GitHubKitAdapter]


def default_adapter_factory(organization: str, access_token: str, github_api_url: str) -> GitHubKitAdapter:
    """Build the organization-scoped adapter shared by every repository of a batch."""
    return GitHubKitAdapter.create(owner=organization, github_pat_token=access_token, github_api_url=github_api_url)


def parse_operation_request(operation: OperationName | str, payload: dict[str, Any]) -> OperationRequest:
    """Validate a raw request body for the named operation.

    Raises:
        RequestValidationError: If required fields are missing or malformed.
    """
    try:
        operation_name = OperationName(operation)
    except ValueError as exc:
        raise RequestValidationError(f"Unknown operation '{operation}'") from exc
    try:
        return operation_request_adapter.validate_python({**payload, "operation": operation_name.value})
    except ValidationError as exc:
        errors = [{"field": ".".join(str(part) for part in error["loc"]), "error": error["msg"]} for error in exc.errors()]
        missing = ", ".join(error["field"] for error in errors)
        raise RequestValidationError(f"Missing or invalid fields in request body: {missing}", errors=errors) from exc


def summarize(action: str, results: Sequence[RepositoryOutcome]) -> str:
    """Human-readable summary of a batch, naming the repositories that failed."""
    failed = [outcome for outcome in results if not outcome.success]
    if not failed:
        return f"{action} completed successfully for {len(results)} repositories"
    failures = "; ".join(f"{outcome.repository}: {outcome.error}" for outcome in failed)
    return f"{action} completed with {len(failed)} of {len(results)} repositories failing ({failures})"


class BatchOrchestrator:
    """Runs one operation against every requested repository.

    Repository pipelines run concurrently, at most `config.max_concurrency` at
    a time. Each pipeline's failure is caught at the repository boundary and
    folded into that repository's outcome, so results always line up one to
    one with the requested repositories.
    """

    def __init__(
        self,
        config: BatchConfig,
        adapter_factory: AdapterFactory = default_adapter_factory,
        sync_engine: RepositorySyncEngine | None = None,
    ) -> None:
        self.config = config
        self.adapter_factory = adapter_factory
        self.sync_engine = sync_engine or RepositorySyncEngine(config)

    def _adapter_for(self, request: OperationRequest) -> GitHubKitAdapter:
        return self.adapter_factory(request.organization, request.access_token, self.config.github_api_url)

    async def fan_out(
        self,
        repositories: Sequence[str],
        pipeline: Callable[[str], Awaitable[RepositoryOutcome]],
    ) -> list[RepositoryOutcome]:
        """Run pipeline for every repository with bounded concurrency, preserving input order."""
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def _run_one(repository: str) -> RepositoryOutcome:
            async with semaphore:
                try:
                    return await pipeline(repository)
                except GitHubOpsError as exc:
                    logger.error("Repository failed", repository=repository, error_kind=exc.kind.value, error=exc.message)
                    return RepositoryOutcome.from_error(repository, exc)
                except Exception as exc:
                    logger.exception("Unexpected error while processing repository", repository=repository)
                    return RepositoryOutcome.from_error(repository, UnknownError(str(exc)))

        return list(await asyncio.gather(*(_run_one(repository) for repository in repositories)))

    async def handle(self, operation: OperationName | str, payload: dict[str, Any]) -> BatchResponse:
        """Validate a raw request body and run the operation it names.

        Request validation failures produce a 400 response before any network
        call is made; failures that stop the whole batch produce a 500.
        """
        try:
            request = parse_operation_request(operation, payload)
        except RequestValidationError as exc:
            logger.warning("Rejected batch request", operation=str(operation), errors=exc.errors)
            return BatchResponse(status_code=400, message=exc.message)

        try:
            return await self.run(request)
        except GitHubOpsError as exc:
            logger.error("Batch operation failed", operation=request.operation, error_kind=exc.kind.value, error=exc.message)
            return BatchResponse(status_code=500, message=f"Error: {exc.message}")
        except Exception as exc:
            logger.exception("Unexpected error during batch operation", operation=request.operation)
            return BatchResponse(status_code=500, message=f"Error: {exc}")

    async def run(self, request: OperationRequest) -> BatchResponse:
        """Dispatch an already-validated request to its operation."""
        start_time = time.time()
        logger.info(
            "Starting batch operation",
            operation=request.operation,
            organization=request.organization,
            repository_count=len(request.repositories),
        )
        if isinstance(request, CreateTagRequest):
            response = await self.run_create_tag(request)
        elif isinstance(request, DeleteTagRequest):
            response = await self.run_delete_tag(request)
        elif isinstance(request, SyncRequest):
            response = await self.run_sync(request)
        elif isinstance(request, DeleteReleasesRequest):
            response = await self.run_delete_releases(request)
        else:
            raise RequestValidationError(f"Unsupported request type {type(request).__name__}")
        logger.info(
            "Finished batch operation",
            operation=request.operation,
            duration=round(time.time() - start_time, 2),
            succeeded=len(response.succeeded),
            failed=len(response.failed),
        )
        return response

    async def run_create_tag(self, request: CreateTagRequest) -> BatchResponse:
        """Create the tag and its release in every repository."""
        adapter = self._adapter_for(request)

        async def _pipeline(repository: str) -> RepositoryOutcome:
            return await create_tag_and_release(
                adapter.for_repository(repository),
                organization=request.organization,
                repository=repository,
                tag_name=request.tag_name,
                branch=request.branch,
            )

        results = await self.fan_out(request.repositories, _pipeline)
        if all(outcome.error_kind == ErrorKind.CONFLICT for outcome in results):
            return BatchResponse(status_code=400, message=f"Tag {request.tag_name} already exists in every repository", results=results)
        return BatchResponse(status_code=200, message=summarize("Tag and release creation", results), results=results)

    async def run_delete_tag(self, request: DeleteTagRequest) -> BatchResponse:
        """Delete the tag (or all tags) from every repository."""
        adapter = self._adapter_for(request)

        async def _pipeline(repository: str) -> RepositoryOutcome:
            return await delete_tag(adapter.for_repository(repository), repository, request.tag_name)

        results = await self.fan_out(request.repositories, _pipeline)
        return BatchResponse(status_code=200, message=summarize("Tag deletion", results), results=results)

    async def run_sync(self, request: SyncRequest) -> BatchResponse:
        """Validate access, then synchronize the branches of every repository."""
        adapter = self._adapter_for(request)
        await validate_access(adapter, request.organization)
        base_dir = request.base_dir or self.config.base_dir

        async def _pipeline(repository: str) -> RepositoryOutcome:
            repo_adapter = adapter.for_repository(repository)
            await validate_repository(repo_adapter, request.organization, repository)
            await validate_branch(repo_adapter, repository, request.local_branch)
            await validate_branch(repo_adapter, repository, request.upstream_branch)
            result = await self.sync_engine.sync(
                organization=request.organization,
                repository=repository,
                access_token=request.access_token,
                local_branch=request.local_branch,
                upstream_branch=request.upstream_branch,
                remote_name=request.remote_name or self.config.default_remote_name,
                base_dir=base_dir,
            )
            if result.error is not None:
                return RepositoryOutcome.from_error(repository, result.error, sync_state=result.state.value)
            return RepositoryOutcome(repository=repository, success=True, sync_state=result.state.value)

        results = await self.fan_out(request.repositories, _pipeline)
        return BatchResponse(status_code=200, message=summarize("Repository sync", results), results=results)

    async def run_delete_releases(self, request: DeleteReleasesRequest) -> BatchResponse:
        """Delete the matching releases from every repository."""
        adapter = self._adapter_for(request)

        async def _pipeline(repository: str) -> RepositoryOutcome:
            return await delete_releases(
                adapter.for_repository(repository),
                repository,
                filter_options=request.filter_options,
                release_name=request.release_name,
            )

        results = await self.fan_out(request.repositories, _pipeline)
        total = sum(outcome.deleted_count or 0 for outcome in results)
        return BatchResponse(
            status_code=200,
            message=f"{summarize('Release deletion', results)}; {total} releases deleted",
            results=results,
        )
