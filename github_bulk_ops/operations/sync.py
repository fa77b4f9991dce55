"""Branch synchronization through a scratch clone of each repository.

A sync walks a fixed sequence of git steps. There are no retries and no
rollback: the first failing step ends the run in `SyncState.FAILED` and leaves
the scratch clone as that step left it. The clone directory is removed and
recreated at the start of every run.
"""

import asyncio
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TypeVar

import structlog
from git import GitCommandError, Repo

from github_bulk_ops.configuration.models import BatchConfig
from github_bulk_ops.github.errors import GitHubOpsError, MergeConflictError, SyncStepError
from github_bulk_ops.utils.constants import CLONE_URL_TEMPLATE, ORIGIN_REMOTE_NAME, SYNC_COMMIT_MESSAGE_TEMPLATE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

T = TypeVar("T")


class SyncState(str, Enum):
    """States of a repository sync; each step moves forward by one state."""

    PENDING = "pending"
    CLONED = "cloned"
    REMOTE_CONFIGURED = "remote_configured"
    LOCAL_CHECKED_OUT = "local_checked_out"
    FETCHED = "fetched"
    RESET_TO_REMOTE = "reset_to_remote"
    MERGED = "merged"
    COMMITTED = "committed"
    PUSHED = "pushed"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of one sync run.

    `state` is the last state reached. On failure `state` is FAILED,
    `failed_step` names the state the failing step was trying to reach, and
    `error` holds the translated error.
    """

    repository: str
    state: SyncState = SyncState.PENDING
    failed_step: SyncState | None = None
    error: GitHubOpsError | None = None

    @property
    def success(self) -> bool:
        return self.state == SyncState.PUSHED


class RepositorySyncEngine:
    """Clones a repository and merges an upstream branch into a local branch."""

    def __init__(self, config: BatchConfig) -> None:
        self.config = config

    def clone_url(self, organization: str, repository: str, access_token: str) -> str:
        """Build the clone URL with the access token embedded as credentials."""
        return CLONE_URL_TEMPLATE.format(token=access_token, host=self.config.git_host, organization=organization, repository=repository)

    async def sync(
        self,
        organization: str,
        repository: str,
        access_token: str,
        local_branch: str,
        upstream_branch: str,
        remote_name: str,
        base_dir: Path | None = None,
    ) -> SyncResult:
        """Synchronize local_branch with upstream_branch and push the result to origin."""
        result = SyncResult(repository=repository)
        repo_path = Path(base_dir or self.config.base_dir) / repository
        url = self.clone_url(organization, repository, access_token)
        log = logger.bind(repository=repository, local_branch=local_branch, upstream_branch=upstream_branch, remote=remote_name)

        async def step(target: SyncState, func: Callable[..., T], *args: Any) -> T:
            try:
                value = await asyncio.to_thread(func, *args)
            except GitHubOpsError:
                raise
            except (GitCommandError, OSError) as exc:
                message = _redact(f"Sync failed for {repository} while reaching {target.value}: {exc}", access_token)
                raise SyncStepError(message, step=target.value) from exc
            result.state = target
            log.info("Sync step completed", state=target.value)
            return value

        try:
            repo = await step(SyncState.CLONED, self._fresh_clone, url, repo_path)
            await step(SyncState.REMOTE_CONFIGURED, self._configure_remote, repo, remote_name, url)
            await step(SyncState.LOCAL_CHECKED_OUT, repo.git.checkout, local_branch)
            await step(SyncState.FETCHED, self._fetch, repo, remote_name, local_branch, upstream_branch)
            await step(SyncState.RESET_TO_REMOTE, repo.git.reset, "--hard", f"{remote_name}/{local_branch}")
            await step(SyncState.MERGED, self._merge, repo, repository, remote_name, upstream_branch, access_token)
            message = SYNC_COMMIT_MESSAGE_TEMPLATE.format(upstream_branch=upstream_branch, local_branch=local_branch)
            await step(SyncState.COMMITTED, repo.git.commit, "--allow-empty", "-m", message)
            await step(SyncState.PUSHED, repo.git.push, ORIGIN_REMOTE_NAME, local_branch)
        except GitHubOpsError as exc:
            result.failed_step = _next_state(result.state)
            result.state = SyncState.FAILED
            result.error = exc
            log.error("Sync failed", failed_step=result.failed_step.value, error=exc.message)
            return result

        log.info("Successfully synchronized repository")
        return result

    def _fresh_clone(self, url: str, repo_path: Path) -> Repo:
        if repo_path.exists():
            shutil.rmtree(repo_path)
        repo_path.mkdir(parents=True, exist_ok=True)
        return Repo.clone_from(url, repo_path)

    def _configure_remote(self, repo: Repo, remote_name: str, url: str) -> None:
        try:
            repo.delete_remote(remote_name)
        except (GitCommandError, ValueError):
            # The remote does not exist yet in a fresh clone.
            pass
        repo.create_remote(remote_name, url)
        if self.config.git_user_name or self.config.git_user_email:
            with repo.config_writer() as writer:
                if self.config.git_user_name:
                    writer.set_value("user", "name", self.config.git_user_name)
                if self.config.git_user_email:
                    writer.set_value("user", "email", self.config.git_user_email)

    def _fetch(self, repo: Repo, remote_name: str, local_branch: str, upstream_branch: str) -> None:
        repo.git.fetch(remote_name, local_branch)
        repo.git.fetch(remote_name, upstream_branch)

    def _merge(self, repo: Repo, repository: str, remote_name: str, upstream_branch: str, access_token: str) -> None:
        try:
            repo.git.merge(f"{remote_name}/{upstream_branch}", "--no-edit")
        except GitCommandError as exc:
            unmerged_paths = sorted(str(path) for path in repo.index.unmerged_blobs())
            if unmerged_paths:
                raise MergeConflictError(
                    _redact(
                        f"Merge of {remote_name}/{upstream_branch} into {repository} has unresolved conflicts in {', '.join(unmerged_paths)}",
                        access_token,
                    )
                ) from exc
            raise


_STEP_ORDER: tuple[SyncState, ...] = (
    SyncState.PENDING,
    SyncState.CLONED,
    SyncState.REMOTE_CONFIGURED,
    SyncState.LOCAL_CHECKED_OUT,
    SyncState.FETCHED,
    SyncState.RESET_TO_REMOTE,
    SyncState.MERGED,
    SyncState.COMMITTED,
    SyncState.PUSHED,
)


def _next_state(state: SyncState) -> SyncState:
    """Return the state following `state` in the sync sequence."""
    index = _STEP_ORDER.index(state)
    return _STEP_ORDER[min(index + 1, len(_STEP_ORDER) - 1)]


def _redact(message: str, access_token: str) -> str:
    """Remove the access token from a message before it is logged or returned."""
    return message.replace(access_token, "***") if access_token else message
