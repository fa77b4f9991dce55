"""Configuration models passed explicitly into batch operations."""

from dataclasses import dataclass, field
from pathlib import Path

from github_bulk_ops.utils.constants import DEFAULT_REMOTE_NAME


@dataclass(frozen=True)
class BatchConfig:
    """Configuration for one batch orchestrator.

    An instance is handed to the orchestrator when it is constructed; nothing
    in github-bulk-ops reads configuration from module-level state.
    """

    github_api_url: str = "https://api.github.com"
    git_host: str = "github.com"
    base_dir: Path = field(default_factory=Path.cwd)
    max_concurrency: int = 5
    default_remote_name: str = DEFAULT_REMOTE_NAME
    git_user_name: str | None = None
    git_user_email: str | None = None
    debug: bool = False
