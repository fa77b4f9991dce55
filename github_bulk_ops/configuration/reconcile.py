"""Reconciles configuration between CLI arguments and environment variables."""

from pathlib import Path
from urllib.parse import urlparse

from github_bulk_ops.configuration.env import Settings
from github_bulk_ops.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, InvalidConfigurationError
from github_bulk_ops.configuration.models import BatchConfig


def derive_git_host(github_api_url: str) -> str:
    """Derive the host used in clone URLs from the GitHub API URL.

    "https://api.github.com" maps to "github.com"; GitHub Enterprise URLs such
    as "https://ghe.example.com/api/v3" map to "ghe.example.com".
    """
    parsed = urlparse(github_api_url)
    host = parsed.netloc or parsed.path.split("/")[0]
    if host == "api.github.com":
        return "github.com"
    return host


def resolve_github_token(cli_github_pat_token: str | None, settings: Settings) -> str:
    """Returns the GitHub token, preferring the CLI value over the environment.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If neither source defines a token.
    """
    token = cli_github_pat_token or settings.GITHUB_PAT_TOKEN
    if not token:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub token provided. Use the --github-pat-token option or the GITHUB_PAT_TOKEN environment variable."
        )
    return token


def reconcile_batch_configuration(
    settings: Settings,
    cli_debug: bool | None = None,
    cli_github_api_url: str | None = None,
    cli_base_dir: Path | None = None,
    cli_max_concurrency: int | None = None,
) -> BatchConfig:
    """Builds the batch configuration, with CLI values taking precedence over environment values."""
    github_api_url = cli_github_api_url or settings.GITHUB_API_URL
    max_concurrency = cli_max_concurrency if cli_max_concurrency is not None else settings.MAX_CONCURRENCY
    if max_concurrency < 1:
        raise InvalidConfigurationError("maximum concurrency", "max_concurrency", "MAX_CONCURRENCY", "must be at least 1")
    base_dir = cli_base_dir or settings.BASE_DIR or Path.cwd()
    return BatchConfig(
        github_api_url=github_api_url,
        git_host=settings.GIT_HOST or derive_git_host(github_api_url),
        base_dir=Path(base_dir),
        max_concurrency=max_concurrency,
        git_user_name=settings.GIT_USER_NAME,
        git_user_email=settings.GIT_USER_EMAIL,
        default_remote_name=settings.DEFAULT_REMOTE_NAME,
        debug=cli_debug if cli_debug is not None else settings.DEBUG,
    )
