"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_bulk_ops.configuration.env import Settings
from github_bulk_ops.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, InvalidConfigurationError
from github_bulk_ops.configuration.reconcile import reconcile_batch_configuration, resolve_github_token
from github_bulk_ops.operations.models import BatchResponse, OperationName, ReleaseType
from github_bulk_ops.operations.orchestrator import BatchOrchestrator
from github_bulk_ops.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Bulk tag, release, and branch operations across GitHub repositories.")

EXIT_CODES: dict[int, int] = {200: 0, 400: 2, 500: 1}

RepoOption = Annotated[list[str], Option("--repo", "-r", help="Repository name within the organization. Repeat for several repositories.")]


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    org: Annotated[str | None, Option("--org", envvar="ORG_NAME", help="GitHub organization name.")] = None,
    github_api_url: Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = None,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    max_concurrency: Annotated[int | None, Option(envvar="MAX_CONCURRENCY", help="Maximum repositories processed at once.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Set the organization and GitHub settings shared by every command."""
    ctx.ensure_object(dict)
    ctx.obj["org"] = org
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["max_concurrency"] = max_concurrency
    ctx.obj["debug"] = debug


def _require_org(ctx: typer.Context) -> str:
    org: str | None = ctx.obj["org"]
    if not org:
        typer.echo("Organization must be provided via --org or ORG_NAME env var.", err=True)
        raise typer.Exit(2)
    return org


def execute_operation(ctx: typer.Context, operation: OperationName, payload: dict[str, Any], base_dir: Path | None = None) -> BatchResponse:
    """Run an operation through the batch orchestrator, print its response, and exit with a matching code."""
    settings = Settings()
    try:
        config = reconcile_batch_configuration(
            settings,
            cli_debug=ctx.obj["debug"] or None,
            cli_github_api_url=ctx.obj["github_api_url"],
            cli_base_dir=base_dir,
            cli_max_concurrency=ctx.obj["max_concurrency"],
        )
        if not payload.get("githubToken"):
            payload["githubToken"] = resolve_github_token(ctx.obj["github_pat_token"], settings)
    except (GitHubAuthenticationConfigurationUndefinedError, InvalidConfigurationError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc

    configure_logging(config.debug)
    response = asyncio.run(BatchOrchestrator(config).handle(operation, payload))
    typer.echo(json.dumps(response.to_payload(), indent=2))
    exit_code = EXIT_CODES.get(response.status_code, 1)
    if exit_code:
        raise typer.Exit(exit_code)
    return response


@typer_app.command(name="create-tag")
def create_tag_cli(
    ctx: typer.Context,
    repos: RepoOption,
    tag_name: Annotated[str, Option(help="Name of the tag and release to create.")],
    branch: Annotated[str, Option(help="Branch whose head commit is tagged.")] = "main",
) -> None:
    """Create a tag and a release with generated notes in each repository."""
    payload = {"orgName": _require_org(ctx), "repos": repos, "tagName": tag_name, "branch": branch}
    execute_operation(ctx, OperationName.CREATE_TAG, payload)


@typer_app.command(name="delete-tag")
def delete_tag_cli(
    ctx: typer.Context,
    repos: RepoOption,
    tag_name: Annotated[str, Option(help="Tag to delete, or 'all' to delete every tag.")],
) -> None:
    """Delete a tag from each repository."""
    payload = {"orgName": _require_org(ctx), "repos": repos, "tagName": tag_name}
    execute_operation(ctx, OperationName.DELETE_TAG, payload)


@typer_app.command(name="sync-branches")
def sync_branches_cli(
    ctx: typer.Context,
    repos: RepoOption,
    local_branch: Annotated[str, Option(help="Branch that receives the merge and is pushed to origin.")],
    upstream_branch: Annotated[str, Option(help="Branch merged into the local branch.")],
    remote_name: Annotated[str | None, Option(help="Name of the remote configured in each clone. Defaults to DEFAULT_REMOTE_NAME.")] = None,
    base_dir: Annotated[Path | None, Option(envvar="BASE_DIR", help="Directory in which repositories are cloned.")] = None,
) -> None:
    """Merge an upstream branch into a local branch of each repository and push it."""
    payload = {
        "orgName": _require_org(ctx),
        "repos": repos,
        "localBranch": local_branch,
        "upstreamBranch": upstream_branch,
    }
    if remote_name is not None:
        payload["remoteName"] = remote_name
    execute_operation(ctx, OperationName.SYNC, payload, base_dir=base_dir)


@typer_app.command(name="delete-releases")
def delete_releases_cli(
    ctx: typer.Context,
    repos: RepoOption,
    release_type: Annotated[ReleaseType, Option("--type", help="Which releases to consider.")] = ReleaseType.ALL,
    older_than: Annotated[str | None, Option(help="Only delete releases created before this date (YYYY-MM-DD or ISO 8601).")] = None,
    name_contains: Annotated[str | None, Option(help="Only delete releases whose name contains this text.")] = None,
    release_name: Annotated[str | None, Option(help="Only delete releases with exactly this name.")] = None,
) -> None:
    """Delete the releases matching the filters from each repository."""
    filter_options: dict[str, Any] = {"type": release_type.value}
    if older_than is not None:
        filter_options["olderThan"] = older_than
    if name_contains is not None:
        filter_options["nameContains"] = name_contains
    payload = {
        "orgName": _require_org(ctx),
        "repos": repos,
        "releaseName": release_name,
        "filterOptions": filter_options,
    }
    execute_operation(ctx, OperationName.DELETE_RELEASES, payload)


@typer_app.command(name="run")
def run_cli(
    ctx: typer.Context,
    operation: Annotated[OperationName, Argument(help="Operation to run.")],
    body_path: Annotated[Path, Argument(help="Path to a JSON request body.")],
) -> None:
    """Run an operation from a JSON request body (orgName, repos, githubToken, ...)."""
    if not body_path.exists():
        typer.echo(f"Request body not found: {body_path.absolute()}", err=True)
        raise typer.Exit(2)
    try:
        payload = json.loads(body_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        typer.echo(f"Failed to parse JSON request body {body_path}: {exc}", err=True)
        raise typer.Exit(2) from exc
    if not isinstance(payload, dict):
        typer.echo("Request body must be a JSON object.", err=True)
        raise typer.Exit(2)
    execute_operation(ctx, operation, payload)


if __name__ == "__main__":
    typer_app()
