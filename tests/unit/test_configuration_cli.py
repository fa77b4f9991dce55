"""Unit tests for the Typer command line interface."""

import json
from pathlib import Path
from typing import Any

import pytest
from pytest import MonkeyPatch
from typer.testing import CliRunner

from github_bulk_ops.configuration import cli as cli_module
from github_bulk_ops.operations.models import BatchResponse, OperationName, RepositoryOutcome

runner = CliRunner()


class FakeOrchestrator:
    """Records the requests it is asked to handle and answers with a canned response."""

    calls: list[tuple[OperationName, dict[str, Any]]] = []
    configs: list[Any] = []
    response = BatchResponse(status_code=200, message="ok", results=[RepositoryOutcome(repository="a", success=True)])

    def __init__(self, config: Any) -> None:
        self.config = config
        type(self).configs.append(config)

    async def handle(self, operation: OperationName, payload: dict[str, Any]) -> BatchResponse:
        type(self).calls.append((operation, payload))
        return type(self).response


@pytest.fixture
def fake_orchestrator(monkeypatch: MonkeyPatch) -> type[FakeOrchestrator]:
    """Replace the orchestrator used by the CLI."""
    FakeOrchestrator.calls = []
    FakeOrchestrator.configs = []
    FakeOrchestrator.response = BatchResponse(status_code=200, message="ok", results=[RepositoryOutcome(repository="a", success=True)])
    monkeypatch.setattr(cli_module, "BatchOrchestrator", FakeOrchestrator)
    monkeypatch.delenv("GITHUB_PAT_TOKEN", raising=False)
    monkeypatch.delenv("MAX_CONCURRENCY", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    return FakeOrchestrator


def test_delete_tag_command(fake_orchestrator: type[FakeOrchestrator]) -> None:
    """Test that command options become a wire-format request body."""
    result = runner.invoke(
        cli_module.typer_app,
        ["--org", "acme", "--github-pat-token", "tok", "delete-tag", "--repo", "a", "--repo", "b", "--tag-name", "v1.0.0"],
    )
    assert result.exit_code == 0, result.output
    operation, payload = fake_orchestrator.calls[0]
    assert operation == OperationName.DELETE_TAG
    assert payload == {"orgName": "acme", "repos": ["a", "b"], "tagName": "v1.0.0", "githubToken": "tok"}
    assert json.loads(result.stdout) == {"message": "ok", "results": [{"repository": "a", "success": True}]}


def test_bad_request_exit_code(fake_orchestrator: type[FakeOrchestrator]) -> None:
    """Test that a 400 response exits with code 2."""
    fake_orchestrator.response = BatchResponse(status_code=400, message="Missing or invalid fields in request body: tagName")
    result = runner.invoke(
        cli_module.typer_app,
        ["--org", "acme", "--github-pat-token", "tok", "create-tag", "--repo", "a", "--tag-name", "v1.0.0"],
    )
    assert result.exit_code == 2
    assert fake_orchestrator.calls[0][1]["branch"] == "main"


def test_missing_token(fake_orchestrator: type[FakeOrchestrator]) -> None:
    """Test that a missing token stops before any request is made."""
    result = runner.invoke(cli_module.typer_app, ["--org", "acme", "delete-tag", "--repo", "a", "--tag-name", "v1"])
    assert result.exit_code == 2
    assert fake_orchestrator.calls == []


def test_run_command_reads_json_body(fake_orchestrator: type[FakeOrchestrator], tmp_path: Path) -> None:
    """Test that the run command forwards a JSON request body unchanged."""
    body = {"orgName": "acme", "repos": ["a"], "githubToken": "body-token", "localBranch": "dev", "upstreamBranch": "main"}
    body_path = tmp_path / "request.json"
    body_path.write_text(json.dumps(body), encoding="utf-8")

    result = runner.invoke(cli_module.typer_app, ["run", "merge-conflict", str(body_path)])

    assert result.exit_code == 0, result.output
    operation, payload = fake_orchestrator.calls[0]
    assert operation == OperationName.SYNC
    assert payload == body


def test_run_command_missing_file(fake_orchestrator: type[FakeOrchestrator], tmp_path: Path) -> None:
    """Test that a missing request body file is reported."""
    result = runner.invoke(cli_module.typer_app, ["run", "delete-tag", str(tmp_path / "missing.json")])
    assert result.exit_code == 2
    assert fake_orchestrator.calls == []


def test_debug_flag_reaches_batch_configuration(fake_orchestrator: type[FakeOrchestrator]) -> None:
    """Test that --debug is carried into the configuration used for the batch."""
    result = runner.invoke(
        cli_module.typer_app,
        ["--org", "acme", "--github-pat-token", "tok", "--debug", "delete-tag", "--repo", "a", "--tag-name", "v1"],
    )
    assert result.exit_code == 0, result.output
    assert fake_orchestrator.configs[0].debug is True


def test_debug_setting_from_environment(fake_orchestrator: type[FakeOrchestrator], monkeypatch: MonkeyPatch) -> None:
    """Test that the DEBUG environment setting enables debug logging without the flag."""
    monkeypatch.setenv("DEBUG", "true")
    result = runner.invoke(cli_module.typer_app, ["--org", "acme", "--github-pat-token", "tok", "delete-tag", "--repo", "a", "--tag-name", "v1"])
    assert result.exit_code == 0, result.output
    assert fake_orchestrator.configs[0].debug is True


def test_sync_branches_omits_unset_remote(fake_orchestrator: type[FakeOrchestrator]) -> None:
    """Test that the remote name is only sent when given on the command line."""
    args = ["--org", "acme", "--github-pat-token", "tok", "sync-branches", "--repo", "a", "--local-branch", "dev", "--upstream-branch", "main"]
    result = runner.invoke(cli_module.typer_app, args)
    assert result.exit_code == 0, result.output
    assert "remoteName" not in fake_orchestrator.calls[0][1]

    runner.invoke(cli_module.typer_app, [*args, "--remote-name", "fork"])
    assert fake_orchestrator.calls[1][1]["remoteName"] == "fork"
