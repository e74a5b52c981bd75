import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from pydantic import ValidationError
from starlette.applications import Starlette

from fake_github import main
from fake_github.main import load_pull_requests, run_fake_github, seed_store
from fake_github.store import FakeGitHubStore


def pull_request_payload(number: int) -> dict[str, Any]:
    return {"number": number, "title": f"PR {number}", "base": {"repo": {"name": "pipeline", "owner": {"login": "tektoncd"}}}}


@pytest.fixture
def pull_request_file(tmp_path: Path) -> Path:
    path = tmp_path / "pull_request.json"
    _ = path.write_text(json.dumps(pull_request_payload(1)))
    return path


@pytest.fixture
def pull_requests_file(tmp_path: Path) -> Path:
    path = tmp_path / "pull_requests.json"
    _ = path.write_text(json.dumps([pull_request_payload(2), pull_request_payload(3)]))
    return path


def test_load_single_pull_request(pull_request_file: Path):
    pull_requests = load_pull_requests(pull_request_file)

    assert [pull_request.to_json() for pull_request in pull_requests] == [pull_request_payload(1)]


def test_load_pull_request_list(pull_requests_file: Path):
    pull_requests = load_pull_requests(pull_requests_file)

    assert [pull_request.number for pull_request in pull_requests] == [2, 3]


def test_load_invalid_pull_request(tmp_path: Path):
    path = tmp_path / "invalid.json"
    _ = path.write_text(json.dumps({"title": "no number"}))

    with pytest.raises(ValidationError):
        _ = load_pull_requests(path)


def test_load_malformed_json(tmp_path: Path):
    path = tmp_path / "malformed.json"
    _ = path.write_text('{"number": 1,')

    with pytest.raises(ValidationError):
        _ = load_pull_requests(path)


def test_seed_store(pull_request_file: Path, pull_requests_file: Path):
    store = FakeGitHubStore()

    assert seed_store(store=store, paths=(pull_request_file, pull_requests_file)) == 3
    assert store.get_pull_request("tektoncd", "pipeline", 3) is not None


def test_help():
    result = CliRunner().invoke(run_fake_github, ["--help"])

    assert result.exit_code == 0
    assert "--pull-request" in result.output
    assert "--port" in result.output


def test_run_fake_github(monkeypatch: pytest.MonkeyPatch, pull_requests_file: Path):
    served: dict[str, Any] = {}

    def fake_run(app: Starlette, **kwargs: Any) -> None:
        served["app"] = app
        served.update(kwargs)

    monkeypatch.setattr(main.uvicorn, "run", fake_run)

    result = CliRunner().invoke(run_fake_github, ["--port", "9999", "--pull-request", str(pull_requests_file)])

    assert result.exit_code == 0, result.output
    assert served["host"] == "127.0.0.1"
    assert served["port"] == 9999

    store: FakeGitHubStore = served["app"].state.store
    assert store.get_pull_request("tektoncd", "pipeline", 2) is not None


def test_run_fake_github_from_environment(monkeypatch: pytest.MonkeyPatch):
    served: dict[str, Any] = {}

    def fake_run(app: Starlette, **kwargs: Any) -> None:
        served.update(kwargs)

    monkeypatch.setattr(main.uvicorn, "run", fake_run)
    monkeypatch.setenv("FAKE_GITHUB_PORT", "7777")
    monkeypatch.setenv("FAKE_GITHUB_LOG_LEVEL", "debug")

    result = CliRunner().invoke(run_fake_github, [])

    assert result.exit_code == 0, result.output
    assert served["port"] == 7777
    assert served["log_level"] == "debug"
