from collections.abc import AsyncGenerator, Generator
from typing import Any

import httpx
import pytest
from github import Github
from pydantic import BaseModel
from starlette.testclient import TestClient

from fake_github.models.github import PullRequest
from fake_github.servers.fake_github import FakeGitHubServer
from fake_github.servers.router import create_app
from fake_github.store import FakeGitHubStore

DEFAULT_API_URL = "https://api.github.com"


class IssueRef(BaseModel):
    owner: str
    repo: str
    number: int


def make_pull_request(issue_ref: IssueRef, api_url: str = DEFAULT_API_URL) -> PullRequest:
    """A pull request payload whose URLs point at the given API."""

    repo_url = f"{api_url}/repos/{issue_ref.owner}/{issue_ref.repo}"

    return PullRequest.for_repository(
        owner=issue_ref.owner,
        repo=issue_ref.repo,
        number=issue_ref.number,
        title="Add a fake GitHub server",
        state="open",
        url=f"{repo_url}/pulls/{issue_ref.number}",
        issue_url=f"{repo_url}/issues/{issue_ref.number}",
        html_url=f"https://github.com/{issue_ref.owner}/{issue_ref.repo}/pull/{issue_ref.number}",
        head={"ref": "fake-github", "sha": "tacocat", "repo": {"name": issue_ref.repo, "owner": {"login": "contributor"}}},
        labels=[],
    )


@pytest.fixture
def issue_ref() -> IssueRef:
    """The issue and pull request that most tests exercise."""
    return IssueRef(owner="tektoncd", repo="pipeline", number=1234)


@pytest.fixture
def pull_request(issue_ref: IssueRef) -> PullRequest:
    return make_pull_request(issue_ref)


@pytest.fixture
def store() -> FakeGitHubStore:
    return FakeGitHubStore()


@pytest.fixture
def test_client(store: FakeGitHubStore) -> Generator[TestClient, None, None]:
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture
def fake_github(store: FakeGitHubStore) -> Generator[FakeGitHubServer, None, None]:
    with FakeGitHubServer(store=store) as fake_github:
        yield fake_github


@pytest.fixture
def served_pull_request(fake_github: FakeGitHubServer, issue_ref: IssueRef) -> PullRequest:
    """A pull request whose URLs point at the running fake, as the real API's point at itself."""
    return make_pull_request(issue_ref, api_url=fake_github.base_url)


@pytest.fixture
def github_client(fake_github: FakeGitHubServer) -> Generator[Github, None, None]:
    github_client = fake_github.github_client()
    try:
        yield github_client
    finally:
        github_client.close()


@pytest.fixture
async def http_client(fake_github: FakeGitHubServer) -> AsyncGenerator[httpx.AsyncClient, Any]:
    async with httpx.AsyncClient(base_url=fake_github.base_url) as http_client:
        yield http_client
