from fake_github.clients.github import get_github_client
from fake_github.models.github import CombinedStatus, IssueComment, Label, PullRequest, RepoStatus
from fake_github.servers.fake_github import FakeGitHubServer, ServerStartupError
from fake_github.servers.router import create_app
from fake_github.store import FakeGitHubStore

__all__ = [
    "CombinedStatus",
    "FakeGitHubServer",
    "FakeGitHubStore",
    "IssueComment",
    "Label",
    "PullRequest",
    "RepoStatus",
    "ServerStartupError",
    "create_app",
    "get_github_client",
]
