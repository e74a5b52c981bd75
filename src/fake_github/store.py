import threading
from collections import defaultdict
from collections.abc import Iterable
from logging import Logger, getLogger

from fake_github.models.github import CombinedStatus, CommitKey, IssueComment, IssueKey, Label, PullRequest, RepoStatus


class FakeGitHubStore:
    """In-memory state served by a fake GitHub server.

    Pull requests, comments, statuses and labels are independent collections: a comment or label can be
    attached to an issue number that has no pull request, as on GitHub. Every operation holds a single lock,
    so the store can be shared between the server thread and the test thread.
    """

    logger: Logger

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or getLogger(__name__)

        self._lock: threading.Lock = threading.Lock()
        self._pull_requests: dict[IssueKey, PullRequest] = {}
        self._comments: defaultdict[IssueKey, list[IssueComment]] = defaultdict(list)
        self._statuses: defaultdict[CommitKey, list[RepoStatus]] = defaultdict(list)
        # dicts keep insertion order, so the keys double as an ordered set of label names
        self._labels: defaultdict[IssueKey, dict[str, None]] = defaultdict(dict)

    def reset(self) -> None:
        with self._lock:
            self._pull_requests.clear()
            self._comments.clear()
            self._statuses.clear()
            self._labels.clear()

    # Pull requests

    def add_pull_request(self, pull_request: PullRequest) -> None:
        """Add a pull request, replacing any pull request with the same owner, repo and number."""

        with self._lock:
            self._pull_requests[pull_request.key] = pull_request

        self.logger.debug(f"Added pull request {pull_request.key}")

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest | None:
        with self._lock:
            return self._pull_requests.get(IssueKey(owner, repo, number))

    # Issue comments

    def add_comment(self, owner: str, repo: str, number: int, comment: IssueComment) -> None:
        key = IssueKey(owner, repo, number)

        with self._lock:
            self._comments[key].append(comment)

        self.logger.debug(f"Added comment to {key}")

    def list_comments(self, owner: str, repo: str, number: int) -> list[IssueComment]:
        with self._lock:
            return list(self._comments.get(IssueKey(owner, repo, number), []))

    # Commit statuses

    def add_status(self, owner: str, repo: str, sha: str, status: RepoStatus) -> None:
        key = CommitKey(owner, repo, sha)

        with self._lock:
            self._statuses[key].append(status)

        self.logger.debug(f"Added {status.state} status to {key}")

    def get_combined_status(self, owner: str, repo: str, sha: str) -> CombinedStatus:
        with self._lock:
            statuses = list(self._statuses.get(CommitKey(owner, repo, sha), []))

        return CombinedStatus.from_statuses(statuses)

    def list_statuses(self, owner: str, repo: str, sha: str) -> list[RepoStatus]:
        """List the statuses for a commit, newest first."""

        with self._lock:
            return list(reversed(self._statuses.get(CommitKey(owner, repo, sha), [])))

    # Issue labels

    def add_labels(self, owner: str, repo: str, number: int, names: Iterable[str]) -> list[Label]:
        """Add labels to an issue. Names already present keep their original position."""

        key = IssueKey(owner, repo, number)

        with self._lock:
            labels = self._labels[key]
            for name in names:
                labels.setdefault(name)
            result = self._to_labels(labels)

        self.logger.debug(f"Labels on {key} are now {[label.name for label in result]}")

        return result

    def replace_labels(self, owner: str, repo: str, number: int, names: Iterable[str]) -> list[Label]:
        """Replace every label on an issue with the given labels."""

        key = IssueKey(owner, repo, number)

        with self._lock:
            self._labels[key] = dict.fromkeys(names)
            result = self._to_labels(self._labels[key])

        self.logger.debug(f"Labels on {key} replaced with {[label.name for label in result]}")

        return result

    def list_labels(self, owner: str, repo: str, number: int) -> list[Label]:
        with self._lock:
            return self._to_labels(self._labels.get(IssueKey(owner, repo, number), {}))

    def remove_label(self, owner: str, repo: str, number: int, name: str) -> list[Label] | None:
        """Remove a single label from an issue.

        Returns:
            The remaining labels, or None if the issue did not have the label.
        """

        key = IssueKey(owner, repo, number)

        with self._lock:
            labels = self._labels.get(key)
            if labels is None or name not in labels:
                return None

            del labels[name]
            return self._to_labels(labels)

    def clear_labels(self, owner: str, repo: str, number: int) -> None:
        with self._lock:
            _ = self._labels.pop(IssueKey(owner, repo, number), None)

    @staticmethod
    def _to_labels(names: dict[str, None]) -> list[Label]:
        return [Label(name=name) for name in names]
