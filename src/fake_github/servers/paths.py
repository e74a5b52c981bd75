import re
from collections.abc import Mapping
from typing import Any

from fake_github.models.github import CommitKey, IssueKey
from fake_github.servers.errors import MalformedPathError

NUMBER_PATTERN = re.compile(r"[0-9]+")

# Numbers are signed 64-bit integers.
MAX_NUMBER = 2**63 - 1


def parse_number(segment: str, value: str) -> int:
    """Parse a numeric path segment, rejecting signs, whitespace and non-ASCII digits."""

    if not NUMBER_PATTERN.fullmatch(value):
        raise MalformedPathError(segment=segment, value=value)

    try:
        number = int(value)
    except ValueError as e:
        raise MalformedPathError(segment=segment, value=value) from e

    if number > MAX_NUMBER:
        raise MalformedPathError(segment=segment, value=value)

    return number


def parse_issue_path(path_params: Mapping[str, Any]) -> IssueKey:
    """Extract the owner, repo and issue or pull request number from the path parameters."""

    return IssueKey(
        owner=str(path_params["owner"]),
        repo=str(path_params["repo"]),
        number=parse_number(segment="number", value=str(path_params["number"])),
    )


def parse_commit_path(path_params: Mapping[str, Any]) -> CommitKey:
    return CommitKey(owner=str(path_params["owner"]), repo=str(path_params["repo"]), sha=str(path_params["sha"]))
