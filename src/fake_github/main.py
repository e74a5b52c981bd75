import logging
from logging import Logger, getLogger
from pathlib import Path

import click
import uvicorn
from pydantic import TypeAdapter

from fake_github.models.github import PullRequest
from fake_github.servers.router import create_app
from fake_github.store import FakeGitHubStore

logger: Logger = getLogger(name="fake_github")

PULL_REQUESTS_ADAPTER: TypeAdapter[PullRequest | list[PullRequest]] = TypeAdapter(PullRequest | list[PullRequest])


def load_pull_requests(path: Path) -> list[PullRequest]:
    """Load a pull request, or a list of pull requests, from a JSON file."""

    pull_requests = PULL_REQUESTS_ADAPTER.validate_json(path.read_bytes())

    return pull_requests if isinstance(pull_requests, list) else [pull_requests]


def seed_store(store: FakeGitHubStore, paths: tuple[Path, ...]) -> int:
    count = 0

    for path in paths:
        for pull_request in load_pull_requests(path):
            store.add_pull_request(pull_request)
            count += 1

    return count


@click.command()
@click.option("--host", envvar="FAKE_GITHUB_HOST", default="127.0.0.1", show_default=True, help="The host to listen on.")
@click.option("--port", envvar="FAKE_GITHUB_PORT", type=int, default=8080, show_default=True, help="The port to listen on.")
@click.option(
    "--pull-request",
    "pull_request_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="A JSON file holding a pull request or a list of pull requests to serve. May be repeated.",
)
@click.option(
    "--log-level",
    envvar="FAKE_GITHUB_LOG_LEVEL",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    show_default=True,
    help="The log level.",
)
def run_fake_github(host: str, port: int, pull_request_files: tuple[Path, ...], log_level: str):
    """Serve a fake GitHub REST API for pull requests, issue comments, commit statuses and labels."""

    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = FakeGitHubStore(logger=logger)
    seeded = seed_store(store=store, paths=pull_request_files)

    logger.info(f"Serving fake GitHub on http://{host}:{port} with {seeded} pull request(s)")

    uvicorn.run(create_app(store=store, logger=logger), host=host, port=port, log_level=log_level, access_log=False)


if __name__ == "__main__":
    run_fake_github()
