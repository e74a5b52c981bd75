"""Endpoint handlers for the fake GitHub server.

Each handler receives the request and the identifiers already extracted from its path, performs one store
operation, and renders the result the way the GitHub REST API does.
"""

import json
from typing import Any

from pydantic import BaseModel, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from fake_github.models.github import CommitKey, IssueComment, IssueKey, Label, LabelNames, PullRequest, RepoStatus
from fake_github.servers.errors import ProblemsParsingJSONError, ResourceNotFoundError, ValidationFailedError
from fake_github.store import FakeGitHubStore

OK = 200
CREATED = 201
NO_CONTENT = 204


def get_store(request: Request) -> FakeGitHubStore:
    store: FakeGitHubStore = request.app.state.store  # pyright: ignore[reportAny]
    return store


async def read_model[T: BaseModel](request: Request, model: type[T], resource: str) -> T:
    """Decode and validate the request body."""

    try:
        data: Any = await request.json()  # pyright: ignore[reportAny]
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProblemsParsingJSONError(extra_info={"error": str(e)}) from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(str(loc) for loc in error['loc']) or 'body'}: {error['msg']}" for error in e.errors())
        raise ValidationFailedError(resource=resource, errors=errors) from e


def labels_response(labels: list[Label]) -> JSONResponse:
    return JSONResponse([label.to_json() for label in labels], status_code=OK)


# Pull requests


async def get_pull_request(request: Request, key: IssueKey) -> Response:
    pull_request: PullRequest | None = get_store(request).get_pull_request(*key)

    if pull_request is None:
        raise ResourceNotFoundError(resource=request.url.path)

    return JSONResponse(pull_request.to_json(), status_code=OK)


# Issue comments


async def list_comments(request: Request, key: IssueKey) -> Response:
    comments = get_store(request).list_comments(*key)

    return JSONResponse([comment.to_json() for comment in comments], status_code=OK)


async def create_comment(request: Request, key: IssueKey) -> Response:
    comment = await read_model(request, IssueComment, resource="IssueComment")

    get_store(request).add_comment(*key, comment=comment)

    return JSONResponse(comment.to_json(), status_code=CREATED)


# Commit statuses


async def get_combined_status(request: Request, key: CommitKey) -> Response:
    combined_status = get_store(request).get_combined_status(*key)

    return JSONResponse(combined_status.to_json(), status_code=OK)


async def list_statuses(request: Request, key: CommitKey) -> Response:
    statuses = get_store(request).list_statuses(*key)

    return JSONResponse([status.to_json() for status in statuses], status_code=OK)


async def create_status(request: Request, key: CommitKey) -> Response:
    status = await read_model(request, RepoStatus, resource="Status")

    get_store(request).add_status(*key, status=status)

    return JSONResponse(status.to_json(), status_code=CREATED)


# Issue labels


async def list_labels(request: Request, key: IssueKey) -> Response:
    return labels_response(get_store(request).list_labels(*key))


async def add_labels(request: Request, key: IssueKey) -> Response:
    names = await read_model(request, LabelNames, resource="Label")

    return labels_response(get_store(request).add_labels(*key, names=names.root))


async def replace_labels(request: Request, key: IssueKey) -> Response:
    names = await read_model(request, LabelNames, resource="Label")

    return labels_response(get_store(request).replace_labels(*key, names=names.root))


async def clear_labels(request: Request, key: IssueKey) -> Response:
    get_store(request).clear_labels(*key)

    return Response(status_code=NO_CONTENT)


async def remove_label(request: Request, key: IssueKey) -> Response:
    name = str(request.path_params["name"])  # pyright: ignore[reportAny]

    labels = get_store(request).remove_label(*key, name=name)

    if labels is None:
        raise ResourceNotFoundError(resource=request.url.path, extra_info={"label": name})

    return labels_response(labels)
