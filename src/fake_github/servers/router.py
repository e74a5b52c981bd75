from collections.abc import Awaitable, Callable, Mapping, Sequence
from logging import Logger, getLogger
from typing import Any

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from fake_github.models.github import CommitKey, IssueKey
from fake_github.servers import handlers
from fake_github.servers.errors import ResourceNotFoundError, ServerError
from fake_github.servers.middleware.logging import RequestLoggingMiddleware
from fake_github.servers.paths import parse_commit_path, parse_issue_path
from fake_github.store import FakeGitHubStore

logger: Logger = getLogger(__name__)

DOCUMENTATION_URL = "https://docs.github.com/rest"

type MethodHandler[K] = Callable[[Request, K], Awaitable[Response]]


class MethodDispatcher[K]:
    """An ASGI endpoint that parses the identifiers in the path, then dispatches on the request method.

    Starlette routes every method to a class endpoint. Identifiers are validated before the method is considered, and a
    method without a handler is a 404.
    """

    parse_key: Callable[[Mapping[str, Any]], K]
    method_handlers: Mapping[str, MethodHandler[K]]

    def __init__(self, parse_key: Callable[[Mapping[str, Any]], K], method_handlers: Mapping[str, MethodHandler[K]]):
        self.parse_key = parse_key
        self.method_handlers = method_handlers

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)

        key = self.parse_key(request.path_params)

        if (handler := self.method_handlers.get(request.method)) is None:
            raise ResourceNotFoundError(resource=request.url.path, extra_info={"method": request.method})

        response = await handler(request, key)
        await response(scope, receive, send)


def issue_route(path: str, method_handlers: Mapping[str, MethodHandler[IssueKey]]) -> Route:
    """A route whose path carries an issue or pull request number."""

    return Route(path, endpoint=MethodDispatcher(parse_issue_path, method_handlers))


def commit_route(path: str, method_handlers: Mapping[str, MethodHandler[CommitKey]]) -> Route:
    """A route whose path carries a commit sha."""

    return Route(path, endpoint=MethodDispatcher(parse_commit_path, method_handlers))


def build_routes() -> Sequence[Route]:
    """The routes of the fake, evaluated in order. The first matching route handles the request."""

    return [
        issue_route("/repos/{owner}/{repo}/pulls/{number}", {"GET": handlers.get_pull_request}),
        issue_route(
            "/repos/{owner}/{repo}/issues/{number}/comments",
            {"GET": handlers.list_comments, "POST": handlers.create_comment},
        ),
        issue_route(
            "/repos/{owner}/{repo}/issues/{number}/labels",
            {
                "GET": handlers.list_labels,
                "POST": handlers.add_labels,
                "PUT": handlers.replace_labels,
                "DELETE": handlers.clear_labels,
            },
        ),
        issue_route("/repos/{owner}/{repo}/issues/{number}/labels/{name:path}", {"DELETE": handlers.remove_label}),
        commit_route("/repos/{owner}/{repo}/commits/{sha}/status", {"GET": handlers.get_combined_status}),
        commit_route("/repos/{owner}/{repo}/commits/{sha}/statuses", {"GET": handlers.list_statuses}),
        commit_route("/repos/{owner}/{repo}/statuses/{sha}", {"POST": handlers.create_status}),
    ]


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"message": message, "documentation_url": DOCUMENTATION_URL}, status_code=status_code)


async def handle_server_error(request: Request, exc: Exception) -> Response:
    if not isinstance(exc, ServerError):
        raise exc

    logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    # Clients match on the exact reason, e.g. PyGithub only raises UnknownObjectException for "Not Found".
    return error_response(status_code=exc.status_code, message=exc.reason)


async def handle_http_exception(request: Request, exc: Exception) -> Response:
    if not isinstance(exc, HTTPException):
        raise exc

    return error_response(status_code=exc.status_code, message=exc.detail)


def create_app(store: FakeGitHubStore | None = None, logger: Logger | None = None) -> Starlette:
    """Create the ASGI app serving the fake GitHub API from the given store."""

    logger = logger or getLogger(__name__)

    app = Starlette(
        routes=list(build_routes()),
        middleware=[Middleware(RequestLoggingMiddleware, logger=logger)],
        exception_handlers={
            ServerError: handle_server_error,
            HTTPException: handle_http_exception,
        },
    )
    app.state.store = store or FakeGitHubStore(logger=logger)

    return app
