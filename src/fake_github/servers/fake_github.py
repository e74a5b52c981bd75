import threading
import time
from logging import Logger, getLogger
from types import TracebackType
from typing import Self

import uvicorn
from anyio import to_thread
from github import Github

from fake_github.clients.github import DEFAULT_TOKEN, get_github_client
from fake_github.servers.router import create_app
from fake_github.store import FakeGitHubStore

DEFAULT_HOST = "127.0.0.1"
DEFAULT_STARTUP_TIMEOUT = 10.0
DEFAULT_SHUTDOWN_TIMEOUT = 10.0
STARTUP_POLL_INTERVAL = 0.01


class ServerStartupError(RuntimeError):
    """The fake GitHub server did not start listening in time."""


class FakeGitHubServer:
    """Serves a fake GitHub REST API from an in-memory store on a background thread.

    Use it as a context manager so the server is always stopped and its port released:

        with FakeGitHubServer() as fake_github:
            fake_github.store.add_pull_request(pull_request)
            github = fake_github.github_client()
    """

    store: FakeGitHubStore
    host: str
    port: int
    logger: Logger

    startup_timeout: float
    shutdown_timeout: float

    def __init__(
        self,
        store: FakeGitHubStore | None = None,
        host: str = DEFAULT_HOST,
        port: int = 0,
        logger: Logger | None = None,
        startup_timeout: float = DEFAULT_STARTUP_TIMEOUT,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
    ):
        self.logger = logger or getLogger(__name__)
        self.store = store or FakeGitHubStore(logger=self.logger)
        self.host = host
        self.port = port
        self.startup_timeout = startup_timeout
        self.shutdown_timeout = shutdown_timeout

        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._bound_port: int | None = None

    @property
    def running(self) -> bool:
        return self._server is not None

    @property
    def base_url(self) -> str:
        if self._bound_port is None:
            msg = "The fake GitHub server is not running"
            raise RuntimeError(msg)

        return f"http://{self.host}:{self._bound_port}"

    def start(self) -> str:
        """Start serving and return the base URL once the server is listening."""

        if self._server is not None:
            return self.base_url

        config = uvicorn.Config(
            app=create_app(store=self.store, logger=self.logger),
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        server = uvicorn.Server(config=config)
        thread = threading.Thread(target=server.run, name="fake-github", daemon=True)

        self._server = server
        self._thread = thread
        thread.start()

        deadline = time.monotonic() + self.startup_timeout
        while not server.started:
            if not thread.is_alive() or time.monotonic() > deadline:
                self.stop()
                msg = f"The fake GitHub server failed to start on {self.host}:{self.port}"
                raise ServerStartupError(msg)
            time.sleep(STARTUP_POLL_INTERVAL)

        self._bound_port = server.servers[0].sockets[0].getsockname()[1]  # pyright: ignore[reportAny]

        self.logger.info(f"Fake GitHub server started at {self.base_url}")

        return self.base_url

    def stop(self) -> None:
        """Stop serving and wait for the listening socket to close."""

        server, thread = self._server, self._thread
        self._server, self._thread, self._bound_port = None, None, None

        if server is None or thread is None:
            return

        server.should_exit = True
        thread.join(timeout=self.shutdown_timeout)

        if thread.is_alive():
            self.logger.warning("Fake GitHub server did not stop gracefully, forcing exit")
            server.force_exit = True
            thread.join(timeout=self.shutdown_timeout)

        self.logger.info("Fake GitHub server stopped")

    def github_client(self, token: str = DEFAULT_TOKEN) -> Github:
        """A PyGithub client that talks to this server."""

        return get_github_client(base_url=self.base_url, token=token)

    def __enter__(self) -> Self:
        _ = self.start()
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None) -> None:
        self.stop()

    async def __aenter__(self) -> Self:
        _ = await to_thread.run_sync(self.start)
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None) -> None:
        await to_thread.run_sync(self.stop)
