"""Run the server: ``python -m wave_api`` or the ``wave-api`` console script.

SIGTERM and SIGINT belong to the app's :class:`ShutdownCoordinator` for the
whole run, installed before uvicorn starts serving.  After the pool is
released the coordinator asks the server to stop, ``serve()`` returns, and the
process exits with status 0.
"""

import asyncio
import contextlib
from collections.abc import Generator

import uvicorn

from wave_api.config import get_settings
from wave_api.logging_config import configure_logging
from wave_api.main import create_app
from wave_api.services.shutdown import ShutdownCoordinator


class Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the shutdown coordinator."""

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None]:
        # uvicorn would restore and re-raise captured signals when serve() ends.
        yield

    def request_exit(self) -> None:
        # The pool is already released; the lifespan shutdown that follows is a no-op.
        self.should_exit = True


async def serve(server: Server, coordinator: ShutdownCoordinator) -> None:
    coordinator.install()
    try:
        await server.serve()
    finally:
        coordinator.uninstall()


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    # ``server`` is bound below, before any signal can reach the coordinator.
    app = create_app(settings, stop_server=lambda: server.request_exit())
    server = Server(
        uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            # Keep the root handler from configure_logging instead of uvicorn's dictConfig.
            log_config=None,
            # AccessLogMiddleware writes the access log.
            access_log=False,
        )
    )
    asyncio.run(serve(server, app.state.shutdown_coordinator))


if __name__ == "__main__":
    main()
