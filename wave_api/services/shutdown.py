"""Graceful shutdown: release the database pool once, then stop the server.

The coordinator is a two-state machine, ``RUNNING`` -> ``SHUTTING_DOWN``.
The first trigger (SIGTERM, SIGINT, or the ASGI lifespan ending) wins; every
later trigger is ignored, so the pool is never released twice.  The release
does not wait for in-flight requests.

On the first signal the captured signals are switched to ``SIG_IGN`` for the
rest of the process lifetime, so a repeated signal during teardown can neither
re-enter the sequence nor kill the process before it exits with status 0.
"""

import asyncio
import enum
import logging
import signal
from collections.abc import Callable, Iterable

from wave_api.database import Database

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)


class ShutdownState(enum.Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


class ShutdownCoordinator:
    """Own the shutdown sequence for one process.

    ``stop_server`` is called after a signal-triggered release and asks the
    HTTP server to leave its serve loop; the process then exits normally.
    """

    def __init__(
        self,
        database: Database,
        stop_server: Callable[[], object] | None = None,
    ) -> None:
        self._database = database
        self._stop_server = stop_server
        self._state = ShutdownState.RUNNING
        self._task: asyncio.Task[None] | None = None
        self._installed: list[signal.Signals] = []
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def task(self) -> asyncio.Task[None] | None:
        """The task running a signal-triggered shutdown, if one was started."""
        return self._task

    def install(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        signals: Iterable[signal.Signals] = SHUTDOWN_SIGNALS,
    ) -> None:
        """Route *signals* on *loop* to :meth:`handle_signal`."""
        loop = loop or asyncio.get_running_loop()
        for sig in signals:
            try:
                loop.add_signal_handler(sig, self.handle_signal, sig)
            except (NotImplementedError, ValueError, RuntimeError):
                # Windows loops lack add_signal_handler; other threads cannot set handlers.
                logger.warning(
                    "Cannot capture %s in this event loop; leaving it to the server", sig.name
                )
                continue
            self._installed.append(sig)
        self._loop = loop

    def uninstall(self) -> None:
        """Hand the captured signals back to their default disposition."""
        if self._loop is None:
            return
        for sig in self._installed:
            self._loop.remove_signal_handler(sig)
        self._installed.clear()
        self._loop = None

    def handle_signal(self, sig: signal.Signals) -> None:
        """Signal callback: start the shutdown task unless one already ran."""
        if self._state is ShutdownState.SHUTTING_DOWN or self._task is not None:
            logger.warning("Received %s while already shutting down; ignoring", sig.name)
            return
        logger.info("Received %s", sig.name)
        self._ignore_further_signals()
        self._task = asyncio.get_running_loop().create_task(self._shutdown_and_stop())
        self._task.add_done_callback(_log_task_failure)

    async def shutdown(self) -> bool:
        """Release the database pool if this is the first shutdown request.

        Returns ``True`` when this call performed the release, ``False`` when a
        shutdown had already begun.  A failure during release is logged and
        does not stop the sequence.
        """
        if self._state is ShutdownState.SHUTTING_DOWN:
            return False
        self._state = ShutdownState.SHUTTING_DOWN

        logger.info("Shutting down...")
        try:
            await self._database.dispose()
        except Exception:
            logger.exception("Failed to release database connections during shutdown")
        else:
            logger.info("Database connections released")
        return True

    async def _shutdown_and_stop(self) -> None:
        if await self.shutdown() and self._stop_server is not None:
            self._stop_server()

    def _ignore_further_signals(self) -> None:
        """Detach our loop handlers and leave the signals at ``SIG_IGN``.

        Removing a loop handler restores the default disposition, so the
        signals are blocked while switching; a signal pending at that moment is
        discarded once the disposition is ``SIG_IGN``.
        """
        if self._loop is None or not self._installed:
            return
        sigs = set(self._installed)
        signal.pthread_sigmask(signal.SIG_BLOCK, sigs)
        try:
            for sig in self._installed:
                self._loop.remove_signal_handler(sig)
                signal.signal(sig, signal.SIG_IGN)
        finally:
            signal.pthread_sigmask(signal.SIG_UNBLOCK, sigs)
        self._installed.clear()
        self._loop = None


def _log_task_failure(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Shutdown sequence failed", exc_info=exc)
