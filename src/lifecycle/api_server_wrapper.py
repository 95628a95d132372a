from __future__ import annotations
import asyncio
import contextlib
import uvicorn
from typing import Any, Optional
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Runs Uvicorn inside an asyncio task with its signal handlers disabled, so
    the ShutdownCoordinator owns process signals.

    start() serves until stop() is called. stop() asks uvicorn to exit,
    waits briefly, then cancels the serve task.
    """

    def __init__(self, app: Any, host: str = "0.0.0.0", port: int = 3000):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event: asyncio.Event = asyncio.Event()

    def _create_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )
        server = uvicorn.Server(config)
        server.install_signal_handlers = lambda: None  # type: ignore
        # Newer uvicorn installs handlers through capture_signals()
        if hasattr(server, "capture_signals"):
            server.capture_signals = contextlib.nullcontext  # type: ignore
        return server

    async def start(self) -> None:
        """
        Launch uvicorn and block until stop() is invoked or the server exits.

        Schedule with create_tracked_task() for non-blocking start. If serve()
        ends on its own, the failure is raised from here so the task registry
        marks the task as failed.
        """
        if self.is_running:
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"🌐 Launching API server on http://{self.host}:{self.port}")
        self._serve_task = asyncio.create_task(self._server.serve(), name="UvicornServeInternal")
        stop_waiter = asyncio.create_task(self._stop_event.wait())

        try:
            done, _ = await asyncio.wait(
                {self._serve_task, stop_waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            log.debug("start() cancelled externally, invoking stop()")
            await self.stop()
            raise
        finally:
            if not stop_waiter.done():
                stop_waiter.cancel()

        if self._serve_task in done and not self._stop_event.is_set():
            serve_task = self._serve_task
            self._server = None
            self._serve_task = None
            error = serve_task.exception()
            if error is not None:
                raise error
            # serve() returned before stop() was requested
            raise RuntimeError(f"API server exited unexpectedly on port {self.port}")

    async def stop(self, *, shutdown_timeout: float = 2.0) -> None:
        """Stop the API server and release the port."""
        self._stop_event.set()

        if self._server is None:
            log.debug("API server stop() called but server was not running")
            return

        log.info("🌐 Stopping API server...")
        self._server.should_exit = True
        self._server.force_exit = True

        if self._serve_task and not self._serve_task.done():
            try:
                await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=shutdown_timeout)
            except asyncio.TimeoutError:
                log.warn("🌐 API server shutdown timeout; cancelling serve task")
                self._serve_task.cancel()
                try:
                    await self._serve_task
                except asyncio.CancelledError:
                    log.debug("Uvicorn serve task cancelled")

        self._server = None
        self._serve_task = None
        log.info("🌐 API server stopped and port released")

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server
