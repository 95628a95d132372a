"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Installs signal handlers, watches critical tasks through the TaskRegistry and
runs the registered shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import List, Optional, Dict, Set

from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)

# Categories whose failure takes the whole relay down
CRITICAL_CATEGORIES: Set[str] = {"API", "NETWORK"}


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(APIServerShutdownHandler(api_wrapper))
        coordinator.register(UDPShutdownHandler(listener, discovery, dispatcher))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        self._handlers: List = []
        self._shutdown_event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._shutdown_trigger: Dict[str, Optional[str]] = {"reason": None}

    @property
    def reason(self) -> Optional[str]:
        return self._shutdown_trigger["reason"]

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must expose a `shutdown_priority` property and an async
        `shutdown()` method.
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT and SIGTERM handlers that trigger shutdown."""
        self._shutdown_event = asyncio.Event()
        shutdown_event = self._shutdown_event

        def signal_handler(sig: signal.Signals) -> None:
            self._shutdown_trigger["reason"] = sig.name
            log.info(f"Signal {sig.name} received → triggering shutdown")
            shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str) -> None:
        """Trigger shutdown programmatically."""
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        self._shutdown_trigger["reason"] = reason
        self._shutdown_event.set()

    # ------------------------------------------------------------------
    # Critical task monitoring
    # ------------------------------------------------------------------

    def _critical_tasks(self) -> List[asyncio.Task]:
        return [
            r.task for r in TaskRegistry.instance().active()
            if r.info.category.name in CRITICAL_CATEGORIES
        ]

    def _check_critical_task_failures(self) -> bool:
        for record in TaskRegistry.instance().failed():
            if record.info.category.name in CRITICAL_CATEGORIES:
                log.error(
                    f"❌ Critical task failed: {record.info.description} "
                    f"(category: {record.info.category.name})"
                )
                self._shutdown_trigger["reason"] = f"Task failure: {record.info.description}"
                return True
        return False

    def _handle_critical_task_completion(self, completed_task: asyncio.Task) -> bool:
        """
        Returns True when the task ended with an exception.

        Clean completion and cancellation do not trigger shutdown.
        """
        if completed_task.cancelled():
            return False

        record = TaskRegistry.instance().get_record_by_task(completed_task)
        task_name = record.info.description if record else completed_task.get_name()

        error = record.finished_with_error if record else completed_task.exception()
        if error is not None:
            log.error(f"❌ Critical task failed: {task_name} - {error!r}")
            self._shutdown_trigger["reason"] = f"Task failure: {task_name}"
            return True

        log.debug(f"Critical task completed cleanly: {task_name}")
        return False

    async def _wait_for_critical_task_completion(
        self, critical_tasks: List[asyncio.Task]
    ) -> Optional[bool]:
        """
        Returns True on shutdown signal, False on critical task failure,
        None when monitoring should continue.
        """
        if not critical_tasks:
            try:
                await asyncio.wait_for(self._shutdown_event.wait(), timeout=0.2)
                return True
            except asyncio.TimeoutError:
                return None

        shutdown_waiter = asyncio.create_task(self._shutdown_event.wait())
        wait_set: Set[asyncio.Task] = set(critical_tasks)
        wait_set.add(shutdown_waiter)

        try:
            done, _ = await asyncio.wait(wait_set, return_when=asyncio.FIRST_COMPLETED)
            if shutdown_waiter in done:
                return True
            for completed_task in done:
                if self._handle_critical_task_completion(completed_task):
                    return False
            return None
        finally:
            # Critical tasks stay alive across iterations; only the waiter is ours
            if not shutdown_waiter.done():
                shutdown_waiter.cancel()

    async def wait_for_shutdown(self) -> None:
        """
        Block until a shutdown signal arrives or a critical task fails.

        Raises:
            RuntimeError: If signal handlers weren't set up
        """
        if self._shutdown_event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        while not self._shutdown_event.is_set():
            if self._check_critical_task_failures():
                return

            result = await self._wait_for_critical_task_completion(self._critical_tasks())

            if result is True or self._shutdown_event.is_set():
                log.debug("Shutdown triggered by signal handler")
                return
            if result is False:
                return

    # ------------------------------------------------------------------
    # Shutdown sequence
    # ------------------------------------------------------------------

    async def shutdown_all(self) -> None:
        """
        Run handlers in descending priority order.

        Each handler gets `timeout_per_handler` seconds; the whole sequence is
        capped at `total_timeout`. A failing handler does not stop the rest.
        """
        log.info("🛑 Initiating graceful shutdown sequence...")
        log.info(f"   Reason: {self._shutdown_trigger.get('reason') or 'UNKNOWN'}")

        sorted_handlers = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"⚠️  Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {handler_name} shutdown complete")
            except asyncio.TimeoutError:
                log.error(f"⚠️  {handler_name} shutdown timeout ({self._timeout_per_handler}s)")
            except asyncio.CancelledError:
                log.warn(f"{handler_name} shutdown was cancelled")
                raise
            except Exception as e:
                log.error(f"❌ Error shutting down {handler_name}: {e!r}")

        log.info("✓ Shutdown sequence complete")

    def get_handler(self, handler_type: type):
        """Registered handler of the given type, or None."""
        for handler in self._handlers:
            if isinstance(handler, handler_type):
                return handler
        return None
