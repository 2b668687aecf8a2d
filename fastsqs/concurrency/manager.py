"""Task manager for the consumer workers."""

import signal

import anyio

from fastsqs.clients.base import QueueTransport
from fastsqs.concurrency.context import ConsumerContext
from fastsqs.concurrency.tasks import IDLE_DELAY_SECONDS, SQSPollTask
from fastsqs.config import ConsumerConfig
from fastsqs.logger import logger
from fastsqs.types import MessageHandler

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class AsyncTaskManager:
    """Runs a fleet of poll tasks sharing one context and one transport.

    The first worker failure cancels the shared context, so the remaining
    workers stop at their next checkpoint, and is raised once every worker
    has returned.
    """

    def __init__(
        self,
        config: ConsumerConfig,
        transport: QueueTransport,
        context: ConsumerContext,
        handle_signals: bool = True,
        idle_delay: float = IDLE_DELAY_SECONDS,
    ) -> None:
        """Initializes the AsyncTaskManager."""
        self.config = config
        self.transport = transport
        self.context = context
        self.handle_signals = handle_signals
        self.idle_delay = idle_delay

        self._tasks: list[SQSPollTask] = []
        self._error: Exception | None = None

    def create_tasks(self, handler: MessageHandler, limiter: anyio.CapacityLimiter) -> None:
        """Builds one poll task per configured worker."""
        self._tasks = [
            SQSPollTask(
                name=f"worker-{index}",
                config=self.config,
                transport=self.transport,
                handler=handler,
                context=self.context,
                limiter=limiter,
                idle_delay=self.idle_delay,
            )
            for index in range(self.config.concurrency)
        ]

    async def run(self, handler: MessageHandler) -> None:
        """Runs the workers until all of them have returned.

        Raises:
            Exception: The first error raised by any worker.
        """
        self._error = None
        self._reserve_transport_threads()
        self.create_tasks(handler, anyio.CapacityLimiter(self.config.concurrency))
        logger.info(
            f"Starting {len(self._tasks)} worker(s) for {self.config.queue_url} "
            f"with delete strategy '{self.config.delete_strategy}'"
        )

        async with anyio.create_task_group() as tg:
            if self.handle_signals:
                tg.start_soon(self._watch_signals)

            async with anyio.create_task_group() as workers:
                for task in self._tasks:
                    workers.start_soon(self._run_task, task, name=task.name)

            tg.cancel_scope.cancel()

        logger.info("All the workers have stopped")
        if self._error is not None:
            raise self._error

    def _reserve_transport_threads(self) -> None:
        # Transports without their own limiter share the default thread
        # limiter, and every worker may hold one of its tokens while long-polling.
        default_limiter = anyio.to_thread.current_default_thread_limiter()
        if default_limiter.total_tokens < self.config.concurrency:
            logger.debug(
                f"Raising the default thread limit from {default_limiter.total_tokens} "
                f"to {self.config.concurrency}"
            )
            default_limiter.total_tokens = self.config.concurrency

    async def _run_task(self, task: SQSPollTask) -> None:
        try:
            await task.start()
        except Exception as e:
            if self._error is None:
                self._error = e
                logger.exception(f"Non-recoverable error on {task.name}, stopping the pool")
            else:
                logger.debug(f"Discarding the error of {task.name} as the pool is stopping: {e}")

            self.context.cancel()

    async def _watch_signals(self) -> None:
        try:
            with anyio.open_signal_receiver(*SHUTDOWN_SIGNALS) as signals:
                async for signum in signals:
                    signal_name = signal.Signals(signum).name
                    logger.info(f"Received {signal_name}, initiating graceful shutdown...")
                    self.context.cancel()
                    return
        except (NotImplementedError, RuntimeError, ValueError):
            logger.warning("Shutdown signals cannot be observed here, use the context to stop.")

    def alive(self) -> dict[str, bool]:
        """Checks if the tasks are alive.

        Returns:
            A dictionary mapping task names to their liveness status.
        """
        return {task.name: task.task_alive() for task in self._tasks}

    def ready(self) -> dict[str, bool]:
        """Checks if the tasks are ready.

        Returns:
            A dictionary mapping task names to their readiness status.
        """
        return {task.name: task.task_ready() for task in self._tasks}

    def shutdown(self) -> None:
        """Asks every task to stop at its next checkpoint."""
        self.context.cancel()
