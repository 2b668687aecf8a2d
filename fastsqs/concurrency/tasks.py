from collections.abc import Sequence
from enum import StrEnum
from functools import partial

import anyio

from fastsqs.batching import SQS_MAX_BATCH_SIZE, chunk
from fastsqs.clients.base import ALL_ATTRIBUTES, QueueTransport
from fastsqs.concurrency.context import ConsumerContext
from fastsqs.concurrency.utils import is_async_callable
from fastsqs.config import ConsumerConfig
from fastsqs.datastructures import AckEntry, Message
from fastsqs.logger import logger
from fastsqs.types import MessageHandler

# Delay before polling again after an empty receive.
IDLE_DELAY_SECONDS = 1.0


class WorkerState(StrEnum):
    POLLING = "polling"
    DISPATCHING = "dispatching"
    ACKNOWLEDGING = "acknowledging"
    STOPPED = "stopped"


class SQSPollTask:
    """Runs the poll, dispatch and acknowledge cycle of a single worker.

    The loop only stops at the cancellation checkpoint on top of each
    iteration, in which case `start` returns None. Receive and delete failures
    propagate to the caller. Handler failures are logged and skipped.
    """

    def __init__(
        self,
        name: str,
        config: ConsumerConfig,
        transport: QueueTransport,
        handler: MessageHandler,
        context: ConsumerContext,
        limiter: anyio.CapacityLimiter | None = None,
        idle_delay: float = IDLE_DELAY_SECONDS,
    ) -> None:
        self.name = name
        self.config = config
        self.transport = transport
        self.handler = handler
        self.context = context
        self.limiter = limiter
        self.idle_delay = idle_delay

        self.ready = False
        self.running = False
        self.state = WorkerState.STOPPED
        self._handler_is_async = is_async_callable(handler)

    async def start(self) -> None:
        logger.debug(f"The message poll loop started for {self.name}")

        self.running = True
        try:
            with logger.contextualize(worker=self.name, queue_url=self.config.queue_url):
                while not self.context.cancelled:
                    await self._poll_cycle()
        finally:
            self.ready = False
            self.running = False
            self.state = WorkerState.STOPPED

        logger.debug(f"The message poll loop stopped for {self.name}")

    async def _poll_cycle(self) -> None:
        self.state = WorkerState.POLLING
        messages = await self.transport.receive(
            self.config.queue_url,
            self.config.max_messages_per_poll,
            self.config.visibility_timeout_seconds,
            self.config.wait_time_seconds,
            ALL_ATTRIBUTES,
        )
        self.ready = True

        if not messages:
            logger.debug("No messages received")
            await self.context.wait(self.idle_delay)
            return

        logger.debug(f"Received {len(messages)} message(s)")
        strategy = self.config.delete_strategy
        if strategy.deletes_before_handling:
            self.state = WorkerState.ACKNOWLEDGING
            await self._acknowledge(messages)

        self.state = WorkerState.DISPATCHING
        succeeded = await self._dispatch(messages)

        if strategy.deletes_on_success:
            self.state = WorkerState.ACKNOWLEDGING
            await self._acknowledge(succeeded)

    async def _dispatch(self, messages: Sequence[Message]) -> list[Message]:
        succeeded: list[Message] = []
        for message in messages:
            with logger.contextualize(
                message_id=message.id, receive_count=message.receive_count
            ):
                try:
                    await self._consume(message)
                except Exception:
                    logger.exception("Unhandled exception on message handler")
                    continue

            succeeded.append(message)

        failed = len(messages) - len(succeeded)
        logger.info(f"Batch complete: {len(succeeded)} succeeded, {failed} failed")
        return succeeded

    async def _consume(self, message: Message) -> None:
        if self._handler_is_async:
            await self.handler(message.body, message.attributes)
            return

        await anyio.to_thread.run_sync(
            partial(self.handler, message.body, message.attributes), limiter=self.limiter
        )

    async def _acknowledge(self, messages: Sequence[Message]) -> None:
        entries = [AckEntry.from_message(message) for message in messages]
        for batch in chunk(entries, SQS_MAX_BATCH_SIZE):
            await self.transport.delete_batch(self.config.queue_url, batch)
            logger.debug(f"Deleted {len(batch)} message(s)")

    def task_ready(self) -> bool:
        return self.ready

    def task_alive(self) -> bool:
        return self.running
