"""Consumer implementation."""

from fastsqs.clients.base import QueueTransport
from fastsqs.clients.sqs import SQSClient
from fastsqs.concurrency.context import ConsumerContext
from fastsqs.concurrency.manager import AsyncTaskManager
from fastsqs.concurrency.tasks import IDLE_DELAY_SECONDS
from fastsqs.concurrency.utils import ensure_message_handler
from fastsqs.config import ConsumerConfig
from fastsqs.exceptions import ConfigurationNotSetError, QueueNotSetError
from fastsqs.logger import logger
from fastsqs.types import MessageHandler


class SQSConsumer:
    """Consumes an SQS queue with a pool of concurrent workers.

    Example:
        ```python
        config = ConsumerConfig(queue_url=url, delete_strategy="on_success")
        consumer = SQSConsumer(config)

        async def handler(body: bytes, attributes: Mapping[str, Any]) -> None:
            ...

        await consumer.start(handler)
        ```
    """

    def __init__(
        self,
        config: ConsumerConfig | None,
        transport: QueueTransport | None = None,
        idle_delay: float = IDLE_DELAY_SECONDS,
    ) -> None:
        if config is None:
            raise ConfigurationNotSetError("The consumer configuration is not set.")

        if not config.queue_url:
            raise QueueNotSetError("The queue url is not set.")

        self.config = config
        self.idle_delay = idle_delay
        if transport is None:
            transport = SQSClient.from_session()
        self.transport = transport
        self._task_manager: AsyncTaskManager | None = None

    async def start(
        self,
        handler: MessageHandler,
        context: ConsumerContext | None = None,
        handle_signals: bool = True,
    ) -> None:
        """Consumes the queue until cancelled or until a worker fails.

        Args:
            handler: Called with the body and the attributes of each message. It
                signals a failure by raising. Sync handlers run in worker threads.
            context: An optional parent context. Cancelling it stops the workers.
            handle_signals: Whether SIGINT and SIGTERM stop the workers.

        Raises:
            QueueTransportError: The first receive or delete failure of any worker.
        """
        ensure_message_handler(handler)

        task_manager = AsyncTaskManager(
            config=self.config,
            transport=self.transport,
            context=context.child() if context is not None else ConsumerContext(),
            handle_signals=handle_signals,
            idle_delay=self.idle_delay,
        )
        self._task_manager = task_manager

        try:
            await task_manager.run(handler)
        finally:
            task_manager.context.cancel()
            task_manager.context.detach()
            logger.info("The SQS consumer stopped")

    def stop(self) -> None:
        if self._task_manager is not None:
            self._task_manager.shutdown()

    def alive(self) -> bool:
        workers = self._task_manager.alive() if self._task_manager else {}
        if not workers:
            logger.info("The workers are not active. May be they are not started?")
            return False

        for name, liveness in workers.items():
            if not liveness:
                logger.error(f"The {name} worker is not alive")
                return False

        return True

    def ready(self) -> bool:
        workers = self._task_manager.ready() if self._task_manager else {}
        if not workers:
            logger.info("The workers are not active. May be they are not started?")
            return False

        for name, readiness in workers.items():
            if not readiness:
                logger.error(f"The {name} worker is not ready")
                return False

        return True
