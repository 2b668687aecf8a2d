from dataclasses import dataclass

import anyio

from fastsqs.clients.sqs import SQSClient
from fastsqs.config import ConsumerConfig
from fastsqs.consumer import SQSConsumer
from fastsqs.datastructures import DeleteStrategy
from fastsqs.logger import logger, setup_logger
from fastsqs.types import MessageHandler


@dataclass(frozen=True)
class AppConfiguration:
    handler: str
    log_level: int
    log_serialize: bool


@dataclass(frozen=True)
class QueueConfiguration:
    queue_url: str
    concurrency: int
    wait_time_seconds: int
    max_messages_per_poll: int
    visibility_timeout_seconds: int | None
    delete_strategy: DeleteStrategy
    region: str | None = None
    endpoint_url: str | None = None

    def to_consumer_config(self) -> ConsumerConfig:
        return ConsumerConfig(
            queue_url=self.queue_url,
            concurrency=self.concurrency,
            wait_time_seconds=self.wait_time_seconds,
            max_messages_per_poll=self.max_messages_per_poll,
            visibility_timeout_seconds=self.visibility_timeout_seconds,
            delete_strategy=self.delete_strategy,
        )


class ConsumerRunner:
    def run(
        self,
        handler: MessageHandler,
        app_configuration: AppConfiguration,
        queue_configuration: QueueConfiguration,
    ) -> None:
        setup_logger(
            log_level=app_configuration.log_level,
            log_serialize=app_configuration.log_serialize,
        )

        config = queue_configuration.to_consumer_config()
        transport = SQSClient.from_session(
            region_name=queue_configuration.region,
            endpoint_url=queue_configuration.endpoint_url,
        )
        consumer = SQSConsumer(config, transport=transport)

        logger.info(
            f"Starting the consumer for '{app_configuration.handler}' "
            f"with {config.concurrency} worker(s)"
        )
        anyio.run(consumer.start, handler)
