from collections.abc import Mapping
from typing import Any

import anyio

from fastsqs import ConsumerConfig, ConsumerContext, SQSConsumer
from fastsqs.logger import logger

QUEUE_URL = "http://localhost:4566/000000000000/orders"


async def process_message(body: bytes, attributes: Mapping[str, Any]) -> None:
    logger.info(f"Processed message: {body!r}")


async def main() -> None:
    context = ConsumerContext()
    consumer = SQSConsumer(ConsumerConfig(queue_url=QUEUE_URL))

    async with anyio.create_task_group() as tg:
        tg.start_soon(consumer.start, process_message, context, False)

        await anyio.sleep(30)
        logger.info("Stopping the consumer after 30 seconds")
        context.cancel()


if __name__ == "__main__":
    anyio.run(main)
