import json
from collections.abc import Mapping
from typing import Any

import anyio

from fastsqs import ConsumerConfig, DeleteStrategy, SQSConsumer
from fastsqs.clients import SQSClient
from fastsqs.logger import logger

QUEUE_URL = "http://localhost:4566/000000000000/orders"


async def process_order(body: bytes, attributes: Mapping[str, Any]) -> None:
    order = json.loads(body)
    logger.info(f"Processed order: {order}")


async def main() -> None:
    config = ConsumerConfig(
        queue_url=QUEUE_URL,
        concurrency=2,
        delete_strategy=DeleteStrategy.IMMEDIATE,
    )
    transport = SQSClient.from_session(endpoint_url="http://localhost:4566")
    consumer = SQSConsumer(config, transport=transport)

    await consumer.start(process_order)


if __name__ == "__main__":
    anyio.run(main)
