import json
from collections.abc import Mapping
from typing import Any

import anyio

from fastsqs import ConsumerConfig, DeleteStrategy, SQSConsumer
from fastsqs.logger import logger

QUEUE_URL = "http://localhost:4566/000000000000/payments"


def charge_payment(body: bytes, attributes: Mapping[str, Any]) -> None:
    # Sync handlers run in worker threads, so blocking calls are fine here.
    payment = json.loads(body)
    if payment.get("amount", 0) <= 0:
        raise ValueError(f"Invalid amount for payment {payment.get('id')}")

    logger.info(f"Charged payment: {payment}")


async def main() -> None:
    config = ConsumerConfig(
        queue_url=QUEUE_URL,
        concurrency=4,
        wait_time_seconds=20,
        visibility_timeout_seconds=60,
        delete_strategy=DeleteStrategy.ON_SUCCESS,
    )
    consumer = SQSConsumer(config)

    # Failed payments stay on the queue and are redelivered after 60 seconds.
    await consumer.start(charge_payment)


if __name__ == "__main__":
    anyio.run(main)
