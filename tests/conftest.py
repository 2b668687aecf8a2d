import time
from collections.abc import Callable, Sequence
from typing import Any

import anyio
import pytest

from fastsqs.clients.base import ALL_ATTRIBUTES
from fastsqs.concurrency.context import ConsumerContext
from fastsqs.config import ConsumerConfig
from fastsqs.datastructures import AckEntry, DeleteStrategy, Message

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/orders"


def make_message(message_id: str) -> Message:
    return Message(
        id=message_id,
        body=f"body-{message_id}".encode(),
        ack_token=f"receipt-{message_id}",
        attributes={"origin": {"DataType": "String", "StringValue": "tests"}},
    )


class FakeQueueTransport:
    """In-memory transport answering receives from a script.

    Each scripted response is either a list of messages or an exception to
    raise. Once the script is exhausted every receive returns no messages and
    `on_exhausted` is called.
    """

    def __init__(
        self,
        responses: Sequence[Sequence[Message] | Exception] | None = None,
        on_exhausted: Callable[[], None] | None = None,
        delete_error: Exception | None = None,
    ) -> None:
        self.responses = list(responses or [])
        self.on_exhausted = on_exhausted
        self.delete_error = delete_error

        self.receive_calls: list[dict[str, Any]] = []
        self.receive_times: list[float] = []
        self.deleted: list[list[AckEntry]] = []
        self.events: list[tuple[str, Any]] = []

    async def receive(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout_seconds: int | None,
        wait_time_seconds: int,
        attribute_names: Sequence[str] = ALL_ATTRIBUTES,
    ) -> list[Message]:
        self.receive_times.append(time.monotonic())
        self.receive_calls.append(
            {
                "queue_url": queue_url,
                "max_messages": max_messages,
                "visibility_timeout_seconds": visibility_timeout_seconds,
                "wait_time_seconds": wait_time_seconds,
                "attribute_names": tuple(attribute_names),
            }
        )

        response: Sequence[Message] | Exception = []
        if self.responses:
            response = self.responses.pop(0)
        elif self.on_exhausted is not None:
            self.on_exhausted()

        await anyio.sleep(0)
        if isinstance(response, Exception):
            raise response
        return list(response)

    async def delete_batch(self, queue_url: str, entries: Sequence[AckEntry]) -> None:
        await anyio.sleep(0)
        if self.delete_error is not None:
            raise self.delete_error

        self.deleted.append(list(entries))
        self.events.append(("delete", tuple(entry.id for entry in entries)))

    @property
    def deleted_ids(self) -> list[list[str]]:
        return [[entry.id for entry in batch] for batch in self.deleted]


@pytest.fixture
def context() -> ConsumerContext:
    return ConsumerContext()


@pytest.fixture
def immediate_config() -> ConsumerConfig:
    return ConsumerConfig(
        queue_url=QUEUE_URL,
        concurrency=1,
        visibility_timeout_seconds=30,
        delete_strategy=DeleteStrategy.IMMEDIATE,
    )


@pytest.fixture
def on_success_config() -> ConsumerConfig:
    return ConsumerConfig(
        queue_url=QUEUE_URL,
        concurrency=1,
        visibility_timeout_seconds=30,
        delete_strategy=DeleteStrategy.ON_SUCCESS,
    )
