from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from fastsqs.datastructures import AckEntry, Message

ALL_ATTRIBUTES = ("All",)


@runtime_checkable
class QueueTransport(Protocol):
    """Receives and deletes messages on a remote queue.

    A single instance is shared by every worker of a pool, so implementations
    must accept concurrent calls.
    """

    async def receive(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout_seconds: int | None,
        wait_time_seconds: int,
        attribute_names: Sequence[str] = ALL_ATTRIBUTES,
    ) -> list[Message]:
        """Long-polls the queue for up to `max_messages` messages."""
        ...

    async def delete_batch(self, queue_url: str, entries: Sequence[AckEntry]) -> None:
        """Deletes up to ten messages in a single call."""
        ...
