from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


@dataclass(frozen=True)
class Message:
    id: str
    body: bytes
    ack_token: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    system_attributes: Mapping[str, str] = field(default_factory=dict)

    @property
    def receive_count(self) -> int:
        return int(self.system_attributes.get("ApproximateReceiveCount", 0))


@dataclass(frozen=True)
class AckEntry:
    id: str
    ack_token: str

    @classmethod
    def from_message(cls, message: Message) -> "AckEntry":
        return cls(id=message.id, ack_token=message.ack_token)


class DeleteStrategy(StrEnum):
    """When received messages are deleted from the queue.

    IMMEDIATE deletes the whole batch before any handler runs (at-most-once).
    ON_SUCCESS deletes only the messages whose handler succeeded (at-least-once).
    """

    IMMEDIATE = "immediate"
    ON_SUCCESS = "on_success"

    @property
    def deletes_before_handling(self) -> bool:
        return self is DeleteStrategy.IMMEDIATE

    @property
    def deletes_on_success(self) -> bool:
        return self is DeleteStrategy.ON_SUCCESS
