"""Consumer configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fastsqs.datastructures import DeleteStrategy
from fastsqs.logger import logger

DEFAULT_CONCURRENCY = 5
DEFAULT_WAIT_TIME_SECONDS = 10
DEFAULT_MAX_MESSAGES_PER_POLL = 10
DEFAULT_DELETE_STRATEGY = DeleteStrategy.IMMEDIATE

# Limits of the ReceiveMessage API.
MAX_WAIT_TIME_SECONDS = 20
MAX_MESSAGES_PER_POLL = 10


class ConsumerConfig(BaseModel):
    """Immutable settings of a consumer pool.

    Zero values of the integer fields are replaced by their defaults, and an
    unset or unknown delete strategy falls back to IMMEDIATE. The visibility
    timeout has no default: when it is None the queue's own setting applies.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    queue_url: str = ""
    concurrency: int = Field(default=0, ge=0)
    wait_time_seconds: int = Field(default=0, ge=0, le=MAX_WAIT_TIME_SECONDS)
    max_messages_per_poll: int = Field(default=0, ge=0, le=MAX_MESSAGES_PER_POLL)
    visibility_timeout_seconds: int | None = Field(default=None, ge=0)
    delete_strategy: DeleteStrategy = DEFAULT_DELETE_STRATEGY

    @field_validator("queue_url", mode="before")
    @classmethod
    def _strip_queue_url(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("concurrency", mode="after")
    @classmethod
    def _default_concurrency(cls, value: int) -> int:
        return value or DEFAULT_CONCURRENCY

    @field_validator("wait_time_seconds", mode="after")
    @classmethod
    def _default_wait_time(cls, value: int) -> int:
        return value or DEFAULT_WAIT_TIME_SECONDS

    @field_validator("max_messages_per_poll", mode="after")
    @classmethod
    def _default_max_messages(cls, value: int) -> int:
        return value or DEFAULT_MAX_MESSAGES_PER_POLL

    @field_validator("delete_strategy", mode="before")
    @classmethod
    def _parse_delete_strategy(cls, value: Any) -> DeleteStrategy:
        if isinstance(value, DeleteStrategy):
            return value

        if not value:
            return DEFAULT_DELETE_STRATEGY

        normalized = str(value).strip().lower().replace("-", "_")
        try:
            return DeleteStrategy(normalized)
        except ValueError:
            logger.warning(
                f"Unknown delete strategy {value!r}, falling back to '{DEFAULT_DELETE_STRATEGY}'."
            )
            return DEFAULT_DELETE_STRATEGY
