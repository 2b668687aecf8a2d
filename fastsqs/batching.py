"""Splitting of acknowledgment batches."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

# Hard limit of entries per DeleteMessageBatch call.
SQS_MAX_BATCH_SIZE = 10


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Splits the items into consecutive chunks of at most `size` elements.

    Every chunk holds exactly `size` items except the last one, which holds the
    remainder. An empty sequence yields no chunks.

    Args:
        items: The items to split. Their order is preserved.
        size: The maximum length of each chunk.

    Returns:
        The list of chunks.
    """
    if size < 1:
        raise ValueError(f"The chunk size must be positive but it is {size}.")

    return [list(items[start : start + size]) for start in range(0, len(items), size)]
