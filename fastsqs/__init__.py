"""An asynchronous worker-pool consumer runtime for Amazon SQS"""

from fastsqs.__about__ import __version__
from fastsqs.batching import SQS_MAX_BATCH_SIZE, chunk
from fastsqs.clients.base import QueueTransport
from fastsqs.clients.sqs import SQSClient
from fastsqs.concurrency.context import ConsumerContext
from fastsqs.config import ConsumerConfig
from fastsqs.consumer import SQSConsumer
from fastsqs.datastructures import AckEntry, DeleteStrategy, Message

__all__ = [
    "__version__",
    "SQSConsumer",
    "ConsumerConfig",
    "ConsumerContext",
    "DeleteStrategy",
    "Message",
    "AckEntry",
    "QueueTransport",
    "SQSClient",
    "SQS_MAX_BATCH_SIZE",
    "chunk",
]
