from fastsqs.clients.base import QueueTransport
from fastsqs.clients.sqs import SQSClient

__all__ = ["QueueTransport", "SQSClient"]
