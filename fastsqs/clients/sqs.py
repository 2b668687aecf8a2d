import os
from collections.abc import Sequence
from functools import partial
from typing import Any

import anyio
import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from fastsqs.batching import SQS_MAX_BATCH_SIZE
from fastsqs.clients.base import ALL_ATTRIBUTES
from fastsqs.datastructures import AckEntry, Message
from fastsqs.exceptions import AWSConfigurationError, QueueTransportError
from fastsqs.logger import logger

SDK_EXCEPTIONS = (BotoCoreError, ClientError)


class SQSClient:
    """QueueTransport backed by a boto3 SQS client.

    boto3 clients are thread-safe, so one instance serves every worker. The
    blocking SDK calls run in worker threads to keep the event loop free.
    """

    def __init__(self, client: BaseClient, limiter: anyio.CapacityLimiter | None = None) -> None:
        self.client = client
        self.limiter = limiter

    @classmethod
    def from_session(
        cls, region_name: str | None = None, endpoint_url: str | None = None
    ) -> "SQSClient":
        """Builds the client from the default boto3 credential chain.

        Raises:
            AWSConfigurationError: If the credentials or the region cannot be resolved.
        """
        region_name = region_name or os.getenv("AWS_REGION") or None
        endpoint_url = endpoint_url or os.getenv("AWS_ENDPOINT_URL") or None

        try:
            session = boto3.Session(region_name=region_name)
            credentials = session.get_credentials()
        except BotoCoreError as e:
            raise AWSConfigurationError(f"The AWS configuration could not be loaded: {e}") from e

        if credentials is None:
            logger.error("The AWS credentials could not be resolved.")
            raise AWSConfigurationError(
                "No AWS credentials found. Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY "
                "or configure a profile."
            )

        if not session.region_name:
            logger.error("The AWS region could not be resolved.")
            raise AWSConfigurationError(
                "No AWS region found. Set AWS_REGION or configure a profile."
            )

        client = session.client("sqs", endpoint_url=endpoint_url)
        logger.debug(f"Created the SQS client for region {session.region_name}")
        return cls(client)

    async def receive(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout_seconds: int | None,
        wait_time_seconds: int,
        attribute_names: Sequence[str] = ALL_ATTRIBUTES,
    ) -> list[Message]:
        request: dict[str, Any] = {
            "QueueUrl": queue_url,
            "MaxNumberOfMessages": max_messages,
            "WaitTimeSeconds": wait_time_seconds,
            "MessageAttributeNames": list(attribute_names),
            "MessageSystemAttributeNames": list(attribute_names),
        }
        if visibility_timeout_seconds is not None:
            request["VisibilityTimeout"] = visibility_timeout_seconds

        response = await self._call(self.client.receive_message, **request)
        return [self._translate_message(raw_message) for raw_message in response.get("Messages", [])]

    async def delete_batch(self, queue_url: str, entries: Sequence[AckEntry]) -> None:
        if not entries:
            return

        if len(entries) > SQS_MAX_BATCH_SIZE:
            raise ValueError(
                f"A delete batch holds at most {SQS_MAX_BATCH_SIZE} entries, got {len(entries)}."
            )

        request_entries = [{"Id": entry.id, "ReceiptHandle": entry.ack_token} for entry in entries]
        response = await self._call(
            self.client.delete_message_batch, QueueUrl=queue_url, Entries=request_entries
        )

        for failure in response.get("Failed", []):
            logger.error(
                f"Failed to delete message {failure.get('Id')}: "
                f"{failure.get('Code')} {failure.get('Message', '')}".strip(),
                extra={"sender_fault": failure.get("SenderFault")},
            )

    async def _call(self, operation: Any, **kwargs: Any) -> dict[str, Any]:
        try:
            return await anyio.to_thread.run_sync(partial(operation, **kwargs), limiter=self.limiter)
        except SDK_EXCEPTIONS as e:
            name = getattr(operation, "__name__", "operation")
            raise QueueTransportError(f"The SQS call {name} failed: {e}") from e

    def _translate_message(self, raw_message: dict[str, Any]) -> Message:
        return Message(
            id=raw_message["MessageId"],
            body=raw_message.get("Body", "").encode(),
            ack_token=raw_message["ReceiptHandle"],
            attributes=raw_message.get("MessageAttributes", {}),
            system_attributes=raw_message.get("Attributes", {}),
        )
