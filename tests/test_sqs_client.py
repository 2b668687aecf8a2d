from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from fastsqs.clients.base import QueueTransport
from fastsqs.clients.sqs import SQSClient
from fastsqs.datastructures import AckEntry
from fastsqs.exceptions import AWSConfigurationError, QueueTransportError

from tests.conftest import QUEUE_URL

CLIENT_MODULE_PATH = "fastsqs.clients.sqs"


@pytest.fixture
def boto_client():
    return boto3.client(
        "sqs",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(boto_client) -> Generator[Stubber]:
    with Stubber(boto_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def sqs_client(boto_client) -> SQSClient:
    return SQSClient(boto_client)


@pytest.fixture
def aws_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    for variable in (
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
        "AWS_ENDPOINT_URL",
        "AWS_ENDPOINT_URL_SQS",
        "AWS_WEB_IDENTITY_TOKEN_FILE",
        "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI",
        "AWS_CONTAINER_CREDENTIALS_FULL_URI",
    ):
        monkeypatch.delenv(variable, raising=False)

    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    return monkeypatch


def receive_request(**overrides):
    request = {
        "QueueUrl": QUEUE_URL,
        "MaxNumberOfMessages": 10,
        "WaitTimeSeconds": 20,
        "MessageAttributeNames": ["All"],
        "MessageSystemAttributeNames": ["All"],
    }
    request.update(overrides)
    return request


class TestSQSClientReceive:
    def test_implements_queue_transport(self, sqs_client: SQSClient):
        assert isinstance(sqs_client, QueueTransport)

    @pytest.mark.asyncio
    async def test_receive_translates_messages(self, stubber: Stubber, sqs_client: SQSClient):
        stubber.add_response(
            "receive_message",
            {
                "Messages": [
                    {
                        "MessageId": "A",
                        "ReceiptHandle": "receipt-A",
                        "Body": '{"order": 1}',
                        "Attributes": {"ApproximateReceiveCount": "2"},
                        "MessageAttributes": {
                            "origin": {"DataType": "String", "StringValue": "checkout"}
                        },
                    },
                    {"MessageId": "B", "ReceiptHandle": "receipt-B", "Body": "plain"},
                ]
            },
            receive_request(VisibilityTimeout=30),
        )

        messages = await sqs_client.receive(QUEUE_URL, 10, 30, 20)

        assert [message.id for message in messages] == ["A", "B"]
        assert messages[0].body == b'{"order": 1}'
        assert messages[0].ack_token == "receipt-A"
        assert messages[0].attributes == {
            "origin": {"DataType": "String", "StringValue": "checkout"}
        }
        assert messages[0].system_attributes == {"ApproximateReceiveCount": "2"}
        assert messages[0].receive_count == 2
        assert messages[1].attributes == {}

    @pytest.mark.asyncio
    async def test_receive_omits_unset_visibility_timeout(
        self, stubber: Stubber, sqs_client: SQSClient
    ):
        stubber.add_response("receive_message", {}, receive_request())

        messages = await sqs_client.receive(QUEUE_URL, 10, None, 20)

        assert messages == []

    @pytest.mark.asyncio
    async def test_receive_passes_zero_visibility_timeout(
        self, stubber: Stubber, sqs_client: SQSClient
    ):
        stubber.add_response(
            "receive_message",
            {"Messages": []},
            receive_request(MaxNumberOfMessages=3, VisibilityTimeout=0),
        )

        assert await sqs_client.receive(QUEUE_URL, 3, 0, 20) == []

    @pytest.mark.asyncio
    async def test_receive_error_is_wrapped(self, stubber: Stubber, sqs_client: SQSClient):
        stubber.add_client_error(
            "receive_message",
            service_error_code="AWS.SimpleQueueService.NonExistentQueue",
            service_message="The specified queue does not exist.",
        )

        with pytest.raises(QueueTransportError, match="receive_message") as exc_info:
            await sqs_client.receive(QUEUE_URL, 10, None, 20)

        assert isinstance(exc_info.value.__cause__, ClientError)


class TestSQSClientDeleteBatch:
    @pytest.mark.asyncio
    async def test_delete_batch_sends_receipt_handles(
        self, stubber: Stubber, sqs_client: SQSClient
    ):
        stubber.add_response(
            "delete_message_batch",
            {"Successful": [{"Id": "A"}, {"Id": "C"}], "Failed": []},
            {
                "QueueUrl": QUEUE_URL,
                "Entries": [
                    {"Id": "A", "ReceiptHandle": "receipt-A"},
                    {"Id": "C", "ReceiptHandle": "receipt-C"},
                ],
            },
        )

        await sqs_client.delete_batch(
            QUEUE_URL, [AckEntry("A", "receipt-A"), AckEntry("C", "receipt-C")]
        )

    @pytest.mark.asyncio
    async def test_partial_failures_are_logged(self, stubber: Stubber, sqs_client: SQSClient):
        stubber.add_response(
            "delete_message_batch",
            {
                "Successful": [{"Id": "A"}],
                "Failed": [
                    {
                        "Id": "B",
                        "SenderFault": True,
                        "Code": "ReceiptHandleIsInvalid",
                        "Message": "The receipt handle is not valid.",
                    }
                ],
            },
            {
                "QueueUrl": QUEUE_URL,
                "Entries": [
                    {"Id": "A", "ReceiptHandle": "receipt-A"},
                    {"Id": "B", "ReceiptHandle": "receipt-B"},
                ],
            },
        )

        with patch(f"{CLIENT_MODULE_PATH}.logger") as logger:
            await sqs_client.delete_batch(
                QUEUE_URL, [AckEntry("A", "receipt-A"), AckEntry("B", "receipt-B")]
            )

        logger.error.assert_called_once()
        message = logger.error.call_args.args[0]
        assert "B" in message
        assert "ReceiptHandleIsInvalid" in message
        assert logger.error.call_args.kwargs["extra"] == {"sender_fault": True}

    @pytest.mark.asyncio
    async def test_delete_error_is_wrapped(self, stubber: Stubber, sqs_client: SQSClient):
        stubber.add_client_error(
            "delete_message_batch",
            service_error_code="AWS.SimpleQueueService.TooManyEntriesInBatchRequest",
        )

        with pytest.raises(QueueTransportError) as exc_info:
            await sqs_client.delete_batch(QUEUE_URL, [AckEntry("A", "receipt-A")])

        assert isinstance(exc_info.value.__cause__, ClientError)

    @pytest.mark.asyncio
    async def test_empty_batch_skips_the_call(self):
        client = MagicMock()

        await SQSClient(client).delete_batch(QUEUE_URL, [])

        client.delete_message_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_oversized_batch_is_rejected(self):
        client = MagicMock()
        entries = [AckEntry(str(index), f"receipt-{index}") for index in range(11)]

        with pytest.raises(ValueError):
            await SQSClient(client).delete_batch(QUEUE_URL, entries)

        client.delete_message_batch.assert_not_called()


class TestSQSClientFromSession:
    def test_builds_client_from_environment(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_ACCESS_KEY_ID", "testing")
        aws_environment.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        aws_environment.setenv("AWS_DEFAULT_REGION", "eu-west-1")

        sqs_client = SQSClient.from_session()

        assert sqs_client.client.meta.region_name == "eu-west-1"

    def test_explicit_region_and_endpoint(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_ACCESS_KEY_ID", "testing")
        aws_environment.setenv("AWS_SECRET_ACCESS_KEY", "testing")

        sqs_client = SQSClient.from_session(
            region_name="us-west-2", endpoint_url="http://localhost:4566"
        )

        assert sqs_client.client.meta.region_name == "us-west-2"
        assert sqs_client.client.meta.endpoint_url == "http://localhost:4566"

    def test_endpoint_falls_back_to_environment(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_ACCESS_KEY_ID", "testing")
        aws_environment.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        aws_environment.setenv("AWS_ENDPOINT_URL", "http://localhost:9324")

        sqs_client = SQSClient.from_session(region_name="us-east-1")

        assert sqs_client.client.meta.endpoint_url == "http://localhost:9324"

    def test_missing_credentials_raise(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_DEFAULT_REGION", "us-east-1")

        with pytest.raises(AWSConfigurationError, match="credentials"):
            SQSClient.from_session()

    def test_missing_region_raises(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_ACCESS_KEY_ID", "testing")
        aws_environment.setenv("AWS_SECRET_ACCESS_KEY", "testing")

        with pytest.raises(AWSConfigurationError, match="region"):
            SQSClient.from_session()

    def test_region_falls_back_to_aws_region(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_ACCESS_KEY_ID", "testing")
        aws_environment.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        aws_environment.setenv("AWS_REGION", "sa-east-1")

        sqs_client = SQSClient.from_session()

        assert sqs_client.client.meta.region_name == "sa-east-1"

    def test_explicit_region_wins_over_aws_region(self, aws_environment: pytest.MonkeyPatch):
        aws_environment.setenv("AWS_ACCESS_KEY_ID", "testing")
        aws_environment.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        aws_environment.setenv("AWS_REGION", "sa-east-1")

        sqs_client = SQSClient.from_session(region_name="us-west-2")

        assert sqs_client.client.meta.region_name == "us-west-2"
