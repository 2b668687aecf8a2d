import argparse
import json
import sys

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from fastsqs.batching import SQS_MAX_BATCH_SIZE, chunk


def _send_messages(messages: list[dict], queue_url: str, endpoint_url: str | None):
    """
    Sends the messages to the specified SQS queue in batches.
    """

    client = boto3.client("sqs", endpoint_url=endpoint_url)

    print(f"Publishing {len(messages)} message(s) to queue '{queue_url}'")
    for batch_number, batch in enumerate(chunk(messages, SQS_MAX_BATCH_SIZE)):
        entries = [
            {"Id": f"{batch_number}-{index}", "MessageBody": json.dumps(message)}
            for index, message in enumerate(batch)
        ]
        try:
            response = client.send_message_batch(QueueUrl=queue_url, Entries=entries)
        except (BotoCoreError, ClientError) as e:
            print(f"ERROR: Failed to send messages to queue '{queue_url}': {e}", file=sys.stderr)
            sys.exit(1)

        for failure in response.get("Failed", []):
            print(f"ERROR: Message {failure['Id']} was rejected: {failure.get('Message')}")

    print("Messages sent successfully.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send JSON messages to an Amazon SQS queue.")
    parser.add_argument(
        "-m",
        "--message",
        type=str,
        required=True,
        help="Must be a valid JSON object.",
    )
    parser.add_argument(
        "-q",
        "--queue-url",
        type=str,
        required=True,
        help="The url of the SQS queue to send the message to.",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=1,
        help="How many copies of the message to send.",
    )
    parser.add_argument(
        "--endpoint-url",
        type=str,
        default=None,
        help="A custom SQS endpoint, e.g. a local emulator.",
    )

    args = parser.parse_args()
    message_payload = {}
    try:
        message_payload = json.loads(args.message)
        if not isinstance(message_payload, dict):
            raise ValueError("JSON input must be a dictionary.")
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON format provided for message: {args.message}")
        print(f"Details: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    payloads = [{**message_payload, "sequence": index} for index in range(args.count)]
    _send_messages(payloads, args.queue_url, args.endpoint_url)
