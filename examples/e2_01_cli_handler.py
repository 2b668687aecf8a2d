"""Run it with the CLI:

    fastsqs run examples.e2_01_cli_handler:handle_event \
        --queue-url http://localhost:4566/000000000000/events \
        --endpoint-url http://localhost:4566 \
        --delete-strategy on_success --concurrency 3
"""

from collections.abc import Mapping
from typing import Any

from fastsqs.logger import logger


async def handle_event(body: bytes, attributes: Mapping[str, Any]) -> None:
    event_type = attributes.get("event_type", {}).get("StringValue", "unknown")
    logger.info(f"Received a {event_type} event: {body.decode()}")
