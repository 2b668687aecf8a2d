from typing import Annotated

import typer

from fastsqs.cli.utils import LogLevels
from fastsqs.datastructures import DeleteStrategy

CLIContext = typer.Context

HandlerArgument = Annotated[
    str,
    typer.Argument(
        help="The message handler as 'module:attribute', e.g. 'app.handlers:process_order'.",
        show_default=False,
    ),
]

QueueUrlOption = Annotated[
    str,
    typer.Option(
        "--queue-url",
        "-q",
        envvar="FASTSQS_QUEUE_URL",
        help="The url of the SQS queue to consume.",
        show_default=False,
    ),
]

ConcurrencyOption = Annotated[
    int,
    typer.Option(
        "--concurrency",
        "-c",
        envvar="FASTSQS_CONCURRENCY",
        min=0,
        help="Number of concurrent workers. Zero uses the default (5).",
    ),
]

WaitTimeOption = Annotated[
    int,
    typer.Option(
        "--wait-time",
        envvar="FASTSQS_WAIT_TIME_SECONDS",
        min=0,
        max=20,
        help="Long polling wait time in seconds. Zero uses the default (10).",
    ),
]

MaxMessagesOption = Annotated[
    int,
    typer.Option(
        "--max-messages",
        envvar="FASTSQS_MAX_MESSAGES",
        min=0,
        max=10,
        help="Maximum messages to receive per poll. Zero uses the default (10).",
    ),
]

VisibilityTimeoutOption = Annotated[
    int | None,
    typer.Option(
        "--visibility-timeout",
        envvar="FASTSQS_VISIBILITY_TIMEOUT",
        min=0,
        help="Visibility timeout in seconds. The queue setting applies when omitted.",
        show_default=False,
    ),
]

DeleteStrategyOption = Annotated[
    DeleteStrategy,
    typer.Option(
        "--delete-strategy",
        envvar="FASTSQS_DELETE_STRATEGY",
        case_sensitive=False,
        help="Delete messages before handling them (immediate) or only after success (on_success).",
    ),
]

EndpointUrlOption = Annotated[
    str | None,
    typer.Option(
        "--endpoint-url",
        envvar="AWS_ENDPOINT_URL",
        help="A custom SQS endpoint, e.g. a local emulator.",
        show_default=False,
    ),
]

RegionOption = Annotated[
    str | None,
    typer.Option(
        "--region",
        envvar=["AWS_REGION", "AWS_DEFAULT_REGION"],
        help="The AWS region. Resolved by boto3 when omitted.",
        show_default=False,
    ),
]

LogLevelOption = Annotated[
    LogLevels,
    typer.Option(
        "--log-level",
        case_sensitive=False,
        help="The logging level of the consumer.",
    ),
]

LogSerializeOption = Annotated[
    bool,
    typer.Option(
        "--log-serialize",
        envvar="FASTSQS_ENABLE_LOG_SERIALIZE",
        help="Emit the logs as JSON lines.",
    ),
]

VersionOption = Annotated[
    bool,
    typer.Option(
        "--version",
        "-v",
        help="Show the version and exit.",
        is_eager=True,
    ),
]
