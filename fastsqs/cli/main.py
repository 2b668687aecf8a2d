import rich
import typer

from fastsqs.__about__ import __version__
from fastsqs.cli.options import (
    CLIContext,
    ConcurrencyOption,
    DeleteStrategyOption,
    EndpointUrlOption,
    HandlerArgument,
    LogLevelOption,
    LogSerializeOption,
    MaxMessagesOption,
    QueueUrlOption,
    RegionOption,
    VersionOption,
    VisibilityTimeoutOption,
    WaitTimeOption,
)
from fastsqs.cli.runner import AppConfiguration, ConsumerRunner, QueueConfiguration
from fastsqs.cli.utils import LogLevels, get_log_level, import_from_string
from fastsqs.concurrency.utils import ensure_message_handler
from fastsqs.datastructures import DeleteStrategy
from fastsqs.exceptions import FastSQSCLIException, FastSQSException

app = typer.Typer(
    name="fastsqs",
    help="A CLI to run FastSQS message handlers against Amazon SQS queues.",
    pretty_exceptions_short=True,
    invoke_without_command=True,
    rich_markup_mode="markdown",
)


@app.callback()
def main(
    ctx: CLIContext,
    version: VersionOption = False,
) -> None:
    """
    Display helpful tips when the main command is run without any subcommands.
    """
    if version:
        import platform

        typer.echo(
            f"Running FastSQS {__version__} with {platform.python_implementation()} "
            f"{platform.python_version()} on {platform.system()}",
        )

        raise typer.Exit

    if ctx.invoked_subcommand is None:
        rich.print("\n[bold]Welcome to the FastSQS CLI! ✨[/bold]")
        rich.print("\n[dim]A CLI to run FastSQS message handlers against SQS queues.[/dim]")
        rich.print("\n[bold]Usage[/bold]: [cyan]fastsqs [COMMAND] [ARGS]...[/cyan]")
        rich.print("\n[bold]Common Commands:[/bold]")
        rich.print("  [green]run[/green]    Consume a queue with a message handler.")
        rich.print("  [green]help[/green]   Get detailed help for a command.")
        rich.print(
            "\nRun '[cyan]fastsqs --help[/cyan]' for "
            "a list of all available commands and options."
        )


@app.command()
def run(
    handler: HandlerArgument,
    queue_url: QueueUrlOption = "",
    concurrency: ConcurrencyOption = 0,
    wait_time: WaitTimeOption = 0,
    max_messages: MaxMessagesOption = 0,
    visibility_timeout: VisibilityTimeoutOption = None,
    delete_strategy: DeleteStrategyOption = DeleteStrategy.IMMEDIATE,
    region: RegionOption = None,
    endpoint_url: EndpointUrlOption = None,
    log_level: LogLevelOption = LogLevels.info,
    log_serialize: LogSerializeOption = False,
) -> None:
    """
    Consume an SQS queue, calling HANDLER for every received message.
    """
    if not queue_url.strip():
        raise FastSQSCLIException(
            "The queue url is not set. Use --queue-url or the FASTSQS_QUEUE_URL variable."
        )

    handler_function = import_from_string(handler)
    try:
        ensure_message_handler(handler_function)
    except TypeError as e:
        raise FastSQSCLIException(str(e)) from e

    app_configuration = AppConfiguration(
        handler=handler,
        log_level=get_log_level(log_level),
        log_serialize=log_serialize,
    )
    queue_configuration = QueueConfiguration(
        queue_url=queue_url,
        concurrency=concurrency,
        wait_time_seconds=wait_time,
        max_messages_per_poll=max_messages,
        visibility_timeout_seconds=visibility_timeout,
        delete_strategy=delete_strategy,
        region=region,
        endpoint_url=endpoint_url,
    )

    consumer_runner = ConsumerRunner()
    try:
        consumer_runner.run(handler_function, app_configuration, queue_configuration)
    except FastSQSException as e:
        rich.print(f"[bold red]The consumer stopped with an error:[/bold red] {e}")
        raise typer.Exit(code=1) from e


@app.command(name="help")
def show_help(ctx: typer.Context) -> None:
    """
    Show this message and exit.
    """
    if ctx.parent:
        rich.print(ctx.parent.get_help())


def execute_app() -> None:
    app()


if __name__ == "__main__":
    execute_app()
