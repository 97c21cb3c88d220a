import json
import logging
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from ga4mp.analytics import Analytics
from ga4mp.config import ProxyConfig, get_credentials, get_proxy_config
from ga4mp.console import main_console as console
from ga4mp.constants import (
    EXIT_CODE_FAILURE,
    EXIT_CODE_VALIDATION_ERROR,
    URL_DEBUG,
    URL_LIVE,
)
from ga4mp.errors import AggregatedSubmissionError, Ga4Error, ValidationError
from ga4mp.meta import get_version
from ga4mp.platform.client import HttpxTransport

LOG = logging.getLogger(__name__)

CLI_MAIN_INTRODUCTION = (
    "Collect analytics events from a JSON file and submit them to the collector."
)
CLI_DEBUG_HELP = "Enable debug logging."
CLI_EVENTS_FILE_HELP = (
    "JSON file with an [bold]events[/bold] list and optional "
    "user_properties, client_id, user_id, session_id, timestamp and "
    "non_personalized_ads fields."
)
CLI_MEASUREMENT_ID_HELP = "Measurement ID of the destination property."
CLI_API_SECRET_HELP = "API secret for the destination property."
CLI_CLIENT_ID_HELP = "Client id, overrides the one in the file."
CLI_USER_ID_HELP = "User id, overrides the one in the file."
CLI_SESSION_ID_HELP = "Session id stamped into every event."
CLI_DEBUG_MODE_HELP = "Stamp debug_mode into every event."


@dataclass
class CliState:
    proxy_config: Optional[ProxyConfig] = None


def configure_logger(debug: bool) -> None:
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)


def handle_cmd_exception(func):
    """
    Decorator to turn ga4mp errors into a printed message and an exit code.
    """

    @wraps(func)
    def inner(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except AggregatedSubmissionError as e:
            LOG.debug("Submission failed: %s", e)
            console.print(
                f"[problem]Submission finished with {len(e.problems)} problem(s):[/problem]"
            )
            for problem in e.problems:
                console.print(f"  - {problem}", style="problem", markup=False)
            raise typer.Exit(code=e.get_exit_code())
        except Ga4Error as e:
            LOG.exception("Expected Ga4Error happened: %s", e)
            console.print(e.message, style="problem", markup=False)
            raise typer.Exit(code=e.get_exit_code())
        except ValueError as e:
            LOG.exception("Invalid option: %s", e)
            console.print(str(e), style="problem", markup=False)
            raise typer.Exit(code=EXIT_CODE_FAILURE)

    return inner


def load_events_file(path: Path) -> Dict[str, Any]:
    """
    Read and check the top-level shape of an events file.

    Raises:
        ValidationError: If the file is not a JSON object with an events list.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Events file is not valid JSON: {path} ({e})") from e

    if not isinstance(data, dict) or not isinstance(data.get("events"), list):
        raise ValidationError(
            f"Events file must contain an object with an 'events' list: {path}"
        )

    return data


def build_analytics(
    data: Dict[str, Any],
    measurement_id: str,
    api_secret: str,
    transport: HttpxTransport,
    url: str,
    client_id: Optional[str] = None,
    user_id: Optional[str] = None,
    session_id: Optional[int] = None,
    debug_mode: bool = False,
) -> Analytics:
    analytics = Analytics(
        measurement_id, api_secret, debug_mode=debug_mode, transport=transport, url=url
    )

    client_id = client_id or data.get("client_id")
    user_id = user_id or data.get("user_id")
    session_id = session_id if session_id is not None else data.get("session_id")

    if client_id:
        analytics.set_client_id(client_id)
    if user_id:
        analytics.set_user_id(user_id)
    if session_id is not None:
        analytics.set_session_id(session_id)
    if data.get("timestamp") is not None:
        analytics.set_timestamp(data["timestamp"])
    if data.get("non_personalized_ads") is not None:
        analytics.allow_personalized_ads(not data["non_personalized_ads"])

    for name, value in (data.get("user_properties") or {}).items():
        analytics.add_user_property({"name": name, "value": value})

    for event in data["events"]:
        analytics.add_event(event)

    return analytics


cli = typer.Typer(
    name="ga4mp",
    help=CLI_MAIN_INTRODUCTION,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ga4mp, version {get_version()}")
        raise typer.Exit()


@cli.callback()
def main(
    ctx: typer.Context,
    debug: Annotated[bool, typer.Option("--debug", help=CLI_DEBUG_HELP)] = False,
    proxy_host: Annotated[Optional[str], typer.Option("--proxy-host")] = None,
    proxy_port: Annotated[Optional[str], typer.Option("--proxy-port")] = None,
    proxy_protocol: Annotated[Optional[str], typer.Option("--proxy-protocol")] = None,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True),
    ] = False,
):
    """
    Collect analytics events from a JSON file and submit them to the collector.
    """
    configure_logger(debug)

    try:
        proxy_config = get_proxy_config(
            host=proxy_host, port=proxy_port, scheme=proxy_protocol
        )
    except ValueError as e:
        console.print(str(e), style="problem", markup=False)
        raise typer.Exit(code=EXIT_CODE_VALIDATION_ERROR)

    ctx.obj = CliState(proxy_config=proxy_config)


EventsFileArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help=CLI_EVENTS_FILE_HELP,
    ),
]
MeasurementIdOpt = Annotated[
    Optional[str], typer.Option("--measurement-id", help=CLI_MEASUREMENT_ID_HELP)
]
ApiSecretOpt = Annotated[
    Optional[str], typer.Option("--api-secret", help=CLI_API_SECRET_HELP)
]
ClientIdOpt = Annotated[Optional[str], typer.Option("--client-id", help=CLI_CLIENT_ID_HELP)]
UserIdOpt = Annotated[Optional[str], typer.Option("--user-id", help=CLI_USER_ID_HELP)]
SessionIdOpt = Annotated[
    Optional[int], typer.Option("--session-id", min=0, help=CLI_SESSION_ID_HELP)
]
DebugModeOpt = Annotated[bool, typer.Option("--debug-mode", help=CLI_DEBUG_MODE_HELP)]


def _run(
    ctx: typer.Context,
    events_file: Path,
    url: str,
    measurement_id: Optional[str],
    api_secret: Optional[str],
    client_id: Optional[str],
    user_id: Optional[str],
    session_id: Optional[int],
    debug_mode: bool,
):
    credentials = get_credentials(measurement_id=measurement_id, api_secret=api_secret)
    data = load_events_file(events_file)
    state: CliState = ctx.obj or CliState()

    with HttpxTransport(proxy_config=state.proxy_config) as transport:
        analytics = build_analytics(
            data,
            credentials.measurement_id,
            credentials.api_secret,
            transport=transport,
            url=url,
            client_id=client_id,
            user_id=user_id,
            session_id=session_id,
            debug_mode=debug_mode,
        )
        return analytics.submit()


@cli.command(help="Submit the events of a file to the collector.")
@handle_cmd_exception
def send(
    ctx: typer.Context,
    events_file: EventsFileArg,
    measurement_id: MeasurementIdOpt = None,
    api_secret: ApiSecretOpt = None,
    client_id: ClientIdOpt = None,
    user_id: UserIdOpt = None,
    session_id: SessionIdOpt = None,
    debug_mode: DebugModeOpt = False,
):
    result = _run(
        ctx, events_file, URL_LIVE, measurement_id, api_secret,
        client_id, user_id, session_id, debug_mode,
    )
    console.print(
        f"[ok]Submitted {result.events} event(s) in {result.batches} request(s).[/ok]"
    )


@cli.command(help="Check the events of a file against the debug collector.")
@handle_cmd_exception
def validate(
    ctx: typer.Context,
    events_file: EventsFileArg,
    measurement_id: MeasurementIdOpt = None,
    api_secret: ApiSecretOpt = None,
    client_id: ClientIdOpt = None,
    user_id: UserIdOpt = None,
    session_id: SessionIdOpt = None,
    debug_mode: DebugModeOpt = False,
):
    try:
        result = _run(
            ctx, events_file, URL_DEBUG, measurement_id, api_secret,
            client_id, user_id, session_id, debug_mode,
        )
    except AggregatedSubmissionError as e:
        console.print(f"[warning]{len(e.problems)} validation problem(s):[/warning]")
        for problem in e.problems:
            console.print(f"  - {problem}", markup=False)
        raise typer.Exit(code=e.get_exit_code())

    console.print(
        f"[ok]No validation messages for {result.events} event(s).[/ok]"
    )
