import json
import sys

import click
import requests
from rich.console import Console
from rich.markup import escape

import sfpermset
from sfpermset.core.context import ActionContext
from sfpermset.core.exceptions import SfPermsetUsageError
from sfpermset.tasks import permsets

from .logger import init_logger
from .ui import result_table

USAGE_ERRORS = (SfPermsetUsageError, click.UsageError)


#
# Root command
#
def main(args=None):
    """Main sfpermset CLI entry point.

    This wraps the `click` library in order to do some initialization and centralized error handling.
    """
    args = list(args or sys.argv)

    debug = "--debug" in args
    if debug:
        args.remove("--debug")

    init_logger(debug=debug)
    # Hand CLI processing over to click, but handle exceptions
    try:
        cli(args[1:], standalone_mode=False)
    except click.Abort:  # Keyboard interrupt
        Console().print("\n[red bold]Aborted!")
        sys.exit(1)
    except Exception as e:
        handle_exception(e, should_show_stacktraces=debug)
        sys.exit(1)


def handle_exception(error, should_show_stacktraces=False):
    """Displays error of appropriate message back to user"""
    error_console = Console(stderr=True)
    if isinstance(error, requests.exceptions.ConnectionError):
        error_console.print(
            "[red bold]We encountered an error connecting to Salesforce. "
            "Please check the address and your connection and try again."
        )
    elif isinstance(error, click.ClickException):
        error_console.print(f"[red bold]Error: {escape(error.format_message())}")
    else:
        error_console.print(f"[red bold]Error: {escape(str(error))}")

    if should_show_stacktraces and not isinstance(error, USAGE_ERRORS):
        error_console.print_exception()


def load_context(context_path):
    if context_path:
        return ActionContext.from_yaml(context_path)
    return ActionContext.from_environ()


def echo_result(result, print_json, title):
    console = Console()
    if print_json:
        console.print_json(json.dumps(result))
    else:
        console.print(result_table(result, title=title))


@click.group("main", help="Add Salesforce users to Permission Sets")
@click.version_option(version=sfpermset.__version__, prog_name="sfpermset")
def cli():
    pass


@cli.command(name="invoke", help="Assign a Permission Set to a user")
@click.argument("username")
@click.argument("permission_set_id")
@click.option("--address", help="Salesforce API base URL. Defaults to $ADDRESS.")
@click.option("--api-version", help="Salesforce REST API version, e.g. v61.0")
@click.option(
    "--context",
    "context_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with environment and secrets mappings. Defaults to the process environment.",
)
@click.option("--json", "print_json", is_flag=True, help="Print a json string")
def invoke_command(
    username, permission_set_id, address, api_version, context_path, print_json
):
    params = {"username": username, "permissionSetId": permission_set_id}
    if address:
        params["address"] = address
    if api_version:
        params["apiVersion"] = api_version

    result = permsets.invoke(params, load_context(context_path))
    echo_result(result, print_json, "Permission Set Assignment")


@cli.command(name="halt", help="Report a graceful shutdown of the action")
@click.option("--username", help="Username the action was working on")
@click.option("--reason", required=True, help="Why the action was halted")
@click.option("--json", "print_json", is_flag=True, help="Print a json string")
def halt_command(username, reason, print_json):
    params = {"reason": reason}
    if username:
        params["username"] = username

    result = permsets.halt(params, ActionContext())
    echo_result(result, print_json, "Halted")
