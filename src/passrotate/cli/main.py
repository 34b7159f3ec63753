"""
passrotate CLI - Command Line Interface for rotation flows.
"""
import os
import sys
import logging
from typing import Optional

import click
from rich.logging import RichHandler

from . import console, print_flow_table, print_flow_inputs, print_result
from ..automation.playwright_engine import PlaywrightProvider, open_session
from ..automation.runner import FlowRunner
from ..automation.sites import SITE_FLOWS, get_flow
from ..core.config import CDP_URL_ENV, SESSION_ID_ENV, cdp_url_from_env, headless_from_env, session_id_from_env

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("passrotate")


def _load_flow(name: str):
    try:
        return get_flow(name)
    except KeyError as e:
        raise click.BadParameter(e.args[0], param_hint="FLOW")


@click.group(invoke_without_command=True)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output",
    show_default=True
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """passrotate - rotate website passwords with browser automation."""
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")
    ctx.obj = {"debug": debug}

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("list")
def list_flows() -> None:
    """List available flows and whether their inputs are configured."""
    print_flow_table(SITE_FLOWS.values(), os.environ)


@cli.command()
@click.argument("flow_name", metavar="FLOW")
def check(flow_name: str) -> None:
    """Validate a flow's inputs without opening a browser."""
    flow = _load_flow(flow_name)
    runner = FlowRunner(flow, environ=os.environ)
    failed = runner.check_inputs()
    if failed is not None:
        print_result(failed)
        print_flow_inputs(flow)
        sys.exit(1)
    console.print(f"[green]✓[/] All required inputs for [bold]{flow.name}[/bold] are set")


@cli.command()
@click.argument("flow_name", metavar="FLOW")
@click.option("--session-id", default=None, help=f"Attach to an existing browser session [env: {SESSION_ID_ENV}]")
@click.option("--cdp-url", default=None, help=f"CDP endpoint or template with {{session_id}} [env: {CDP_URL_ENV}]")
@click.option("--headless/--headed", default=None, help="Local Chromium mode when no CDP URL is set")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_obj
def run(obj: dict, flow_name: str, session_id: Optional[str], cdp_url: Optional[str],
        headless: Optional[bool], as_json: bool) -> None:
    """Run a rotation flow and report the result."""
    flow = _load_flow(flow_name)
    runner = FlowRunner(flow, environ=os.environ)

    # Missing inputs short-circuit before any browser is touched
    failed = runner.check_inputs()
    if failed is not None:
        print_result(failed, as_json)
        sys.exit(1)

    provider = PlaywrightProvider(
        cdp_url=cdp_url or cdp_url_from_env(),
        headless=headless_from_env() if headless is None else headless,
    )
    try:
        with open_session(provider, session_id or session_id_from_env()) as session:
            runner.page = session.page
            result = runner.run()
    except Exception as e:
        console.print(f"[red]✗[/] Browser session failed: {e}")
        if obj.get("debug"):
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)

    print_result(result, as_json)
    sys.exit(0 if result.success else 1)


def main() -> None:
    """Entry point for the passrotate CLI."""
    cli()


if __name__ == "__main__":
    main()
