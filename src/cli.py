"""Click CLI: list, watch, create and join debates on the ledger."""

import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from config.config_loader import AppConfig, load_config
from src.arena import DebateArena
from src.healthcheck import run_health_check
from src.ledger.base import LedgerClient
from src.ledger.iota_rpc import IotaRpcClient
from src.models import SIDE_A, SIDE_B, TransactionStatus, TxState
from src.output import print_view, render_dashboard, render_status, view_to_json
from src.submitter import IotaCliSubmitter
from src.validation import ValidationError

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_SIDES = {"A": SIDE_A, "B": SIDE_B}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=Console(stderr=True))],
    )


def _build_arena(config: AppConfig, client: LedgerClient, identity: str | None, **callbacks) -> DebateArena:
    submitter = IotaCliSubmitter(config.ledger, config.submitter)
    return DebateArena(config, client, submitter, acting_identity=identity, **callbacks)


async def _ensure_ledger_reachable(client: LedgerClient, config: AppConfig) -> None:
    """Abort with status 1 when the node cannot answer an event query."""
    ok, err = await run_health_check(client, config.ledger.created_event_type)
    if not ok:
        short_err = err.splitlines()[0][:120] if err else "unknown error"
        raise click.ClickException(f"Ledger unreachable: {config.ledger.rpc_url}: {short_err}")


async def _run_list(config: AppConfig, identity: str | None, as_json: bool, show_ids: bool, health_check: bool) -> None:
    async with IotaRpcClient(config.ledger) as client:
        if health_check:
            await _ensure_ledger_reachable(client, config)
        arena = _build_arena(config, client, identity)
        views = await arena.refresh()

    if as_json:
        click.echo(view_to_json(views))
    else:
        print_view(views, show_ids=show_ids)


async def _run_watch(config: AppConfig, identity: str | None, show_ids: bool, health_check: bool) -> None:
    async with IotaRpcClient(config.ledger) as client:
        if health_check:
            await _ensure_ledger_reachable(client, config)
        arena = _build_arena(config, client, identity)
        with Live(render_dashboard((), arena.get_status()), console=console, refresh_per_second=4) as live:
            async with arena:
                while True:
                    live.update(render_dashboard(arena.get_view(), arena.get_status(), show_ids=show_ids))
                    await asyncio.sleep(0.25)


async def _run_write(config: AppConfig, identity: str | None, action: str, *args) -> TransactionStatus:
    async with IotaRpcClient(config.ledger) as client:
        arena = _build_arena(config, client, identity)
        console.print(f"[dim]{config.ledger.network}: submitting via {config.submitter.cli_path}[/dim]")
        if action == "create":
            return await arena.create_debate(*args)
        return await arena.join_debate(*args)


def _finish_write(status: TransactionStatus) -> None:
    console.print(render_status(status))
    if status.receipt is not None:
        console.print(f"[dim]Digest: {status.receipt.digest}[/dim]")
        console.print("[dim]The change appears in the list after the next poll.[/dim]")
    if status.state is not TxState.SUCCEEDED:
        sys.exit(1)


@click.group()
@click.option("--settings", "settings_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Path to settings.yaml (default: bundled config)")
@click.option("--address", default=None, help="Acting address (default: from DEBATE_ARENA_ADDRESS)")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--skip-health-check", is_flag=True, default=False,
              help="Skip the ledger connectivity check at startup")
@click.pass_context
def main(
    ctx: click.Context,
    settings_path: str | None,
    address: str | None,
    verbose: bool,
    skip_health_check: bool,
) -> None:
    """Debate Arena -- browse and join on-ledger debates.

    \b
    Examples:
      debate-arena list
      debate-arena watch --interval 5
      debate-arena create "Tabs or spaces?" "Settle it once and for all."
      debate-arena join 0x5f...c1 A
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(Path(settings_path)) if settings_path else load_config()
    except (FileNotFoundError, KeyError, ValueError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    ctx.obj = {
        "config": config,
        "identity": address or config.acting_identity(),
        "health_check": not skip_health_check,
    }


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the view as JSON")
@click.option("--ids", "show_ids", is_flag=True, help="Show debate ids")
@click.pass_obj
def list_debates(obj: dict, as_json: bool, show_ids: bool) -> None:
    """Run one reconciliation cycle and print the debates."""
    asyncio.run(_run_list(obj["config"], obj["identity"], as_json, show_ids, obj["health_check"]))


@main.command()
@click.option("--interval", type=float, default=None, help="Poll interval in seconds (default: from config)")
@click.option("--ids", "show_ids", is_flag=True, help="Show debate ids")
@click.pass_obj
def watch(obj: dict, interval: float | None, show_ids: bool) -> None:
    """Poll the ledger and keep the table up to date (Ctrl+C to quit)."""
    config: AppConfig = obj["config"]
    if interval is not None:
        if interval <= 0:
            raise click.BadParameter("must be positive", param_hint="--interval")
        config = dataclasses.replace(config, polling=dataclasses.replace(config.polling, interval_sec=interval))
    try:
        asyncio.run(_run_watch(config, obj["identity"], show_ids, obj["health_check"]))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


@main.command()
@click.argument("topic")
@click.argument("description")
@click.pass_obj
def create(obj: dict, topic: str, description: str) -> None:
    """Create a debate with TOPIC (<=100 chars) and DESCRIPTION (<=500 chars)."""
    try:
        status = asyncio.run(_run_write(obj["config"], obj["identity"], "create", topic, description))
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc
    _finish_write(status)


@main.command()
@click.argument("debate_id")
@click.argument("side", type=click.Choice(sorted(_SIDES), case_sensitive=False))
@click.pass_obj
def join(obj: dict, debate_id: str, side: str) -> None:
    """Join DEBATE_ID on SIDE A or B."""
    try:
        status = asyncio.run(_run_write(obj["config"], obj["identity"], "join", debate_id, _SIDES[side.upper()]))
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc
    _finish_write(status)


if __name__ == "__main__":
    main()
