"""CLI entry point for fluid_indexer."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from fluid_indexer.config import load_config
from fluid_indexer.abi import LOCKER
from fluid_indexer.evm.logs import JsonlLogSource
from fluid_indexer.indexer import Indexer
from fluid_indexer.storage.sqlite import SQLiteEntityStore


def _require_contracts(cfg):
    """Exit with error if the static contract addresses are not configured."""
    missing = []
    if not cfg.program_manager_address:
        missing.append("program_manager")
    if not cfg.locker_factory_address:
        missing.append("locker_factory")
    if missing:
        click.echo(f"Error: No contract address configured for: {', '.join(missing)}", err=True)
        click.echo(
            "Set FLUID_INDEXER_PROGRAM_MANAGER / FLUID_INDEXER_LOCKER_FACTORY"
            " or the [contracts] section of the config file.",
            err=True,
        )
        sys.exit(1)


def _load(ctx: click.Context):
    if (cfg := ctx.obj.get("config")) is not None:
        return cfg
    try:
        cfg = load_config(ctx.obj["config_path"])
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    ctx.obj["config"] = cfg
    return cfg


def _open_store(ctx: click.Context) -> SQLiteEntityStore:
    return SQLiteEntityStore(_load(ctx).db_path)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """fluid-indexer - index FLUID program, locker and claim events."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    cfg = _load(ctx)
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Indexing ───────────────────────────────────────────


@cli.command()
@click.argument("logs_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def ingest(ctx: click.Context, logs_file: str) -> None:
    """Index logs from a JSON-lines file of eth_getLogs objects."""
    cfg = _load(ctx)
    _require_contracts(cfg)

    async def _ingest():
        indexer = Indexer(cfg)
        await indexer.initialize()
        try:
            return await indexer.run(JsonlLogSource(logs_file))
        finally:
            await indexer.close()

    try:
        summary = asyncio.run(_ingest())
    except Exception as exc:
        click.echo(f"Indexing failed: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Logs seen:      {summary.logs_seen}")
    click.echo(f"Events handled: {summary.events_handled}")
    click.echo(f"Logs skipped:   {summary.logs_skipped}")
    if summary.last_block is not None:
        click.echo(f"Last block:     {summary.last_block}")
    for kind, count in sorted(summary.handled_by_kind.items()):
        click.echo(f"  {kind:<22} {count}")


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and record counts."""
    cfg = _load(ctx)
    click.echo(f"Network:         {cfg.network}")
    click.echo(f"Program manager: {cfg.program_manager_address or '(not set)'}")
    click.echo(f"Locker factory:  {cfg.locker_factory_address or '(not set)'}")
    click.echo(f"DB path:         {cfg.db_path}")

    async def _counts():
        store = SQLiteEntityStore(cfg.db_path)
        await store.initialize()
        try:
            return await store.counts()
        finally:
            await store.close()

    counts = asyncio.run(_counts())
    click.echo("")
    click.echo(f"Programs:        {counts.programs}")
    click.echo(f"Lockers:         {counts.lockers}")
    click.echo(f"Claim events:    {counts.claim_events} ({counts.claim_units} units)")
    click.echo(f"Data sources:    {counts.data_sources}")


@cli.command()
@click.argument("program_id")
@click.pass_context
def program(ctx: click.Context, program_id: str) -> None:
    """Show one program."""
    store = _open_store(ctx)

    async def _get():
        await store.initialize()
        try:
            return await store.get_program(program_id)
        finally:
            await store.close()

    p = asyncio.run(_get())
    if p is None:
        click.echo(f"Program {program_id} not found.", err=True)
        sys.exit(1)

    click.echo(f"Program {p.id}")
    click.echo(f"  Admin:             {p.program_admin}")
    click.echo(f"  Signer:            {p.signer}")
    click.echo(f"  Token:             {p.token}")
    click.echo(f"  Distribution pool: {p.distribution_pool}")
    click.echo(f"  Funding:           {p.funding_amount}")
    click.echo(f"  Subsidy:           {p.subsidy_amount}")
    click.echo(f"  Early end date:    {p.early_end_date}")
    click.echo(f"  End date:          {p.end_date}")
    click.echo(f"  Stopped date:      {p.stopped_date}")
    click.echo(f"  Compensation:      {p.funding_compensation_amount} + {p.subsidy_compensation_amount} subsidy")
    click.echo(f"  Cancellation date: {p.cancellation_date}")
    click.echo(f"  Returned deposit:  {p.returned_deposit}")
    click.echo(f"  Created:           block {p.block_number} (tx {p.transaction_hash})")


@cli.command()
@click.pass_context
def programs(ctx: click.Context) -> None:
    """List all programs."""
    store = _open_store(ctx)

    async def _list():
        await store.initialize()
        try:
            return await store.get_all_programs()
        finally:
            await store.close()

    rows = asyncio.run(_list())
    if not rows:
        click.echo("No programs indexed.")
        return
    for p in rows:
        state = "cancelled" if p.cancellation_date else "stopped" if p.stopped_date else "active"
        click.echo(f"{p.id:>6}  {state:<9}  token={p.token}  funding={p.funding_amount}")


@cli.command()
@click.pass_context
def lockers(ctx: click.Context) -> None:
    """List all lockers."""
    store = _open_store(ctx)

    async def _list():
        await store.initialize()
        try:
            return await store.get_all_lockers()
        finally:
            await store.close()

    rows = asyncio.run(_list())
    if not rows:
        click.echo("No lockers indexed.")
        return
    for locker in rows:
        click.echo(f"{locker.id}  owner={locker.locker_owner}  block={locker.block_number}")


@cli.command()
@click.option("--locker", default=None, help="Only claims made on this locker")
@click.pass_context
def claims(ctx: click.Context, locker: str | None) -> None:
    """List claim events and their per-program units."""
    store = _open_store(ctx)

    async def _list():
        await store.initialize()
        try:
            events = await store.get_claim_events(locker)
            return [(e, await store.get_claim_units(e.id)) for e in events]
        finally:
            await store.close()

    rows = asyncio.run(_list())
    if not rows:
        click.echo("No claims indexed.")
        return
    for event, units in rows:
        click.echo(
            f"block {event.block_number}  locker={event.locker}  claimer={event.claimer}"
        )
        for unit in units:
            click.echo(f"    program {unit.program_id}: {unit.amount}")


@cli.command()
@click.pass_context
def watched(ctx: click.Context) -> None:
    """List locker addresses registered as dynamic data sources."""
    store = _open_store(ctx)

    async def _list():
        await store.initialize()
        try:
            return await store.get_addresses(LOCKER)
        finally:
            await store.close()

    addresses = asyncio.run(_list())
    click.echo(f"{len(addresses)} watched {LOCKER} contract(s)")
    for address in addresses:
        click.echo(f"  {address}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
