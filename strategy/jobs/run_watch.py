#!/usr/bin/env python3
"""
strategy/jobs/run_watch.py - CLI entrypoint for the arbitrage watcher.

Usage:
    python -m strategy.jobs.run_watch watch
    python -m strategy.jobs.run_watch watch --config my_watch.yaml --max-cycles 10
    python -m strategy.jobs.run_watch history --limit 20
"""

import asyncio
import signal
import sys
import time
from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Sequence

import click

from chains.providers import RPCProvider
from core.constants import CycleStatus
from core.exceptions import ArbWatchError, ConfigError, QuoteUnavailableError, StorageError
from core.format_money import format_money
from core.logging import get_logger, set_global_context, setup_logging
from core.math import wei_to_human
from core.models import RawQuote
from core.time import Clock, now_utc
from dex.adapters.base import QuoteSource
from dex.adapters.uniswap_v2 import UniswapV2RouterSource
from storage.opportunities import OpportunityStore
from strategy.config import WatchConfig, load_watch_config
from strategy.cycle import CycleOutcome, evaluate_cycle, skipped_outcome

logger = get_logger("arbwatch.watch")

# Graceful shutdown flag
_shutdown_requested = False

SLEEP_SLICE_SECONDS = 0.5


def handle_shutdown(signum: int, frame: object) -> None:
    """Handle shutdown signals."""
    global _shutdown_requested
    _shutdown_requested = True
    logger.info("Shutdown requested", extra={"context": {"signal": signum}})


class WatchSession:
    """Counters for one watcher run."""

    def __init__(self):
        self.started_at = datetime.now()
        self.cycles = 0
        self.status_counts: Counter[str] = Counter()
        self.records_saved = 0
        self.persist_failures = 0
        self.cycle_errors = 0
        self.best_profit: Decimal | None = None

    def log_outcome(self, outcome: CycleOutcome) -> None:
        self.cycles += 1
        self.status_counts[outcome.status.value] += 1
        if outcome.record is not None:
            profit = outcome.record.profit
            if self.best_profit is None or profit > self.best_profit:
                self.best_profit = profit

    def get_summary(self) -> dict:
        elapsed = datetime.now() - self.started_at
        return {
            "session_start": self.started_at.isoformat(),
            "elapsed_seconds": int(elapsed.total_seconds()),
            "cycles": self.cycles,
            "opportunities": self.status_counts[CycleStatus.OPPORTUNITY.value],
            "below_threshold": self.status_counts[CycleStatus.BELOW_THRESHOLD.value],
            "no_opportunity": self.status_counts[CycleStatus.NO_OPPORTUNITY.value],
            "skipped_invalid_price": self.status_counts[CycleStatus.SKIPPED_INVALID_PRICE.value],
            "skipped_quote_unavailable": self.status_counts[CycleStatus.SKIPPED_QUOTE_UNAVAILABLE.value],
            "cycle_errors": self.cycle_errors,
            "records_saved": self.records_saved,
            "persist_failures": self.persist_failures,
            "best_profit": format_money(self.best_profit) if self.best_profit is not None else None,
        }


def build_sources(config: WatchConfig, provider: RPCProvider) -> list[UniswapV2RouterSource]:
    """One router source per configured venue."""
    return [
        UniswapV2RouterSource(
            provider=provider,
            venue_id=venue.venue_id,
            router_address=venue.router,
            token_in=config.pair.base,
            token_out=config.pair.quote,
            amount_in=config.simulation.fixed_trade_size,
        )
        for venue in config.venues
    ]


async def fetch_quotes(sources: Sequence[QuoteSource]) -> list[RawQuote]:
    """
    Fetch all venue quotes concurrently.

    Raises:
        QuoteUnavailableError: first venue that failed
    """
    results = await asyncio.gather(
        *(source.fetch_quote() for source in sources),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


def _log_outcome(outcome: CycleOutcome) -> None:
    context = outcome.to_context()
    if outcome.status is CycleStatus.OPPORTUNITY:
        logger.info(
            f"Arbitrage found: buy {outcome.record.buy_dex}, sell {outcome.record.sell_dex}, "
            f"profit {format_money(outcome.record.profit)}",
            extra={"context": context},
        )
    elif outcome.status.evaluated:
        logger.info("Cycle evaluated", extra={"context": context})
    else:
        logger.warning("Cycle skipped", extra={"context": context})


async def run_cycle(
    sources: Sequence[QuoteSource],
    config: WatchConfig,
    store: OpportunityStore,
    session: WatchSession,
    clock: Clock = now_utc,
) -> CycleOutcome:
    """
    Run a single poll cycle: fetch, evaluate, persist.

    A persistence failure is logged and counted; the returned outcome is
    unaffected.
    """
    try:
        quotes = await fetch_quotes(sources)
    except QuoteUnavailableError as e:
        outcome = skipped_outcome(e)
    else:
        outcome = evaluate_cycle(
            quotes,
            pair=config.pair,
            gas_cost=config.simulation.gas_cost,
            threshold=config.simulation.threshold,
            clock=clock,
            min_price=config.simulation.min_price,
        )

    session.log_outcome(outcome)
    _log_outcome(outcome)

    if outcome.record is not None:
        try:
            row_id = store.append(outcome.record)
        except StorageError as e:
            session.persist_failures += 1
            logger.error(
                f"Failed to persist opportunity: {e}",
                extra={"context": {"error": e.to_dict()}},
            )
        else:
            session.records_saved += 1
            logger.info("Saved to database", extra={"context": {"row_id": row_id}})

    return outcome


async def _sleep_until(deadline: float) -> None:
    """Sleep until a monotonic deadline, waking early on shutdown."""
    while not _shutdown_requested:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return
        await asyncio.sleep(min(remaining, SLEEP_SLICE_SECONDS))


async def watch_loop(
    sources: Sequence[QuoteSource],
    config: WatchConfig,
    store: OpportunityStore,
    session: WatchSession,
    max_cycles: int | None = None,
) -> None:
    """
    Poll at a fixed interval until shutdown or max_cycles.

    Errors raised by a cycle are logged and counted; the loop moves on.
    """
    interval = config.simulation.check_interval_secs

    while not _shutdown_requested:
        cycle_start = time.monotonic()

        try:
            await run_cycle(sources, config, store, session)
        except ArbWatchError as e:
            session.cycle_errors += 1
            logger.error(
                f"Cycle failed: {e}",
                extra={"context": {"error": e.to_dict()}},
            )
        except Exception as e:
            session.cycle_errors += 1
            logger.error(
                f"Unexpected cycle error: {type(e).__name__}: {e}",
                exc_info=True,
            )

        attempted = session.cycles + session.cycle_errors
        if max_cycles is not None and attempted >= max_cycles:
            logger.info("Cycle limit reached", extra={"context": {"max_cycles": max_cycles}})
            break

        if attempted % 10 == 0:
            logger.info("Watch progress", extra={"context": session.get_summary()})

        await _sleep_until(cycle_start + interval)


async def _run_watch(config: WatchConfig, store: OpportunityStore, session: WatchSession, max_cycles: int | None) -> None:
    provider = RPCProvider(
        chain_id=config.chain_id,
        rpc_urls=config.rpc_urls,
        timeout_seconds=config.rpc_timeout_seconds,
    )
    try:
        sources = build_sources(config, provider)
        await watch_loop(sources, config, store, session, max_cycles=max_cycles)
    finally:
        logger.info("RPC stats", extra={"context": provider.get_stats_summary()})
        await provider.close()


def _load_config(config_path: str | None) -> WatchConfig:
    try:
        return load_watch_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))


def _open_store(db_path: str) -> OpportunityStore:
    try:
        return OpportunityStore(db_path)
    except StorageError as e:
        raise click.ClickException(str(e))


@click.group()
def cli() -> None:
    """ARBWATCH - two-venue DEX arbitrage watcher."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    help="Path to watch YAML (default: bundled config/watch.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON log format",
)
@click.option(
    "--log-file",
    default=None,
    help="Also write JSON logs to this file",
)
@click.option(
    "--max-cycles",
    "-n",
    default=None,
    type=click.IntRange(min=1),
    help="Stop after this many cycles (default: run until interrupted)",
)
@click.option(
    "--db-path",
    default=None,
    help="Override storage.db_path from config",
)
def watch(
    config_path: str | None,
    log_level: str,
    json_logs: bool,
    log_file: str | None,
    max_cycles: int | None,
    db_path: str | None,
) -> None:
    """
    Poll both venues and record profitable opportunities.
    """
    setup_logging(level=log_level, log_file=log_file, json_format=json_logs)

    config = _load_config(config_path)
    store = _open_store(db_path or config.db_path)

    set_global_context(
        service="arbwatch",
        pair=config.pair.symbol,
        chain_id=config.chain_id,
    )

    signal.signal(signal.SIGINT, handle_shutdown)
    signal.signal(signal.SIGTERM, handle_shutdown)

    session = WatchSession()

    logger.info(
        "Starting ARBWATCH",
        extra={
            "context": {
                "venues": [v.venue_id for v in config.venues],
                "pair": config.pair.symbol,
                "trade_size": str(wei_to_human(config.simulation.fixed_trade_size, config.pair.base.decimals)),
                "gas_cost": format_money(config.simulation.gas_cost),
                "threshold": format_money(config.simulation.threshold),
                "interval_secs": config.simulation.check_interval_secs,
                "db_path": store.path,
            }
        },
    )

    try:
        asyncio.run(_run_watch(config, store, session, max_cycles))
    except KeyboardInterrupt:
        logger.info("Watcher interrupted")
    except Exception as e:
        logger.error(
            f"Watcher error: {e}",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        sys.exit(1)
    finally:
        store.close()

    summary = session.get_summary()
    logger.info("Watcher stopped", extra={"context": summary})

    click.echo("\n" + "=" * 60)
    click.echo("ARBWATCH SESSION SUMMARY")
    click.echo("=" * 60)
    click.echo(f"Duration: {summary['elapsed_seconds']} seconds")
    click.echo(f"Cycles: {summary['cycles']}")
    click.echo(f"Opportunities recorded: {summary['records_saved']}")
    click.echo(f"Below threshold: {summary['below_threshold']}")
    click.echo(f"No opportunity (equal prices): {summary['no_opportunity']}")
    click.echo(f"Skipped (invalid price): {summary['skipped_invalid_price']}")
    click.echo(f"Skipped (quote unavailable): {summary['skipped_quote_unavailable']}")
    if summary["best_profit"] is not None:
        click.echo(f"Best profit: {summary['best_profit']}")
    click.echo("=" * 60)


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    help="Path to watch YAML (used for storage.db_path)",
)
@click.option(
    "--db-path",
    default=None,
    help="Read this database instead of the configured one",
)
@click.option(
    "--limit",
    "-n",
    default=20,
    type=click.IntRange(min=1),
    help="Number of most recent records to show",
)
def history(config_path: str | None, db_path: str | None, limit: int) -> None:
    """
    Show recorded opportunities, oldest first.
    """
    if db_path is None:
        db_path = _load_config(config_path).db_path

    store = _open_store(db_path)
    try:
        records = store.list_records(limit=limit)
        total = store.count()
    except StorageError as e:
        raise click.ClickException(str(e))
    finally:
        store.close()

    if not records:
        click.echo("No opportunities recorded.")
        return

    click.echo(f"{'timestamp':<34} {'buy':<14} {'sell':<14} {'profit':>16}")
    for record in records:
        click.echo(
            f"{record.timestamp.isoformat():<34} {record.buy_dex:<14} "
            f"{record.sell_dex:<14} {format_money(record.profit):>16}"
        )
    click.echo(f"Showing {len(records)} of {total}")


if __name__ == "__main__":
    cli()
