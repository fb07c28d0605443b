"""CLI entry point for the health tracker."""

import argparse
import asyncio
import inspect
import json
import logging
import sys
import traceback
from datetime import date, datetime, timedelta
from pathlib import Path

from .config import Config, ConfigError, load_config
from .controller import HealthTrackerController
from .entry import HealthEntry
from .render import MessageKind, format_message, render_table
from .storage import SQLiteKeyValueStore, StorageError
from .sync import ConnectionMonitor, ConnectionStatus, LocalCache, RemoteClient, SyncStore


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            # Fallback for non-serializable objects
            log_data["message"] = str(log_data["message"])
            if "exception" in log_data:
                log_data["exception"] = str(log_data["exception"])
            return json.dumps(log_data)


def setup_logging(verbose: bool = False, log_level: str | None = None, json_output: bool = False) -> None:
    """Configure logging.

    Args:
        verbose: Enable debug logging (ignored if log_level is set).
        log_level: Explicit log level (warning, info, debug).
        json_output: Output logs as JSON lines for machine parsing.
    """
    if log_level:
        level_map = {
            "warning": logging.WARNING,
            "info": logging.INFO,
            "debug": logging.DEBUG,
        }
        level = level_map.get(log_level, logging.WARNING)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def build_store(config: Config) -> SyncStore:
    """Create the sync store described by the configuration."""
    remote = RemoteClient(config.remote)
    cache = LocalCache(SQLiteKeyValueStore(config.cache.db_path), key=config.cache.key)
    return SyncStore(remote, cache, local_fallback=config.sync.local_fallback)


class TablePrinter:
    """Render callback that keeps the latest view and prints it once.

    The controller renders the cached view before the reconciled one; on a
    terminal only the final table is worth printing.
    """

    def __init__(self):
        self._entries: list[HealthEntry] | None = None

    def __call__(self, entries: list[HealthEntry]) -> None:
        self._entries = entries

    def flush(self) -> None:
        if self._entries is not None:
            print()
            print(render_table(self._entries))
            self._entries = None


def print_message(text: str, kind: MessageKind) -> None:
    stream = sys.stderr if kind == MessageKind.ERROR else sys.stdout
    print(format_message(text, kind), file=stream)


def print_status(status: ConnectionStatus, message: str) -> None:
    print(f"Connection: {status.value} - {message}")


async def cmd_log(args: argparse.Namespace) -> int:
    """Log one day's weight and calories."""
    config = load_config(args.config)
    store = build_store(config)

    form = {
        "date": args.date,
        "weight": args.weight,
        "morningCalories": args.morning,
        "lunchCalories": args.lunch,
        "dinnerCalories": args.dinner,
    }

    printer = TablePrinter()
    controller = HealthTrackerController(store, render=printer, notify=print_message)
    try:
        result = await controller.submit(form)
    finally:
        await store.close()

    printer.flush()
    return 0 if result.saved else 1


async def cmd_history(args: argparse.Namespace) -> int:
    """Show logged entries, most recent first."""
    config = load_config(args.config)
    store = build_store(config)

    try:
        if args.json:
            entries = await store.load_all()
            print(json.dumps(
                [dict(e.to_dict(), totalCalories=e.total_calories) for e in entries],
                indent=2,
            ))
        else:
            printer = TablePrinter()
            controller = HealthTrackerController(
                store, render=printer, notify=print_message
            )
            await controller.refresh()
            printer.flush()
    finally:
        await store.close()

    return 0


async def cmd_status(args: argparse.Namespace) -> int:
    """Check connectivity to the remote sheet."""
    config = load_config(args.config)
    store = build_store(config)

    monitor = ConnectionMonitor(
        store.remote,
        listener=None if args.json else print_status,
        online_display_seconds=config.status.online_display_seconds,
    )

    try:
        status = await monitor.check()
        cached = len(store.cache.read())
    finally:
        await store.close()

    if args.json:
        print(json.dumps({
            "timestamp": datetime.now().isoformat(),
            "remote": {
                "configured": config.remote.is_configured,
                "url": config.remote.url or None,
                "status": status.value,
                "message": monitor.message,
            },
            "cache": {
                "db_path": config.cache.db_path,
                "key": config.cache.key,
                "entries": cached,
            },
        }, indent=2))
    else:
        print(f"Cached entries: {cached}")

    return 0 if status == ConnectionStatus.ONLINE else 1


def sample_entries(today: date) -> list[HealthEntry]:
    """Two demonstration entries for the days before today."""
    return [
        HealthEntry(
            date=(today - timedelta(days=2)).isoformat(),
            weight=70.5,
            morning_calories=400,
            lunch_calories=600,
            dinner_calories=500,
        ),
        HealthEntry(
            date=(today - timedelta(days=1)).isoformat(),
            weight=70.3,
            morning_calories=350,
            lunch_calories=650,
            dinner_calories=450,
        ),
    ]


def cmd_sample(args: argparse.Namespace) -> int:
    """Replace the local cache with sample entries."""
    config = load_config(args.config)
    kv = SQLiteKeyValueStore(config.cache.db_path)
    cache = LocalCache(kv, key=config.cache.key)

    entries = sample_entries(date.today())
    try:
        cache.write(entries)
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        kv.close()

    print(f"Wrote {len(entries)} sample entries to {config.cache.db_path}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="healthtracker",
        description="Log daily weight and meal calories to a remote sheet with local fallback",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: built-in defaults)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["warning", "info", "debug"],
        default=None,
        help="Set log level explicitly (overrides -v/--verbose)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON for machine parsing",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Log command
    log_parser = subparsers.add_parser("log", help="Log today's weight and calories")
    log_parser.add_argument(
        "-d", "--date",
        type=str,
        default=None,
        help="Entry date as YYYY-MM-DD (default: today)",
    )
    log_parser.add_argument("-w", "--weight", required=True, help="Weight in kg")
    log_parser.add_argument("--morning", required=True, help="Morning calories")
    log_parser.add_argument("--lunch", required=True, help="Lunch calories")
    log_parser.add_argument("--dinner", required=True, help="Dinner calories")
    log_parser.set_defaults(func=cmd_log)

    # History command
    history_parser = subparsers.add_parser("history", help="Show logged entries")
    history_parser.add_argument(
        "--json",
        action="store_true",
        help="Output entries as JSON",
    )
    history_parser.set_defaults(func=cmd_history)

    # Status command
    status_parser = subparsers.add_parser("status", help="Check remote connectivity")
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Output status as JSON",
    )
    status_parser.set_defaults(func=cmd_status)

    # Sample command
    sample_parser = subparsers.add_parser("sample", help="Seed the local cache with sample data")
    sample_parser.set_defaults(func=cmd_sample)

    args = parser.parse_args()

    setup_logging(args.verbose, args.log_level, args.json_logs)

    if not args.command:
        parser.print_help()
        return 1

    func = args.func
    try:
        if inspect.iscoroutinefunction(func):
            return asyncio.run(func(args))
        return func(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
