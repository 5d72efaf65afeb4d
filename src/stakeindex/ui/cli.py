from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from stakeindex.app import ingest_staking_events, resolve_stakers
from stakeindex.config import configure_logging
from stakeindex.domain.model import StakingEventType
from stakeindex.domain.staking import StakingEvent

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve and record staking participants")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Get or create stakers for account ids")
    resolve.add_argument(
        "--height",
        type=int,
        required=True,
        help="Block height being processed (chain state is read at height - 1)",
    )
    resolve.add_argument("ids", nargs="+", help="Encoded stash account ids")

    ingest = subparsers.add_parser("ingest", help="Record decoded staking events of one block")
    ingest.add_argument(
        "--height",
        type=int,
        required=True,
        help="Block height the events belong to",
    )
    ingest.add_argument(
        "--file",
        type=Path,
        required=True,
        help="JSON Lines file with objects {id, account, amount, type}",
    )
    ingest.add_argument(
        "--timestamp",
        type=str,
        help="ISO-8601 block timestamp (UTC)",
    )

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_height(value: int) -> int:
    if value < 1:
        raise ValueError(f"Block height must be positive: {value}")
    return value


def _load_events(path: Path) -> list[StakingEvent]:
    events: list[StakingEvent] = []
    with path.open() as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
                events.append(
                    StakingEvent(
                        id=str(payload["id"]),
                        account=str(payload["account"]),
                        amount=int(payload["amount"]),
                        type=StakingEventType(payload["type"]),
                    )
                )
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"{path}:{line_number}: invalid staking event: {exc}") from exc
    return events


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    events: list[StakingEvent] = []
    timestamp: datetime | None = None
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        height = _parse_height(parsed_args.height)
        if parsed_args.command == "ingest":
            events = _load_events(parsed_args.file)
            if parsed_args.timestamp:
                timestamp = _parse_iso_datetime(parsed_args.timestamp)
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "resolve":
            stakers = resolve_stakers(parsed_args.ids, height=height)
            for staker in stakers:
                log.info(
                    "%s role=%s bond=%s commission=%s",
                    staker.id,
                    staker.role,
                    staker.active_bond,
                    staker.commission,
                )
            unresolved = set(parsed_args.ids) - {staker.id for staker in stakers}
            if unresolved:
                log.info("Not staking: %s", ", ".join(sorted(unresolved)))
        elif parsed_args.command == "ingest":
            ingest_staking_events(events, height=height, timestamp=timestamp)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error while processing block %s", height)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
