"""Command line entrypoint: ``python -m statecraft``."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Sequence

from statecraft.config import get_settings
from statecraft.database import init_db
from statecraft.errors import StatecraftError
from statecraft.factory import create_scheduler

logger = logging.getLogger("statecraft")


def _cmd_init_db(args: argparse.Namespace) -> int:  # noqa: ARG001
    init_db()
    logger.info("Created tables for %s", get_settings().DATABASE_URL)
    return 0


def _cmd_sweep(args: argparse.Namespace) -> int:  # noqa: ARG001
    report = create_scheduler().sweep_sync()
    print(
        f"reclaimed={len(report.reclaimed)} requeued={len(report.requeued)} "
        f"queued={len(report.queued)} resolved={len(report.resolved)} "
        f"conflicts={len(report.conflicts)} failed={len(report.failed)}"
    )
    return 1 if report.failed else 0


def _cmd_requeue(args: argparse.Namespace) -> int:
    try:
        job_id = create_scheduler().requeue_sync(args.quarter_id)
    except StatecraftError as exc:
        logger.error("%s", exc)
        return 1
    print(f"quarter={args.quarter_id} job={job_id}")
    return 0


async def _run_forever(interval: float | None) -> None:
    scheduler = create_scheduler()
    if interval is not None:
        scheduler.set_interval(interval)
    scheduler.start()
    logger.info("Resolution scheduler running every %.1fs", scheduler.interval_seconds)
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()


def _cmd_run(args: argparse.Namespace) -> int:
    try:
        asyncio.run(_run_forever(args.interval))
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statecraft", description="Statecraft quarter resolution tools"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Create database tables without migrations")
    init.set_defaults(handler=_cmd_init_db)

    sweep = sub.add_parser("sweep", help="Run one reclaim/queue/resolve cycle")
    sweep.set_defaults(handler=_cmd_sweep)

    requeue = sub.add_parser(
        "requeue", help="Queue an active quarter again, reviving a failed resolution job"
    )
    requeue.add_argument("quarter_id", type=int, help="Quarter to resolve")
    requeue.set_defaults(handler=_cmd_requeue)

    run = sub.add_parser("run", help="Run the resolution scheduler until interrupted")
    run.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between sweeps (defaults to SWEEP_INTERVAL_SECONDS)",
    )
    run.set_defaults(handler=_cmd_run)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
