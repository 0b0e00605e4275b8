"""CLI entry point for visibility scores.

Usage:
    fujiview all
    fujiview single north morning
    fujiview serve    # JSON-lines triggers on stdin, reports on stdout
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from fujiview.config import Settings, configure_logging, load_settings
from fujiview.errors import ProtocolError
from fujiview.forecast import ForecastClient
from fujiview.messages import Message
from fujiview.models import Region, TimeWindow
from fujiview.orchestrator import FetchOrchestrator

logger = logging.getLogger(__name__)


def _write_message(message: Message) -> None:
    sys.stdout.write(json.dumps(message) + "\n")
    sys.stdout.flush()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fujiview", description="Mount Fuji visibility forecast scores"
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("all", help="Score all four region/time combinations")
    single = sub.add_parser("single", help="Score one region/time combination")
    single.add_argument("region", choices=[r.value for r in Region])
    single.add_argument("time", choices=[w.value for w in TimeWindow])
    sub.add_parser("serve", help="Answer JSON-lines trigger messages on stdin")
    return parser


async def _serve(orchestrator: FetchOrchestrator) -> None:
    loop = asyncio.get_running_loop()
    orchestrator.announce_ready()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break
        if not line.strip():
            continue
        try:
            await orchestrator.handle(json.loads(line))
        except (json.JSONDecodeError, ProtocolError) as e:
            logger.error("Ignoring message %r: %s", line.strip(), e)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    async with ForecastClient(settings) as client:
        orchestrator = FetchOrchestrator(client.fetch, _write_message)
        if args.command == "all":
            # Failed points show up as -1 scores in the report, not as an exit code.
            await orchestrator.update_all()
            return 0
        if args.command == "single":
            await orchestrator.update_single(Region(args.region), TimeWindow(args.time))
            return 0
        await _serve(orchestrator)
        return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)
    args = _build_parser().parse_args(argv)
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
