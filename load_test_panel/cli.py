"""CLI entry point for the load test panel."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from aiohttp import web

from load_test_panel.config import PanelSettings
from load_test_panel.errors import PanelError
from load_test_panel.identifiers import generate_test_id
from load_test_panel.models.result import TestResult
from load_test_panel.orchestrator import LoadTestOrchestrator
from load_test_panel.providers.github_actions import GitHubActionsEngine
from load_test_panel.web import create_app

STATUS_SYMBOLS = {
    "running": "⏳",
    "completed": "✅",
    "failed": "❌",
}


def log_history_summary(log: logging.Logger, results: Sequence[TestResult]) -> None:
    """Log a formatted summary of recent tests with run URLs."""
    log.info("=" * 80)
    log.info("Recent Load Tests:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        duration = f"{result.duration}s" if result.duration is not None else "-"
        log.info("%s %s: %s (%s)", symbol, result.test_id, result.status, duration)
        if result.github_url:
            log.info("  Run URL: %s", result.github_url)
        if result.failure_reason:
            log.info("  Reason: %s", result.failure_reason)


def build_trigger_payload(args: argparse.Namespace) -> dict[str, Any]:
    """Build a trigger payload from command line arguments."""
    return {
        "inboxId": args.inbox_id,
        "testId": args.test_id or generate_test_id(),
        "network": args.network,
        "duration": args.duration,
        "numGroups": args.groups,
        "numDms": args.dms,
        "interval": args.interval,
        "messagesPerBatch": args.messages_per_batch,
    }


async def run(command: str, args: argparse.Namespace, settings: PanelSettings) -> int:
    """Run a one-shot command against GitHub and return exit code."""
    log = logging.getLogger("load_test_panel")

    async with GitHubActionsEngine.from_config(settings.github_config()) as engine:
        orchestrator = LoadTestOrchestrator(engine=engine, settings=settings)
        try:
            output = await execute(orchestrator, command, args, log)
        except PanelError as exc:
            log.error("%s failed: %s", command, exc)
            print(json.dumps({"error": str(exc)}))
            return 1

    print(json.dumps(output, indent=2))
    return 0


async def execute(
    orchestrator: LoadTestOrchestrator,
    command: str,
    args: argparse.Namespace,
    log: logging.Logger,
) -> dict[str, Any]:
    """Dispatch a command to the orchestrator and format its output."""
    match command:
        case "trigger":
            response = await orchestrator.trigger(build_trigger_payload(args))
            return response.to_json_dict()
        case "status":
            result = await orchestrator.get_status(args.test_id)
            return result.to_json_dict()
        case "history":
            results = await orchestrator.get_history()
            log_history_summary(log, results)
            return {"tests": [result.to_json_dict() for result in results]}
        case "cancel":
            response = await orchestrator.cancel(args.test_id)
            return response.to_json_dict()
        case _:
            raise ValueError(f"Unknown command: {command}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Launch, monitor and cancel load tests run by GitHub Actions"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve the panel HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8080, help="Port to bind")

    trigger = subparsers.add_parser("trigger", help="Dispatch a new load test")
    trigger.add_argument("--inbox-id", required=True, help="64 character hex inbox ID")
    trigger.add_argument(
        "--test-id", default=None, help="Test identifier (generated when omitted)"
    )
    trigger.add_argument("--network", default="dev", help="Target network")
    trigger.add_argument("--duration", default="30", help="Duration in seconds")
    trigger.add_argument("--groups", default="5", help="Number of groups")
    trigger.add_argument("--dms", default="5", help="Number of DMs")
    trigger.add_argument("--interval", default="1", help="Seconds between batches")
    trigger.add_argument(
        "--messages-per-batch", default="3", help="Messages sent per batch"
    )

    status = subparsers.add_parser("status", help="Show the status of a test")
    status.add_argument("test_id", help="Test identifier")

    subparsers.add_parser("history", help="List recent tests")

    cancel = subparsers.add_parser("cancel", help="Cancel a running test")
    cancel.add_argument("test_id", help="Test identifier")

    return parser


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    settings = PanelSettings()

    if args.command == "serve":
        web.run_app(create_app(settings), host=args.host, port=args.port)
        return

    exit_code = asyncio.run(run(args.command, args, settings))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
