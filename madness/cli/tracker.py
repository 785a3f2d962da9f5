from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from madness.api.client import GameProvider, SportsDataClient
from madness.api.fallback import SeedDataProvider
from madness.config import TrackerConfig, load_config
from madness.report.formatters import format_json, format_markdown, render_sections
from madness.sync.controller import SyncController
from madness.sync.store import DocumentStore, FileDocumentStore, InMemoryDocumentStore


def _pretty(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True)


def build_controller(
    config: TrackerConfig,
    *,
    store_dir: str | None = "reports/tracker",
    offline: bool = False,
) -> SyncController:
    provider: GameProvider = SeedDataProvider() if offline else SportsDataClient.from_config(config)
    store: DocumentStore = FileDocumentStore(store_dir) if store_dir else InMemoryDocumentStore()
    return SyncController(provider, store, config)


def run_once(controller: SyncController, *, output_format: str = "markdown") -> tuple[int, str]:
    """Bootstrap, run one cycle and return (exit code, rendered output)."""
    snapshot = asyncio.run(controller.bootstrap())
    if snapshot is None:
        return 1, f"No snapshot committed: {controller.last_error or 'unknown error'}\n"
    if output_format == "json":
        return 0, format_json(snapshot, pretty=True) + "\n"
    return 0, format_markdown(render_sections(snapshot, controller.config))


async def _serve(controller: SyncController) -> None:
    await controller.bootstrap()
    await controller.run_forever()


def main(argv: list[str] | None = None) -> int:  # pragma: no cover
    parser = argparse.ArgumentParser(
        description="Track NCAA tournament games and publish them to a shared document"
    )
    parser.add_argument("command", choices=("once", "serve"), help="Run a single cycle or keep refreshing")
    parser.add_argument("--config", default=None, help="YAML config file (TRACKER_* env vars override it)")
    parser.add_argument("--tournament-id", default=None, help="Tournament/season id (default from config)")
    parser.add_argument("--interval", type=float, default=None, help="Refresh interval in minutes")
    parser.add_argument("--document-id", default=None, help="Existing document id to update")
    parser.add_argument(
        "--store-dir", default="reports/tracker", help="Directory for the file-backed document store"
    )
    parser.add_argument(
        "--memory", action="store_true", help="Keep the document in memory instead of writing files"
    )
    parser.add_argument(
        "--offline", action="store_true", help="Use the built-in seed dataset instead of the provider API"
    )
    parser.add_argument(
        "--format", default="markdown", choices=("markdown", "json"), help="Output format for `once`"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        overrides: dict[str, Any] = {}
        if args.tournament_id:
            overrides["tournament_id"] = args.tournament_id
        if args.interval is not None:
            overrides["refresh_interval_minutes"] = args.interval
        if args.document_id:
            overrides["document_id"] = args.document_id
        config = config.replace(**overrides).validate()
    except (OSError, ValueError) as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    controller = build_controller(
        config, store_dir=None if args.memory else args.store_dir, offline=args.offline
    )

    if args.command == "once":
        code, output = run_once(controller, output_format=args.format)
        sys.stdout.write(output)
        if code == 0:
            print(_pretty({"document_id": controller.document_id, "source": controller.snapshot.source}), file=sys.stderr)
        return code

    try:
        asyncio.run(_serve(controller))
    except KeyboardInterrupt:
        print("Stopped.", file=sys.stderr)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
