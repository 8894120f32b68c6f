#!/usr/bin/env python3
"""
pageperf CLI
Usage: python analyze.py snapshot.json [--level basic] [--json] [--output FILE]
       python analyze.py --url https://example.com [--headful] [--session KEY]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pageperf.core.analyzer import analyze
from pageperf.core.collector import collect_snapshot
from pageperf.core.engine import BottleneckEngine
from pageperf.core.report import export_filename, print_report, to_json
from pageperf.models.settings import SuggestionLevel
from pageperf.utils.storage import SessionStore, SettingsStore

logger = logging.getLogger("pageperf.cli")


class SnapshotError(ValueError):
    """The snapshot file is missing, unreadable or not shaped like a snapshot."""


def load_snapshot(path) -> dict:
    """Read a `{"url"?, "metrics": {...}, "resources": [...]}` JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SnapshotError(f"cannot read {path}: {e}") from e
    except ValueError as e:
        raise SnapshotError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError(f"{path}: expected a JSON object")
    if "metrics" not in data or "resources" not in data:
        raise SnapshotError(f"{path}: snapshot needs both 'metrics' and 'resources'")
    if data["metrics"] is not None and not isinstance(data["metrics"], dict):
        raise SnapshotError(f"{path}: 'metrics' must be an object")
    if data["resources"] is not None and not isinstance(data["resources"], list):
        raise SnapshotError(f"{path}: 'resources' must be a list")
    return data


def _cli_progress(event_type: str, data: dict):
    if event_type == "detector_complete":
        found = data.get("bottlenecks", 0)
        if found:
            print(f"   {data.get('detector', '')}: {found} issue(s)", file=sys.stderr)
    elif event_type == "detector_failed":
        print(f"   [WARN] {data.get('detector', '')} failed: {data.get('error', '')[:80]}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pageperf: find page-load bottlenecks and how to fix them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  python analyze.py snapshot.json\n"
               "  python analyze.py snapshot.json --level advanced --json\n"
               "  python analyze.py --url https://example.com --session home",
    )
    parser.add_argument("snapshot", nargs="?", help="JSON snapshot with 'metrics' and 'resources'")
    parser.add_argument("--url", help="Load this page in Chromium instead of reading a snapshot")
    parser.add_argument("--level", choices=[lvl.value for lvl in SuggestionLevel],
                        help="Suggestion verbosity (default: from saved settings)")
    parser.add_argument("--json", action="store_true", help="Output results as JSON instead of table")
    parser.add_argument("--output", nargs="?", const="", metavar="FILE",
                        help="Also write the JSON result to FILE (default name when omitted)")
    parser.add_argument("--session", metavar="KEY", help="Save the result under this session key")
    parser.add_argument("--headful", action="store_true", help="Run browser visibly when using --url")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if bool(args.snapshot) == bool(args.url):
        parser.error("give either a snapshot file or --url")

    settings = SettingsStore().get()
    level = args.level or settings.suggestion_level

    if args.url:
        url = args.url if args.url.startswith("http") else f"https://{args.url}"
        print(f"\n  pageperf loading {url}\n", file=sys.stderr)
        metrics, resources = asyncio.run(run_collect(url, args.headful, settings.network_throttling))
    else:
        try:
            snapshot = load_snapshot(args.snapshot)
        except SnapshotError as e:
            print(f"\n  Error: {e}", file=sys.stderr)
            sys.exit(1)
        url = snapshot.get("url") or ""
        metrics, resources = snapshot["metrics"], snapshot["resources"]

    engine = BottleneckEngine(on_progress=_cli_progress if args.verbose else None)
    result = analyze(metrics, resources, level=level, url=url, engine=engine)
    data = result.to_dict()

    if args.session:
        SessionStore().save(args.session, data)
        logger.info("saved session %s", args.session)

    if args.output is not None:
        out = Path(args.output or export_filename())
        out.write_text(to_json(result), encoding="utf-8")
        print(f"  Saved {out}", file=sys.stderr)

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print_report(result, show_metrics=settings.show_metrics)

    return result


async def run_collect(url: str, headful: bool = False, throttling: str = "none"):
    try:
        return await collect_snapshot(url, headful=headful, throttling=throttling)
    except Exception as e:
        print(f"\n  Error loading page: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
