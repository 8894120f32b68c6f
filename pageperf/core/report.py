"""Render an analysis result for humans (rich) or machines (JSON)."""

from __future__ import annotations

import json
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pageperf.core.metrics import METRIC_LABELS
from pageperf.core.resource_analyzer import group_by_type, size_metrics, total_size_by_type
from pageperf.models.types import AnalysisResult, Bottleneck, Severity
from pageperf.utils.resources import format_size, format_time, short_url


SEVERITY_COLORS = {"high": "red bold", "medium": "yellow", "low": "cyan"}
RATING_COLORS = {"good": "green", "needs-improvement": "yellow", "poor": "red"}
MAX_LISTED_RESOURCES = 3


# Settings.show_metrics toggle for each metric row.
METRIC_TOGGLES = {
    "page_load_time": "pageLoad",
    "dom_content_loaded": "domContentLoaded",
    "first_contentful_paint": "fcp",
    "largest_contentful_paint": "lcp",
    "time_to_interactive": "tti",
    "total_blocking_time": "tbt",
}


def export_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"performance-insights-{stamp}.json"


def to_json(result: AnalysisResult, indent: int | None = 2) -> str:
    return json.dumps(result.to_dict(), indent=indent)


def _metric_table(result: AnalysisResult, show_metrics: dict[str, bool] | None = None) -> Table:
    table = Table(title="Metrics", show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Metric", min_width=24)
    table.add_column("Value", width=10, justify="right")
    table.add_column("Rating", width=18)

    show_metrics = show_metrics or {}
    for name, label in METRIC_LABELS.items():
        if not show_metrics.get(METRIC_TOGGLES[name], True):
            continue
        value = getattr(result.metrics, name)
        rating = result.ratings.get(name)
        color = RATING_COLORS.get(rating, "dim")
        table.add_row(label, format_time(value), Text(rating or "-", style=color))

    table.add_row("Requests", str(result.metrics.request_count), "")
    table.add_row("Transfer Size", format_size(result.metrics.transfer_size), "")
    return table


def _size_table(result: AnalysisResult) -> Table:
    table = Table(title="Size by Type", show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Type", min_width=12)
    table.add_column("Files", width=6, justify="right")
    table.add_column("Size", width=10, justify="right")
    table.add_column("Oversized", width=10, justify="right")

    grouped = group_by_type(result.resources)
    sizes = total_size_by_type(result.resources)
    for rtype, size in sorted(sizes.items(), key=lambda item: item[1], reverse=True):
        members = grouped[rtype]
        oversized = sum(1 for r in members if size_metrics(r)["is_large"])
        table.add_row(
            rtype.value,
            str(len(members)),
            format_size(size),
            Text(str(oversized), style="yellow" if oversized else "dim"),
        )
    return table


def _bottleneck_table(bottlenecks: list[Bottleneck]) -> Table:
    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Sev", width=6)
    table.add_column("Category", max_width=24)
    table.add_column("Issue", min_width=40)

    for b in bottlenecks:
        table.add_row(
            Text(b.severity.value, style=SEVERITY_COLORS.get(b.severity.value, "white")),
            b.category.value,
            b.title,
        )
    return table


def _print_details(console: Console, bottleneck: Bottleneck):
    color = SEVERITY_COLORS.get(bottleneck.severity.value, "white")
    console.print(f"  [{color}]{bottleneck.title}[/{color}]  [dim]{bottleneck.category.value}[/dim]")
    console.print(f"    {bottleneck.description}")

    for r in bottleneck.resources[:MAX_LISTED_RESOURCES]:
        console.print(f"    [dim]- {short_url(r.url, 70)} ({format_size(r.size)})[/dim]")
    extra = len(bottleneck.resources) - MAX_LISTED_RESOURCES
    if extra > 0:
        console.print(f"    [dim]  ... and {extra} more[/dim]")

    for s in bottleneck.suggestions:
        line = f"    > {s.text}"
        if s.link:
            line += f" [dim]({s.link})[/dim]"
        console.print(line)
    console.print()


def print_report(
    result: AnalysisResult,
    console: Console | None = None,
    show_metrics: dict[str, bool] | None = None,
):
    """Print metrics, bottlenecks and suggestions using Rich.

    `show_metrics` is Settings.show_metrics; metrics toggled off are left out
    of the metrics table.
    """
    console = console or Console()

    duration = ""
    if result.started_at and result.completed_at:
        secs = (result.completed_at - result.started_at).total_seconds()
        duration = f" in {secs:.2f}s"

    header = Text()
    header.append("\n Page Performance Report\n", style="bold")
    header.append(f" {result.url or '(unknown page)'}\n", style="dim")
    header.append(f" {len(result.resources)} resources analyzed{duration}", style="dim")
    header.append(f" | suggestions: {result.suggestion_level}\n", style="dim")
    console.print(Panel(header, border_style="blue"))
    console.print()

    console.print(_metric_table(result, show_metrics))
    console.print()

    if result.resources:
        console.print(_size_table(result))
        console.print()

    if not result.bottlenecks:
        console.print("  [green bold]No bottlenecks found. This page is in good shape.[/green bold]\n")
    else:
        counts = []
        for sev in Severity:
            n = sum(1 for b in result.bottlenecks if b.severity is sev)
            if n:
                color = SEVERITY_COLORS[sev.value]
                counts.append(f"[{color}]{n} {sev.value}[/{color}]")
        console.print(f"  Bottlenecks found: {', '.join(counts)}\n")
        console.print(_bottleneck_table(result.bottlenecks))
        console.print()

        for b in result.bottlenecks:
            _print_details(console, b)

    if result.errors:
        console.print(f"  [dim]Detector warnings: {len(result.errors)}[/dim]")
        for err in result.errors[:5]:
            console.print(f"    [dim]- {err[:120]}[/dim]")
        console.print()
