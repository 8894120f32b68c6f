from __future__ import annotations

import json
import re
from datetime import datetime

from rich.console import Console

from pageperf.core.analyzer import analyze
from pageperf.core.report import export_filename, print_report, to_json


def render(result) -> str:
    console = Console(record=True, width=160, color_system=None)
    print_report(result, console=console)
    return console.export_text()


def test_export_filename() -> None:
    assert export_filename(datetime(2024, 5, 6, 7, 8, 9)) == "performance-insights-2024-05-06T07-08-09.json"
    assert export_filename().startswith("performance-insights-")


def test_to_json_matches_result_dict(snapshot) -> None:
    result = analyze(snapshot["metrics"], snapshot["resources"])
    assert json.loads(to_json(result)) == json.loads(json.dumps(result.to_dict()))


def test_report_lists_metrics_and_bottlenecks(snapshot) -> None:
    result = analyze(snapshot["metrics"], snapshot["resources"], level="basic")
    text = render(result)

    assert "Page Performance Report" in text
    assert "https://shop.example.com/" in text
    assert "Largest Contentful Paint" in text
    assert "needs-improvement" in text
    assert "Large JavaScript Payload" in text
    assert "Bottlenecks found" in text
    assert result.bottlenecks[0].suggestions[0].text in text


def test_report_for_clean_page() -> None:
    result = analyze({"firstContentfulPaint": 500}, [
        {"url": "https://tiny.example.com/", "type": "document", "size": 2000, "startTime": 0, "endTime": 100},
    ])
    text = render(result)

    assert "No bottlenecks found" in text
    assert "good" in text


def test_report_shows_detector_warnings(snapshot) -> None:
    result = analyze(snapshot["metrics"], snapshot["resources"])
    result.errors.append("css: KeyError: 'size'")
    assert "Detector warnings: 1" in render(result)


def test_hidden_metrics_are_left_out(snapshot) -> None:
    result = analyze(snapshot["metrics"], snapshot["resources"])
    console = Console(record=True, width=160, color_system=None)
    print_report(result, console=console, show_metrics={"lcp": False, "tbt": False})
    text = console.export_text()
    rows = table_rows(text)

    assert "Largest Contentful Paint" not in rows
    assert "Total Blocking Time" not in rows
    assert rows["First Contentful Paint"][-1] == "good"


def table_rows(text: str) -> dict[str, list[str]]:
    rows = {}
    for line in text.splitlines():
        cells = [c.strip() for c in re.split(r"[│┃|]", line) if c.strip()]
        if cells:
            rows.setdefault(cells[0], cells)
    return rows


def test_size_breakdown_by_type(snapshot) -> None:
    result = analyze(snapshot["metrics"], snapshot["resources"])
    text = render(result)
    rows = table_rows(text)

    assert "Size by Type" in text
    assert rows["script"] == ["script", "1", "620.0 KB", "1"]
    assert rows["document"][-1] == "0"
    assert rows["image"][-1] == "1"
