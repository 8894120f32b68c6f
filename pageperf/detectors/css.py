"""Unoptimized CSS: stylesheet weight and count."""

from __future__ import annotations

from pageperf.detectors.base import KB, make_bottleneck, missing_input, tiered
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type, format_size, resource_size, total_size


PURGE_TIP = ("Remove unused CSS using tools like PurgeCSS or UnCSS.",
             "https://web.dev/articles/unused-css")
MINIFY_TIP = ("Minify CSS files to reduce their size.",
              "https://web.dev/articles/reduce-network-payloads-using-text-compression")
CRITICAL_TIP = ("Split CSS into critical and non-critical styles.",
                "https://web.dev/articles/extract-critical-css")


class CSSDetector:

    name = "css"
    category = BottleneckCategory.UNOPTIMIZED_CSS

    THRESHOLDS = {
        "total_size": {"high": 150 * KB, "medium": 75 * KB},
        "file_count": 4,
        "file_size": 50 * KB,
    }

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        stylesheets = filter_by_type(resources, ResourceType.STYLESHEET)
        if not stylesheets:
            return []

        findings = []

        # 1. Total CSS weight
        css_size = total_size(stylesheets)
        limits = self.THRESHOLDS["total_size"]
        severity = tiered(css_size, limits["high"], limits["medium"])
        if severity is Severity.HIGH:
            findings.append(make_bottleneck(
                self.category,
                "Large Total CSS Size",
                f"The total CSS size is {format_size(css_size)}, which is significantly "
                "larger than the recommended size of 75 KB.",
                severity,
                stylesheets,
                [PURGE_TIP, MINIFY_TIP, CRITICAL_TIP,
                 ("Consider using CSS frameworks more selectively or with tree-shaking.",
                  "https://web.dev/articles/extract-critical-css")],
            ))
        elif severity is Severity.MEDIUM:
            findings.append(make_bottleneck(
                self.category,
                "Moderate Total CSS Size",
                f"The total CSS size is {format_size(css_size)}, which is larger than the "
                "recommended size of 75 KB.",
                severity,
                stylesheets,
                [PURGE_TIP, MINIFY_TIP, CRITICAL_TIP],
            ))

        # 2. File count
        if len(stylesheets) > self.THRESHOLDS["file_count"]:
            findings.append(make_bottleneck(
                self.category,
                "Too Many CSS Files",
                f"The page loads {len(stylesheets)} CSS files, which increases HTTP "
                "requests and parsing time.",
                Severity.MEDIUM,
                stylesheets,
                [("Consolidate CSS files to reduce HTTP requests.",
                  "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
                 ("Use CSS preprocessors or build tools to combine stylesheets.",
                  "https://web.dev/articles/extract-critical-css"),
                 ("Consider using CSS-in-JS or CSS Modules for component-based styling.",
                  "https://web.dev/articles/extract-critical-css")],
            ))

        # 3. Individual large files, may co-occur with the total size finding
        large = [r for r in stylesheets if resource_size(r) > self.THRESHOLDS["file_size"]]
        if large:
            findings.append(make_bottleneck(
                self.category,
                "Large CSS Files",
                f"{len(large)} CSS files are larger than 50 KB, which can slow down parsing "
                "and rendering.",
                Severity.MEDIUM,
                large,
                [PURGE_TIP, MINIFY_TIP,
                 ("Split large CSS files into smaller, more focused stylesheets.",
                  "https://web.dev/articles/extract-critical-css"),
                 ("Optimize CSS selectors for better performance.",
                  "https://web.dev/articles/extract-critical-css")],
            ))

        return findings
