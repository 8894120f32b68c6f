"""Render-blocking stylesheets, scripts and fonts requested before first paint."""

from __future__ import annotations

from pageperf.detectors.base import make_bottleneck, missing_input
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type, resource_type


PRELOAD_TIP = ("Consider using the preload link type to prioritize critical resources.",
               "https://web.dev/articles/preload-critical-assets")


class BlockingResourcesDetector:

    name = "blocking_resources"
    category = BottleneckCategory.BLOCKING_RESOURCES

    THRESHOLDS = {
        "script_load_ms": 100,   # scripts slower than this are treated as blocking
        "high_count": 2,         # more affected resources than this is high severity
    }

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        findings = []

        # 1. Stylesheets
        blocking_css = [
            r for r in filter_by_type(resources, ResourceType.STYLESHEET)
            if r.is_render_blocking or self.is_likely_render_blocking(r)
        ]
        if blocking_css:
            findings.append(make_bottleneck(
                self.category,
                "Render-Blocking CSS",
                f"{len(blocking_css)} CSS resources are blocking rendering, which delays "
                "the First Contentful Paint.",
                self._severity(len(blocking_css)),
                blocking_css,
                [("Inline critical CSS directly in the HTML to reduce render-blocking.",
                  "https://web.dev/articles/extract-critical-css"),
                 ("Use media queries to make CSS non-render-blocking.",
                  "https://web.dev/articles/defer-non-critical-css"),
                 ("Load non-critical CSS asynchronously.",
                  "https://web.dev/articles/defer-non-critical-css"),
                 PRELOAD_TIP],
            ))

        # 2. Scripts
        blocking_js = [
            r for r in filter_by_type(resources, ResourceType.SCRIPT)
            if r.is_render_blocking or self.is_likely_render_blocking(r)
        ]
        if blocking_js:
            findings.append(make_bottleneck(
                self.category,
                "Render-Blocking JavaScript",
                f"{len(blocking_js)} JavaScript resources are blocking rendering, which "
                "delays the First Contentful Paint.",
                self._severity(len(blocking_js)),
                blocking_js,
                [("Add async or defer attributes to non-critical script tags.",
                  "https://web.dev/articles/efficiently-load-third-party-javascript"),
                 ("Move script tags to the end of the body.",
                  "https://web.dev/articles/efficiently-load-third-party-javascript"),
                 PRELOAD_TIP,
                 ("Use dynamic imports for JavaScript modules that are not immediately needed.",
                  "https://web.dev/articles/reduce-javascript-payloads-with-code-splitting")],
            ))

        # 3. Fonts requested before first paint
        fcp = metrics.first_contentful_paint
        early_fonts = [
            r for r in filter_by_type(resources, ResourceType.FONT)
            if fcp and r.start_time is not None and r.start_time < fcp
        ]
        if early_fonts:
            findings.append(make_bottleneck(
                self.category,
                "Font Loading Issues",
                f"{len(early_fonts)} font resources may be blocking rendering or causing "
                "layout shifts.",
                Severity.MEDIUM,
                early_fonts,
                [("Use the font-display CSS property to control how fonts are displayed while loading.",
                  "https://web.dev/articles/font-display"),
                 ("Preload important font files to improve loading performance.",
                  "https://web.dev/articles/preload-critical-assets"),
                 ("Consider using system fonts or variable fonts to reduce the number of font files.",
                  "https://web.dev/articles/variable-fonts"),
                 ("Self-host fonts instead of using third-party font services for better control.",
                  "https://web.dev/articles/font-best-practices")],
            ))

        return findings

    def is_likely_render_blocking(self, resource) -> bool:
        """Stylesheets always block; scripts block unless they loaded quickly."""
        rtype = resource_type(resource)
        if rtype is ResourceType.STYLESHEET:
            # No media-query information is available, so every stylesheet counts.
            return True
        if rtype is ResourceType.SCRIPT:
            total = resource.timing_breakdown.total
            if total:
                return total > self.THRESHOLDS["script_load_ms"]
            return True
        return False

    def _severity(self, count: int) -> Severity:
        return Severity.HIGH if count > self.THRESHOLDS["high_count"] else Severity.MEDIUM
