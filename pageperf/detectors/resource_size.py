"""Resource size: total page weight, JS/CSS payloads and oversized files."""

from __future__ import annotations

from pageperf.detectors.base import KB, MB, make_bottleneck, missing_input, tiered
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import (
    filter_by_type,
    format_size,
    resource_size,
    resource_type,
    total_size,
)


COMPRESS_TIP = ("Compress text resources (HTML, CSS, JavaScript) using Gzip or Brotli.",
                "https://web.dev/articles/reduce-network-payloads-using-text-compression")
IMAGES_TIP = ("Optimize images by using modern formats, proper compression, and appropriate dimensions.",
              "https://web.dev/articles/use-imagemin-to-compress-images")
SPLIT_TIP = ("Implement code splitting for JavaScript to load only what is needed.",
             "https://web.dev/articles/reduce-javascript-payloads-with-code-splitting")
JS_SPLIT_TIP = ("Implement code splitting to load JavaScript only when needed.",
                "https://web.dev/articles/reduce-javascript-payloads-with-code-splitting")
TREE_SHAKE_TIP = ("Remove unused JavaScript code using tree shaking.",
                  "https://web.dev/articles/remove-unused-code")
MINIFY_JS_TIP = ("Minify JavaScript files to reduce their size.",
                 "https://web.dev/articles/reduce-network-payloads-using-text-compression")
PURGE_CSS_TIP = ("Remove unused CSS using tools like PurgeCSS.",
                 "https://web.dev/articles/unused-css")
MINIFY_CSS_TIP = ("Minify CSS files to reduce their size.",
                  "https://web.dev/articles/reduce-network-payloads-using-text-compression")
CRITICAL_CSS_TIP = ("Split CSS into critical and non-critical styles.",
                    "https://web.dev/articles/extract-critical-css")


class ResourceSizeDetector:

    name = "resource_size"
    category = BottleneckCategory.RESOURCE_SIZE

    THRESHOLDS = {
        "total": {"high": 3 * MB, "medium": 1.5 * MB},
        ResourceType.SCRIPT: {"high": 500 * KB, "medium": 250 * KB},
        ResourceType.STYLESHEET: {"high": 150 * KB, "medium": 75 * KB},
        ResourceType.IMAGE: {"high": 200 * KB, "medium": 100 * KB},
        ResourceType.FONT: {"high": 100 * KB, "medium": 50 * KB},
    }
    DEFAULT_INDIVIDUAL_LIMIT = 200 * KB

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        findings = []

        # 1. Total page weight
        total = metrics.transfer_size or total_size(resources)
        limits = self.THRESHOLDS["total"]
        severity = tiered(total, limits["high"], limits["medium"])
        if severity is Severity.HIGH:
            findings.append(make_bottleneck(
                self.category,
                "Large Total Page Size",
                f"The total page size is {format_size(total)}, which is significantly "
                "larger than the recommended size of 1.5 MB.",
                severity,
                resources,
                [COMPRESS_TIP, IMAGES_TIP, SPLIT_TIP,
                 ("Remove unused CSS and JavaScript code.", "https://web.dev/articles/unused-javascript")],
            ))
        elif severity is Severity.MEDIUM:
            findings.append(make_bottleneck(
                self.category,
                "Moderate Total Page Size",
                f"The total page size is {format_size(total)}, which is larger than the "
                "recommended size of 1.5 MB.",
                severity,
                resources,
                [COMPRESS_TIP, IMAGES_TIP, SPLIT_TIP],
            ))

        # 2. JavaScript payload
        scripts = filter_by_type(resources, ResourceType.SCRIPT)
        js_size = total_size(scripts)
        limits = self.THRESHOLDS[ResourceType.SCRIPT]
        if js_size > limits["high"]:
            findings.append(make_bottleneck(
                self.category,
                "Large JavaScript Payload",
                f"The total JavaScript size is {format_size(js_size)}, which is significantly "
                "larger than the recommended size of 250 KB.",
                Severity.HIGH,
                scripts,
                [JS_SPLIT_TIP, TREE_SHAKE_TIP, MINIFY_JS_TIP,
                 ("Consider using smaller JavaScript libraries or alternatives.",
                  "https://web.dev/articles/commonjs-larger-bundles")],
            ))
        elif js_size > limits["medium"] and scripts:
            findings.append(make_bottleneck(
                self.category,
                "Moderate JavaScript Payload",
                f"The total JavaScript size is {format_size(js_size)}, which is larger than "
                "the recommended size of 250 KB.",
                Severity.MEDIUM,
                scripts,
                [JS_SPLIT_TIP, TREE_SHAKE_TIP, MINIFY_JS_TIP],
            ))

        # 3. CSS payload
        stylesheets = filter_by_type(resources, ResourceType.STYLESHEET)
        css_size = total_size(stylesheets)
        limits = self.THRESHOLDS[ResourceType.STYLESHEET]
        if css_size > limits["high"]:
            findings.append(make_bottleneck(
                self.category,
                "Large CSS Payload",
                f"The total CSS size is {format_size(css_size)}, which is significantly "
                "larger than the recommended size of 75 KB.",
                Severity.HIGH,
                stylesheets,
                [PURGE_CSS_TIP, MINIFY_CSS_TIP,
                 ("Consider using CSS frameworks more selectively or with tree-shaking.",
                  "https://web.dev/articles/extract-critical-css"),
                 CRITICAL_CSS_TIP],
            ))
        elif css_size > limits["medium"] and stylesheets:
            findings.append(make_bottleneck(
                self.category,
                "Moderate CSS Payload",
                f"The total CSS size is {format_size(css_size)}, which is larger than the "
                "recommended size of 75 KB.",
                Severity.MEDIUM,
                stylesheets,
                [PURGE_CSS_TIP, MINIFY_CSS_TIP, CRITICAL_CSS_TIP],
            ))

        # 4. Individual resources over their type's limit
        large = [r for r in resources if resource_size(r) > self.individual_limit(r)]
        if large:
            findings.append(make_bottleneck(
                self.category,
                "Large Individual Resources",
                f"{len(large)} resources are larger than recommended size thresholds.",
                Severity.MEDIUM,
                large,
                [("Compress large text resources using Gzip or Brotli.",
                  "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
                 IMAGES_TIP,
                 ("Consider lazy loading large resources that are not immediately needed.",
                  "https://web.dev/articles/lazy-loading")],
            ))

        return findings

    def individual_limit(self, resource) -> int:
        limits = self.THRESHOLDS.get(resource_type(resource))
        if limits:
            return limits["high"]
        return self.DEFAULT_INDIVIDUAL_LIMIT
