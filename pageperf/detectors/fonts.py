"""Font loading: font weight, count, third-party font hosts and late fonts."""

from __future__ import annotations

from pageperf.detectors.base import KB, make_bottleneck, missing_input, tiered
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type, format_size, is_third_party, main_domain, total_size


SUBSET_TIP = ("Use font subsetting to include only the characters you need.",
              "https://web.dev/articles/reduce-webfont-size")
VARIABLE_TIP = ("Consider using variable fonts to reduce the number of font files.",
                "https://web.dev/articles/variable-fonts")
WOFF2_TIP = ("Use modern font formats like WOFF2 for better compression.",
             "https://web.dev/articles/reduce-webfont-size")
SWAP_TIP = ("Implement font-display: swap to prevent font blocking.",
            "https://web.dev/articles/font-display")


class FontLoadingDetector:

    name = "font_loading"
    category = BottleneckCategory.FONT_LOADING

    THRESHOLDS = {
        "total_size": {"high": 100 * KB, "medium": 50 * KB},
        "file_count": 4,
    }

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        fonts = filter_by_type(resources, ResourceType.FONT)
        if not fonts:
            return []

        findings = []

        # 1. Total font weight
        font_size = total_size(fonts)
        limits = self.THRESHOLDS["total_size"]
        severity = tiered(font_size, limits["high"], limits["medium"])
        if severity is Severity.HIGH:
            findings.append(make_bottleneck(
                self.category,
                "Large Font Files",
                f"The total size of font files is {format_size(font_size)}, which is "
                "significantly larger than the recommended size of 50 KB.",
                severity,
                fonts,
                [SUBSET_TIP, VARIABLE_TIP,
                 ("Optimize font files using tools like fonttools or glyphhanger.",
                  "https://web.dev/articles/reduce-webfont-size"),
                 WOFF2_TIP],
            ))
        elif severity is Severity.MEDIUM:
            findings.append(make_bottleneck(
                self.category,
                "Moderate Font Size",
                f"The total size of font files is {format_size(font_size)}, which is larger "
                "than the recommended size of 50 KB.",
                severity,
                fonts,
                [SUBSET_TIP, VARIABLE_TIP, WOFF2_TIP],
            ))

        # 2. Font file count
        if len(fonts) > self.THRESHOLDS["file_count"]:
            findings.append(make_bottleneck(
                self.category,
                "Too Many Font Files",
                f"The page loads {len(fonts)} font files, which increases HTTP requests and "
                "can impact performance.",
                Severity.MEDIUM,
                fonts,
                [("Reduce the number of font families and weights used on the page.",
                  "https://web.dev/articles/font-best-practices"),
                 VARIABLE_TIP,
                 ("Use system fonts for less important text to reduce the number of custom fonts.",
                  "https://web.dev/articles/font-best-practices")],
            ))

        # 3. Fonts served by third-party services
        domain = main_domain(resources)
        hosted = [r for r in fonts if is_third_party(r, domain)]
        if hosted:
            findings.append(make_bottleneck(
                self.category,
                "Third-Party Font Services",
                f"The page loads {len(hosted)} fonts from third-party services, which can "
                "introduce additional latency.",
                Severity.MEDIUM,
                hosted,
                [("Consider self-hosting fonts instead of using third-party font services.",
                  "https://web.dev/articles/font-best-practices"),
                 ("Use resource hints like preconnect for third-party font domains.",
                  "https://web.dev/articles/preconnect-and-dns-prefetch"),
                 SWAP_TIP],
            ))

        # 4. Fonts requested after first paint. BlockingResourcesDetector flags the
        # opposite direction; both findings can appear for different fonts.
        fcp = metrics.first_contentful_paint
        late = [r for r in fonts if fcp and r.start_time is not None and r.start_time > fcp]
        if late:
            findings.append(make_bottleneck(
                self.category,
                "Late-Loading Fonts",
                f"{len(late)} fonts are loaded after the First Contentful Paint, which can "
                "cause layout shifts.",
                Severity.MEDIUM,
                late,
                [("Preload critical fonts to ensure they load early.",
                  "https://web.dev/articles/preload-critical-assets"),
                 SWAP_TIP,
                 ("Use the Font Loading API to control font loading behavior.",
                  "https://web.dev/articles/optimize-webfont-loading"),
                 ("Consider using system fonts or font fallbacks that closely match your custom fonts.",
                  "https://web.dev/articles/font-best-practices")],
            ))

        return findings
