"""Unoptimized images: oversized files and legacy formats."""

from __future__ import annotations

from pageperf.detectors.base import KB, make_bottleneck, missing_input
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type, format_size, resource_size, total_size, url_extension


class UnoptimizedImagesDetector:

    name = "unoptimized_images"
    category = BottleneckCategory.UNOPTIMIZED_IMAGES

    THRESHOLDS = {
        "size": {"high": 200 * KB, "medium": 100 * KB},
        "high_count": 2,
    }
    MODERN_FORMATS = {"webp", "avif"}

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        images = filter_by_type(resources, ResourceType.IMAGE)
        if not images:
            return []

        findings = []
        limits = self.THRESHOLDS["size"]

        # 1. Large images
        large = [r for r in images if resource_size(r) > limits["high"]]
        if large:
            findings.append(make_bottleneck(
                self.category,
                "Large Images",
                f"{len(large)} images are larger than {format_size(limits['high'])}, "
                f"with a total size of {format_size(total_size(large))}.",
                Severity.HIGH if len(large) > self.THRESHOLDS["high_count"] else Severity.MEDIUM,
                large,
                [("Compress images using tools like ImageOptim, TinyPNG, or Squoosh.",
                  "https://web.dev/articles/use-imagemin-to-compress-images"),
                 ("Resize images to appropriate dimensions for their display size.",
                  "https://web.dev/articles/serve-responsive-images"),
                 ("Use responsive images with srcset to serve different sizes based on the device.",
                  "https://web.dev/articles/serve-responsive-images"),
                 ("Implement lazy loading for images below the fold.",
                  "https://web.dev/articles/lazy-loading-images")],
            ))

        # 2. Legacy formats
        legacy = [r for r in images if r.url and url_extension(r.url) not in self.MODERN_FORMATS]
        if legacy:
            findings.append(make_bottleneck(
                self.category,
                "Non-Modern Image Formats",
                f"{len(legacy)} images are using older formats instead of modern formats "
                "like WebP or AVIF, which offer better compression.",
                Severity.MEDIUM,
                legacy,
                [("Convert images to WebP format for better compression and quality.",
                  "https://web.dev/articles/serve-images-webp"),
                 ("Consider using AVIF format for even better compression.",
                  "https://web.dev/articles/compress-images-avif"),
                 ("Use the picture element with multiple sources to provide fallbacks for older browsers.",
                  "https://web.dev/articles/serve-responsive-images")],
            ))

        # 3. Mid-sized images not already reported as large
        mid = [r for r in images if limits["medium"] < resource_size(r) <= limits["high"]]
        if mid:
            findings.append(make_bottleneck(
                self.category,
                "Potentially Unoptimized Images",
                f"{len(mid)} images may not be fully optimized and could be further "
                "compressed without significant quality loss.",
                Severity.LOW,
                mid,
                [("Use tools like ImageOptim, TinyPNG, or Squoosh to optimize images.",
                  "https://web.dev/articles/use-imagemin-to-compress-images"),
                 ("Adjust compression quality settings to find the right balance between size and quality.",
                  "https://web.dev/articles/compress-images"),
                 ("Remove unnecessary metadata from images.",
                  "https://web.dev/articles/compress-images")],
            ))

        return findings
