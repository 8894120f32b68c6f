"""Network latency: slow server response for the document and slow resources."""

from __future__ import annotations

from pageperf.detectors.base import make_bottleneck, missing_input
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type


CDN_TIP = ("Consider using a Content Delivery Network (CDN) to reduce latency.",
           "https://web.dev/articles/content-delivery-networks")
SERVER_TIP = ("Optimize server-side processing to reduce response time.",
              "https://web.dev/articles/optimize-ttfb")


class NetworkLatencyDetector:

    name = "network_latency"
    category = BottleneckCategory.NETWORK_LATENCY

    # Waiting time is an estimate of TTFB (30% of the resource's total time).
    THRESHOLDS = {"ttfb_ms": {"high": 600, "medium": 300}}

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        findings = []
        limits = self.THRESHOLDS["ttfb_ms"]

        # 1. Server response time of the main document
        documents = filter_by_type(resources, ResourceType.DOCUMENT)
        if documents:
            main_document = documents[0]
            ttfb = main_document.timing_breakdown.waiting or 0
            if ttfb > limits["high"]:
                findings.append(make_bottleneck(
                    self.category,
                    "Slow Server Response Time",
                    f"The server took {round(ttfb)}ms to respond with the first byte of data, "
                    "which is significantly higher than the recommended threshold of 200ms.",
                    Severity.HIGH,
                    [main_document],
                    [CDN_TIP, SERVER_TIP,
                     ("Implement server-side caching to improve response times.",
                      "https://web.dev/articles/http-cache")],
                ))
            elif ttfb > limits["medium"]:
                findings.append(make_bottleneck(
                    self.category,
                    "Moderate Server Response Time",
                    f"The server took {round(ttfb)}ms to respond with the first byte of data, "
                    "which is higher than the recommended threshold of 200ms.",
                    Severity.MEDIUM,
                    [main_document],
                    [CDN_TIP, SERVER_TIP],
                ))

        # 2. Any resource with a long wait, including the document itself
        slow = [r for r in resources if (r.timing_breakdown.waiting or 0) > limits["high"]]
        if slow:
            findings.append(make_bottleneck(
                self.category,
                "Slow Resource Response Times",
                f"{len(slow)} resources have high waiting times, indicating potential "
                "server or network latency issues.",
                Severity.MEDIUM,
                slow,
                [("Consider using a Content Delivery Network (CDN) for static resources.",
                  "https://web.dev/articles/content-delivery-networks"),
                 ("Implement HTTP/2 or HTTP/3 to improve connection efficiency.",
                  "https://web.dev/articles/performance-http2"),
                 ("Reduce the number of different domains serving resources to minimize DNS lookups.",
                  "https://web.dev/articles/preconnect-and-dns-prefetch")],
            ))

        return findings
