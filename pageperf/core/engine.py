"""Detector engine: runs every detector over one (metrics, resources) snapshot.

Each detector call is isolated. A failure is turned into a DetectorOutcome
carrying the error, logged with the detector's name and reported through the
progress callback; the remaining detectors still run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from pageperf.core.metrics import parse_metrics
from pageperf.core.resource_analyzer import analyze_resources
from pageperf.detectors.base import Detector
from pageperf.detectors.blocking import BlockingResourcesDetector
from pageperf.detectors.css import CSSDetector
from pageperf.detectors.fonts import FontLoadingDetector
from pageperf.detectors.images import UnoptimizedImagesDetector
from pageperf.detectors.javascript import JavaScriptDetector
from pageperf.detectors.network import NetworkLatencyDetector
from pageperf.detectors.resource_size import ResourceSizeDetector
from pageperf.detectors.third_party import ThirdPartyScriptsDetector
from pageperf.models.types import Bottleneck

logger = logging.getLogger("pageperf.engine")

ProgressCallback = Callable[[str, dict], None]


def default_detectors() -> list[Detector]:
    return [
        NetworkLatencyDetector(),
        ResourceSizeDetector(),
        BlockingResourcesDetector(),
        UnoptimizedImagesDetector(),
        JavaScriptDetector(),
        CSSDetector(),
        FontLoadingDetector(),
        ThirdPartyScriptsDetector(),
    ]


@dataclass
class DetectorOutcome:
    detector: str
    bottlenecks: list[Bottleneck] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def detector_name(detector) -> str:
    return getattr(detector, "name", None) or type(detector).__name__


def sort_by_severity(bottlenecks: Iterable[Bottleneck]) -> list[Bottleneck]:
    """Stable sort, high before medium before low."""
    return sorted(bottlenecks, key=lambda b: b.severity.rank)


class BottleneckEngine:

    def __init__(
        self,
        detectors: Sequence[Detector] | None = None,
        on_progress: ProgressCallback | None = None,
    ):
        self.detectors = list(detectors) if detectors is not None else default_detectors()
        self._progress = on_progress or (lambda *_: None)

    def run_detector(self, detector, metrics, resources) -> DetectorOutcome:
        name = detector_name(detector)
        try:
            found = list(detector.detect(metrics, resources) or [])
        except Exception as e:
            logger.exception("detector %s failed", name)
            outcome = DetectorOutcome(detector=name, error=f"{type(e).__name__}: {e}"[:300])
            self._progress("detector_failed", {"detector": name, "error": outcome.error})
            return outcome

        self._progress("detector_complete", {"detector": name, "bottlenecks": len(found)})
        return DetectorOutcome(detector=name, bottlenecks=found)

    def run(self, metrics, resources) -> tuple[list[DetectorOutcome], list[Bottleneck]]:
        """Run all detectors; return per-detector outcomes and the merged, sorted list."""
        if metrics is None or resources is None:
            return [], []

        metrics = parse_metrics(metrics)
        resources = analyze_resources(resources)

        outcomes = [self.run_detector(d, metrics, resources) for d in self.detectors]
        merged = [b for outcome in outcomes for b in outcome.bottlenecks]
        return outcomes, sort_by_severity(merged)

    def detect_bottlenecks(self, metrics, resources) -> list[Bottleneck]:
        _, bottlenecks = self.run(metrics, resources)
        return bottlenecks
