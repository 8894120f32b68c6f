from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}


class ResourceType(str, Enum):
    DOCUMENT = "document"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    IMAGE = "image"
    FONT = "font"
    XHR = "xhr"
    MEDIA = "media"
    OTHER = "other"

    @classmethod
    def parse(cls, raw) -> ResourceType | None:
        """Return the matching member, or None for empty/unknown values."""
        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class BottleneckCategory(str, Enum):
    NETWORK_LATENCY = "Network Latency"
    RESOURCE_SIZE = "Resource Size"
    BLOCKING_RESOURCES = "Blocking Resources"
    UNOPTIMIZED_IMAGES = "Unoptimized Images"
    INEFFICIENT_JAVASCRIPT = "Inefficient JavaScript"
    UNOPTIMIZED_CSS = "Unoptimized CSS"
    FONT_LOADING = "Font Loading Issues"
    THIRD_PARTY_SCRIPTS = "Third-Party Scripts"


@dataclass(frozen=True)
class TimingBreakdown:
    total: float = 0
    waiting: float = 0
    downloading: float = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "waiting": self.waiting,
            "downloading": self.downloading,
        }


@dataclass(frozen=True)
class ResourceRecord:
    """One fetched sub-resource of a page load."""

    url: str = ""
    type: ResourceType = ResourceType.OTHER
    size: int = 0
    mime_type: str | None = None
    start_time: float | None = None   # ms
    end_time: float | None = None     # ms
    timing_breakdown: TimingBreakdown = field(default_factory=TimingBreakdown)
    is_render_blocking: bool = False

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "type": self.type.value,
            "size": self.size,
            "mimeType": self.mime_type,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "timingBreakdown": self.timing_breakdown.to_dict(),
            "isRenderBlocking": self.is_render_blocking,
        }


@dataclass(frozen=True)
class MetricsRecord:
    """Page-level timing metrics. Timings are milliseconds, None when unknown."""

    page_load_time: float | None = None
    dom_content_loaded: float | None = None
    first_contentful_paint: float | None = None
    largest_contentful_paint: float | None = None
    time_to_interactive: float | None = None
    total_blocking_time: float | None = None
    request_count: int = 0
    transfer_size: int = 0
    page_size: int = 0

    def to_dict(self) -> dict:
        return {
            "pageLoadTime": self.page_load_time,
            "domContentLoaded": self.dom_content_loaded,
            "firstContentfulPaint": self.first_contentful_paint,
            "largestContentfulPaint": self.largest_contentful_paint,
            "timeToInteractive": self.time_to_interactive,
            "totalBlockingTime": self.total_blocking_time,
            "requestCount": self.request_count,
            "transferSize": self.transfer_size,
            "pageSize": self.page_size,
        }


@dataclass(frozen=True)
class Suggestion:
    text: str
    link: str | None = None

    def to_dict(self) -> dict:
        d = {"text": self.text}
        if self.link:
            d["link"] = self.link
        return d


@dataclass(frozen=True)
class Bottleneck:
    """A detected performance problem with its affected resources and fixes."""

    category: BottleneckCategory
    title: str
    description: str
    severity: Severity
    resources: tuple[ResourceRecord, ...] = ()
    suggestions: tuple[Suggestion, ...] = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "resources": [r.to_dict() for r in self.resources],
            "suggestions": [s.to_dict() for s in self.suggestions],
        }


@dataclass
class AnalysisResult:
    url: str
    metrics: MetricsRecord
    resources: list[ResourceRecord] = field(default_factory=list)
    bottlenecks: list[Bottleneck] = field(default_factory=list)
    suggestion_level: str = "intermediate"
    ratings: dict[str, str | None] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "metrics": self.metrics.to_dict(),
            "ratings": self.ratings,
            "resources": [r.to_dict() for r in self.resources],
            "bottlenecks": [b.to_dict() for b in self.bottlenecks],
            "suggestionLevel": self.suggestion_level,
            "errors": self.errors,
            "startedAt": self.started_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }
