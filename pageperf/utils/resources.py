"""Resource classification helpers shared by every detector.

All helpers accept either a ResourceRecord or a raw mapping, and none of
them raise on malformed URLs: a bad URL simply classifies as "other" or
"not third-party".
"""

from __future__ import annotations

import math
from typing import Iterable
from urllib.parse import urlparse

from pageperf.models.types import ResourceRecord, ResourceType


# Prefix match, checked in order.
MIME_TYPE_MAP: dict[ResourceType, tuple[str, ...]] = {
    ResourceType.DOCUMENT: ("text/html", "application/xhtml+xml"),
    ResourceType.STYLESHEET: ("text/css",),
    ResourceType.SCRIPT: ("application/javascript", "text/javascript", "application/x-javascript"),
    ResourceType.IMAGE: ("image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"),
    ResourceType.FONT: ("font/woff", "font/woff2", "font/ttf", "font/otf"),
    ResourceType.XHR: ("application/json", "application/xml", "text/xml"),
    ResourceType.MEDIA: ("audio/", "video/"),
}

EXTENSION_MAP: dict[str, ResourceType] = {
    "css": ResourceType.STYLESHEET,
    "js": ResourceType.SCRIPT,
    "jpg": ResourceType.IMAGE,
    "jpeg": ResourceType.IMAGE,
    "png": ResourceType.IMAGE,
    "gif": ResourceType.IMAGE,
    "webp": ResourceType.IMAGE,
    "svg": ResourceType.IMAGE,
    "woff": ResourceType.FONT,
    "woff2": ResourceType.FONT,
    "ttf": ResourceType.FONT,
    "otf": ResourceType.FONT,
    "json": ResourceType.XHR,
    "xml": ResourceType.XHR,
    "mp3": ResourceType.MEDIA,
    "mp4": ResourceType.MEDIA,
    "webm": ResourceType.MEDIA,
    "ogg": ResourceType.MEDIA,
    "html": ResourceType.DOCUMENT,
    "htm": ResourceType.DOCUMENT,
}


def _field(resource, name: str, raw_name: str | None = None):
    if isinstance(resource, ResourceRecord):
        return getattr(resource, name)
    if isinstance(resource, dict):
        value = resource.get(raw_name or name)
        if value is None and raw_name:
            value = resource.get(name)
        return value
    return None


def url_extension(url: str | None) -> str:
    """Lower-cased file extension of a URL, ignoring query string and fragment."""
    if not url or not isinstance(url, str):
        return ""
    path = url.split("?", 1)[0].split("#", 1)[0]
    last = path.rsplit("/", 1)[-1]
    if "." not in last:
        return ""
    return last.rsplit(".", 1)[-1].lower()


def type_from_mime(mime_type: str | None) -> ResourceType | None:
    if not mime_type or not isinstance(mime_type, str):
        return None
    mime = mime_type.strip().lower()
    for rtype, prefixes in MIME_TYPE_MAP.items():
        if mime.startswith(prefixes):
            return rtype
    return None


def resource_type(resource) -> ResourceType:
    """Declared type if meaningful, else inferred from MIME type, else from URL."""
    declared = ResourceType.parse(_field(resource, "type"))
    if declared and declared is not ResourceType.OTHER:
        return declared

    by_mime = type_from_mime(_field(resource, "mime_type", "mimeType"))
    if by_mime:
        return by_mime

    return EXTENSION_MAP.get(url_extension(_field(resource, "url")), ResourceType.OTHER)


def hostname(url: str | None) -> str:
    if not url or not isinstance(url, str):
        return ""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def main_domain(resources) -> str:
    """Hostname of the page: first document resource, else the first resource."""
    if not resources:
        return ""
    for resource in resources:
        if resource_type(resource) is ResourceType.DOCUMENT:
            host = hostname(_field(resource, "url"))
            if host:
                return host
            break
    return hostname(_field(resources[0], "url"))


def is_third_party(resource, domain: str) -> bool:
    """True when the resource host is neither the main domain nor one of its subdomains."""
    url = _field(resource, "url")
    if not url or not domain:
        return False
    host = hostname(url)
    if not host:
        return False
    domain = domain.lower()
    if host == domain or host.endswith(f".{domain}"):
        return False
    return True


def filter_by_type(resources: Iterable, rtype: ResourceType) -> list:
    return [r for r in resources if resource_type(r) is rtype]


def resource_size(resource) -> int:
    size = _field(resource, "size")
    if isinstance(size, bool) or not isinstance(size, (int, float)):
        return 0
    if (isinstance(size, float) and not math.isfinite(size)) or size < 0:
        return 0
    return int(size)


def total_size(resources: Iterable) -> int:
    return sum(resource_size(r) for r in resources)


def format_size(num_bytes: float | None) -> str:
    if num_bytes is None:
        return "-"
    if num_bytes < 1024:
        return f"{int(num_bytes)} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.2f} MB"


def format_time(ms: float | None) -> str:
    if ms is None:
        return "-"
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def short_url(url: str, max_len: int = 80) -> str:
    if len(url) <= max_len:
        return url
    return url[:max_len - 3] + "..."
