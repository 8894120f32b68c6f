"""Suggestion catalog and verbosity filtering.

Detectors attach their own suggestions; the catalog is the fallback for
bottlenecks that arrive without any. Within a category the entries are
ordered from most to least broadly applicable, because filtering keeps a
prefix of the list.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from pageperf.models.settings import DEFAULT_LEVEL, SuggestionLevel, normalize_level
from pageperf.models.types import Bottleneck, BottleneckCategory, Suggestion


LEVEL_LIMITS = {
    SuggestionLevel.BASIC: 2,
    SuggestionLevel.INTERMEDIATE: 4,
    SuggestionLevel.ADVANCED: None,
}


def _entries(*pairs: tuple[str, str]) -> tuple[Suggestion, ...]:
    return tuple(Suggestion(text, link) for text, link in pairs)


SUGGESTION_CATALOG: dict[BottleneckCategory, tuple[Suggestion, ...]] = {
    BottleneckCategory.NETWORK_LATENCY: _entries(
        ("Use a Content Delivery Network (CDN) to serve static assets from locations closer to your users.",
         "https://web.dev/articles/content-delivery-networks"),
        ("Optimize server response time by improving server-side code, database queries, and server configuration.",
         "https://web.dev/articles/optimize-ttfb"),
        ("Implement HTTP/2 or HTTP/3 to improve connection efficiency.",
         "https://web.dev/articles/performance-http2"),
        ("Use DNS prefetching for domains you will connect to.",
         "https://web.dev/articles/preconnect-and-dns-prefetch"),
        ("Implement server-side caching to improve response times for repeat visitors.",
         "https://web.dev/articles/http-cache"),
        ("Consider using a service worker to cache resources and provide offline functionality.",
         "https://web.dev/articles/service-workers-cache-storage"),
    ),
    BottleneckCategory.RESOURCE_SIZE: _entries(
        ("Compress text resources (HTML, CSS, JavaScript) using Gzip or Brotli.",
         "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
        ("Minify HTML, CSS, and JavaScript to remove unnecessary characters.",
         "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
        ("Implement code splitting for JavaScript to load only what is needed.",
         "https://web.dev/articles/reduce-javascript-payloads-with-code-splitting"),
        ("Remove unused CSS and JavaScript code using tools like PurgeCSS and tree shaking.",
         "https://web.dev/articles/unused-javascript"),
        ("Optimize images by using modern formats, proper compression, and appropriate dimensions.",
         "https://web.dev/articles/use-imagemin-to-compress-images"),
        ("Use responsive images with srcset to serve different sizes based on the device.",
         "https://web.dev/articles/serve-responsive-images"),
    ),
    BottleneckCategory.BLOCKING_RESOURCES: _entries(
        ("Inline critical CSS directly in the HTML to reduce render-blocking.",
         "https://web.dev/articles/extract-critical-css"),
        ("Add async or defer attributes to non-critical script tags.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
        ("Use media queries to make CSS non-render-blocking.",
         "https://web.dev/articles/defer-non-critical-css"),
        ("Load non-critical CSS asynchronously.",
         "https://web.dev/articles/defer-non-critical-css"),
        ("Consider using the preload link type to prioritize critical resources.",
         "https://web.dev/articles/preload-critical-assets"),
        ("Move script tags to the end of the body.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
    ),
    BottleneckCategory.UNOPTIMIZED_IMAGES: _entries(
        ("Compress images using tools like ImageOptim, TinyPNG, or Squoosh.",
         "https://web.dev/articles/use-imagemin-to-compress-images"),
        ("Convert images to WebP format for better compression and quality.",
         "https://web.dev/articles/serve-images-webp"),
        ("Resize images to appropriate dimensions for their display size.",
         "https://web.dev/articles/serve-responsive-images"),
        ("Use responsive images with srcset to serve different sizes based on the device.",
         "https://web.dev/articles/serve-responsive-images"),
        ("Implement lazy loading for images below the fold.",
         "https://web.dev/articles/lazy-loading-images"),
        ("Consider using AVIF format for even better compression.",
         "https://web.dev/articles/compress-images-avif"),
    ),
    BottleneckCategory.INEFFICIENT_JAVASCRIPT: _entries(
        ("Break up long tasks into smaller, asynchronous tasks.",
         "https://web.dev/articles/optimize-long-tasks"),
        ("Implement code splitting to load JavaScript only when needed.",
         "https://web.dev/articles/reduce-javascript-payloads-with-code-splitting"),
        ("Remove unused JavaScript code using tree shaking.",
         "https://web.dev/articles/remove-unused-code"),
        ("Defer or lazy load non-critical JavaScript.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
        ("Use web workers for CPU-intensive tasks to avoid blocking the main thread.",
         "https://web.dev/articles/off-main-thread"),
        ("Optimize JavaScript execution by avoiding layout thrashing and other performance issues.",
         "https://web.dev/articles/optimize-long-tasks"),
    ),
    BottleneckCategory.UNOPTIMIZED_CSS: _entries(
        ("Remove unused CSS using tools like PurgeCSS or UnCSS.",
         "https://web.dev/articles/unused-css"),
        ("Minify CSS files to reduce their size.",
         "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
        ("Split CSS into critical and non-critical styles.",
         "https://web.dev/articles/extract-critical-css"),
        ("Optimize CSS selectors for better performance.",
         "https://web.dev/articles/extract-critical-css"),
        ("Consolidate CSS files to reduce HTTP requests.",
         "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
        ("Consider using CSS frameworks more selectively or with tree-shaking.",
         "https://web.dev/articles/extract-critical-css"),
    ),
    BottleneckCategory.FONT_LOADING: _entries(
        ("Use the font-display CSS property to control how fonts are displayed while loading.",
         "https://web.dev/articles/font-display"),
        ("Preload important font files to improve loading performance.",
         "https://web.dev/articles/preload-critical-assets"),
        ("Use font subsetting to include only the characters you need.",
         "https://web.dev/articles/reduce-webfont-size"),
        ("Consider using variable fonts to reduce the number of font files.",
         "https://web.dev/articles/variable-fonts"),
        ("Self-host fonts instead of using third-party font services for better control.",
         "https://web.dev/articles/font-best-practices"),
        ("Use modern font formats like WOFF2 for better compression.",
         "https://web.dev/articles/reduce-webfont-size"),
    ),
    BottleneckCategory.THIRD_PARTY_SCRIPTS: _entries(
        ("Evaluate the necessity of each third-party script and remove unnecessary ones.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
        ("Load third-party scripts asynchronously or defer their loading.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
        ("Use resource hints like dns-prefetch and preconnect for third-party domains.",
         "https://web.dev/articles/preconnect-and-dns-prefetch"),
        ("Consider using a tag management system to better control third-party scripts.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
        ("Consider self-hosting critical third-party scripts for better control.",
         "https://web.dev/articles/efficiently-load-third-party-javascript"),
        ("Implement a performance budget to limit the impact of third-party scripts.",
         "https://web.dev/articles/performance-budgets-101"),
    ),
}

_missing = set(BottleneckCategory) - set(SUGGESTION_CATALOG)
if _missing:
    raise RuntimeError(f"suggestion catalog has no entries for: {sorted(c.value for c in _missing)}")


def filter_suggestions(suggestions: Sequence[Suggestion], level) -> tuple[Suggestion, ...]:
    """Keep the prefix allowed by the level; unknown or missing levels keep everything."""
    if not suggestions:
        return ()
    parsed = normalize_level(level)
    limit = LEVEL_LIMITS.get(parsed) if parsed else None
    if limit is None:
        return tuple(suggestions)
    return tuple(suggestions[:limit])


def catalog_suggestions(category: BottleneckCategory) -> tuple[Suggestion, ...]:
    return SUGGESTION_CATALOG[category]


def generate_suggestions(bottlenecks: Iterable[Bottleneck] | None, level=DEFAULT_LEVEL) -> list[Bottleneck]:
    """Return copies of the bottlenecks with suggestion lists trimmed to the level."""
    if not bottlenecks:
        return []

    enhanced = []
    for bottleneck in bottlenecks:
        source = bottleneck.suggestions or catalog_suggestions(bottleneck.category)
        enhanced.append(replace(bottleneck, suggestions=filter_suggestions(source, level)))
    return enhanced
