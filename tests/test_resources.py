from __future__ import annotations

from pageperf.models.types import ResourceRecord, ResourceType
from pageperf.utils.resources import (
    format_size,
    format_time,
    is_third_party,
    main_domain,
    resource_type,
    short_url,
    total_size,
    url_extension,
)


def test_url_extension_ignores_query_and_fragment() -> None:
    assert url_extension("https://cdn.example.com/img/photo.JPG?w=200#top") == "jpg"
    assert url_extension("https://example.com/") == ""
    assert url_extension(None) == ""


def test_resource_type_prefers_declared_then_mime_then_url() -> None:
    assert resource_type({"type": "font", "url": "https://x.com/a.css"}) is ResourceType.FONT
    assert resource_type({"type": "other", "mimeType": "text/css"}) is ResourceType.STYLESHEET
    assert resource_type({"mimeType": "video/mp4"}) is ResourceType.MEDIA
    assert resource_type({"url": "https://x.com/bundle.js?v=3"}) is ResourceType.SCRIPT
    assert resource_type({"url": "https://x.com/api/items"}) is ResourceType.OTHER
    assert resource_type(ResourceRecord(url="https://x.com/a.woff2")) is ResourceType.FONT


def test_same_host_and_subdomains_are_first_party() -> None:
    assert not is_third_party({"url": "https://example.com/a.js"}, "example.com")
    assert not is_third_party({"url": "https://static.example.com/a.js"}, "example.com")
    assert not is_third_party({"url": "https://EXAMPLE.com/a.js"}, "example.com")


def test_unrelated_host_is_third_party() -> None:
    assert is_third_party({"url": "https://cdn.tracker.net/t.js"}, "example.com")
    assert is_third_party({"url": "https://notexample.com/t.js"}, "example.com")


def test_unparseable_or_missing_input_is_not_third_party() -> None:
    assert not is_third_party({"url": "http://[::1/broken"}, "example.com")
    assert not is_third_party({"url": "not a url"}, "example.com")
    assert not is_third_party({}, "example.com")
    assert not is_third_party({"url": "https://cdn.tracker.net/t.js"}, "")


def test_main_domain_prefers_document() -> None:
    resources = [
        {"url": "https://cdn.other.com/lib.js", "type": "script"},
        {"url": "https://www.example.com/", "type": "document"},
    ]
    assert main_domain(resources) == "www.example.com"
    assert main_domain(resources[:1]) == "cdn.other.com"
    assert main_domain([]) == ""


def test_total_size_skips_bad_sizes() -> None:
    assert total_size([{"size": 100}, {"size": -4}, {"size": "12"}, {}, {"size": 50.7}]) == 150


def test_formatting() -> None:
    assert format_size(512) == "512 B"
    assert format_size(1536) == "1.5 KB"
    assert format_size(2 * 1024 * 1024) == "2.00 MB"
    assert format_time(850) == "850ms"
    assert format_time(1250) == "1.25s"
    assert format_time(None) == "-"
    assert short_url("https://example.com/" + "a" * 100, 30).endswith("...")
    assert len(short_url("https://example.com/" + "a" * 100, 30)) == 30


def test_non_finite_sizes_count_as_zero() -> None:
    assert total_size([{"size": float("nan")}, {"size": float("inf")}, {"size": 10}]) == 10
