from __future__ import annotations

import pytest

from pageperf.core.suggestions import (
    SUGGESTION_CATALOG,
    filter_suggestions,
    generate_suggestions,
)
from pageperf.detectors.base import make_bottleneck
from pageperf.models.settings import SuggestionLevel
from pageperf.models.types import BottleneckCategory, Severity


@pytest.fixture
def six_tips():
    return make_bottleneck(
        BottleneckCategory.RESOURCE_SIZE,
        "Large JavaScript Payload",
        "too big",
        Severity.HIGH,
        suggestions=[(f"tip {i}", f"https://web.dev/{i}") for i in range(6)],
    )


def test_catalog_covers_every_category() -> None:
    assert set(SUGGESTION_CATALOG) == set(BottleneckCategory)
    assert all(len(entries) == 6 for entries in SUGGESTION_CATALOG.values())


def test_basic_keeps_first_two(six_tips) -> None:
    [filtered] = generate_suggestions([six_tips], "basic")
    assert filtered.suggestions == six_tips.suggestions[:2]


def test_intermediate_keeps_first_four(six_tips) -> None:
    [filtered] = generate_suggestions([six_tips], SuggestionLevel.INTERMEDIATE)
    assert filtered.suggestions == six_tips.suggestions[:4]


def test_default_level_is_intermediate(six_tips) -> None:
    [filtered] = generate_suggestions([six_tips])
    assert len(filtered.suggestions) == 4


@pytest.mark.parametrize("level", ["advanced", "ADVANCED", "verbose", "", None])
def test_advanced_and_unknown_levels_keep_everything(six_tips, level) -> None:
    [filtered] = generate_suggestions([six_tips], level)
    assert filtered.suggestions == six_tips.suggestions


def test_advanced_is_idempotent(six_tips) -> None:
    once = generate_suggestions([six_tips], "advanced")
    twice = generate_suggestions(once, "advanced")
    assert twice == once


def test_input_is_not_mutated(six_tips) -> None:
    bottlenecks = [six_tips]
    result = generate_suggestions(bottlenecks, "basic")

    assert result is not bottlenecks
    assert bottlenecks[0] is six_tips
    assert len(six_tips.suggestions) == 6
    assert result[0].title == six_tips.title
    assert result[0].resources == six_tips.resources


def test_catalog_fills_in_missing_suggestions() -> None:
    bare = make_bottleneck(BottleneckCategory.FONT_LOADING, "Fonts", "", Severity.LOW)
    [filtered] = generate_suggestions([bare], "basic")
    assert filtered.suggestions == SUGGESTION_CATALOG[BottleneckCategory.FONT_LOADING][:2]


def test_empty_input() -> None:
    assert generate_suggestions(None) == []
    assert generate_suggestions([]) == []
    assert filter_suggestions((), "basic") == ()
