"""Tests for the export search filter."""

from nvr_exports.schemas.export import Export
from nvr_exports.services.search import filter_exports, normalize_name, visible_ids


def make_export(export_id: str, name: str) -> Export:
    return Export(id=export_id, name=name, video_path=f"/media/frigate/exports/{export_id}.mp4")


EXPORTS = [
    make_export("1", "Front_Door"),
    make_export("2", "garage_morning"),
    make_export("3", "Backyard Night"),
]


def test_normalize_name():
    assert normalize_name("Front_Door_Evening") == "front door evening"


def test_search_ignores_case_and_underscores():
    assert [e.id for e in filter_exports(EXPORTS, "front door")] == ["1"]
    assert [e.id for e in filter_exports(EXPORTS, "FRONT")] == ["1"]


def test_search_term_underscores_match_spaces():
    assert [e.id for e in filter_exports(EXPORTS, "garage_mor")] == ["2"]


def test_empty_search_returns_everything_in_order():
    result = filter_exports(EXPORTS, "")
    assert result == EXPORTS
    assert result is not EXPORTS


def test_missing_collection_stays_missing():
    assert filter_exports(None, "front") is None
    assert filter_exports(None, "") is None


def test_no_match_returns_empty_list():
    assert filter_exports(EXPORTS, "driveway") == []


def test_filter_is_pure():
    first = filter_exports(EXPORTS, "night")
    second = filter_exports(EXPORTS, "night")
    assert first == second
    assert len(EXPORTS) == 3


def test_visible_ids():
    assert visible_ids(EXPORTS, "o") == {"1", "2"}
    assert visible_ids(None, "o") == set()
