"""Pagination helpers over the cached result set."""

import pytest

from placesearch.pagination import build_page_view, clamp_start, go_to_page, page_count, slice_records


@pytest.mark.parametrize(
    ("total", "page_size", "expected"),
    [(0, 3, 1), (1, 3, 1), (3, 3, 1), (4, 3, 2), (8, 3, 3), (10, 1, 10), (10, 10, 1)],
)
def test_page_count(total, page_size, expected):
    assert page_count(total, page_size) == expected


def test_page_count_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        page_count(5, 0)


def test_clamp_start_snaps_to_page_boundary():
    assert clamp_start(4, 8, 3) == 3
    assert clamp_start(6, 8, 3) == 6


def test_clamp_start_keeps_offset_on_an_existing_page():
    assert clamp_start(99, 8, 3) == 6
    assert clamp_start(-3, 8, 3) == 0
    assert clamp_start(9, 0, 3) == 0


def test_slice_never_runs_past_the_end():
    """Every offset produced by clamp_start yields an in-bounds, non-empty page."""
    records = list(range(8))
    for page_size in range(1, 10):
        for start in range(-2, 20):
            clamped = clamp_start(start, len(records), page_size)
            page = slice_records(records, clamped, page_size)
            assert 0 < len(page) <= page_size
            assert page == records[clamped : clamped + page_size]


def test_slice_of_empty_records_is_empty():
    assert slice_records([], 0, 3) == []


def test_go_to_page_is_zero_based_offset():
    assert go_to_page(1, 3) == 0
    assert go_to_page(3, 3) == 6


def test_build_page_view_for_last_partial_page(make_places):
    records = make_places("lon", 8)
    view = build_page_view(records, 6, 3)

    assert view.page_number == 3
    assert view.total_pages == 3
    assert view.items == records[6:8]
    assert view.has_prev()
    assert not view.has_next()


def test_build_page_view_empty_set_has_single_page():
    view = build_page_view([], 0, 3)

    assert view.items == []
    assert view.total_pages == 1
    assert view.page_number == 1
    assert not view.has_next()
