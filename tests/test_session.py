import pytest

from bead_grid.infrastructure.session import GridSession
from bead_grid.processing.palette import EMPTY_CELL, GridCell

RED = GridCell("#FF0000", {"MARD": "A1", "COCO": "E01"})
GREEN = GridCell("#00FF00", {"MARD": "B1", "COCO": "E02"})


def _grid(cell, size=2):
    return [[cell] * size for _ in range(size)]


def test_newest_request_wins_over_stale_result():
    session = GridSession()
    first = session.begin()
    second = session.begin()

    assert session.accept(second, _grid(GREEN)) is True
    assert session.accept(first, _grid(RED)) is False
    assert session.grid == _grid(GREEN)


def test_select_vendor_only_changes_labels():
    session = GridSession()
    session.accept(session.begin(), _grid(RED))
    grid_before = session.grid

    assert session.labels() == [["A1", "A1"], ["A1", "A1"]]
    session.select_vendor("COCO")

    assert session.grid is grid_before
    assert session.labels() == [["E01", "E01"], ["E01", "E01"]]


def test_select_vendor_rejects_unknown_vendor():
    session = GridSession()

    with pytest.raises(ValueError):
        session.select_vendor("Hama")
    with pytest.raises(ValueError):
        GridSession("Hama")


def test_paint_and_eyedrop_current_grid():
    session = GridSession()
    session.accept(session.begin(), _grid(RED))
    original = session.grid

    session.paint(0, 1, GREEN)

    assert session.eyedrop(0, 1) == GREEN
    assert original[0][1] == RED


def test_edits_require_a_grid():
    session = GridSession()

    with pytest.raises(LookupError):
        session.paint(0, 0, RED)
    with pytest.raises(LookupError):
        session.labels()


def test_reset_clears_grid_restores_vendor_and_invalidates_in_flight_builds():
    session = GridSession("漫漫")
    token = session.begin()
    session.select_vendor("MARD")

    session.reset()

    assert session.grid is None
    assert session.vendor == "漫漫"
    assert session.accept(token, _grid(EMPTY_CELL)) is False
