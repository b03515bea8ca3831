import pytest

from bead_grid.config import VENDORS
from bead_grid.processing.palette import (
    FALLBACK_CELL,
    GridCell,
    color_distance_sq,
    create_palette_entries,
    find_nearest_color,
    hex_to_rgb,
    load_palette,
)


CODES_A = {"MARD": "A1", "COCO": "E01", "漫漫": "M1", "盼盼": "1", "咪小窝": "X1"}
CODES_B = {"MARD": "B1", "COCO": "E02", "漫漫": "M2", "盼盼": "2", "咪小窝": "X2"}


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#FF0000", (255, 0, 0)),
        ("00ff7f", (0, 255, 127)),
        ("#aBcDeF", (171, 205, 239)),
    ],
)
def test_hex_to_rgb_parses_six_digit_colors(value, expected):
    assert hex_to_rgb(value) == expected


@pytest.mark.parametrize("value", ["#FFF", "#GG0000", "##FF0000", "FF00000", "#FF0000\n", "", "red"])
def test_hex_to_rgb_rejects_malformed_values(value):
    assert hex_to_rgb(value) is None


def test_create_palette_entries_skips_unparsable_keys_and_keeps_order():
    mapping = {
        "#00FF00": CODES_B,
        "not-a-color": CODES_A,
        "ff0000": CODES_A,
        "#12345": CODES_A,
    }

    entries = create_palette_entries(mapping)

    assert [entry.hex for entry in entries] == ["#00FF00", "ff0000"]
    assert entries[0].rgb == (0, 255, 0)
    assert entries[1].codes == CODES_A


def test_loaded_codes_are_read_only_and_detached_from_source():
    source = dict(CODES_A)
    entry = create_palette_entries({"#FF0000": source})[0]
    cell = find_nearest_color([entry], (250, 0, 0))

    source["MARD"] = "Z9"

    assert entry.codes["MARD"] == "A1"
    with pytest.raises(TypeError):
        entry.codes["MARD"] = "Z9"
    with pytest.raises(TypeError):
        cell.codes["COCO"] = "Z9"
    with pytest.raises(TypeError):
        FALLBACK_CELL.codes["MARD"] = "Z9"
    assert cell.to_dict()["codes"] == CODES_A


def test_bundled_palette_round_trips_hex_to_rgb():
    palette = load_palette()

    assert palette
    for entry in palette:
        assert hex_to_rgb(entry.hex) == (entry.r, entry.g, entry.b)
        assert set(entry.codes) == set(VENDORS)


def test_load_palette_reads_custom_file(tmp_path):
    path = tmp_path / "palette.json"
    path.write_text('{"#010203": {"MARD": "Z9"}, "bogus": {}}', encoding="utf-8")

    palette = load_palette(path)

    assert len(palette) == 1
    assert palette[0].rgb == (1, 2, 3)
    assert palette[0].codes == {"MARD": "Z9"}


def test_load_palette_rejects_non_object_json(tmp_path):
    path = tmp_path / "palette.json"
    path.write_text('["#010203"]', encoding="utf-8")

    with pytest.raises(ValueError):
        load_palette(path)


def test_color_distance_sq():
    assert color_distance_sq((0, 0, 0), (3, 4, 12)) == 169


def test_find_nearest_color_exact_match_wins_with_first_inserted_on_ties():
    palette = create_palette_entries({"#FF0000": CODES_A, "ff0000": CODES_B, "#00FF00": CODES_B})

    cell = find_nearest_color(palette, (255, 0, 0))

    assert cell == GridCell("#FF0000", CODES_A)


def test_find_nearest_color_picks_minimum_distance():
    palette = create_palette_entries({"#FF0000": CODES_A, "#00FF00": CODES_B})

    assert find_nearest_color(palette, (40, 200, 30)).hex == "#00FF00"
    assert find_nearest_color(palette, (200, 90, 90)).hex == "#FF0000"


def test_find_nearest_color_empty_candidates_returns_white_placeholder():
    cell = find_nearest_color([], (12, 34, 56))

    assert cell is FALLBACK_CELL
    assert cell.hex == "#FFFFFF"
    assert cell.codes == {vendor: "-" for vendor in VENDORS}
