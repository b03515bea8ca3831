import pytest

from bead_grid.processing.filters import FilterStyle, filter_palette, rgb_to_hsl
from bead_grid.processing.palette import create_palette_entries


def _palette(*hex_values):
    return create_palette_entries({value: {"MARD": value} for value in hex_values})


@pytest.mark.parametrize(
    "rgb, expected",
    [
        ((255, 0, 0), (0, 100, 50)),
        ((0, 255, 0), (120, 100, 50)),
        ((0, 0, 255), (240, 100, 50)),
        ((255, 255, 255), (0, 0, 100)),
        ((0, 0, 0), (0, 0, 0)),
        ((128, 128, 128), (0, 0, 50)),
        ((255, 0, 128), (330, 100, 50)),
        ((212, 196, 196), (0, 16, 80)),
        ((159, 159, 96), (60, 25, 50)),
    ],
)
def test_rgb_to_hsl(rgb, expected):
    assert rgb_to_hsl(*rgb) == expected


def test_none_style_returns_palette_unchanged_and_is_idempotent():
    palette = _palette("#FF0000", "#808080", "#FFFFFF")

    once = filter_palette(palette, FilterStyle.NONE)
    twice = filter_palette(once, "none")

    assert once == palette
    assert twice == once


def test_candy_keeps_white_black_and_pastels_but_drops_muddy_tones():
    palette = _palette("#FFFFFF", "#000000", "#D4C4C4", "#9F9F60")

    kept = [entry.hex for entry in filter_palette(palette, FilterStyle.CANDY)]

    assert kept == ["#FFFFFF", "#000000", "#D4C4C4"]


def test_candy_keeps_vivid_dark_colors():
    palette = _palette("#B22222", "#4D4D4D", "#F2F2F2")

    kept = [entry.hex for entry in filter_palette(palette, "candy")]

    assert kept == ["#B22222"]


def test_candy_recognizes_white_without_hash_prefix():
    palette = _palette("ffffff", "#808080")

    assert [entry.hex for entry in filter_palette(palette, "candy")] == ["ffffff"]


def test_grayscale_keeps_near_neutral_colors():
    palette = _palette("#FFFFFF", "#000000", "#808080", "#828080", "#FF0000", "#D4C4C4")

    kept = [entry.hex for entry in filter_palette(palette, FilterStyle.GRAYSCALE)]

    assert kept == ["#FFFFFF", "#000000", "#808080", "#828080"]


@pytest.mark.parametrize("style", list(FilterStyle))
def test_filter_never_returns_empty(style):
    vivid_only = _palette("#FF0000", "#00FF00")
    muddy_only = _palette("#9F9F60", "#808060")

    assert filter_palette(vivid_only, style)
    assert filter_palette(muddy_only, style)


def test_empty_result_falls_back_to_full_palette():
    palette = _palette("#FF0000", "#0000FF")

    assert filter_palette(palette, FilterStyle.GRAYSCALE) == palette


def test_unknown_style_is_rejected():
    with pytest.raises(ValueError):
        filter_palette(_palette("#FF0000"), "sepia")
