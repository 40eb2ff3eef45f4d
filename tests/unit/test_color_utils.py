import pytest

from brandhub.utils.colors import hex_to_rgb, is_valid_hex, normalize_hex, parse_cmyk, parse_rgb


@pytest.mark.parametrize("value", ["#802A02", "#fff", "#abcdef"])
def test_valid_hex(value):
    assert is_valid_hex(value)


@pytest.mark.parametrize("value", ["802A02", "#12345", "#GGGGGG", "", None])
def test_invalid_hex(value):
    assert not is_valid_hex(value)


def test_normalize_hex_expands_short_form_and_uppercases():
    assert normalize_hex("#abc") == "#AABBCC"
    assert normalize_hex("#802a02") == "#802A02"
    with pytest.raises(ValueError):
        normalize_hex("red")


def test_hex_to_rgb():
    assert hex_to_rgb("#802A02") == {"r": 128, "g": 42, "b": 2}


def test_parse_rgb_accepts_strings_and_dicts():
    assert parse_rgb("rgb(128, 42, 2)") == {"r": 128, "g": 42, "b": 2}
    assert parse_rgb("128 42 2") == {"r": 128, "g": 42, "b": 2}
    assert parse_rgb({"r": 300, "g": "10", "b": -5}) == {"r": 255, "g": 10, "b": 0}
    assert parse_rgb("12, 13") is None
    assert parse_rgb({"r": 1}) is None
    assert parse_rgb(None) is None


def test_parse_cmyk_accepts_labelled_values():
    assert parse_cmyk("C0 M67 Y100 K50") == {"c": 0, "m": 67, "y": 100, "k": 50}
    assert parse_cmyk("0, 0, 0, 100") == {"c": 0, "m": 0, "y": 0, "k": 100}
    assert parse_cmyk("1 2 3") is None
