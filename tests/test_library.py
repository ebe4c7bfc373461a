from datetime import datetime, timezone

import pytest

from noxelmesh.library import (
    NoxelColor,
    SavedColor,
    SavedColorArray,
    unix_timestamp,
    utc_from_unix_timestamp,
)
from noxelmesh.structs import Color


def test_color_roles_looked_up_by_display_name():
    assert NoxelColor("Inactive node") is NoxelColor.NODE_INACTIVE
    assert NoxelColor("Move color (arrows)") is NoxelColor.MOVE_COLOR_2
    assert len(list(NoxelColor)) == 9


def test_saved_color_defaults():
    saved = SavedColor()
    assert saved.name == "NO-NAME"
    assert saved.hex_color == "00000000"


def test_saved_color_from_color_round_trip():
    color = Color(12, 200, 34, 99)
    saved = SavedColor.from_color("line", color)
    assert saved.name == "line"
    assert saved.hex_color == color.to_hex()
    assert saved.color == color


def test_saved_color_array_dict_round_trip():
    array = SavedColorArray([SavedColor("a", "FF0000FF"), SavedColor("b", "00FF00FF")])
    restored = SavedColorArray.from_dict(array.to_dict())
    assert restored == array
    assert array.to_dict()["Colors"][0] == {"Name": "a", "HexColor": "FF0000FF"}


def test_empty_array_default():
    assert SavedColorArray().colors == []
    assert SavedColorArray.from_dict({}) == SavedColorArray()


def test_epoch():
    assert utc_from_unix_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert unix_timestamp(datetime(1970, 1, 1)) == 0


@pytest.mark.parametrize("stamp", [0, 1, 86400, 1_600_000_000, -1_000_000])
def test_timestamp_round_trip(stamp):
    assert unix_timestamp(utc_from_unix_timestamp(stamp)) == stamp


def test_result_is_utc():
    assert utc_from_unix_timestamp(1_600_000_000).utcoffset().total_seconds() == 0


def test_fraction_truncates_toward_zero():
    before_epoch = datetime(1969, 12, 31, 23, 59, 59, 500000, tzinfo=timezone.utc)
    assert unix_timestamp(before_epoch) == 0
    after = utc_from_unix_timestamp(5).replace(microsecond=900000)
    assert unix_timestamp(after) == 5