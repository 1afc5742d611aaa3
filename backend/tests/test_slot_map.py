"""Sparse slot maps: default-false reads, key encoding, value coercion."""

from datetime import date

import pytest

from groupcal.services.availability import SlotMap, coerce_available, hour_key, parse_slot_key, slot_key


def test_absent_key_reads_false():
    slots = SlotMap()
    assert slots["2024-06-10-14"] is False
    assert slots.get("2024-06-10-14") is False
    assert slots.is_available(date(2024, 6, 10), 14) is False
    assert "2024-06-10-14" not in slots


def test_set_and_read():
    slots = SlotMap()
    slots.set(date(2024, 6, 10), 14.5, True)
    assert slots["2024-06-10-14.5"] is True
    assert slots.true_keys() == {"2024-06-10-14.5"}


def test_copy_keeps_default():
    copied = SlotMap({"2024-06-10-9": True}).copy()
    assert isinstance(copied, SlotMap)
    assert copied["2024-06-10-10"] is False


@pytest.mark.parametrize(
    "hour,expected",
    [(14, "14"), (14.0, "14"), (14.5, "14.5"), (0, "0"), (9.5, "9.5")],
)
def test_hour_key(hour, expected):
    assert hour_key(hour) == expected


def test_parse_slot_key():
    assert parse_slot_key(slot_key(date(2024, 6, 10), 14.5)) == (date(2024, 6, 10), 14.5)
    with pytest.raises(ValueError):
        parse_slot_key("garbage")


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        (0.5, True),
        ("true", True),
        ("YES", True),
        ("false", False),
        ("", False),
        (None, False),
        ([], False),
        ({"a": 1}, False),
    ],
)
def test_coerce_available(value, expected):
    assert coerce_available(value) is expected


def test_from_raw_coerces_malformed_values():
    slots = SlotMap.from_raw({"2024-06-10-9": "1", "2024-06-10-10": None, "2024-06-10-11": 3})
    assert slots == {"2024-06-10-9": True, "2024-06-10-10": False, "2024-06-10-11": True}
