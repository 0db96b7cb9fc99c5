"""
Unit tests for the RegisterFields accessor and batch merging.

CHANGELOG:
- 2026-10-14: Initial creation
"""

from __future__ import annotations

import logging

import pytest

from eg4_proxy.services.registers import RegisterFields, merge_batches


class TestMergeBatches:
    def test_later_batch_overwrites(self) -> None:
        merged = merge_batches([{"a": 1, "b": 2}, {"b": 3, "c": 4}])
        assert merged == {"a": 1, "b": 3, "c": 4}

    def test_empty(self) -> None:
        assert merge_batches([]) == {}


class TestInteger:
    """integer() parsing and defaults."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(7, 7), ("7", 7), (" 12 ", 12), ("30.0", 30), (4.9, 4)],
    )
    def test_parses(self, value: object, expected: int) -> None:
        assert RegisterFields({"X": value}).integer("X") == expected

    def test_missing_is_recorded(self) -> None:
        fields = RegisterFields({})
        assert fields.integer("X") == 0
        assert fields.missing == {"X"}
        assert fields.invalid == set()

    def test_null_counts_as_missing(self) -> None:
        fields = RegisterFields({"X": None})
        assert fields.integer("X", default=5) == 5
        assert "X" in fields.missing

    @pytest.mark.parametrize("value", ["abc", "", True, [1]])
    def test_unparseable_is_recorded(self, value: object) -> None:
        fields = RegisterFields({"X": value})
        assert fields.integer("X") == 0
        assert fields.invalid == {"X"}


class TestNumber:
    def test_parses_float_strings(self) -> None:
        assert RegisterFields({"V": "52.4"}).number("V") == pytest.approx(52.4)

    def test_unparseable_defaults(self) -> None:
        fields = RegisterFields({"V": "n/a"})
        assert fields.number("V") == 0.0
        assert "V" in fields.invalid

    def test_nan_defaults(self) -> None:
        fields = RegisterFields({"V": "nan"})
        assert fields.number("V") == 0.0


class TestFlag:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            ("true", True),
            (False, False),
            ("false", False),
            ("True", False),
            (1, False),
            ("1", False),
        ],
    )
    def test_only_true_literals_count(self, value: object, expected: bool) -> None:
        assert RegisterFields({"F": value}).flag("F") is expected

    def test_missing_is_off(self) -> None:
        fields = RegisterFields({})
        assert fields.flag("F") is False
        assert "F" in fields.missing


class TestText:
    def test_passthrough_and_missing(self) -> None:
        fields = RegisterFields({"FW": "ABCD", "N": 12})
        assert fields.text("FW") == "ABCD"
        assert fields.text("N") == "12"
        assert fields.text("NONE") is None


def test_log_gaps_lists_missing_names(caplog: pytest.LogCaptureFixture) -> None:
    fields = RegisterFields({"B": "zz"})
    fields.integer("A")
    fields.integer("B")
    with caplog.at_level(logging.DEBUG, logger="eg4_proxy.services.registers"):
        fields.log_gaps("test")
    assert "A" in caplog.text
    assert "unparseable" in caplog.text
