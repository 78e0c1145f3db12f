"""Coordinate validation: ranges, numeric parsing, default labels."""

import math

import pytest

from coordinate_plotter import CoordinateRecord, Rejected, validate


class TestAcceptance:
    @pytest.mark.parametrize("lat,lon", [
        ("0", "0"),
        ("-90", "-180"),
        ("90", "180"),
        ("45.5", "-122.25"),
        (" 12.5 ", "  45.25"),
        ("1e1", "-1.5E2"),
    ])
    def test_in_range_values_are_accepted(self, lat, lon):
        record = validate(lat, lon, "x")
        assert isinstance(record, CoordinateRecord)
        assert record.latitude == float(lat)
        assert record.longitude == float(lon)

    def test_numbers_are_accepted_as_well_as_text(self):
        record = validate(12.5, 45.25, "")
        assert (record.latitude, record.longitude) == (12.5, 45.25)

    def test_record_is_immutable(self):
        record = validate("1", "2", "a")
        with pytest.raises(Exception):
            record.latitude = 5


class TestRejection:
    @pytest.mark.parametrize("lat,lon", [
        ("90.0001", "0"),
        ("-90.5", "0"),
        ("0", "180.01"),
        ("0", "-181"),
        ("abc", "10"),
        ("10", ""),
        ("", ""),
        (None, "1"),
        ("nan", "1"),
        ("1", "inf"),
        ("12abc", "1"),
    ])
    def test_out_of_range_or_non_numeric_is_rejected(self, lat, lon):
        result = validate(lat, lon)
        assert isinstance(result, Rejected)
        assert result.reason

    def test_rejection_is_a_falsy_value_not_an_exception(self):
        result = validate("x", "y")
        assert not result

    def test_nan_float_is_rejected(self):
        assert isinstance(validate(math.nan, 0.0), Rejected)


class TestDefaultLabel:
    def test_default_label_uses_input_text(self):
        assert validate(12.5, 45.25, "").label == "12.5, 45.25"

    def test_default_label_keeps_trailing_zeros(self):
        record = validate("12.50", "45.250")
        assert record.label == "12.50, 45.250"
        assert record.latitude == 12.5

    def test_whitespace_label_falls_back_to_default(self):
        assert validate("1", "2", "   ").label == "1, 2"

    def test_explicit_label_is_trimmed(self):
        assert validate("1", "2", "  Home ").label == "Home"
