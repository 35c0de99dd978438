# ==============================================
# Tests for Validator Predicates
# ==============================================

import pytest

from smartzprod.config import Band, ValidationConfig
from smartzprod.validation.validators import (
    is_valid_identifier,
    is_valid_name,
    is_valid_positive_decimal,
    is_valid_positive_int,
    is_valid_range,
    is_within_optimal_band,
    is_within_warn_band,
)


class TestName:
    @pytest.mark.parametrize("value", ["Budi Santoso", "O'Neil", "Anne-Marie", "  Siti  "])
    def test_accepts_letters_spaces_hyphen_apostrophe(self, value):
        assert is_valid_name(value)

    @pytest.mark.parametrize("value", ["", "   ", "Budi2", "Budi_S", None, 42])
    def test_rejects_other_input(self, value):
        assert not is_valid_name(value)

    def test_length_limit(self):
        assert is_valid_name("a" * 100)
        assert not is_valid_name("a" * 101)


class TestIdentifier:
    def test_alphanumeric(self):
        assert is_valid_identifier("EX01")
        assert is_valid_identifier("12345")

    @pytest.mark.parametrize("value", ["", "EX-01", "EX 01", "EX.01", None])
    def test_rejects_non_alphanumeric(self, value):
        assert not is_valid_identifier(value)

    def test_length_limit(self):
        assert is_valid_identifier("A" * 50)
        assert not is_valid_identifier("A" * 51)


class TestPositiveInt:
    def test_bounds(self):
        """0 and 10000 fall outside [1, 9999]."""
        assert is_valid_positive_int("0") is False
        assert is_valid_positive_int("1") is True
        assert is_valid_positive_int("9999") is True
        assert is_valid_positive_int("10000") is False

    def test_integral_float_string_counts(self):
        assert is_valid_positive_int("5.0")
        assert is_valid_positive_int(5)

    @pytest.mark.parametrize("value", ["5.5", "abc", "", None, True, "-3"])
    def test_rejects_non_integral_and_junk(self, value):
        assert not is_valid_positive_int(value)


class TestPositiveDecimal:
    def test_minimum(self):
        assert is_valid_positive_decimal("0.1")
        assert not is_valid_positive_decimal("0.09")
        assert not is_valid_positive_decimal(0)

    def test_comma_separator(self):
        assert is_valid_positive_decimal("6,5")

    @pytest.mark.parametrize("value", ["nan", "inf", "x", "", None])
    def test_rejects_non_finite_and_junk(self, value):
        assert not is_valid_positive_decimal(value)


class TestRange:
    def test_end_must_exceed_start(self):
        assert is_valid_range("105", "100")
        assert not is_valid_range("100", "100")
        assert not is_valid_range("99", "100")

    def test_non_numeric(self):
        assert not is_valid_range("", "100")
        assert not is_valid_range("105", None)


class TestBands:
    def test_inclusive_defaults(self):
        assert is_within_warn_band(0.1)
        assert is_within_warn_band(2.0)
        assert not is_within_warn_band(2.01)
        assert is_within_optimal_band(0.5)
        assert is_within_optimal_band(1.5)
        assert not is_within_optimal_band(1.51)

    def test_configured_band(self):
        config = ValidationConfig(match_factor_warn=Band(0.2, 3.0))
        assert is_within_warn_band(2.5, config)
        assert not is_within_warn_band(0.15, config)

    def test_optimal_inside_warn(self):
        for value in (0.5, 0.75, 1.0, 1.25, 1.5):
            assert is_within_optimal_band(value)
            assert is_within_warn_band(value)
