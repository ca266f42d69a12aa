"""Tests for string, number, boolean and date validators."""

import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from dataknobs_validation import (
    BooleanValidator,
    DateValidator,
    NumberBounds,
    NumberValidator,
    SchemaConfigurationError,
    StringValidator,
)


class TestStringValidator:
    """Test StringValidator rules."""

    def test_rejects_non_strings(self):
        """Test the type check."""
        result = StringValidator().validate(42)
        assert result.messages == ["Value must be a string"]

    def test_min_length(self):
        """Test the minimum length rule."""
        validator = StringValidator().min_length(3)
        assert validator.validate("abc").valid
        assert validator.validate("ab").messages == ["Minimum length is 3"]

    def test_max_length(self):
        """Test the maximum length rule."""
        validator = StringValidator().max_length(3)
        assert validator.validate("abc").valid
        assert validator.validate("abcd").messages == ["Maximum length is 3"]

    def test_first_failing_rule_only(self):
        """Test that string rules short-circuit."""
        validator = StringValidator().min_length(5).pattern(r"^\d+$")
        assert validator.validate("ab").messages == ["Minimum length is 5"]
        assert validator.validate("abcdef").messages == ["Pattern validation failed"]

    def test_blank_strings(self):
        """Test blank handling."""
        assert StringValidator().pattern(r"^\d+$").validate("   ").valid
        assert StringValidator().min_length(1).validate("").messages == ["Minimum length is 1"]
        assert StringValidator().with_message("Required").validate("  ").messages == ["Required"]

    def test_pattern_search(self):
        """Test that unanchored patterns match anywhere."""
        assert StringValidator().pattern("b").validate("abc").valid
        assert StringValidator().pattern(re.compile(r"^b")).validate("abc").messages == [
            "Pattern validation failed"
        ]

    def test_pattern_custom_message(self):
        """Test a pattern with its own message."""
        validator = StringValidator().pattern(r"^[a-z]+$", "Lowercase letters only")
        assert validator.validate("ABC").messages == ["Lowercase letters only"]

    def test_email(self):
        """Test the email preset."""
        validator = StringValidator().email()
        assert validator.validate("jane@example.com").valid
        assert validator.validate("jane.example.com").messages == ["Email format is invalid"]

    def test_phone_number(self):
        """Test the phone number preset."""
        validator = StringValidator().phone_number()
        assert validator.validate("555-123-4567").valid
        assert validator.validate("5551234567").messages == [
            "Phone number format is invalid (expected format: XXX-XXX-XXXX)"
        ]

    def test_postal_code(self):
        """Test the postal code preset."""
        validator = StringValidator().postal_code()
        assert validator.validate("12345").valid
        assert validator.validate("1234").messages == ["Postal code must be exactly 5 digits"]

    def test_custom_message_overrides_defaults(self):
        """Test with_message."""
        validator = StringValidator().min_length(3).with_message("Name is too short")
        assert validator.validate("ab").messages == ["Name is too short"]

    @pytest.mark.parametrize("length", [-1, 1.5, True, None])
    def test_invalid_length(self, length):
        """Test that invalid lengths are rejected."""
        with pytest.raises(SchemaConfigurationError):
            StringValidator().min_length(length)

    def test_inconsistent_lengths(self):
        """Test that min_length cannot exceed max_length."""
        with pytest.raises(SchemaConfigurationError):
            StringValidator().max_length(2).min_length(3)
        with pytest.raises(SchemaConfigurationError):
            StringValidator().min_length(3).max_length(2)

    def test_invalid_pattern(self):
        """Test that empty and invalid patterns are rejected."""
        with pytest.raises(SchemaConfigurationError):
            StringValidator().pattern("")
        with pytest.raises(SchemaConfigurationError):
            StringValidator().pattern("[unclosed")

    def test_empty_message_rejected(self):
        """Test that an empty custom message is rejected."""
        with pytest.raises(SchemaConfigurationError):
            StringValidator().with_message("")


class TestNumberValidator:
    """Test NumberValidator rules."""

    @pytest.mark.parametrize("value", ["30", True, None, float("nan"), [1]])
    def test_rejects_non_numbers(self, value):
        """Test the type check."""
        assert NumberValidator().validate(value).messages == ["Value must be a number"]

    def test_accepts_numeric_types(self):
        """Test ints, floats and decimals."""
        validator = NumberValidator().range(0, 100)
        assert validator.validate(30).valid
        assert validator.validate(30.5).valid
        assert validator.validate(Decimal("99.9")).valid

    def test_integers_beyond_float_range(self):
        """Test that ints too large for a float are compared exactly."""
        huge = 10**400
        assert NumberValidator().validate(huge).valid
        assert NumberValidator().integer().non_negative().validate(huge).valid
        assert NumberValidator().range(10**399, 10**401).validate(huge).valid
        assert NumberValidator().max(100).validate(huge).messages == [
            "Value must be less than or equal to 100"
        ]
        assert NumberValidator().min(0).validate(-huge).messages == [
            "Value must be greater than or equal to 0"
        ]

    def test_decimals_beyond_float_range(self):
        """Test finite decimals that overflow a float."""
        validator = NumberValidator().integer()
        assert validator.validate(Decimal("1e400")).valid
        assert NumberValidator().max(100).validate(Decimal("1e400")).messages == [
            "Value must be less than or equal to 100"
        ]

    def test_bounds_are_inclusive(self):
        """Test min and max boundaries."""
        validator = NumberValidator().min(0).max(10)
        assert validator.validate(0).valid
        assert validator.validate(10).valid
        assert validator.validate(-1).messages == ["Value must be greater than or equal to 0"]
        assert validator.validate(11).messages == ["Value must be less than or equal to 10"]

    def test_collects_all_violations(self):
        """Test that every violated rule is reported."""
        validator = NumberValidator().max(10).integer().non_negative()
        assert NumberValidator().min(0).integer().validate(-1.5).messages == [
            "Value must be greater than or equal to 0",
            "Value must be an integer",
        ]
        assert validator.validate(-0.5).messages == [
            "Value must be an integer",
            "Value must be non-negative",
        ]

    def test_integer_tolerance(self):
        """Test that representation error is absorbed."""
        validator = NumberValidator().integer()
        assert validator.validate(0.1 * 3 * 10).valid
        assert validator.validate(5.0).valid
        assert validator.validate(-3.0000000001).valid
        assert validator.validate(30.5).messages == ["Value must be an integer"]
        assert not validator.validate(float("inf")).valid

    def test_non_negative_is_separate_from_min(self):
        """Test that non_negative does not set a minimum."""
        validator = NumberValidator().non_negative()
        assert validator.bounds.min is None
        assert validator.validate(0).valid
        assert validator.validate(-1).messages == ["Value must be non-negative"]

    def test_invalid_bounds(self):
        """Test configuration errors for bounds."""
        with pytest.raises(SchemaConfigurationError):
            NumberValidator().min("0")
        with pytest.raises(SchemaConfigurationError):
            NumberValidator().min(True)
        with pytest.raises(SchemaConfigurationError):
            NumberValidator().range(10, 0)
        with pytest.raises(SchemaConfigurationError):
            NumberValidator().max(0).min(1)

    def test_apply_bounds(self):
        """Test replacing the constraint record."""
        validator = NumberValidator().apply(NumberBounds(min=1, max=5, integer=True))
        assert validator.validate(3).valid
        assert validator.validate(2.5).messages == ["Value must be an integer"]
        with pytest.raises(SchemaConfigurationError):
            validator.apply({"min": 1})

    def test_outside_range(self):
        """Test an inverted range."""
        validator = NumberValidator(bounds=NumberBounds(min=10, max=20, outside=True))
        assert validator.validate(9).valid
        assert validator.validate(21).valid
        assert validator.validate(10).messages == ["Value must be outside the range [10, 20]"]

    def test_outside_one_sided(self):
        """Test one-sided inverted ranges."""
        below = NumberValidator(bounds=NumberBounds(min=10, outside=True))
        above = NumberValidator(bounds=NumberBounds(max=10, outside=True))
        assert below.validate(12).messages == ["Value must be less than 10"]
        assert above.validate(8).messages == ["Value must be greater than 10"]


class TestBooleanValidator:
    """Test BooleanValidator."""

    def test_booleans(self):
        """Test that any bool passes and other values fail."""
        validator = BooleanValidator()
        assert validator.validate(True).valid
        assert validator.validate(False).valid
        assert validator.validate(1).messages == ["Value must be a boolean"]
        assert validator.validate("true").messages == ["Value must be a boolean"]


class TestDateValidator:
    """Test DateValidator bounds."""

    def test_rejects_non_dates(self):
        """Test the type check."""
        assert DateValidator().validate("2024-01-01").messages == ["Value must be a date"]

    def test_inclusive_bounds(self):
        """Test that boundaries are inclusive."""
        validator = DateValidator().range(date(2024, 1, 1), date(2024, 12, 31))
        assert validator.validate(date(2024, 1, 1)).valid
        assert validator.validate(datetime(2024, 12, 31)).valid
        assert validator.validate(date(2023, 12, 31)).messages == [
            "Date must be on or after 2024-01-01"
        ]
        assert validator.validate(date(2025, 1, 1)).messages == [
            "Date must be on or before 2024-12-31"
        ]

    def test_string_bounds(self):
        """Test bounds given as strings keep their label."""
        validator = DateValidator().min("2024-06-01")
        assert validator.validate(datetime(2024, 6, 1, 12)).valid
        assert validator.validate(datetime(2024, 5, 31)).messages == [
            "Date must be on or after 2024-06-01"
        ]

    def test_timezone_aware_comparison(self):
        """Test that naive values are compared as UTC."""
        eastern = timezone(timedelta(hours=-5))
        validator = DateValidator().max(datetime(2024, 1, 1, 0, 0, tzinfo=eastern))
        # 04:00 UTC is before 05:00 UTC
        assert validator.validate(datetime(2024, 1, 1, 4, 0)).valid
        assert not validator.validate(datetime(2024, 1, 1, 6, 0)).valid

    def test_invalid_bounds(self):
        """Test configuration errors for date bounds."""
        with pytest.raises(SchemaConfigurationError):
            DateValidator().min("not a date")
        with pytest.raises(SchemaConfigurationError):
            DateValidator().min(20240101)
        with pytest.raises(SchemaConfigurationError):
            DateValidator().range("2024-12-31", "2024-01-01")

    def test_failed_range_keeps_previous_bounds(self):
        """Test that a rejected range() leaves the configured bounds in place."""
        validator = DateValidator().range("2024-01-01", "2024-12-31")
        with pytest.raises(SchemaConfigurationError):
            validator.range("2025-01-01", "2024-01-01")
        with pytest.raises(SchemaConfigurationError):
            validator.range("not a date", "2024-01-01")
        assert validator.validate(date(2023, 6, 1)).messages == [
            "Date must be on or after 2024-01-01"
        ]
        assert validator.validate(date(2025, 6, 1)).messages == [
            "Date must be on or before 2024-12-31"
        ]
