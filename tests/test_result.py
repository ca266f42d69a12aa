"""Tests for validation results and error paths."""

import pytest

from dataknobs_validation import (
    SchemaConfigurationError,
    SchemaValidationError,
    ValidationError,
    ValidationResult,
    join_path,
)


class TestJoinPath:
    """Test field path composition."""

    def test_dotted_segments(self):
        """Test joining property names with a dot."""
        assert join_path("address", "postalCode") == "address.postalCode"

    def test_index_segment_is_appended(self):
        """Test that index segments attach without a dot."""
        assert join_path("tags", "[2]") == "tags[2]"
        assert join_path("[2]", "email") == "[2].email"

    def test_missing_sides(self):
        """Test that a missing side yields the other side."""
        assert join_path("[2]", None) == "[2]"
        assert join_path(None, "name") == "name"
        assert join_path(None, None) is None


class TestValidationError:
    """Test the error record."""

    def test_under_reroots_path(self):
        """Test re-rooting keeps the message."""
        error = ValidationError("Bad", "postalCode").under("address")
        assert error.message == "Bad"
        assert error.field_path == "address.postalCode"

    def test_to_dict(self):
        """Test dictionary form."""
        assert ValidationError("Bad").to_dict() == {"message": "Bad", "field_path": None}


class TestValidationResult:
    """Test ValidationResult functionality."""

    def test_success_result(self):
        """Test creating a successful result."""
        result = ValidationResult.success()
        assert result.valid is True
        assert result.errors == ()
        assert bool(result) is True

    def test_failure_result(self):
        """Test creating a failed result from strings and errors."""
        result = ValidationResult.failure(["Error 1", ValidationError("Error 2", "name")])
        assert result.valid is False
        assert bool(result) is False
        assert result.messages == ["Error 1", "Error 2"]
        assert result.field_paths == [None, "name"]

    def test_failure_requires_errors(self):
        """Test that a failure without errors is rejected."""
        with pytest.raises(SchemaConfigurationError):
            ValidationResult.failure([])

    def test_valid_with_errors_is_rejected(self):
        """Test that validity must match the error list on direct construction."""
        with pytest.raises(SchemaConfigurationError):
            ValidationResult(valid=True, errors=(ValidationError("x"),))
        with pytest.raises(SchemaConfigurationError):
            ValidationResult(valid=False)

    def test_errors_are_immutable(self):
        """Test that errors given as a list are stored as a tuple."""
        result = ValidationResult(valid=False, errors=[ValidationError("x")])
        assert isinstance(result.errors, tuple)

    def test_from_errors(self):
        """Test building a result from a possibly empty error list."""
        assert ValidationResult.from_errors([]).valid
        assert not ValidationResult.from_errors([ValidationError("x")]).valid

    def test_merge_results(self):
        """Test merging keeps errors in order."""
        merged = ValidationResult.failure(["a"]).merge(ValidationResult.failure(["b"]))
        assert merged.messages == ["a", "b"]
        assert ValidationResult.success().merge(ValidationResult.success()).valid

    def test_raise_if_invalid(self):
        """Test converting a failure into an exception."""
        assert ValidationResult.success().raise_if_invalid().valid

        result = ValidationResult.failure([ValidationError("Too short", "name")])
        with pytest.raises(SchemaValidationError) as exc_info:
            result.raise_if_invalid()
        assert exc_info.value.errors == result.errors
        assert exc_info.value.context == {"errors": [{"message": "Too short", "field_path": "name"}]}
        assert "name: Too short" in str(exc_info.value)

    def test_to_dict(self):
        """Test dictionary form of a result."""
        result = ValidationResult.failure([ValidationError("Bad", "age")])
        assert result.to_dict() == {
            "valid": False,
            "errors": [{"message": "Bad", "field_path": "age"}],
        }


class TestExceptionHierarchy:
    """Test that package exceptions extend the dataknobs hierarchy."""

    def test_configuration_errors(self):
        """Test configuration error subclasses."""
        from dataknobs_common.exceptions import ConfigurationError, DataknobsError

        from dataknobs_validation import SealedValidatorError, UnsupportedOperationError

        assert issubclass(SchemaConfigurationError, ConfigurationError)
        assert issubclass(UnsupportedOperationError, SchemaConfigurationError)
        assert issubclass(SealedValidatorError, SchemaConfigurationError)
        assert issubclass(SchemaValidationError, DataknobsError)

    def test_validation_error_is_common_validation_error(self):
        """Test that raised failures can be caught as common validation errors."""
        from dataknobs_common.exceptions import ValidationError as CommonValidationError

        with pytest.raises(CommonValidationError):
            ValidationResult.failure(["Bad"]).raise_if_invalid()
