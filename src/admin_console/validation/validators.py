"""
Validation framework with Strategy pattern.

This module provides:
- Abstract Validator interface
- ValidationResult for consistent validation reporting
- Field checks shared by the action, seed and stats validators

Validation runs on the caller side of the store: the transition engine
itself never checks values.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional


DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
TIMESTAMP_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$')


@dataclass
class ValidationResult:
    """
    Result of data validation.

    Attributes:
        is_valid: Whether validation passed
        errors: List of error messages
        warnings: List of warning messages (non-fatal)
    """

    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: Optional[str]) -> 'ValidationResult':
        """
        Add an error message. ``None`` is ignored so field checks can be
        passed straight through.

        Args:
            message: Error message to add

        Returns:
            Self for method chaining

        Examples:
            >>> result = ValidationResult()
            >>> result.add_error("Error 1").add_error(None).add_error("Error 2")
        """
        if message:
            self.errors.append(message)
            self.is_valid = False
        return self

    def add_warning(self, message: str) -> 'ValidationResult':
        """
        Add a warning message.

        Args:
            message: Warning message to add

        Returns:
            Self for method chaining
        """
        self.warnings.append(message)
        return self

    @property
    def has_errors(self) -> bool:
        """Check if there are errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if there are warnings."""
        return len(self.warnings) > 0

    def get_summary(self) -> str:
        """
        Get validation summary.

        Returns:
            Human-readable summary of validation results
        """
        if self.is_valid and not self.has_warnings:
            return "Validation passed"

        parts = []

        if self.has_errors:
            parts.append(f"Errors ({len(self.errors)}):")
            for error in self.errors:
                parts.append(f"  - {error}")

        if self.has_warnings:
            parts.append(f"Warnings ({len(self.warnings)}):")
            for warning in self.warnings:
                parts.append(f"  - {warning}")

        return "\n".join(parts)


class Validator(ABC):
    """
    Abstract base class for validators.

    Subclasses implement ``validate()``. The ``state`` argument carries the
    current AdminState for checks that depend on it (e.g. a transfer amount
    against the instructor's balance) and may be None.
    """

    @abstractmethod
    def validate(self, data: Any, state: Any = None) -> ValidationResult:
        """
        Validate data.

        Args:
            data: Data to validate
            state: Optional current state for cross-checks

        Returns:
            ValidationResult with errors and warnings
        """
        pass

    def validate_identifier(self, value: Any, field_name: str) -> Optional[str]:
        """
        Validate that an ID is a non-empty string.

        Returns:
            Error message if invalid, None if valid
        """
        if not isinstance(value, str) or not value.strip():
            return f"{field_name} must be a non-empty string, got {value!r}"
        return None

    def validate_date_format(
        self,
        date_str: Any,
        field_name: str = "date"
    ) -> Optional[str]:
        """
        Validate date format (YYYY-MM-DD).

        Args:
            date_str: Date string to validate
            field_name: Name of the field (for error message)

        Returns:
            Error message if invalid, None if valid
        """
        if not isinstance(date_str, str) or not DATE_PATTERN.match(date_str):
            return f"Invalid {field_name} format: {date_str} (expected YYYY-MM-DD)"
        return None

    def validate_timestamp_format(
        self,
        value: Any,
        field_name: str = "timestamp"
    ) -> Optional[str]:
        """Validate timestamp format (YYYY-MM-DDTHH:MM:SS)."""
        if not isinstance(value, str) or not TIMESTAMP_PATTERN.match(value):
            return (
                f"Invalid {field_name} format: {value} "
                f"(expected YYYY-MM-DDTHH:MM:SS)"
            )
        return None

    def validate_number(self, value: Any, field_name: str) -> Optional[str]:
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{field_name} must be a number, got {type(value).__name__}"
        return None

    def validate_positive_number(
        self,
        value: Any,
        field_name: str
    ) -> Optional[str]:
        """
        Validate that value is a positive number.

        Args:
            value: Value to validate
            field_name: Name of the field (for error message)

        Returns:
            Error message if invalid, None if valid
        """
        error = self.validate_number(value, field_name)
        if error:
            return error

        if value <= 0:
            return f"{field_name} must be positive, got {value}"

        return None

    def validate_range(
        self,
        value: Any,
        field_name: str,
        minimum: float,
        maximum: float
    ) -> Optional[str]:
        """
        Validate that a number lies within [minimum, maximum].

        Examples:
            >>> validator.validate_range(120, "commission_percentage", 0, 100)
            'commission_percentage must be between 0 and 100, got 120'
        """
        error = self.validate_number(value, field_name)
        if error:
            return error

        if not minimum <= value <= maximum:
            return f"{field_name} must be between {minimum} and {maximum}, got {value}"

        return None

    def validate_boolean(self, value: Any, field_name: str) -> Optional[str]:
        if not isinstance(value, bool):
            return f"{field_name} must be a boolean, got {type(value).__name__}"
        return None

    def validate_string_length(
        self,
        value: Any,
        field_name: str,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None
    ) -> Optional[str]:
        """
        Validate string length.

        Args:
            value: String to validate
            field_name: Name of the field (for error message)
            min_length: Minimum length (optional)
            max_length: Maximum length (optional)

        Returns:
            Error message if invalid, None if valid
        """
        if not isinstance(value, str):
            return f"{field_name} must be a string, got {type(value).__name__}"

        length = len(value)

        if min_length is not None and length < min_length:
            return f"{field_name} must be at least {min_length} characters, got {length}"

        if max_length is not None and length > max_length:
            return f"{field_name} must be at most {max_length} characters, got {length}"

        return None

    def validate_unique_ids(self, records: Iterable[Any], collection: str) -> List[str]:
        """
        Validate that record IDs are unique within a collection.

        Returns:
            List of error messages, one per duplicated ID
        """
        seen = set()
        errors = []
        for record in records:
            if record.id in seen:
                errors.append(f"Duplicate id in {collection}: {record.id}")
            seen.add(record.id)
        return errors
