"""
Action validator.

Checks an action against business rules and the current state before it is
dispatched. The engine accepts whatever it is given; this is where
out-of-range commissions, stale transfer amounts and empty messages are
turned into reported errors.
"""

from dataclasses import fields
from typing import Any, Callable, Dict, Optional, Type

from ..models import actions as a
from ..models.entities import Settings
from ..models.state import AdminState
from .validators import Validator, ValidationResult


class ActionValidator(Validator):
    """
    Validator for dispatched actions.

    Validates:
    - Identifier payloads (non-empty strings)
    - Commission range (0-100)
    - Transfer amount against the instructor's current pending payment
    - Message text
    - Settings keys and value types

    Examples:
        >>> validator = ActionValidator()
        >>> result = validator.validate(
        ...     UpdatePackageCommission("PKG001", 120), store.state
        ... )
        >>> result.is_valid
        False
    """

    MIN_COMMISSION = 0
    MAX_COMMISSION = 100
    MAX_MESSAGE_LENGTH = 2000

    # Amounts closer than this are treated as equal
    AMOUNT_TOLERANCE = 0.005

    def __init__(self):
        self._checks: Dict[Type[a.Action], Callable[[Any, Optional[AdminState], ValidationResult], None]] = {
            a.TransferPayment: self._check_transfer,
            a.SendMessage: self._check_message,
            a.UpdateSettings: self._check_settings,
            a.UpdatePackageCommission: self._check_commission,
        }

    def validate(self, data: a.Action, state: Optional[AdminState] = None) -> ValidationResult:
        """
        Validate an action.

        Args:
            data: Action to validate
            state: Current state; cross-checks are skipped when None

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult()

        if not isinstance(data, a.Action):
            return result.add_error(f"Not an action: {data!r}")

        for f in fields(data):
            if f.name.endswith("_id"):
                result.add_error(self.validate_identifier(getattr(data, f.name), f.name))

        if not result.is_valid:
            return result

        check = self._checks.get(type(data))
        if check:
            check(data, state, result)

        return result

    def _check_commission(
        self,
        action: a.UpdatePackageCommission,
        state: Optional[AdminState],
        result: ValidationResult
    ):
        result.add_error(self.validate_range(
            action.commission_percentage,
            "commission_percentage",
            self.MIN_COMMISSION,
            self.MAX_COMMISSION,
        ))

    def _check_transfer(
        self,
        action: a.TransferPayment,
        state: Optional[AdminState],
        result: ValidationResult
    ):
        error = self.validate_positive_number(action.amount, "amount")
        if error:
            result.add_error(error)
            return

        if state is None:
            return

        instructor = state.find_instructor(action.instructor_id)
        if instructor is None:
            result.add_error(f"Instructor not found: {action.instructor_id}")
            return

        if instructor.pending_payment <= 0:
            result.add_error(
                f"No pending payment for {instructor.name} "
                f"(already transferred?)"
            )
        elif abs(instructor.pending_payment - action.amount) > self.AMOUNT_TOLERANCE:
            # The amount was read from an older snapshot
            result.add_error(
                f"Transfer amount {action.amount} does not match current "
                f"pending payment {instructor.pending_payment} for {instructor.name}"
            )

    def _check_message(
        self,
        action: a.SendMessage,
        state: Optional[AdminState],
        result: ValidationResult
    ):
        error = self.validate_string_length(
            action.text, "text", max_length=self.MAX_MESSAGE_LENGTH
        )
        if error:
            result.add_error(error)
        elif not action.text.strip():
            result.add_error("text must not be blank")

        if state is not None and state.find_conversation(action.conversation_id) is None:
            result.add_error(f"Conversation not found: {action.conversation_id}")

    def _check_settings(
        self,
        action: a.UpdateSettings,
        state: Optional[AdminState],
        result: ValidationResult
    ):
        if not action.changes:
            result.add_warning("Settings update has no changes")
            return

        known = Settings.field_names()
        for key, value in action.changes.items():
            if key not in known:
                result.add_error(
                    f"Unknown setting: {key} (must be one of: {', '.join(known)})"
                )
            elif key == "lesson_pricing_default":
                result.add_error(self.validate_positive_number(value, key))
            elif key == "platform_fees":
                result.add_error(self.validate_range(value, key, 0, 100))
            else:
                result.add_error(self.validate_boolean(value, key))
