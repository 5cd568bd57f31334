"""
Caller-side validation of actions and snapshots.
"""

from .action_validator import ActionValidator
from .state_validator import SeedValidator, StatsValidator
from .validators import ValidationResult, Validator

__all__ = [
    "ActionValidator",
    "SeedValidator",
    "StatsValidator",
    "ValidationResult",
    "Validator",
]
