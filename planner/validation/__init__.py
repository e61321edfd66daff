"""Form validation package."""

from planner.validation.validator import (
    FORM_FIELD,
    FieldIssue,
    FormValidator,
    ValidationResult,
    summarize_issues,
)

__all__ = [
    "FORM_FIELD",
    "FieldIssue",
    "FormValidator",
    "ValidationResult",
    "summarize_issues",
]
