"""
Two-Stage Form Validation

DESIGN DECISION: Form input is validated in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- The pydantic Create/Update model for the entity
- Required fields, types, lengths, enum values, HH:MM times, emails
- Any failure here blocks the save
- Edit forms are also checked against the stored record with the
  changes applied (an expense's paid amount, an event's end time)

STAGE 2 - SEMANTIC CHECKS:
- Plausibility checks on an input that already parsed
- A due date that has passed on something still open
- A deposit with nothing recorded as paid
- These are warnings only; the form can still be saved

IMPORTANT: Validation NEVER silently fixes input.
Every issue is keyed by its form field so the page can show it next
to the offending input.
"""

from datetime import date
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, Field, ValidationError

from planner.models import (
    ExpenseCreate,
    ExpenseStatus,
    ExpenseUpdate,
    FormModel,
    StoredRecord,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
)
from planner.repositories.base import merge_patch


FormT = TypeVar("FormT", bound=FormModel)


class FieldIssue(BaseModel):
    """A single problem with one form field."""

    field: str = Field(
        ...,
        description="Top-level form field, or '__form__' for cross-field rules"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    issue_type: str = Field(
        ...,
        description="Pydantic error type, or a semantic check name"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
    )


class ValidationResult(BaseModel):
    """Outcome of validating one form submission."""

    model: Optional[FormModel] = Field(
        default=None,
        description="The parsed model; None when schema validation failed"
    )
    issues: list[FieldIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Valid when there are no errors; warnings don't block."""
        return self.model is not None and not self.errors

    @property
    def errors(self) -> list[FieldIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[FieldIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def messages_for(self, field: str) -> list[str]:
        """Messages to render under one input."""
        return [i.message for i in self.issues if i.field == field]


FORM_FIELD = "__form__"


class FormValidator:
    """
    Validates raw form input against an entity's Create/Update model.

    Stage 1 always runs; stage 2 only runs on input that parsed.
    """

    def __init__(self, today: Optional[date] = None):
        """
        Args:
            today: Reference date for the due-date checks (defaults to today)
        """
        self._today = today

    def _validate_schema(
        self,
        model_cls: type[FormT],
        raw: dict[str, Any],
    ) -> tuple[Optional[FormT], list[FieldIssue]]:
        """
        Stage 1: parse with pydantic.

        Each pydantic error becomes one issue (see _issues_from).
        """
        try:
            return model_cls.model_validate(raw), []
        except ValidationError as e:
            return None, _issues_from(e)

    def _validate_merged(self, model: FormModel, current: StoredRecord) -> list[FieldIssue]:
        """
        Stage 1, edit forms: the stored record with the changes applied
        must still satisfy its cross-field rules.
        """
        try:
            merge_patch(current, model.to_patch())
        except ValidationError as e:
            return _issues_from(e)
        return []

    def _validate_semantic(self, model: FormModel) -> list[FieldIssue]:
        """
        Stage 2: warnings on input that parsed.

        Checks:
        - Overdue task that isn't done
        - Overdue expense that isn't paid
        - Deposit without a paid amount
        """
        issues = []
        today = self._today or date.today()

        if isinstance(model, (TaskCreate, TaskUpdate)):
            if model.due_date and model.due_date < today and model.status != TaskStatus.DONE:
                issues.append(FieldIssue(
                    field="due_date",
                    message=f"Due date ({model.due_date}) has already passed",
                    issue_type="overdue",
                    severity="warning",
                ))

        if isinstance(model, (ExpenseCreate, ExpenseUpdate)):
            if model.due_date and model.due_date < today and model.status != ExpenseStatus.PAID:
                issues.append(FieldIssue(
                    field="due_date",
                    message=f"Payment was due on {model.due_date} and is not marked paid",
                    issue_type="overdue",
                    severity="warning",
                ))
            if model.status == ExpenseStatus.DEPOSIT and not model.paid_amount:
                issues.append(FieldIssue(
                    field="paid_amount",
                    message="Deposit selected but no paid amount entered",
                    issue_type="missing_deposit",
                    severity="warning",
                ))

        return issues

    def validate(
        self,
        model_cls: type[FormT],
        raw: dict[str, Any],
        current: Optional[StoredRecord] = None,
    ) -> ValidationResult:
        """
        Run both stages.

        Args:
            model_cls: The Create or Update model of the entity
            raw: Field values exactly as the form produced them
            current: The stored record an edit form applies to

        Returns:
            ValidationResult with the parsed model (if any) and all issues
        """
        model, issues = self._validate_schema(model_cls, raw)
        if model is not None and current is not None:
            issues.extend(self._validate_merged(model, current))
        if model is not None and not issues:
            issues.extend(self._validate_semantic(model))
        return ValidationResult(model=model, issues=issues)


def _issues_from(error: ValidationError) -> list[FieldIssue]:
    """
    One issue per pydantic error, keyed by its top-level field.

    Model-level rules (e.g. end time before start time) have no
    location and are keyed as FORM_FIELD.
    """
    issues = []
    for e in error.errors():
        loc = e.get("loc") or ()
        message = e["msg"]
        # pydantic prefixes messages of ValueError raised in validators
        message = message.removeprefix("Value error, ")
        issues.append(FieldIssue(
            field=str(loc[0]) if loc else FORM_FIELD,
            message=message,
            issue_type=e["type"],
        ))
    return issues


def summarize_issues(result: ValidationResult) -> str:
    """
    One block of text for the top of a form.

    Per-field messages are rendered next to the inputs; this is the
    banner above them.
    """
    if result.is_valid and not result.warnings:
        return "✅ All fields look good."

    lines = []
    if result.errors:
        lines.append("❌ Please fix the following:")
        for issue in result.errors:
            lines.append(f"   • {issue.field}: {issue.message}")

    if result.warnings:
        if lines:
            lines.append("")
        lines.append("⚠️ Please double-check:")
        for issue in result.warnings:
            lines.append(f"   • {issue.message}")

    return "\n".join(lines)
