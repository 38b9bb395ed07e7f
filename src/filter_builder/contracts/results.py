from __future__ import annotations
"""Result envelopes returned by the engine instead of raising."""

from typing import Optional

from pydantic import BaseModel, Field


class GroupCheck(BaseModel):
    """Outcome of asking whether a selection can be grouped."""

    can_create: bool = Field(..., description="Whether the group may be created")
    reason: Optional[str] = Field(default=None, description="Human-readable rejection reason")

    @classmethod
    def allowed(cls) -> "GroupCheck":
        return cls(can_create=True)

    @classmethod
    def rejected(cls, reason: str) -> "GroupCheck":
        return cls(can_create=False, reason=reason)


class ValidationIssue(BaseModel):
    """A single structural problem found in a filter tree."""

    code: str = Field(..., description="Machine-readable issue code")
    path: str = Field(..., description="Location of the node, e.g. children[0].children[1]")
    message: str = Field(..., description="Human-readable message")

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationResult(BaseModel):
    valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [str(i) for i in self.issues]

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationResult":
        return cls(valid=not issues, issues=issues)


def issue(code: str, path: str, message: str) -> ValidationIssue:
    """Helper to create a validation issue."""
    return ValidationIssue(code=code, path=path, message=message)
