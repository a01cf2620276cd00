"""Structured outcome of a record validation."""

from typing import Any

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Validation outcome for a whole record.

    Attributes:
        valid: True when no field failed.
        errors: Failure messages keyed by field name, in rule order.
        data: The validated subset of the record on success, the full
            input on failure.
    """

    valid: bool = Field(default=True, description="Whether every field passed")
    errors: dict[str, list[str]] = Field(
        default_factory=dict, description="Messages keyed by field name"
    )
    data: dict[str, Any] = Field(default_factory=dict, description="Validated data")

    def add_error(self, field: str, message: str) -> "ValidationResult":
        self.errors.setdefault(field, []).append(message)
        self.valid = False
        return self

    def has_errors(self) -> bool:
        return bool(self.errors)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Fold another result into this one.

        Errors are appended per field and data keys from ``other`` win.
        """
        for field, messages in other.errors.items():
            for message in messages:
                self.add_error(field, message)
        self.data.update(other.data)
        self.valid = self.valid and other.valid
        return self

    def first_error(self, field: str) -> str | None:
        messages = self.errors.get(field)
        return messages[0] if messages else None

    def to_array(self) -> dict[str, Any]:
        return self.model_dump()
