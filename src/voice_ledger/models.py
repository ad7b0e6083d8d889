import math
from datetime import date as Date
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

TransactionType = Literal["income", "expense"]

DEFAULT_CONFIDENCE = 0.9


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ParsedTransaction(BaseModel):
    """Structured guess produced by the extraction collaborator."""

    amount: float | None = None
    type: TransactionType | None = None
    description: str | None = None
    category_keyword: str | None = None
    date: Date | None = None
    notes: str | None = None
    confidence: float = DEFAULT_CONFIDENCE

    @field_validator("description", "category_keyword", "notes", "date", mode="before")
    @classmethod
    def _empty_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("amount")
    @classmethod
    def _positive_amount(cls, value: float | None) -> float | None:
        # Zero, negative and non-finite amounts carry no information to record.
        if value is None or not math.isfinite(value) or value <= 0:
            return None
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_CONFIDENCE
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return min(1.0, max(0.0, float(value)))
        return value

    @property
    def is_complete(self) -> bool:
        return self.type is not None and self.amount is not None


class Category(BaseModel):
    id: str
    name: str
    type: TransactionType
    is_default: bool = Field(
        default=False, validation_alias=AliasChoices("is_default", "isDefault")
    )
    is_active: bool = Field(
        default=True, validation_alias=AliasChoices("is_active", "isActive")
    )
    icon: str | None = None
    color: str | None = None
    sort_order: int | None = Field(
        default=None, validation_alias=AliasChoices("sort_order", "sortOrder")
    )


class ResolutionResult(BaseModel):
    category_id: str | None = None
    found: bool = False
    tier: str | None = None  # name of the matching tier, None when not found


class CommitRequest(BaseModel):
    type: TransactionType
    amount: float
    description: str
    category_id: str
    date: Date
    notes: str | None = None


class ConfirmationRequest(BaseModel):
    parsed: ParsedTransaction


class Entry(BaseModel):
    id: str
    type: TransactionType
    amount: float
    description: str
    category_id: str
    date: Date
    notes: str | None = None
    user_id: str


class ParsingInfo(BaseModel):
    method: Literal["ai"] = "ai"
    confidence: float
    category_found: bool


class CommitResult(BaseModel):
    transaction: Entry
    parsing: ParsingInfo


class ConfirmationResult(BaseModel):
    needs_confirmation: Literal[True] = Field(default=True, serialization_alias="needsConfirmation")
    parsed: ParsedTransaction
