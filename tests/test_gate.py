from datetime import date

import pytest

from voice_ledger.errors import InvalidCategory, TypeUndetermined
from voice_ledger.models import (
    CommitRequest,
    ConfirmationRequest,
    ParsedTransaction,
    ResolutionResult,
)
from voice_ledger.services.gate import decide

RAW = "500 lira market harcaması yaptım"
TODAY = date(2024, 5, 17)


def parsed(**overrides: object) -> ParsedTransaction:
    values: dict[str, object] = {
        "amount": 500,
        "type": "expense",
        "category_keyword": "market",
        "confidence": 0.95,
    }
    values.update(overrides)
    return ParsedTransaction.model_validate(values)


RESOLVED = ResolutionResult(category_id="cat-1", found=True, tier="exact_name")


@pytest.mark.parametrize(
    ("confidence", "expected"),
    [
        (0.69, ConfirmationRequest),
        (0.7, CommitRequest),
        (0.71, CommitRequest),
        (0.0, ConfirmationRequest),
        (1.0, CommitRequest),
    ],
)
def test_threshold_boundary_is_inclusive(confidence: float, expected: type) -> None:
    result = decide(parsed(confidence=confidence), RESOLVED, 0.7, RAW, today=TODAY)
    assert isinstance(result, expected)


def test_commit_defaults() -> None:
    result = decide(parsed(), RESOLVED, 0.7, RAW, today=TODAY)
    assert isinstance(result, CommitRequest)
    assert result.amount == 500
    assert result.type == "expense"
    assert result.category_id == "cat-1"
    assert result.description == RAW
    assert result.date == TODAY
    assert result.notes is None


def test_commit_keeps_extracted_values() -> None:
    result = decide(
        parsed(description="Haftalık market", date="2024-05-10", notes="indirimli"),
        RESOLVED,
        0.7,
        RAW,
        today=TODAY,
    )
    assert isinstance(result, CommitRequest)
    assert result.description == "Haftalık market"
    assert result.date == date(2024, 5, 10)
    assert result.notes == "indirimli"


def test_confirmation_carries_parse_with_description_default() -> None:
    low = parsed(confidence=0.4)
    result = decide(low, RESOLVED, 0.7, RAW, today=TODAY)
    assert isinstance(result, ConfirmationRequest)
    assert result.parsed.description == RAW
    assert result.parsed.model_dump(exclude={"description"}) == low.model_dump(
        exclude={"description"}
    )


def test_missing_amount_defaults_to_zero_for_direct_callers() -> None:
    result = decide(parsed(amount=None), RESOLVED, 0.7, RAW, today=TODAY)
    assert isinstance(result, CommitRequest)
    assert result.amount == 0


def test_commit_without_type_fails() -> None:
    with pytest.raises(TypeUndetermined):
        decide(parsed(type=None), RESOLVED, 0.7, RAW, today=TODAY)


def test_commit_without_category_fails() -> None:
    with pytest.raises(InvalidCategory) as exc_info:
        decide(parsed(), ResolutionResult(found=False), 0.7, RAW, today=TODAY)
    assert exc_info.value.to_dict()["error"] == "INVALID_CATEGORY"


def test_low_confidence_without_category_still_asks() -> None:
    result = decide(parsed(confidence=0.3), ResolutionResult(found=False), 0.7, RAW)
    assert isinstance(result, ConfirmationRequest)
