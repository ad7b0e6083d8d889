from datetime import date

from voice_ledger.errors import InvalidCategory, TypeUndetermined
from voice_ledger.logger import get_logger
from voice_ledger.models import (
    CommitRequest,
    ConfirmationRequest,
    ParsedTransaction,
    ResolutionResult,
)

logger = get_logger(__name__)


def needs_confirmation(confidence: float, threshold: float) -> bool:
    # Equal to the threshold is confident enough.
    return confidence < threshold


def decide(
    parsed: ParsedTransaction,
    resolution: ResolutionResult,
    threshold: float,
    raw_text: str,
    *,
    today: date | None = None,
) -> CommitRequest | ConfirmationRequest:
    """Turn a parse and its category into either a commit or a question back to the user."""
    description = parsed.description or raw_text

    if needs_confirmation(parsed.confidence, threshold):
        logger.info(
            "[GATE] Confidence %.2f below threshold %.2f; asking for confirmation.",
            parsed.confidence,
            threshold,
        )
        return ConfirmationRequest(parsed=parsed.model_copy(update={"description": description}))

    if parsed.type is None:
        raise TypeUndetermined()
    if resolution.category_id is None:
        raise InvalidCategory("Cannot commit a transaction without a resolved category")

    return CommitRequest(
        type=parsed.type,
        # Extraction already rejects a missing amount; 0 only guards direct callers.
        amount=parsed.amount if parsed.amount is not None else 0,
        description=description,
        category_id=resolution.category_id,
        date=parsed.date or today or date.today(),
        notes=parsed.notes,
    )
