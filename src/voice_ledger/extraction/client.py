import asyncio

from pydantic import ValidationError

from voice_ledger.errors import (
    ExtractionFailed,
    ExtractionIncomplete,
    ExtractionTimeout,
    ExtractionUnparseable,
    InvalidInput,
)
from voice_ledger.logger import get_logger
from voice_ledger.models import ParsedTransaction

from .base import Extractor

logger = get_logger(__name__)


class ExtractionClient:
    """Single-attempt, deadline-bound call to an extractor.

    The extractor is awaited at most once per ``extract`` call. When the
    deadline passes the pending call is cancelled and the attempt counts as
    failed even if the remote side finishes later.
    """

    def __init__(self, extractor: Extractor, timeout: float, max_text_length: int = 500):
        self.extractor = extractor
        self.timeout = timeout
        self.max_text_length = max_text_length

    async def extract(self, text: str) -> ParsedTransaction:
        self._check_text(text)

        try:
            raw = await asyncio.wait_for(self.extractor.extract(text), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("[EXTRACT] No response within %.2fs.", self.timeout)
            raise ExtractionTimeout() from exc
        except Exception as exc:
            logger.error("[EXTRACT] Extractor failed: %s", exc)
            raise ExtractionFailed() from exc

        parsed = self.parse(raw)
        logger.debug(
            "[EXTRACT] type=%s amount=%s keyword=%r confidence=%.2f",
            parsed.type,
            parsed.amount,
            parsed.category_keyword,
            parsed.confidence,
        )
        return parsed

    def _check_text(self, text: str) -> None:
        if not text or not text.strip():
            raise InvalidInput("Text is required")
        if len(text) > self.max_text_length:
            raise InvalidInput(f"Text must be at most {self.max_text_length} characters")

    @staticmethod
    def parse(raw: str | None) -> ParsedTransaction:
        if not raw or not raw.strip():
            logger.warning("[EXTRACT] Empty response from extractor.")
            raise ExtractionUnparseable("AI returned no response")

        try:
            parsed = ParsedTransaction.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("[EXTRACT] Response does not match the expected shape: %s", exc)
            raise ExtractionUnparseable() from exc

        if not parsed.is_complete:
            missing = [name for name in ("type", "amount") if getattr(parsed, name) is None]
            logger.info("[EXTRACT] Response is missing %s.", ", ".join(missing))
            raise ExtractionIncomplete()
        return parsed
