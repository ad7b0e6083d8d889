from voice_ledger.core.configuration import VoiceParsingConfig
from voice_ledger.domain.default_categories import fallback_category_name
from voice_ledger.errors import DefaultCategoryMissing, ExtractionDisabled, TypeUndetermined
from voice_ledger.extraction.client import ExtractionClient
from voice_ledger.integration.stores import CategoryStore, LedgerStore
from voice_ledger.logger import get_logger
from voice_ledger.models import (
    CommitResult,
    ConfirmationRequest,
    ConfirmationResult,
    ParsedTransaction,
    ParsingInfo,
    ResolutionResult,
    TransactionType,
)
from voice_ledger.resolution.resolver import CategoryResolver
from voice_ledger.services.gate import decide

logger = get_logger(__name__)


class VoiceTransactionPipeline:
    """Free text in, ledger entry (or a request to confirm) out.

    Each call is independent: categories are read once per call and nothing
    is kept between calls.
    """

    def __init__(
        self,
        extraction: ExtractionClient | None,
        categories: CategoryStore,
        ledger: LedgerStore,
        config: VoiceParsingConfig,
        resolver: CategoryResolver | None = None,
    ) -> None:
        self.extraction = extraction
        self.categories = categories
        self.ledger = ledger
        self.config = config
        self.resolver = resolver or CategoryResolver()

    async def parse_and_create(self, text: str, user_id: str) -> CommitResult | ConfirmationResult:
        if self.extraction is None:
            raise ExtractionDisabled()

        logger.debug("[VOICE] Parsing text for user %s (%d chars).", user_id, len(text))
        parsed = await self.extraction.extract(text)

        resolution = await self.resolve_category(parsed, user_id)

        decision = decide(parsed, resolution, self.config.confidence_threshold, text)
        if isinstance(decision, ConfirmationRequest):
            return ConfirmationResult(parsed=decision.parsed)

        entry = await self.ledger.create_entry(decision, user_id)
        logger.info(
            "[VOICE] Created %s entry %s for user %s (category_found=%s, confidence=%.2f).",
            entry.type,
            entry.id,
            user_id,
            resolution.found,
            parsed.confidence,
        )
        return CommitResult(
            transaction=entry,
            parsing=ParsingInfo(confidence=parsed.confidence, category_found=resolution.found),
        )

    async def resolve_category(self, parsed: ParsedTransaction, user_id: str) -> ResolutionResult:
        if parsed.type is None:
            raise TypeUndetermined()

        if parsed.category_keyword:
            candidates = await self.categories.list_active_categories(user_id, parsed.type)
            resolution = self.resolver.resolve(parsed.category_keyword, parsed.type, candidates)
            if resolution.found:
                return resolution

        return await self.fallback_category(parsed.type, user_id)

    async def fallback_category(self, type_: TransactionType, user_id: str) -> ResolutionResult:
        name = fallback_category_name(type_)
        category = await self.categories.find_default_category_by_name(user_id, type_, name)
        if category is None:
            logger.error("[VOICE] Default category not found: %s for user %s", name, user_id)
            raise DefaultCategoryMissing()
        logger.debug("[VOICE] Falling back to default category '%s'.", name)
        return ResolutionResult(category_id=category.id, found=False)
