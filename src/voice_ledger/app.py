from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from voice_ledger.api.routes import categories, voice
from voice_ledger.core import settings
from voice_ledger.core.configuration import LedgerConfig, VoiceParsingConfig
from voice_ledger.errors import DefaultCategoryMissing, VoiceLedgerError
from voice_ledger.extraction.client import ExtractionClient
from voice_ledger.extraction.llm import OpenAIExtractor
from voice_ledger.integration.ledger import LedgerClient
from voice_ledger.integration.memory import InMemoryLedger
from voice_ledger.logger import get_logger, setup_logging
from voice_ledger.services.voice import VoiceTransactionPipeline

logger = get_logger(__name__)


def build_pipeline(
    config: VoiceParsingConfig,
    ledger_config: LedgerConfig,
) -> tuple[VoiceTransactionPipeline, OpenAIExtractor | None, LedgerClient | InMemoryLedger]:
    extractor: OpenAIExtractor | None = None
    extraction: ExtractionClient | None = None
    if config.extraction_available:
        extractor = OpenAIExtractor(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
        )
        extraction = ExtractionClient(
            extractor,
            timeout=config.timeout_seconds,
            max_text_length=config.max_text_length,
        )
        logger.info(
            "AI parsing enabled: model=%s, base_url=%s, timeout=%.1fs, threshold=%.2f",
            config.model,
            config.base_url or "default",
            config.timeout_seconds,
            config.confidence_threshold,
        )
    else:
        logger.warning("AI parsing is disabled or OPENAI_API_KEY is missing.")

    store: LedgerClient | InMemoryLedger
    if ledger_config.remote:
        store = LedgerClient(base_url=ledger_config.base_url, token=ledger_config.token)
        logger.info("Using ledger backend at %s.", ledger_config.base_url)
    else:
        store = InMemoryLedger(auto_bootstrap=True)
        logger.warning("LEDGER_URL not set. Entries are kept in memory only.")

    pipeline = VoiceTransactionPipeline(
        extraction=extraction,
        categories=store,
        ledger=store,
        config=config,
    )
    return pipeline, extractor, store


async def handle_voice_ledger_error(request: Request, exc: VoiceLedgerError) -> JSONResponse:
    if isinstance(exc, DefaultCategoryMissing):
        logger.error("[API] Account integrity error on %s: %s", request.url.path, exc.message)
    else:
        logger.info("[API] %s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        pipeline, extractor, store = build_pipeline(
            VoiceParsingConfig.from_env(),
            LedgerConfig.from_env(),
        )
        app.state.pipeline = pipeline

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")
        if extractor:
            await extractor.aclose()
        if isinstance(store, LedgerClient):
            await store.aclose()

    app = FastAPI(title="Voice Ledger", lifespan=lifespan)
    app.add_exception_handler(VoiceLedgerError, handle_voice_ledger_error)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(voice.router)
    app.include_router(categories.router)

    return app


app = create_app()
