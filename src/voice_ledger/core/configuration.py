import os
from dataclasses import dataclass

from voice_ledger.core import settings

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_MS = 5000
DEFAULT_CONFIDENCE_THRESHOLD = 0.7
DEFAULT_MAX_TEXT_LENGTH = 500


@dataclass(frozen=True)
class VoiceParsingConfig:
    """Values the voice pipeline needs, resolved once when it is built."""

    enabled: bool = True
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_MS / 1000
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    max_text_length: int = DEFAULT_MAX_TEXT_LENGTH

    @property
    def extraction_available(self) -> bool:
        return self.enabled and bool(self.api_key)

    @classmethod
    def from_env(cls) -> "VoiceParsingConfig":
        timeout_ms = settings.get_env_int("OPENAI_TIMEOUT", DEFAULT_TIMEOUT_MS, min_value=1)
        return cls(
            enabled=settings.get_env_bool("AI_PARSING_ENABLED", True),
            api_key=os.getenv("OPENAI_API_KEY") or None,
            model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            timeout_seconds=timeout_ms / 1000,
            confidence_threshold=settings.get_env_float(
                "AI_CONFIDENCE_THRESHOLD",
                DEFAULT_CONFIDENCE_THRESHOLD,
                min_value=0.0,
                max_value=1.0,
            ),
            max_text_length=settings.get_env_int(
                "VOICE_MAX_TEXT_LENGTH",
                DEFAULT_MAX_TEXT_LENGTH,
                min_value=1,
            ),
        )


@dataclass(frozen=True)
class LedgerConfig:
    base_url: str | None = None
    token: str | None = None

    @property
    def remote(self) -> bool:
        return bool(self.base_url)

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        return cls(
            base_url=os.getenv("LEDGER_URL") or None,
            token=os.getenv("LEDGER_TOKEN") or None,
        )
