import asyncio
import json
from collections.abc import Generator
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from voice_ledger.errors import (
    ExtractionFailed,
    ExtractionIncomplete,
    ExtractionTimeout,
    ExtractionUnparseable,
    InvalidInput,
)
from voice_ledger.extraction.base import Extractor
from voice_ledger.extraction.client import ExtractionClient
from voice_ledger.extraction.llm import OpenAIExtractor


class StaticExtractor(Extractor):
    def __init__(self, response: str | None) -> None:
        self.response = response
        self.calls: list[str] = []

    async def extract(self, text: str) -> str | None:
        self.calls.append(text)
        return self.response


class SlowExtractor(Extractor):
    def __init__(self) -> None:
        self.cancelled = False

    async def extract(self, text: str) -> str | None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return "{}"


def payload(**values: object) -> str:
    return json.dumps(values)


@pytest.mark.anyio
async def test_extract_parses_full_response() -> None:
    extractor = StaticExtractor(
        payload(
            amount=500,
            type="expense",
            description="Market alışverişi",
            category_keyword="market",
            date="2024-05-17",
            notes=None,
            confidence=0.95,
        )
    )
    client = ExtractionClient(extractor, timeout=1.0)

    parsed = await client.extract("500 lira market harcaması yaptım")

    assert extractor.calls == ["500 lira market harcaması yaptım"]
    assert parsed.amount == 500
    assert parsed.type == "expense"
    assert parsed.category_keyword == "market"
    assert parsed.date == date(2024, 5, 17)
    assert parsed.confidence == 0.95


@pytest.mark.anyio
async def test_missing_confidence_defaults() -> None:
    client = ExtractionClient(StaticExtractor(payload(amount=3000, type="income")), timeout=1.0)
    parsed = await client.extract("3000 maaş aldım")
    assert parsed.confidence == 0.9
    assert parsed.category_keyword is None


@pytest.mark.anyio
async def test_timeout_cancels_the_call() -> None:
    extractor = SlowExtractor()
    client = ExtractionClient(extractor, timeout=0.01)

    with pytest.raises(ExtractionTimeout):
        await client.extract("500 lira market")

    assert extractor.cancelled


@pytest.mark.anyio
@pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]", '{"type": "transfer"}'])
async def test_unparseable(raw: str | None) -> None:
    client = ExtractionClient(StaticExtractor(raw), timeout=1.0)
    with pytest.raises(ExtractionUnparseable):
        await client.extract("500 lira market")


@pytest.mark.anyio
@pytest.mark.parametrize(
    "raw",
    [
        payload(type="expense", amount=None, confidence=0.9),
        payload(type=None, amount=500),
        payload(type="expense", amount=0),
        payload(category_keyword="market"),
        '{"amount": NaN, "type": "expense"}',
        '{"amount": Infinity, "type": "expense"}',
        '{"amount": -Infinity, "type": "expense"}',
    ],
)
async def test_incomplete(raw: str) -> None:
    client = ExtractionClient(StaticExtractor(raw), timeout=1.0)
    with pytest.raises(ExtractionIncomplete):
        await client.extract("market")


@pytest.mark.anyio
async def test_extractor_error_is_wrapped() -> None:
    extractor = AsyncMock(spec=Extractor)
    extractor.extract.side_effect = RuntimeError("connection reset")
    client = ExtractionClient(extractor, timeout=1.0)

    with pytest.raises(ExtractionFailed):
        await client.extract("500 lira market")
    extractor.extract.assert_awaited_once()


@pytest.mark.anyio
@pytest.mark.parametrize("text", ["", "   ", "x" * 501])
async def test_rejects_bad_text_before_calling_extractor(text: str) -> None:
    extractor = StaticExtractor(payload(amount=1, type="expense"))
    client = ExtractionClient(extractor, timeout=1.0, max_text_length=500)

    with pytest.raises(InvalidInput):
        await client.extract(text)
    assert extractor.calls == []


def test_parse_normalizes_loose_fields() -> None:
    parsed = ExtractionClient.parse(
        payload(amount="250.5", type="Income", description="", date="", confidence=1.7)
    )
    assert parsed.amount == 250.5
    assert parsed.type == "income"
    assert parsed.description is None
    assert parsed.date is None
    assert parsed.confidence == 1.0


@pytest.fixture
def mock_openai_client() -> Generator[MagicMock, None, None]:
    with patch("voice_ledger.extraction.llm.AsyncOpenAI") as mock:
        yield mock


@pytest.mark.anyio
async def test_openai_extractor_requests_json(mock_openai_client: MagicMock) -> None:
    mock_instance = mock_openai_client.return_value
    completion = MagicMock()
    completion.choices[0].message.content = payload(amount=500, type="expense")
    mock_instance.chat.completions.create = AsyncMock(return_value=completion)

    extractor = OpenAIExtractor(api_key="sk-fake", model="gpt-4o-mini")
    raw = await extractor.extract("500 lira market harcaması yaptım")

    assert json.loads(raw or "") == {"amount": 500, "type": "expense"}
    kwargs = mock_instance.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][1] == {"role": "user", "content": "500 lira market harcaması yaptım"}


def test_system_prompt_mentions_today() -> None:
    prompt = OpenAIExtractor.system_prompt(date(2024, 5, 17))
    assert "2024-05-17" in prompt
    assert '"category_keyword"' in prompt
