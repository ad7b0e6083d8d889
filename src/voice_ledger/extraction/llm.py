from datetime import date

from openai import AsyncOpenAI

from voice_ledger.logger import get_logger

from .base import Extractor

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are a financial transaction parser. Analyse what the user said in Turkish or English and convert it to structured JSON.

Output format (a JSON object is mandatory):
{
  "amount": number | null,
  "type": "income" | "expense" | null,
  "description": string | null,
  "category_keyword": string | null,
  "date": "YYYY-MM-DD" | null,
  "notes": string | null,
  "confidence": number (0.0-1.0)
}

Rules:
- Turkish: "aldım", "kazandım", "maaş", "gelir" -> income
- English: "received", "earned", "salary", "income" -> income
- Turkish: "yaptım", "harcadım", "ödeme", "gider" -> expense
- English: "spent", "paid", "payment", "expense" -> expense
- Always extract the amount (a number followed by "tl", "lira", "₺", "dollar", "$" and similar)
- Extract the category keyword:
  * Turkish: "market", "yemek", "maaş", "yatırım", "ulaşım", "fatura", "eğlence", "sağlık"
  * English: "grocery", "food", "salary", "investment", "transportation", "bills", "entertainment", "health"
- If a date is mentioned ("dün/yesterday", "bugün/today", "geçen hafta/last week") return it as YYYY-MM-DD
- If anything is ambiguous keep confidence low (below 0.5)
- Return only JSON, no explanations"""


class OpenAIExtractor(Extractor):
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        temperature: float = 0.1,
    ):
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature

    @staticmethod
    def system_prompt(today: date | None = None) -> str:
        today = today or date.today()
        return f"{SYSTEM_PROMPT}\n- Today is {today.isoformat()}, resolve relative dates against it"

    async def extract(self, text: str) -> str | None:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt()},
                {"role": "user", "content": text},
            ],
            response_format={"type": "json_object"},
            temperature=self.temperature,
        )
        if not completion.choices:
            logger.debug("[EXTRACT] Completion returned no choices.")
            return None
        return completion.choices[0].message.content

    async def aclose(self) -> None:
        await self.client.close()
