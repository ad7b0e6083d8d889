import asyncio
import os
from typing import Any

import httpx
from pydantic import ValidationError

from voice_ledger.errors import InvalidCategory, LedgerUnavailable
from voice_ledger.logger import get_logger
from voice_ledger.models import Category, CommitRequest, Entry, TransactionType

from .stores import CategoryStore, LedgerStore

logger = get_logger(__name__)

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


class LedgerClient(CategoryStore, LedgerStore):
    """REST client for the ledger backend that owns categories and entries.

    Failures are raised as LedgerUnavailable; the caller owns retry policy.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or os.getenv("LEDGER_URL") or "").rstrip("/")
        self.token = token or os.getenv("LEDGER_TOKEN")
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"
        self.timeout = timeout
        self._client = client
        self._client_lock = asyncio.Lock()

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        client = self._client
        if client is not None and not client.is_closed:
            return client

        async with self._client_lock:
            client = self._client
            if client is None or client.is_closed:
                client = httpx.AsyncClient()
                self._client = client
            return client

    def _url(self, user_id: str, resource: str) -> str:
        return f"{self.base_url}/api/users/{user_id}/{resource}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(
                method, url, headers=self.headers, timeout=self.timeout, **kwargs
            )
        except httpx.HTTPError as exc:
            logger.error("[LEDGER] %s %s failed: %s", method, url, exc)
            raise LedgerUnavailable() from exc

        if response.status_code == 400 and _error_code(response) == InvalidCategory.code:
            raise InvalidCategory()
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("[LEDGER] %s %s returned %s.", method, url, response.status_code)
            raise LedgerUnavailable() from exc
        return response.json()

    async def _fetch_categories(self, user_id: str, params: dict[str, str]) -> list[Category]:
        payload = await self._request("GET", self._url(user_id, "categories"), params=params)
        try:
            return [Category.model_validate(item) for item in payload.get("data", [])]
        except ValidationError as exc:
            logger.error("[LEDGER] Unexpected category payload: %s", exc)
            raise LedgerUnavailable() from exc

    async def list_active_categories(self, user_id: str, type_: TransactionType) -> list[Category]:
        categories = await self._fetch_categories(user_id, {"type": type_, "active": "true"})
        logger.debug(
            "[LEDGER] %d active %s categories for user %s.", len(categories), type_, user_id
        )
        # The backend filter is trusted for order only.
        return [c for c in categories if c.type == type_ and c.is_active]

    async def find_default_category_by_name(
        self, user_id: str, type_: TransactionType, name: str
    ) -> Category | None:
        categories = await self._fetch_categories(
            user_id,
            {"type": type_, "active": "true", "default": "true", "name": name},
        )
        return next(
            (c for c in categories if c.is_default and c.is_active and c.name == name),
            None,
        )

    async def create_entry(self, request: CommitRequest, user_id: str) -> Entry:
        payload = await self._request(
            "POST",
            self._url(user_id, "transactions"),
            json=request.model_dump(mode="json"),
        )
        try:
            data = payload.get("data", payload)
            return Entry.model_validate({"user_id": user_id, **data})
        except ValidationError as exc:
            logger.error("[LEDGER] Unexpected entry payload: %s", exc)
            raise LedgerUnavailable() from exc


def _error_code(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("messageKey")
    return None
