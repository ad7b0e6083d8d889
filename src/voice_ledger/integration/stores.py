from abc import ABC, abstractmethod

from voice_ledger.models import Category, CommitRequest, Entry, TransactionType


class CategoryStore(ABC):
    @abstractmethod
    async def list_active_categories(self, user_id: str, type_: TransactionType) -> list[Category]:
        """Active categories of ``type_`` owned by the user, in a stable order."""
        pass

    @abstractmethod
    async def find_default_category_by_name(
        self, user_id: str, type_: TransactionType, name: str
    ) -> Category | None:
        """The user's seeded, active default category called ``name``."""
        pass


class LedgerStore(ABC):
    @abstractmethod
    async def create_entry(self, request: CommitRequest, user_id: str) -> Entry:
        """Persist the entry. Raises InvalidCategory if the category does not fit."""
        pass
