from uuid import uuid4

from voice_ledger.domain.default_categories import DEFAULT_CATEGORIES, DefaultCategoryEntry
from voice_ledger.errors import InvalidCategory
from voice_ledger.logger import get_logger
from voice_ledger.models import Category, CommitRequest, Entry, TransactionType

from .stores import CategoryStore, LedgerStore

logger = get_logger(__name__)


class InMemoryLedger(CategoryStore, LedgerStore):
    """Process-local category and entry store, used when no ledger URL is configured."""

    def __init__(self, auto_bootstrap: bool = False) -> None:
        self.auto_bootstrap = auto_bootstrap
        self.categories: dict[str, list[Category]] = {}
        self.entries: dict[str, list[Entry]] = {}

    def bootstrap_user(
        self,
        user_id: str,
        table: tuple[DefaultCategoryEntry, ...] = DEFAULT_CATEGORIES,
    ) -> list[Category]:
        """Seed the default categories for a new account. No-op if already seeded."""
        existing = self.categories.setdefault(user_id, [])
        if any(c.is_default for c in existing):
            return existing
        for entry in table:
            existing.append(
                Category(
                    id=uuid4().hex,
                    name=entry.canonical_key,
                    type=entry.type,
                    is_default=True,
                    icon=entry.icon,
                    color=entry.color,
                    sort_order=entry.sort_order,
                )
            )
        logger.info("[LEDGER] Seeded %d default categories for user %s.", len(table), user_id)
        return existing

    def add_category(self, user_id: str, category: Category) -> Category:
        self.categories.setdefault(user_id, []).append(category)
        return category

    def _categories_of(self, user_id: str) -> list[Category]:
        if self.auto_bootstrap and user_id not in self.categories:
            return self.bootstrap_user(user_id)
        return self.categories.get(user_id, [])

    async def list_active_categories(self, user_id: str, type_: TransactionType) -> list[Category]:
        return [
            c for c in self._categories_of(user_id) if c.type == type_ and c.is_active
        ]

    async def find_default_category_by_name(
        self, user_id: str, type_: TransactionType, name: str
    ) -> Category | None:
        for category in self._categories_of(user_id):
            if (
                category.type == type_
                and category.is_default
                and category.is_active
                and category.name == name
            ):
                return category
        return None

    async def create_entry(self, request: CommitRequest, user_id: str) -> Entry:
        category = next(
            (c for c in self.categories.get(user_id, []) if c.id == request.category_id),
            None,
        )
        if category is None or category.type != request.type:
            raise InvalidCategory(f"Category is not a valid {request.type} category")

        entry = Entry(id=uuid4().hex, user_id=user_id, **request.model_dump())
        self.entries.setdefault(user_id, []).append(entry)
        return entry
