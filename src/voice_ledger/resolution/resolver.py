from collections.abc import Callable, Sequence

from voice_ledger.domain.default_categories import (
    DEFAULT_CATEGORIES,
    DefaultCategoryEntry,
    entries_for,
)
from voice_ledger.domain.keywords import normalize_keyword, to_lower
from voice_ledger.logger import get_logger
from voice_ledger.models import Category, ResolutionResult, TransactionType

logger = get_logger(__name__)

Tier = Callable[[str, TransactionType, list[Category]], Category | None]


def _name(category: Category) -> str:
    return to_lower(category.name).strip()


def _contains_either(keyword: str, name: str) -> bool:
    # An empty name is a substring of everything; never treat it as a match.
    if not keyword or not name:
        return False
    return keyword in name or name in keyword


class CategoryResolver:
    """Map a spoken category keyword to one of the user's categories.

    Tiers run in a fixed order and the first hit wins:

    1. default_keyword: the keyword is a known alias of a seeded default
       category, and the user still has that default category.
    2. exact_name: the keyword equals a category name.
    3. substring: the keyword and a category name contain one another.
    4. token: like substring, but per whitespace-separated keyword token.

    There is no scoring. Ties go to the earlier tier, then the earlier token,
    then the earlier candidate in the order supplied.
    """

    def __init__(self, table: tuple[DefaultCategoryEntry, ...] = DEFAULT_CATEGORIES):
        self.table = table
        self.tiers: list[tuple[str, Tier]] = [
            ("default_keyword", self._match_default_keyword),
            ("exact_name", self._match_exact_name),
            ("substring", self._match_substring),
            ("token", self._match_token),
        ]

    def resolve(
        self,
        keyword: str | None,
        type_: TransactionType | None,
        candidates: Sequence[Category],
    ) -> ResolutionResult:
        if keyword is None or type_ is None:
            return ResolutionResult(found=False)

        normalized = normalize_keyword(keyword)
        if not normalized:
            return ResolutionResult(found=False)

        eligible = [c for c in candidates if c.type == type_ and c.is_active]

        for tier_name, tier in self.tiers:
            category = tier(normalized, type_, eligible)
            if category:
                logger.info(
                    "[RESOLVE] Category found (%s): '%s' for keyword '%s'",
                    tier_name,
                    category.name,
                    keyword,
                )
                return ResolutionResult(category_id=category.id, found=True, tier=tier_name)

        logger.debug("[RESOLVE] No category matched keyword '%s' (%s).", keyword, type_)
        return ResolutionResult(found=False)

    def _match_default_keyword(
        self, keyword: str, type_: TransactionType, candidates: list[Category]
    ) -> Category | None:
        for entry in entries_for(type_, self.table):
            if not entry.matches(keyword):
                continue
            for category in candidates:
                if category.is_default and _name(category) == entry.canonical_key:
                    return category
        return None

    @staticmethod
    def _match_exact_name(
        keyword: str, type_: TransactionType, candidates: list[Category]
    ) -> Category | None:
        return next((c for c in candidates if _name(c) == keyword), None)

    @staticmethod
    def _match_substring(
        keyword: str, type_: TransactionType, candidates: list[Category]
    ) -> Category | None:
        return next((c for c in candidates if _contains_either(keyword, _name(c))), None)

    @staticmethod
    def _match_token(
        keyword: str, type_: TransactionType, candidates: list[Category]
    ) -> Category | None:
        for token in keyword.split():
            for category in candidates:
                if _contains_either(token, _name(category)):
                    return category
        return None
