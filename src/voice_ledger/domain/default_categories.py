"""Categories seeded for every new account.

Default categories are stored under their canonical key as name (the client
translates it for display), which lets the resolver find the user's copy of
a default category from any of its spoken keywords.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from voice_ledger.models import TransactionType

DEFAULT_CATEGORIES_VERSION = 2

OTHER_INCOME = "other_income"
OTHER_EXPENSE = "other_expense"


@dataclass(frozen=True)
class DefaultCategoryEntry:
    canonical_key: str
    type: TransactionType
    keywords: tuple[str, ...]
    icon: str
    color: str
    sort_order: int

    def matches(self, keyword: str) -> bool:
        return keyword in self.keywords


DEFAULT_CATEGORIES: tuple[DefaultCategoryEntry, ...] = (
    DefaultCategoryEntry(
        canonical_key="salary",
        type="income",
        keywords=("maaş", "maas", "salary", "maaşım", "maasim", "maaşımı", "maasimi", "wage"),
        icon="💰",
        color="#00C853",
        sort_order=1,
    ),
    DefaultCategoryEntry(
        canonical_key="investment",
        type="income",
        keywords=("yatırım", "yatirim", "investment", "sermaye", "temettü", "dividend"),
        icon="📈",
        color="#00E676",
        sort_order=2,
    ),
    DefaultCategoryEntry(
        canonical_key=OTHER_INCOME,
        type="income",
        keywords=("diğer gelir", "diger gelir", "other", OTHER_INCOME),
        icon="💵",
        color="#69F0AE",
        sort_order=3,
    ),
    DefaultCategoryEntry(
        canonical_key="food",
        type="expense",
        keywords=("yemek", "food", "market", "grocery", "groceries", "gıda", "gida", "restoran"),
        icon="🍔",
        color="#FF5722",
        sort_order=1,
    ),
    DefaultCategoryEntry(
        canonical_key="transportation",
        type="expense",
        keywords=(
            "ulaşım",
            "ulasim",
            "transportation",
            "transport",
            "taşıma",
            "tasima",
            "araba",
            "benzin",
        ),
        icon="🚗",
        color="#FF9800",
        sort_order=2,
    ),
    DefaultCategoryEntry(
        canonical_key="bills",
        type="expense",
        keywords=("fatura", "faturalar", "bills", "bill", "elektrik", "su", "internet"),
        icon="💡",
        color="#FFC107",
        sort_order=3,
    ),
    DefaultCategoryEntry(
        canonical_key="entertainment",
        type="expense",
        keywords=("eğlence", "eglence", "entertainment", "sinema", "oyun"),
        icon="🎬",
        color="#9C27B0",
        sort_order=4,
    ),
    DefaultCategoryEntry(
        canonical_key="health",
        type="expense",
        keywords=("sağlık", "saglik", "health", "hastane", "ilaç", "ilac", "doktor"),
        icon="🏥",
        color="#F44336",
        sort_order=5,
    ),
    DefaultCategoryEntry(
        canonical_key=OTHER_EXPENSE,
        type="expense",
        keywords=("diğer gider", "diger gider", "other", OTHER_EXPENSE),
        icon="📦",
        color="#607D8B",
        sort_order=6,
    ),
)


def entries_for(
    type_: TransactionType,
    table: tuple[DefaultCategoryEntry, ...] = DEFAULT_CATEGORIES,
) -> Iterator[DefaultCategoryEntry]:
    return (entry for entry in table if entry.type == type_)


def fallback_category_name(type_: TransactionType) -> str:
    return OTHER_INCOME if type_ == "income" else OTHER_EXPENSE
