"""Canonical form of the category keyword returned by the extractor.

Spoken input tends to carry the kind of event along with the category
("market harcaması", "fuel expense"). Only the category part is useful for
matching, so trailing descriptive words are removed.
"""

# Checked in order; each entry must be a whole trailing word.
CATEGORY_SUFFIXES: tuple[str, ...] = (
    # Turkish, with and without diacritics
    "harcaması",
    "harcamasi",
    "harcamaları",
    "harcamalari",
    "gideri",
    "giderleri",
    "geliri",
    "alışverişi",
    "alisverisi",
    "alışveriş",
    "alisveris",
    "ödemesi",
    "odemesi",
    "ödemi",
    "odemi",
    "işlemi",
    "islemi",
    "masrafı",
    "masrafi",
    # English
    "expenses",
    "expense",
    "purchase",
    "payment",
    "transaction",
    "income",
)


def to_lower(value: str) -> str:
    # str.lower() turns "İ" into "i" plus a combining dot.
    return value.replace("İ", "i").lower()


def strip_suffix(value: str, suffixes: tuple[str, ...] = CATEGORY_SUFFIXES) -> str:
    """Remove one recognized trailing word from an already lower-cased string."""
    for suffix in suffixes:
        if not value.endswith(suffix):
            continue
        head = value[: -len(suffix)]
        if head and head[-1].isspace():
            return head.strip()
    return value


def normalize_keyword(value: str, suffixes: tuple[str, ...] = CATEGORY_SUFFIXES) -> str:
    normalized = to_lower(value).strip()
    while True:
        stripped = strip_suffix(normalized, suffixes)
        if stripped == normalized:
            return normalized
        normalized = stripped
