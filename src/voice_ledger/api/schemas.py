from pydantic import BaseModel, Field

from voice_ledger.models import TransactionType


class VoiceTransactionRequest(BaseModel):
    # The upper bound is configurable and checked by the extraction client.
    text: str = Field(
        min_length=1,
        examples=["500 tl lik market alışverişi yaptım"],
    )


class DefaultCategoryOut(BaseModel):
    canonical_key: str
    type: TransactionType
    keywords: list[str]
    icon: str
    color: str
    sort_order: int


class DefaultCategoriesResponse(BaseModel):
    version: int
    categories: list[DefaultCategoryOut]
