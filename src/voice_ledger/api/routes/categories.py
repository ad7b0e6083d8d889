from fastapi import APIRouter

from voice_ledger.api.schemas import DefaultCategoriesResponse, DefaultCategoryOut
from voice_ledger.domain.default_categories import DEFAULT_CATEGORIES, DEFAULT_CATEGORIES_VERSION

router = APIRouter()


@router.get("/api/categories/defaults", response_model=DefaultCategoriesResponse)
async def get_default_categories() -> DefaultCategoriesResponse:
    return DefaultCategoriesResponse(
        version=DEFAULT_CATEGORIES_VERSION,
        categories=[
            DefaultCategoryOut(
                canonical_key=entry.canonical_key,
                type=entry.type,
                keywords=list(entry.keywords),
                icon=entry.icon,
                color=entry.color,
                sort_order=entry.sort_order,
            )
            for entry in DEFAULT_CATEGORIES
        ],
    )
