from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from src.search import MedicineSearchService
from src.utils.errors import InvalidInputError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medicines", tags=["medicines"])


class MedicineItem(BaseModel):
    id: str = Field(..., description="Primary key of the medicine.")
    name: str = Field(..., description="Display name.")
    type: str = Field(..., description="Category or classification.")
    price: float = Field(..., description="Unit price.")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp.")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp.")


class SuggestionItem(BaseModel):
    id: str
    name: str
    type: str
    price: float


class MedicineListResponse(BaseModel):
    data: List[MedicineItem] = Field(
        default_factory=list, description="All medicines, ordered by name."
    )


class SearchResponse(BaseModel):
    data: List[MedicineItem] = Field(
        default_factory=list, description="Up to 10 medicines, most relevant first."
    )
    message: str = Field(..., description="Human-readable summary of the result.")


class SuggestResponse(BaseModel):
    suggestions: List[SuggestionItem] = Field(
        default_factory=list, description="Up to 10 autocomplete suggestions."
    )


@lru_cache(maxsize=1)
def get_search_service() -> MedicineSearchService:
    return MedicineSearchService()


@router.get(
    "",
    summary="List all medicines",
    response_model=MedicineListResponse,
)
def list_medicines(
    service: MedicineSearchService = Depends(get_search_service),
) -> MedicineListResponse:
    try:
        medicines = service.list_all()
    except Exception as exc:
        logger.exception("Listing medicines failed")
        raise HTTPException(
            status_code=500, detail=f"Failed to list medicines: {exc}"
        ) from exc

    return MedicineListResponse(data=[MedicineItem(**m.to_dict()) for m in medicines])


@router.get(
    "/search",
    summary="Search medicines by relevance",
    response_model=SearchResponse,
)
def search_medicines(
    query: Optional[str] = Query(
        None, description="Free-text query. Empty returns popular medicines."
    ),
    service: MedicineSearchService = Depends(get_search_service),
) -> SearchResponse:
    """Rank medicines whose name or type contains the query."""

    try:
        result = service.search(query)
    except Exception as exc:
        logger.exception("Search error")
        raise HTTPException(status_code=500, detail=f"Search failed: {exc}") from exc

    return SearchResponse(
        data=[MedicineItem(**m.to_dict()) for m in result.data],
        message=result.message,
    )


@router.get(
    "/suggest/{term}",
    summary="Autocomplete suggestions for a term",
    response_model=SuggestResponse,
)
def suggest_medicines(
    term: str,
    service: MedicineSearchService = Depends(get_search_service),
) -> SuggestResponse:
    """Suggest medicines by name prefix, then name substring, then type substring."""

    try:
        suggestions = service.suggest(term)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Suggestion error")
        raise HTTPException(
            status_code=500, detail=f"Suggestion failed: {exc}"
        ) from exc

    return SuggestResponse(
        suggestions=[SuggestionItem(**m.to_suggestion()) for m in suggestions]
    )


# An empty path segment never reaches /suggest/{term}; reject it the same way.
@router.get("/suggest", include_in_schema=False)
@router.get("/suggest/", include_in_schema=False)
async def suggest_without_term():
    raise HTTPException(status_code=400, detail="Search term is required")
