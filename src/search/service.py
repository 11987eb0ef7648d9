from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List, Optional

from src.store.base import MedicineRepository
from src.store.data_store import SqlMedicineStore
from src.store.memory_store import InMemoryMedicineStore
from src.store.schemas import AnyOf, Medicine, contains
from src.utils.config import load_config
from src.utils.text_cleaning import normalize_term

from .relevance import rank_medicines
from .suggestions import assemble_suggestions


CONFIG_FILE_PATH = Path(__file__).parent / "config.yaml"

POPULAR_MESSAGE = "Showing popular medicines"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchServiceConfig:
    result_limit: int = 10
    popular_limit: int = 10
    suggestion_limit: int = 10

    @classmethod
    def from_yaml(cls, path: Path | str = CONFIG_FILE_PATH) -> "SearchServiceConfig":
        """Build a config from YAML; unknown keys are ignored, missing keys keep defaults."""
        try:
            cfg = load_config(path)
        except FileNotFoundError:
            cfg = {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: int(v) for k, v in cfg.items() if k in known})


@dataclass(frozen=True)
class SearchResult:
    data: List[Medicine]
    message: str


def build_default_store() -> MedicineRepository:
    """Pick the record store from the environment.

    MEDICINES_SEED_FILE serves an in-memory catalog loaded from that file;
    otherwise the SQL store at DATABASE_URL is used.
    """
    seed_file = os.getenv("MEDICINES_SEED_FILE", "").strip()
    if seed_file:
        return InMemoryMedicineStore.from_file(seed_file)
    return SqlMedicineStore()


class MedicineSearchService:
    """Application-layer medicine catalog service.

    Implements:
      1) Listing the whole catalog
      2) Free-text search ranked by relevance (popular medicines for empty queries)
      3) Tiered autocomplete suggestions

    Store failures propagate to the caller unchanged.
    """

    def __init__(
        self,
        store: Optional[MedicineRepository] = None,
        config: Optional[SearchServiceConfig] = None,
    ):
        self.config = config or SearchServiceConfig.from_yaml()
        self.store = store if store is not None else build_default_store()

    def list_all(self) -> List[Medicine]:
        return self.store.find_many(order_by="name")

    def popular(self) -> List[Medicine]:
        # No usage statistics are tracked; "popular" is the head of the catalog by name.
        return self.store.find_many(take=self.config.popular_limit, order_by="name")

    def search(self, query: Optional[str]) -> SearchResult:
        """Search by a free-text query string."""

        search_term = normalize_term(query)
        if not search_term:
            return SearchResult(data=self.popular(), message=POPULAR_MESSAGE)

        candidates = self.store.find_many(
            AnyOf(contains("name", search_term), contains("type", search_term)),
            order_by="name",
        )
        logger.debug("Search %r matched %d candidates", search_term, len(candidates))

        results = rank_medicines(candidates, search_term, limit=self.config.result_limit)
        if results:
            message = f'Showing top {len(results)} relevant results for "{query}"'
        else:
            message = f'No matches found for "{query}"'
        return SearchResult(data=results, message=message)

    def suggest(self, term: Optional[str]) -> List[Medicine]:
        return assemble_suggestions(
            self.store, term or "", limit=self.config.suggestion_limit
        )
