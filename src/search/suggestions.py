from __future__ import annotations

import logging
from typing import Iterable, List, Set

from src.store.base import MedicineRepository
from src.store.schemas import Medicine, contains, starts_with
from src.utils.errors import InvalidInputError
from src.utils.text_cleaning import normalize_term


logger = logging.getLogger(__name__)


class SuggestionAccumulator:
    """Ordered, id-deduplicated list of suggestions with a hard size cap."""

    def __init__(self, limit: int = 10) -> None:
        self.limit = limit
        self._items: List[Medicine] = []
        self._ids: Set[str] = set()

    @property
    def items(self) -> List[Medicine]:
        return list(self._items)

    @property
    def ids(self) -> List[str]:
        return [m.id for m in self._items]

    @property
    def remaining(self) -> int:
        return max(0, self.limit - len(self._items))

    @property
    def is_full(self) -> bool:
        return self.remaining == 0

    def add_batch(self, medicines: Iterable[Medicine]) -> int:
        """Append records in order, skipping known ids; returns how many were added."""
        added = 0
        for medicine in medicines:
            if self.is_full:
                break
            if medicine.id in self._ids:
                continue
            self._ids.add(medicine.id)
            self._items.append(medicine)
            added += 1
        return added

    def __len__(self) -> int:
        return len(self._items)


def assemble_suggestions(
    store: MedicineRepository, term: str, limit: int = 10
) -> List[Medicine]:
    """Build autocomplete suggestions for ``term``.

    Tiers run in order and each only fills the space the previous ones left:
      1) name starts with the term
      2) name contains the term
      3) type contains the term
    Every tier is ordered by name and excludes ids already suggested.

    Raises:
        InvalidInputError: If the term is empty or whitespace (no store query is made).
        StoreError: If any tier's query fails; nothing partial is returned.
    """
    search_term = normalize_term(term)
    if not search_term:
        raise InvalidInputError("Search term is required")

    acc = SuggestionAccumulator(limit=limit)
    tiers = (
        ("name_prefix", starts_with("name", search_term)),
        ("name_contains", contains("name", search_term)),
        ("type_contains", contains("type", search_term)),
    )
    for tier_name, predicate in tiers:
        if acc.is_full:
            break
        batch = store.find_many(
            predicate,
            take=acc.remaining,
            order_by="name",
            exclude_ids=acc.ids,
        )
        added = acc.add_batch(batch)
        logger.debug(
            "Suggestion tier %s for %r added %d (total %d)",
            tier_name,
            search_term,
            added,
            len(acc),
        )

    return acc.items
