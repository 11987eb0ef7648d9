from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol

from .schemas import Medicine


class MedicineRepository(Protocol):
    """Query capability the search layer needs from a record store.

    ``where`` is a predicate tree of FieldMatch/AnyOf/AllOf. Exclusions are
    applied before ``take``. Ordering is ascending on ``order_by``; ``None``
    keeps storage order. Backend failures surface as StoreError.
    """

    def find_many(
        self,
        where: Optional[Any] = None,
        *,
        take: Optional[int] = None,
        order_by: Optional[str] = "name",
        exclude_ids: Iterable[str] = (),
    ) -> List[Medicine]: ...

    def upsert(self, medicines: Iterable[Medicine]) -> None: ...

    def count(self) -> int: ...
