from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .schemas import AllOf, AnyOf, FieldMatch, Medicine


logger = logging.getLogger(__name__)


def matches(medicine: Medicine, where: Optional[Any]) -> bool:
    """Evaluate a predicate tree against one record, case-insensitively."""
    if where is None:
        return True
    if isinstance(where, FieldMatch):
        haystack = str(getattr(medicine, where.field)).lower()
        needle = where.value.lower()
        if where.op == "starts_with":
            return haystack.startswith(needle)
        return needle in haystack
    if isinstance(where, AnyOf):
        return any(matches(medicine, p) for p in where.predicates)
    if isinstance(where, AllOf):
        return all(matches(medicine, p) for p in where.predicates)
    raise TypeError(f"Unsupported predicate: {where!r}")


def read_records(path: Path | str) -> List[Dict[str, Any]]:
    """Read raw medicine records from a JSON array or a JSON-lines file.

    Blank lines are skipped. Any malformed line fails the whole file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line or the document is not valid JSON.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Medicine seed file not found: {path}") from e

    if text.lstrip().startswith("["):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing medicine seed file '{path}': {e}") from e

    records = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Error parsing medicine seed file '{path}' at line {line_no}: {e}"
            ) from e
    return records


def load_medicines(path: Path | str) -> List[Medicine]:
    """Load medicines from a JSON array or a JSON-lines file (see read_records)."""
    return [Medicine.from_record(r) for r in read_records(path)]


class InMemoryMedicineStore:
    """List-backed record store with the same query surface as the SQL store."""

    def __init__(self, medicines: Optional[Iterable[Medicine]] = None) -> None:
        self._lock = threading.Lock()
        self._rows: List[Medicine] = []
        if medicines is not None:
            self.upsert(medicines)

    @classmethod
    def from_file(cls, path: Path | str) -> "InMemoryMedicineStore":
        medicines = load_medicines(path)
        logger.info("Loaded %d medicines from %s", len(medicines), path)
        return cls(medicines)

    def find_many(
        self,
        where: Optional[Any] = None,
        *,
        take: Optional[int] = None,
        order_by: Optional[str] = "name",
        exclude_ids: Iterable[str] = (),
    ) -> List[Medicine]:
        excluded = set(exclude_ids)
        rows = [
            m for m in self._rows if m.id not in excluded and matches(m, where)
        ]
        if order_by is not None:
            rows.sort(key=lambda m: getattr(m, order_by))
        if take is not None:
            rows = rows[: max(0, take)]
        return rows

    def upsert(self, medicines: Iterable[Medicine]) -> None:
        with self._lock:
            positions = {m.id: i for i, m in enumerate(self._rows)}
            rows = list(self._rows)
            for medicine in medicines:
                if medicine.id in positions:
                    rows[positions[medicine.id]] = medicine
                else:
                    positions[medicine.id] = len(rows)
                    rows.append(medicine)
            self._rows = rows

    def count(self) -> int:
        return len(self._rows)
