"""Medicine search script using the search service directly.

Configuration via constants below (no CLI args). Run:
    uv run python scripts/search.py

Environment:
    DATABASE_URL         (default sqlite:///./medicines.db)
    MEDICINES_SEED_FILE  (optional; search an in-memory catalog loaded from this file)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

# Ensure the project root is on path so 'src' imports resolve
CURRENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CURRENT_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.search import MedicineSearchService  # noqa: E402
from src.store.schemas import Medicine, format_medicine  # noqa: E402


# ---------------------------------------------------------------------------
# Configuration Constants
# ---------------------------------------------------------------------------
QUERY_TEXT: str = "aspirin"
SUGGEST_TERM: str = "par"
LOG_LEVEL: str = "INFO"


def _format_block(header: str, items: List[Medicine]) -> str:
    lines: List[str] = [header]
    for idx, item in enumerate(items, start=1):
        lines.append(f"{idx}. {format_medicine(item)}")
    return "\n".join(lines)


def search(query: str, term: str) -> None:
    """Run a ranked search and a suggestion lookup, logging both result blocks."""
    logger = logging.getLogger(__name__)
    service = MedicineSearchService()

    result = service.search(query)
    logger.info(_format_block(f"{result.message}\nQuery: {query!r}", result.data))

    suggestions = service.suggest(term)
    logger.info(
        _format_block(
            f"Returned {len(suggestions)} suggestions.\nTerm: {term!r}", suggestions
        )
    )


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    try:
        search(QUERY_TEXT, SUGGEST_TERM)
        return 0
    except Exception as e:  # pragma: no cover
        logging.exception("Search failed: %s", e)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
