"""Search application layer.

This package implements the medicine catalog scenarios used by the API:
- Relevance-ranked search by free-text query
- Autocomplete suggestions assembled from name-prefix, name-substring and
  type-substring matches

Scoring and suggestion assembly are pure functions over records returned by a
record store; they hold no state between calls.
"""

from .relevance import calculate_relevance, rank_medicines
from .service import MedicineSearchService, SearchResult, SearchServiceConfig
from .suggestions import SuggestionAccumulator, assemble_suggestions

__all__ = [
    "MedicineSearchService",
    "SearchResult",
    "SearchServiceConfig",
    "SuggestionAccumulator",
    "assemble_suggestions",
    "calculate_relevance",
    "rank_medicines",
]
