"""
Tests for MedicineSearchService: popular fallback, ranked search messages,
suggest delegation and config loading.
"""

import pytest

from src.search import MedicineSearchService, SearchServiceConfig
from src.search.service import POPULAR_MESSAGE
from src.store.schemas import AnyOf, FieldMatch
from src.utils.errors import InvalidInputError, StoreError

from tests.factories import SpyStore, med


@pytest.fixture
def fifteen_store():
    names = [f"Medicine {chr(ord('O') - i)}" for i in range(15)]
    return SpyStore([med(name) for name in names])


class TestSearch:

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_empty_query_returns_popular(self, fifteen_store, config, query):
        service = MedicineSearchService(store=fifteen_store, config=config)

        result = service.search(query)

        assert result.message == POPULAR_MESSAGE == "Showing popular medicines"
        assert [m.name for m in result.data] == [
            f"Medicine {c}" for c in "ABCDEFGHIJ"
        ]
        assert fifteen_store.calls == [
            {"where": None, "take": 10, "order_by": "name", "exclude_ids": []}
        ]

    def test_ranked_results_and_message(self, service, spy_store):
        result = service.search("  Aspirin ")

        assert [m.name for m in result.data] == ["Aspirin", "Aspirin Plus", "Baby Aspirin"]
        assert result.message == 'Showing top 3 relevant results for "  Aspirin "'
        assert spy_store.calls[0]["where"] == AnyOf(
            FieldMatch("name", "contains", "aspirin"),
            FieldMatch("type", "contains", "aspirin"),
        )

    def test_type_matches_are_candidates(self, service):
        result = service.search("antibiotic")
        assert [m.name for m in result.data] == ["Amoxicillin"]

    def test_no_matches_message(self, service):
        result = service.search("xyz")
        assert result.data == []
        assert result.message == 'No matches found for "xyz"'

    def test_results_capped_by_config(self, spy_store):
        spy_store.upsert([med(f"Aspirin {i:02d}", "Analgesic") for i in range(20)])
        service = MedicineSearchService(
            store=spy_store, config=SearchServiceConfig(result_limit=5)
        )
        result = service.search("aspirin")
        assert len(result.data) == 5
        assert result.data[0].name == "Aspirin"

    def test_store_failure_propagates(self, catalog, config):
        service = MedicineSearchService(
            store=SpyStore(catalog, fail_on_call=1), config=config
        )
        with pytest.raises(StoreError):
            service.search("aspirin")

    def test_repeatable(self, service):
        assert service.search("an").data == service.search("an").data


class TestListAndSuggest:

    def test_list_all_is_name_ordered(self, service, catalog):
        names = [m.name for m in service.list_all()]
        assert names == sorted(m.name for m in catalog)

    def test_popular_respects_limit(self, fifteen_store):
        service = MedicineSearchService(
            store=fifteen_store, config=SearchServiceConfig(popular_limit=3)
        )
        assert [m.name for m in service.popular()] == [
            "Medicine A",
            "Medicine B",
            "Medicine C",
        ]

    def test_suggest_delegates(self, service):
        assert [m.name for m in service.suggest("asp")] == [
            "Aspirin",
            "Aspirin Plus",
            "Baby Aspirin",
        ]

    @pytest.mark.parametrize("term", [None, "", "  "])
    def test_suggest_rejects_empty(self, service, spy_store, term):
        with pytest.raises(InvalidInputError):
            service.suggest(term)
        assert spy_store.calls == []


class TestConfig:

    def test_defaults_from_bundled_yaml(self):
        config = SearchServiceConfig.from_yaml()
        assert config == SearchServiceConfig(
            result_limit=10, popular_limit=10, suggestion_limit=10
        )

    def test_yaml_overrides_and_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("result_limit: 5\nsomething_else: true\n", encoding="utf-8")
        config = SearchServiceConfig.from_yaml(path)
        assert config.result_limit == 5
        assert config.popular_limit == 10

    def test_missing_file_keeps_defaults(self, tmp_path):
        assert SearchServiceConfig.from_yaml(tmp_path / "missing.yaml") == SearchServiceConfig()

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("result_limit: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError):
            SearchServiceConfig.from_yaml(path)


class TestSqlBackedService:

    @pytest.fixture
    def sql_service(self, sql_store, config):
        sql_store.upsert([med("Ácido Fólico", "Vitamina B9"), med("Acetato", "Sal")])
        return MedicineSearchService(store=sql_store, config=config)

    def test_search_folds_accented_case(self, sql_service):
        result = sql_service.search("ÁCIDO")
        assert [m.name for m in result.data] == ["Ácido Fólico"]

    def test_suggest_folds_accented_case(self, sql_service):
        assert [m.name for m in sql_service.suggest("ácido")] == ["Ácido Fólico"]
        assert [m.name for m in sql_service.suggest("FÓL")] == ["Ácido Fólico"]
