"""Shared fixtures for the medicine catalog tests."""

from __future__ import annotations

from typing import List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from src.search import MedicineSearchService, SearchServiceConfig
from src.store.data_store import SqlMedicineStore
from src.store.memory_store import InMemoryMedicineStore
from src.store.schemas import Medicine

from tests.factories import SpyStore, med


@pytest.fixture
def catalog() -> List[Medicine]:
    return [
        med("Aspirin", "Analgesic", 4.5),
        med("Aspirin Plus", "Analgesic", 6.0),
        med("Baby Aspirin", "Analgesic", 3.25),
        med("Paracetamol", "Analgesic", 2.0),
        med("Amoxicillin", "Antibiotic", 12.0),
        med("Cetirizine", "Antihistamine", 5.5),
        med("Ibuprofen", "Anti-inflammatory", 4.0),
    ]


@pytest.fixture
def memory_store(catalog) -> InMemoryMedicineStore:
    return InMemoryMedicineStore(catalog)


@pytest.fixture
def spy_store(catalog) -> SpyStore:
    return SpyStore(catalog)


@pytest.fixture
def config() -> SearchServiceConfig:
    return SearchServiceConfig(result_limit=10, popular_limit=10, suggestion_limit=10)


@pytest.fixture
def service(spy_store, config) -> MedicineSearchService:
    return MedicineSearchService(store=spy_store, config=config)


@pytest.fixture
def sql_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine, catalog) -> SqlMedicineStore:
    store = SqlMedicineStore(engine=sql_engine)
    store.upsert(catalog)
    return store
