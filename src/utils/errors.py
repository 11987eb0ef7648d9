from __future__ import annotations


class CatalogError(Exception):
    """Base class for errors raised by the medicine catalog."""


class InvalidInputError(CatalogError):
    """The caller supplied input the catalog refuses to query with."""


class StoreError(CatalogError):
    """The record store failed to answer a query."""
