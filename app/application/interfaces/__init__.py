"""Application interfaces (ports). Infrastructure implements these."""

from app.application.interfaces.document_store import (
    FILTER_OPERATORS,
    ChangeListener,
    CollectionQuery,
    FieldFilter,
    IDocumentStore,
    StoredDocument,
    Unsubscribe,
    collection_query,
    where,
)

__all__ = [
    "FILTER_OPERATORS",
    "ChangeListener",
    "CollectionQuery",
    "FieldFilter",
    "IDocumentStore",
    "StoredDocument",
    "Unsubscribe",
    "collection_query",
    "where",
]
