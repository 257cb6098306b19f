"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deploy bundle small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from app.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_fields,
    encode_fields,
    parse_rest_timestamp,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_COUNT_ALIAS = "count"


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DocumentExistsError(Exception):
    """Raised when createDocument returns 409 (document ID already exists)."""


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers)
    elif method == "PATCH":
        resp = await client.patch(url, headers=headers, json=body)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body)
    elif method == "DELETE":
        resp = await client.delete(url, headers=headers)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError("Document already exists")
    if resp.status_code not in (200, 204):
        resp.raise_for_status()
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentSnapshot:
    """Snapshot of a document: id, data, owning parent document id, server times."""

    def __init__(
        self,
        id_: str,
        data: dict,
        *,
        parent_id: str | None = None,
        update_time: datetime | None = None,
    ):
        self.id = id_
        self._data = data
        self.parent_id = parent_id
        self.update_time = update_time

    def to_dict(self) -> dict:
        return self._data

    @classmethod
    def from_rest(cls, document: dict) -> DocumentSnapshot:
        """Build from a REST Document resource.

        The name is ".../documents/<col>/<id>[/<sub>/<id>...]"; for a document in a
        sub-collection the parent id is the segment two places before its own id.
        """
        name = document.get("name", "")
        relative = name.split("/documents/", 1)[-1] if name else ""
        segments = [s for s in relative.split("/") if s]
        doc_id = segments[-1] if segments else ""
        parent_id = segments[-3] if len(segments) >= 4 else None
        update_time = document.get("updateTime")
        return cls(
            doc_id,
            decode_fields(document),
            parent_id=parent_id,
            update_time=parse_rest_timestamp(update_time) if update_time else None,
        )


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        url = f"{_BASE}/{self._path}"
        out = await _request_async(
            self._client._http, url, access_token=await self._client.get_token()
        )
        if not out:
            return None
        return DocumentSnapshot.from_rest(out)

    async def update(self, data: dict[str, Any]) -> bool:
        """Merge the given top-level fields; False if the document does not exist.

        Sends an updateMask so untouched fields are kept, and an exists
        precondition so a missing document is not silently created.
        """
        params = [("updateMask.fieldPaths", key) for key in data]
        params.append(("currentDocument.exists", "true"))
        url = f"{_BASE}/{self._path}?{urlencode(params)}"
        out = await _request_async(
            self._client._http,
            url,
            method="PATCH",
            body=encode_fields(data),
            access_token=await self._client.get_token(),
        )
        return out is not None

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        url = f"{_BASE}/{self._path}"
        await _request_async(
            self._client._http,
            url,
            method="DELETE",
            access_token=await self._client.get_token(),
        )


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
}


class Query:
    """Fluent query builder; runs via runQuery / runAggregationQuery on the server.

    Filters are ANDed. all_descendants=True turns the query into a collection
    group query over every collection with this id.
    """

    def __init__(
        self,
        client: FirestoreRESTClient,
        parent: str,
        collection_id: str,
        *,
        all_descendants: bool = False,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._all_descendants = all_descendants
        self._filters: list[dict[str, Any]] = []
        self._order_by_field: str | None = None
        self._order_direction: str = "ASCENDING"
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> Query:
        if op not in _OP_MAP:
            raise ValueError(f"Unsupported filter operator: {op!r}")
        self._filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": _OP_MAP[op],
                    "value": _encode_value(value),
                }
            }
        )
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        self._order_by_field = field
        self._order_direction = direction
        return self

    def limit(self, n: int | None) -> Query:
        self._limit = n
        return self

    def structured_query(self) -> dict[str, Any]:
        source: dict[str, Any] = {"collectionId": self._collection_id}
        if self._all_descendants:
            source["allDescendants"] = True
        structured: dict[str, Any] = {"from": [source]}
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": list(self._filters)}
            }
        if self._order_by_field is not None:
            structured["orderBy"] = [
                {
                    "field": {"fieldPath": self._order_by_field},
                    "direction": self._order_direction,
                }
            ]
        if self._limit is not None:
            structured["limit"] = self._limit
        return structured

    async def _post(self, verb: str, body: dict) -> list[dict]:
        url = f"{_BASE}/{self._parent}:{verb}"
        resp = await _request_async(
            self._client._http,
            url,
            method="POST",
            body=body,
            access_token=await self._client.get_token(),
        )
        return resp if isinstance(resp, list) else ([resp] if resp else [])

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots in query order."""
        items = await self._post("runQuery", {"structuredQuery": self.structured_query()})
        for item in items:
            if "document" not in item:
                continue
            yield DocumentSnapshot.from_rest(item["document"])

    async def count(self) -> int:
        """Server-side COUNT aggregation; no documents are transferred."""
        body = {
            "structuredAggregationQuery": {
                "structuredQuery": self.structured_query(),
                "aggregations": [{"alias": _COUNT_ALIAS, "count": {}}],
            }
        }
        items = await self._post("runAggregationQuery", body)
        for item in items:
            fields = item.get("result", {}).get("aggregateFields", {})
            if _COUNT_ALIAS in fields:
                return int(fields[_COUNT_ALIAS].get("integerValue", 0))
        return 0


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists)."""
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body=encode_fields(data),
            access_token=await self._client.get_token(),
        )

    def query(self) -> Query:
        """Start a query. Chain .where(), .order_by(), .limit(), then .stream() or .count()."""
        parent, collection_id = self._path.rsplit("/", 1)
        return Query(self._client, parent, collection_id)


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")

    def collection_group(self, collection_id: str) -> Query:
        """Query every collection named collection_id, at any depth."""
        return Query(self, self._prefix, collection_id, all_descendants=True)
