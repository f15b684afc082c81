"""Document capability over Supabase tables: fetch, create, patch-commit."""

import logging
from typing import Any, Optional, Set, Union

from ulid import ULID

from src.services.queries import Query
from src.services.supabase_client import SupabaseClient
from src.utils.errors import DuplicateDocumentError, SupabaseError

logger = logging.getLogger(__name__)

# Document type -> table
TABLES = {
    "agent": "agents",
    "property": "properties",
    "lead": "leads",
    "user": "users",
}


def table_for(doc_type: Optional[str]) -> str:
    try:
        return TABLES[doc_type]
    except KeyError:
        raise ValueError(f"Unknown document type: {doc_type!r}")


def generate_document_id() -> str:
    """Generate a text document ID (ULID format)."""
    return str(ULID())


def _is_unique_violation(error: Exception) -> bool:
    text = str(error).lower()
    return "duplicate key" in text or "23505" in text


class Patch:
    """
    Builder for a single-document update.

    Operations apply in call order when committed. Array operations
    (append/remove/set_if_missing) read the current row first; there is no
    concurrency token between that read and the write.
    """

    def __init__(self, store: "DocumentStore", doc_type: str, doc_id: str):
        self._store = store
        self.doc_type = doc_type
        self.table = table_for(doc_type)
        self.doc_id = doc_id
        self._operations: list[tuple[str, Any]] = []

    def set(self, fields: dict[str, Any]) -> "Patch":
        self._operations.append(("set", dict(fields)))
        return self

    def unset(self, paths: list[str]) -> "Patch":
        self._operations.append(("unset", list(paths)))
        return self

    def set_if_missing(self, fields: dict[str, Any]) -> "Patch":
        self._operations.append(("set_if_missing", dict(fields)))
        return self

    def append(self, path: str, items: list[Any]) -> "Patch":
        self._operations.append(("append", (path, list(items))))
        return self

    def remove(self, path: str, items: list[Any]) -> "Patch":
        """Remove every element equal to one of `items` from the array at `path`."""
        self._operations.append(("remove", (path, list(items))))
        return self

    @property
    def operations(self) -> list[tuple[str, Any]]:
        return list(self._operations)

    def columns_to_read(self) -> Set[str]:
        """Columns whose current value the operations depend on."""
        columns: Set[str] = set()
        for op, arg in self._operations:
            if op == "set_if_missing":
                columns.update(arg.keys())
            elif op in ("append", "remove"):
                columns.add(arg[0])
        return columns

    def apply(self, current: dict[str, Any]) -> dict[str, Any]:
        """Fold the operations over `current` and return the column updates."""
        updates: dict[str, Any] = {}

        def value_of(column: str) -> Any:
            return updates[column] if column in updates else current.get(column)

        for op, arg in self._operations:
            if op == "set":
                updates.update(arg)
            elif op == "unset":
                for path in arg:
                    updates[path] = None
            elif op == "set_if_missing":
                for column, value in arg.items():
                    if value_of(column) is None:
                        updates[column] = value
            elif op == "append":
                path, items = arg
                updates[path] = list(value_of(path) or []) + items
            elif op == "remove":
                path, items = arg
                updates[path] = [item for item in (value_of(path) or []) if item not in items]

        return updates

    async def commit(self) -> dict[str, Any]:
        return await self._store.commit_patch(self)


class DocumentStore:
    """Typed documents (agent, property, lead, user) stored one table per type."""

    async def fetch(self, query: Query, params: Optional[dict[str, Any]] = None) -> Union[dict, list, int, None]:
        """
        Run a declared query.

        Returns a dict (or None) for `first` queries, an int for `count`
        queries, and a list otherwise.
        """
        params = params or {}
        missing = query.param_names() - params.keys()
        if missing:
            raise ValueError(f"Missing query params for {query.table}: {sorted(missing)}")

        # postgrest rejects an empty IN list; nothing can match anyway
        if any(not params[param] for param in query.in_filters.values()):
            return 0 if query.count else (None if query.first else [])

        async with SupabaseClient() as client:
            try:
                if query.count:
                    request = client.table(query.table).select(query.columns, count="exact")
                else:
                    request = client.table(query.table).select(query.columns)

                for column, param in query.filters.items():
                    request = request.eq(column, params[param])
                for column, value in query.where.items():
                    request = request.eq(column, value)
                for column, param in query.in_filters.items():
                    request = request.in_(column, list(params[param]))

                if query.order_by:
                    request = request.order(query.order_by, desc=query.descending)
                if query.first:
                    request = request.limit(1)
                elif query.limit:
                    request = request.limit(query.limit)

                result = await request.execute()
            except Exception as e:
                raise SupabaseError(f"Failed to fetch from {query.table}: {e}")

        if query.count:
            return result.count or 0
        rows = result.data or []
        if query.first:
            return rows[0] if rows else None
        return rows

    async def create(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Insert a document; `_type` selects the table."""
        fields = dict(doc)
        doc_type = fields.pop("_type", None)
        table = table_for(doc_type)
        fields.setdefault("id", generate_document_id())

        async with SupabaseClient() as client:
            try:
                result = await client.table(table).insert(fields).execute()
            except Exception as e:
                if _is_unique_violation(e):
                    raise DuplicateDocumentError(f"Duplicate {doc_type}: {e}")
                raise SupabaseError(f"Failed to create {doc_type}: {e}")

        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError(f"Failed to create {doc_type}: no data returned")

    def patch(self, doc_type: str, doc_id: str) -> Patch:
        return Patch(self, doc_type, doc_id)

    async def commit_patch(self, patch: Patch) -> dict[str, Any]:
        """Apply a patch: read the columns it depends on, then write once."""
        columns = patch.columns_to_read()

        async with SupabaseClient() as client:
            current: dict[str, Any] = {}
            if columns:
                try:
                    result = await client.table(patch.table).select(", ".join(sorted(columns))).eq("id", patch.doc_id).execute()
                except Exception as e:
                    raise SupabaseError(f"Failed to read {patch.doc_type} for patch: {e}")
                if not result.data:
                    raise SupabaseError(f"Failed to patch {patch.doc_type}: {patch.doc_id} not found")
                current = result.data[0]

            updates = patch.apply(current)
            if not updates:
                return current

            try:
                result = await client.table(patch.table).update(updates).eq("id", patch.doc_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to patch {patch.doc_type}: {e}")

        if result.data and len(result.data) > 0:
            logger.debug(
                "Patched document",
                extra={"doc_type": patch.doc_type, "doc_id": patch.doc_id, "columns": sorted(updates)}
            )
            return result.data[0]
        raise SupabaseError(f"Failed to patch {patch.doc_type}: {patch.doc_id}")
