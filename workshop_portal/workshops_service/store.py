"""
Workshop store: persistence of workshop records in the `workshops` table.

The title and creator are real columns; everything else lives in the
`details` JSONB document so new link lists need no migration.
"""

from typing import Any, Callable, Dict, List, Optional

from psycopg2.extras import Json

WORKSHOP_COLUMNS = "workshop_id, event_title, created_by, details"

# Mongo-style ordering: workshops without a start date come first.
ORDER_BY_START = "ORDER BY details->>'eventStDate' ASC NULLS FIRST, workshop_id ASC"


def to_document(row: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a row into the JSON shape the API returns."""
    doc = dict(row.get("details") or {})
    doc["id"] = row["workshop_id"]
    doc["eventTitle"] = row["event_title"]
    doc["createdBy"] = row["created_by"]
    return doc


class WorkshopStore:
    """
    Reads and writes workshops through a connection factory.

    Args:
        connect: Zero-argument callable returning a context manager that
            yields a psycopg2 connection.
    """

    def __init__(self, connect: Callable):
        self._connect = connect

    def _fetch_all(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
        return [to_document(row) for row in rows]

    def find_by_title(self, title: str) -> Optional[Dict[str, Any]]:
        sql = f"SELECT {WORKSHOP_COLUMNS} FROM workshops WHERE event_title = %s;"
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (title,))
                row = cur.fetchone()
        return to_document(row) if row else None

    def insert(self, title: str, created_by: str, details: Dict[str, Any]) -> Optional[int]:
        """
        Insert a workshop.

        Returns:
            int: The new workshop id, or None if the title is already taken.
        """
        sql = """
            INSERT INTO workshops (event_title, created_by, details)
            VALUES (%s, %s, %s)
            ON CONFLICT (event_title) DO NOTHING
            RETURNING workshop_id;
        """
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (title, created_by, Json(details)))
                row = cur.fetchone()
        return row["workshop_id"] if row else None

    def list_all(self) -> List[Dict[str, Any]]:
        return self._fetch_all(f"SELECT {WORKSHOP_COLUMNS} FROM workshops ORDER BY workshop_id ASC;")

    def list_sorted(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        """All workshops by ascending start date, optionally only one category."""
        if category is None:
            return self._fetch_all(f"SELECT {WORKSHOP_COLUMNS} FROM workshops {ORDER_BY_START};")

        # jsonb `?` matches a string element of the category array
        sql = f"SELECT {WORKSHOP_COLUMNS} FROM workshops WHERE details->'category' ? %s {ORDER_BY_START};"
        return self._fetch_all(sql, (category,))

    def list_by_creator(self, username: str) -> List[Dict[str, Any]]:
        sql = f"SELECT {WORKSHOP_COLUMNS} FROM workshops WHERE created_by = %s ORDER BY workshop_id ASC;"
        return self._fetch_all(sql, (username,))

    def replace_details(self, title: str, details: Dict[str, Any]) -> bool:
        """Overwrite the details document. Returns False if no row matched."""
        sql = "UPDATE workshops SET details = %s, updated_at = CURRENT_TIMESTAMP WHERE event_title = %s;"
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (Json(details), title))
                return cur.rowcount > 0

    def delete(self, title: str) -> bool:
        """Delete one workshop. Returns False when nothing was deleted."""
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM workshops WHERE event_title = %s;", (title,))
                return cur.rowcount > 0
