"""
Credential store: persistence of user records in the `users` table.
"""

from typing import Any, Callable, Dict, List, Optional

from workshop_portal.auth_service.models import User

USER_COLUMNS = """
    user_id, username, password_hash, full_name, email, department,
    designation, bio, is_admin, is_blocked, has_create_access,
    create_access_expiry, workshops_created, created_at
"""

# Columns that may be written through `update`.
UPDATABLE_COLUMNS = (
    "password_hash",
    "full_name",
    "email",
    "department",
    "designation",
    "bio",
    "is_admin",
    "is_blocked",
    "has_create_access",
    "create_access_expiry",
)


class UserStore:
    """
    Reads and writes users through a connection factory.

    Args:
        connect: Zero-argument callable returning a context manager that
            yields a psycopg2 connection (see `database.db_connection`).
    """

    def __init__(self, connect: Callable):
        self._connect = connect

    def _fetch_one(self, sql: str, params: tuple) -> Optional[User]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
        return User.from_row(row) if row else None

    def find_by_username(self, username: str) -> Optional[User]:
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE username = %s;"
        return self._fetch_one(sql, (username,))

    def find_by_id(self, user_id: int) -> Optional[User]:
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE user_id = %s;"
        return self._fetch_one(sql, (user_id,))

    def list_all(self) -> List[User]:
        sql = f"SELECT {USER_COLUMNS} FROM users ORDER BY user_id ASC;"
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                rows = cur.fetchall()
        return [User.from_row(row) for row in rows]

    def insert(self, username: str, password_hash: str, profile: Dict[str, Any]) -> Optional[User]:
        """
        Insert a new user with default flags.

        Returns:
            User: The stored record, or None if the username is already taken.
        """
        columns = ["username", "password_hash"]
        values: List[Any] = [username, password_hash]
        for column, value in profile.items():
            if column in UPDATABLE_COLUMNS:
                columns.append(column)
                values.append(value)

        placeholders = ", ".join(["%s"] * len(values))
        sql = f"""
            INSERT INTO users ({", ".join(columns)})
            VALUES ({placeholders})
            ON CONFLICT (username) DO NOTHING
            RETURNING {USER_COLUMNS};
        """
        return self._fetch_one(sql, tuple(values))

    def update(self, user_id: int, changes: Dict[str, Any]) -> Optional[User]:
        """
        Overwrite the given columns of one user.

        Returns:
            User: The updated record, or None if no such user exists.

        Raises:
            ValueError: If a column is not updatable.
        """
        unknown = set(changes) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        if not changes:
            return self.find_by_id(user_id)

        set_clause = ", ".join(f"{column} = %s" for column in changes)
        sql = f"UPDATE users SET {set_clause} WHERE user_id = %s RETURNING {USER_COLUMNS};"
        return self._fetch_one(sql, tuple(changes.values()) + (user_id,))

    def increment_workshops_created(self, user_id: int) -> None:
        sql = "UPDATE users SET workshops_created = workshops_created + 1 WHERE user_id = %s;"
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))

    def delete(self, user_id: int) -> bool:
        """Delete one user. Returns False when nothing was deleted."""
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM users WHERE user_id = %s;", (user_id,))
                return cur.rowcount > 0
