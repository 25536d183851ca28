"""
In-memory stand-ins for the PostgreSQL stores, used by the route tests.
"""

import copy
from itertools import count

from workshop_portal.auth_service.models import User
from workshop_portal.auth_service.store import UPDATABLE_COLUMNS
from workshop_portal.workshops_service.store import to_document


class MemoryUserStore:
    def __init__(self):
        self._users = {}
        self._ids = count(1)

    def find_by_username(self, username):
        for user in self._users.values():
            if user.username == username:
                return user.copy()
        return None

    def find_by_id(self, user_id):
        user = self._users.get(user_id)
        return user.copy() if user else None

    def list_all(self):
        return [self._users[k].copy() for k in sorted(self._users)]

    def insert(self, username, password_hash, profile):
        if self.find_by_username(username) is not None:
            return None
        user = User(id=next(self._ids), username=username, password_hash=password_hash, **profile)
        self._users[user.id] = user
        return user.copy()

    def update(self, user_id, changes):
        unknown = set(changes) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        if user_id not in self._users:
            return None
        self._users[user_id] = self._users[user_id].copy(**changes)
        return self._users[user_id].copy()

    def increment_workshops_created(self, user_id):
        user = self._users[user_id]
        self._users[user_id] = user.copy(workshops_created=user.workshops_created + 1)

    def delete(self, user_id):
        return self._users.pop(user_id, None) is not None


class MemoryWorkshopStore:
    def __init__(self):
        self._rows = []
        self._ids = count(1)

    def _row(self, title):
        for row in self._rows:
            if row["event_title"] == title:
                return row
        return None

    def _docs(self, rows):
        return [to_document(copy.deepcopy(row)) for row in rows]

    def find_by_title(self, title):
        row = self._row(title)
        return to_document(copy.deepcopy(row)) if row else None

    def insert(self, title, created_by, details):
        if self._row(title) is not None:
            return None
        row = {
            "workshop_id": next(self._ids),
            "event_title": title,
            "created_by": created_by,
            "details": copy.deepcopy(details),
        }
        self._rows.append(row)
        return row["workshop_id"]

    def list_all(self):
        return self._docs(self._rows)

    def list_sorted(self, category=None):
        rows = self._rows
        if category is not None:
            rows = [r for r in rows if category in (r["details"].get("category") or [])]

        def key(row):
            start = row["details"].get("eventStDate")
            return (start is not None, start or "", row["workshop_id"])

        return self._docs(sorted(rows, key=key))

    def list_by_creator(self, username):
        return self._docs([r for r in self._rows if r["created_by"] == username])

    def replace_details(self, title, details):
        row = self._row(title)
        if row is None:
            return False
        row["details"] = copy.deepcopy(details)
        return True

    def delete(self, title):
        row = self._row(title)
        if row is None:
            return False
        self._rows.remove(row)
        return True
