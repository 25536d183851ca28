import pytest
from unittest.mock import MagicMock

from workshop_portal.auth_service.store import UserStore
from workshop_portal.workshops_service.store import WorkshopStore


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the connection factory, connection and cursor.
    """
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None
    mock_conn.cursor.return_value = mock_cursor

    connect = mocker.Mock(return_value=mock_conn)
    return connect, mock_cursor


USER_ROW = {
    "user_id": 7,
    "username": "alice",
    "password_hash": "hashed_secret",
    "full_name": "Alice",
    "email": "alice@example.com",
    "department": None,
    "designation": None,
    "bio": None,
    "is_admin": False,
    "is_blocked": True,
    "has_create_access": False,
    "create_access_expiry": None,
    "workshops_created": 2,
    "created_at": None,
}


def test_find_user_by_username(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = USER_ROW

    user = UserStore(connect).find_by_username("alice")

    assert user.id == 7
    assert user.is_blocked is True
    assert user.workshops_created == 2
    args, _ = cursor.execute.call_args
    assert "WHERE username = %s" in args[0]
    assert args[1] == ("alice",)


def test_find_user_missing(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = None

    assert UserStore(connect).find_by_id(99) is None


def test_insert_user_only_writes_known_columns(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = USER_ROW

    UserStore(connect).insert("alice", "hashed_secret", {"full_name": "Alice", "user_id": 1})

    sql, params = cursor.execute.call_args[0]
    assert "INSERT INTO users (username, password_hash, full_name)" in sql
    assert "ON CONFLICT (username) DO NOTHING" in sql
    assert params == ("alice", "hashed_secret", "Alice")


def test_insert_user_conflict_returns_none(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = None

    assert UserStore(connect).insert("alice", "hashed_secret", {}) is None


def test_update_user(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = USER_ROW

    UserStore(connect).update(7, {"is_blocked": True, "bio": "hi"})

    sql, params = cursor.execute.call_args[0]
    assert "SET is_blocked = %s, bio = %s WHERE user_id = %s" in sql
    assert params == (True, "hi", 7)


def test_update_user_rejects_key_columns(mock_db):
    connect, _ = mock_db
    with pytest.raises(ValueError):
        UserStore(connect).update(7, {"username": "mallory"})


def test_delete_user(mock_db):
    connect, cursor = mock_db
    cursor.rowcount = 1
    assert UserStore(connect).delete(7) is True

    cursor.rowcount = 0
    assert UserStore(connect).delete(7) is False


WORKSHOP_ROW = {
    "workshop_id": 3,
    "event_title": "W1",
    "created_by": "alice",
    "details": {"category": ["AI"], "eventStDate": "2025-03-01"},
}


def test_find_workshop_flattens_row(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = WORKSHOP_ROW

    doc = WorkshopStore(connect).find_by_title("W1")

    assert doc == {
        "id": 3,
        "eventTitle": "W1",
        "createdBy": "alice",
        "category": ["AI"],
        "eventStDate": "2025-03-01",
    }


def test_insert_workshop(mock_db):
    connect, cursor = mock_db
    cursor.fetchone.return_value = {"workshop_id": 3}

    workshop_id = WorkshopStore(connect).insert("W1", "alice", {"category": ["AI"]})

    assert workshop_id == 3
    sql, params = cursor.execute.call_args[0]
    assert "ON CONFLICT (event_title) DO NOTHING" in sql
    assert params[0] == "W1"
    assert params[1] == "alice"
    assert params[2].adapted == {"category": ["AI"]}


def test_list_by_category_sorted(mock_db):
    connect, cursor = mock_db
    cursor.fetchall.return_value = [WORKSHOP_ROW]

    docs = WorkshopStore(connect).list_sorted(category="AI")

    assert [d["eventTitle"] for d in docs] == ["W1"]
    sql, params = cursor.execute.call_args[0]
    assert "details->'category' ? %s" in sql
    assert "ORDER BY details->>'eventStDate' ASC NULLS FIRST" in sql
    assert params == ("AI",)


def test_replace_details_missing_row(mock_db):
    connect, cursor = mock_db
    cursor.rowcount = 0

    assert WorkshopStore(connect).replace_details("W1", {"eventStTime": "2pm"}) is False


def test_delete_workshop(mock_db):
    connect, cursor = mock_db
    cursor.rowcount = 1

    assert WorkshopStore(connect).delete("W1") is True
    sql, params = cursor.execute.call_args[0]
    assert params == ("W1",)
