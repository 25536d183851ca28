import jwt
import pytest
from datetime import datetime, timedelta, timezone

from workshop_portal.auth_service.models import User, parse_flag
from workshop_portal.auth_service.utils import AuthGate, TokenService
from workshop_portal.errors import Forbidden, InvalidToken, NotFound, Unauthenticated
from workshop_portal.tests.fakes import MemoryUserStore


@pytest.fixture
def tokens():
    return TokenService("test_secret")


@pytest.fixture
def gate(tokens):
    users = MemoryUserStore()
    users.insert("alice", "hash", {})
    users.insert("mallory", "hash", {})
    mallory = users.find_by_username("mallory")
    users.update(mallory.id, {"is_blocked": True})
    return AuthGate(tokens, users)


def test_issue_token_carries_only_username(tokens):
    token = tokens.issue("alice")

    payload = jwt.decode(token, "test_secret", algorithms=["HS256"])
    assert payload == {"username": "alice"}


def test_issue_token_is_deterministic(tokens):
    assert tokens.issue("alice") == tokens.issue("alice")
    assert tokens.issue("alice") != tokens.issue("bob")


def test_verify_token(tokens):
    assert tokens.verify(tokens.issue("alice")) == "alice"


def test_verify_token_invalid(tokens):
    with pytest.raises(InvalidToken):
        tokens.verify("invalid.token.here")


def test_verify_token_wrong_secret(tokens):
    forged = jwt.encode({"username": "alice"}, "other_secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        tokens.verify(forged)


def test_verify_token_tampered(tokens):
    header, payload, signature = tokens.issue("alice").split(".")
    other_payload = tokens.issue("admin").split(".")[1]
    with pytest.raises(InvalidToken):
        tokens.verify(f"{header}.{other_payload}.{signature}")


def test_verify_token_unsigned(tokens):
    unsigned = jwt.encode({"username": "alice"}, key=None, algorithm="none")
    with pytest.raises(InvalidToken):
        tokens.verify(unsigned)


def test_verify_token_without_username(tokens):
    token = jwt.encode({"sub": 1}, "test_secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_expiring_tokens():
    tokens = TokenService("test_secret", expiration_minutes=30)
    payload = jwt.decode(tokens.issue("alice"), "test_secret", algorithms=["HS256"])
    assert "exp" in payload
    assert "iat" in payload

    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    expired = jwt.encode({"username": "alice", "exp": past}, "test_secret", algorithm="HS256")
    with pytest.raises(InvalidToken, match="expired"):
        tokens.verify(expired)


def test_token_service_requires_secret():
    with pytest.raises(RuntimeError):
        TokenService("")


def test_authenticate_valid(gate, tokens):
    user = gate.authenticate(f"Bearer {tokens.issue('alice')}")
    assert user.username == "alice"


def test_authenticate_missing_header(gate):
    with pytest.raises(Unauthenticated, match="No token provided"):
        gate.authenticate(None)


def test_authenticate_invalid_format(gate, tokens):
    with pytest.raises(Unauthenticated):
        gate.authenticate(f"Token {tokens.issue('alice')}")


def test_authenticate_invalid_token(gate):
    with pytest.raises(Unauthenticated, match="Invalid token"):
        gate.authenticate("Bearer not-a-jwt")


def test_authenticate_deleted_user(gate, tokens):
    with pytest.raises(NotFound):
        gate.authenticate(f"Bearer {tokens.issue('ghost')}")


def test_authenticate_blocked_user(gate, tokens):
    with pytest.raises(Forbidden, match="blocked"):
        gate.authenticate(f"Bearer {tokens.issue('mallory')}")


def test_require_admin():
    admin = User(id=1, username="root", password_hash="x", is_admin=True)
    member = User(id=2, username="alice", password_hash="x")

    assert AuthGate.require_admin(admin) is admin
    with pytest.raises(Forbidden, match="Admin access required"):
        AuthGate.require_admin(member)


@pytest.mark.parametrize("value, expected", [
    (True, True),
    ("true", True),
    ("TRUE", True),
    (False, False),
    ("false", False),
    ("yes", False),
    (None, False),
    (1, False),
])
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected
