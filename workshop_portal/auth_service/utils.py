"""
Shared authentication helpers.
Provides token creation/verification and the request gates
(login required, admin required).
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Callable, Optional

import jwt
from flask import request

from workshop_portal.auth_service.models import User
from workshop_portal.auth_service.store import UserStore
from workshop_portal.errors import Forbidden, InvalidToken, NotFound, Unauthenticated

ALGORITHM = "HS256"


class TokenService:
    """
    Issues and verifies signed identity tokens.

    Tokens carry only the username. Without `expiration_minutes` they never
    expire and are identical for the same username and secret.
    """

    def __init__(self, secret: str, expiration_minutes: Optional[int] = None):
        if not secret:
            raise RuntimeError("JWT_SECRET is missing. Set it in .env")
        self._secret = secret
        self._expiration_minutes = expiration_minutes

    def issue(self, username: str) -> str:
        """
        Generate a JWT for the given username.

        Returns:
            str: Encoded JWT string.
        """
        payload = {"username": username}

        if self._expiration_minutes:
            now = datetime.now(timezone.utc)
            payload["iat"] = now
            payload["exp"] = now + timedelta(minutes=self._expiration_minutes)

        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        """
        Validate a JWT and return the username it was issued for.

        Raises:
            InvalidToken: Malformed, tampered, unsigned or expired token,
                or one without a username claim.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token expired, please sign in again")
        except jwt.InvalidTokenError:
            raise InvalidToken()

        username = payload.get("username")
        if not isinstance(username, str) or not username:
            raise InvalidToken()
        return username


class AuthGate:
    """
    Per-request authentication backed by the credential store.

    `login_required` and `admin_required` decorate view functions; the
    authenticated `User` is passed to the view as its first argument.
    """

    def __init__(self, tokens: TokenService, users: UserStore):
        self.tokens = tokens
        self.users = users

    def authenticate(self, authorization: Optional[str]) -> User:
        """
        Resolve an Authorization header to a live, unblocked user.

        Raises:
            Unauthenticated: Header missing, not a bearer token, or token invalid.
            NotFound: Token names a user that no longer exists.
            Forbidden: The user is blocked.
        """
        if not authorization or not authorization.startswith("Bearer "):
            raise Unauthenticated()

        token = authorization.split(" ", 1)[1].strip()
        try:
            username = self.tokens.verify(token)
        except InvalidToken as e:
            raise Unauthenticated(e.message)

        user = self.users.find_by_username(username)
        if user is None:
            raise NotFound("User not found")

        if user.is_blocked:
            logging.warning(f"[Auth] Rejected blocked user {username}")
            raise Forbidden("Your account has been blocked. Please contact admin.")

        return user

    @staticmethod
    def require_admin(user: User) -> User:
        """Raises Forbidden unless the user is an admin."""
        if not user.is_admin:
            logging.warning(f"[Auth] Admin access denied for {user.username}")
            raise Forbidden("Admin access required")
        return user

    def login_required(self, view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = self.authenticate(request.headers.get("Authorization"))
            return view(user, *args, **kwargs)

        return wrapper

    def admin_required(self, view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = self.require_admin(self.authenticate(request.headers.get("Authorization")))
            return view(user, *args, **kwargs)

        return wrapper
