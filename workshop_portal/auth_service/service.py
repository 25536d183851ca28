"""
User account operations: signup, signin, self-service profile changes and
admin user management.
"""

import logging
from datetime import date
from typing import Any, List, Optional, Tuple

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from workshop_portal.auth_service.models import ProfileFields, User, parse_flag
from workshop_portal.auth_service.store import UserStore
from workshop_portal.auth_service.utils import TokenService
from workshop_portal.errors import (
    BadRequest,
    Conflict,
    Forbidden,
    InvalidCredentials,
    NoChange,
    NotFound,
    ServerError,
)

ph = PasswordHasher()


def check_password(password_hash: str, password: str) -> bool:
    """Verify a password against its argon2 hash without raising."""
    try:
        return ph.verify(password_hash, password or "")
    except (VerificationError, InvalidHashError):
        return False


class UserService:
    def __init__(self, users: UserStore, tokens: TokenService):
        self.users = users
        self.tokens = tokens

    # --- PUBLIC ---

    def signup(self, username: str, password: str, profile: Optional[ProfileFields] = None) -> User:
        """
        Register a new user with default (non-admin, unblocked) flags.

        Raises:
            BadRequest: Username or password missing.
            Conflict: Username already taken.
        """
        username = (username or "").strip()
        if not username or not password:
            raise BadRequest("Username and password required")

        if self.users.find_by_username(username) is not None:
            raise Conflict("User already exists!!")

        columns = profile.to_columns() if profile else {}
        user = self.users.insert(username, ph.hash(password), columns)
        if user is None:
            # Lost a race against a concurrent signup for the same name
            raise Conflict("User already exists!!")

        logging.info(f"[Users] Created user {username}")
        return user

    def signin(self, username: str, password: str) -> Tuple[str, User]:
        """
        Check credentials and issue a token.

        Raises:
            InvalidCredentials: Unknown user or wrong password.
            Forbidden: The user is blocked.
        """
        user = self.users.find_by_username((username or "").strip())
        if user is None:
            raise InvalidCredentials("Invalid Credentials - User not found in DB")
        if user.is_blocked:
            raise Forbidden("You have been blocked. Please contact admin for more details!!")
        if not check_password(user.password_hash, password):
            raise InvalidCredentials("Incorrect Password!! Please try again")

        return self.tokens.issue(user.username), user

    # --- SELF SERVICE ---

    def update_profile(self, user: User, fields: ProfileFields) -> User:
        """
        Overwrite the caller's profile fields that were supplied non-empty.

        Raises:
            NoChange: Nothing supplied differs from what is stored.
        """
        changes = {
            column: value
            for column, value in fields.to_columns().items()
            if getattr(user, column) != value
        }
        if not changes:
            raise NoChange("No changes made to profile")

        updated = self.users.update(user.id, changes)
        if updated is None:
            raise NotFound("User not found")
        return updated

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Replace the caller's password after confirming the current one.

        Raises:
            InvalidCredentials: current_password does not match.
            BadRequest: new_password is empty.
        """
        if not check_password(user.password_hash, current_password):
            raise InvalidCredentials("Current password is incorrect")
        if not new_password:
            raise BadRequest("New password required")

        if self.users.update(user.id, {"password_hash": ph.hash(new_password)}) is None:
            raise BadRequest("Password could not be updated")
        logging.info(f"[Users] Password changed for {user.username}")

    def delete_account(self, user: User, password: str) -> None:
        """
        Permanently delete the caller's own account.

        Raises:
            InvalidCredentials: password does not match.
        """
        if not check_password(user.password_hash, password):
            raise InvalidCredentials("Password is incorrect")
        if not self.users.delete(user.id):
            raise BadRequest("Could not delete account")
        logging.info(f"[Users] {user.username} deleted their account")

    # --- ADMIN ---

    def list_users(self) -> List[User]:
        return self.users.list_all()

    def _load_other(self, admin: User, target_id: int, action: str) -> User:
        target = self.users.find_by_id(target_id)
        if target is None:
            raise NotFound("User not found")
        if target.id == admin.id:
            raise BadRequest(f"You cannot {action} your own account")
        return target

    def toggle_block(self, admin: User, target_id: int, desired: Any = None) -> User:
        """
        Block or unblock another user.

        Args:
            desired: New block state; bool or legacy "true"/"false". When None
                the current state is inverted.

        Raises:
            NotFound: No such user.
            BadRequest: An admin tried to block themselves.
        """
        target = self._load_other(admin, target_id, "block")
        is_blocked = (not target.is_blocked) if desired is None else parse_flag(desired)

        updated = self.users.update(target.id, {"is_blocked": is_blocked})
        if updated is None:
            raise NotFound("User not found")

        state = "blocked" if is_blocked else "unblocked"
        logging.info(f"[Users] {admin.username} {state} {target.username}")
        return updated

    def delete_user(self, admin: User, target_id: int) -> User:
        """
        Delete another user.

        Raises:
            NotFound: No such user.
            BadRequest: An admin tried to delete themselves this way.
        """
        target = self._load_other(admin, target_id, "delete")
        if not self.users.delete(target.id):
            raise ServerError("Failed to delete user")
        logging.info(f"[Users] {admin.username} deleted {target.username}")
        return target

    def grant_create_access(self, admin: User, target_id: int, expiry_date: Optional[str] = None) -> User:
        """
        Allow a user to create workshops, optionally until `expiry_date`
        (ISO date, inclusive).

        Raises:
            NotFound: No such user.
            BadRequest: expiry_date is not an ISO date.
        """
        if expiry_date:
            try:
                expiry_date = date.fromisoformat(str(expiry_date)[:10]).isoformat()
            except ValueError:
                raise BadRequest("expiryDate must be an ISO date (YYYY-MM-DD)")

        updated = self.users.update(target_id, {
            "has_create_access": True,
            "create_access_expiry": expiry_date or None,
        })
        if updated is None:
            raise NotFound("User not found")

        logging.info(f"[Users] {admin.username} granted create access to {updated.username} until {expiry_date}")
        return updated

    def revoke_create_access(self, admin: User, target_id: int) -> User:
        """
        Raises:
            NotFound: No such user.
        """
        updated = self.users.update(target_id, {
            "has_create_access": False,
            "create_access_expiry": None,
        })
        if updated is None:
            raise NotFound("User not found")

        logging.info(f"[Users] {admin.username} revoked create access from {updated.username}")
        return updated
