"""
Workshop operations: create, read, ownership-checked edit and delete.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from workshop_portal.auth_service.models import User
from workshop_portal.auth_service.store import UserStore
from workshop_portal.errors import (
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    NotModified,
    ServerError,
)
from workshop_portal.workshops_service.models import WorkshopCreate, WorkshopPatch
from workshop_portal.workshops_service.store import WorkshopStore

# Keys that are columns rather than part of the stored details document.
RECORD_KEYS = ("id", "eventTitle", "createdBy")


def creator_first(creator: str, usernames: Optional[List[str]]) -> List[str]:
    """Put the creator at the head of the edit-access list, dropping duplicates and blanks."""
    ordered = [creator]
    for name in usernames or []:
        name = name.strip()
        if name and name not in ordered:
            ordered.append(name)
    return ordered


class WorkshopService:
    """
    Args:
        workshops: Workshop store.
        users: Credential store, used for creation-access bookkeeping.
        require_create_access: When True, non-admins need an unexpired
            create-access grant to create workshops.
    """

    def __init__(self, workshops: WorkshopStore, users: UserStore, require_create_access: bool = False):
        self.workshops = workshops
        self.users = users
        self.require_create_access = require_create_access

    # --- GATES ---

    def _check_create_access(self, user: User) -> None:
        if user.is_admin or not self.require_create_access:
            return

        if not user.has_create_access:
            raise Forbidden("You don't have permission to create workshops. Please contact an administrator.")

        if user.create_access_expiry and date.today() > date.fromisoformat(user.create_access_expiry[:10]):
            self.users.update(user.id, {"has_create_access": False, "create_access_expiry": None})
            logging.info(f"[Workshops] Create access of {user.username} expired and was revoked")
            raise Forbidden("Your workshop creation access has expired. Please contact an administrator to renew.")

    def _load_owned(self, user: User, title: str, action: str) -> Dict[str, Any]:
        """
        Load a workshop the user may mutate: its creator, or any admin.

        Raises:
            NotFound: No workshop with this title.
            Forbidden: The user is neither creator nor admin.
        """
        workshop = self.workshops.find_by_title(title)
        if workshop is None:
            raise NotFound("Workshop not found")

        if workshop["createdBy"] != user.username and not user.is_admin:
            logging.warning(f"[Workshops] {user.username} denied {action} on '{title}'")
            raise Forbidden(f"You don't have permission to {action} this workshop")

        return workshop

    # --- WRITE ---

    def create(self, user: User, fields: WorkshopCreate) -> int:
        """
        Create a workshop owned by `user`.

        Returns:
            int: The new workshop id.

        Raises:
            Forbidden: Create access is required and missing or expired.
            BadRequest: No title.
            Conflict: The title is already taken.
        """
        self._check_create_access(user)

        title = (fields.eventTitle or "").strip()
        if not title:
            raise BadRequest("Workshop title is required")

        if self.workshops.find_by_title(title) is not None:
            raise Conflict("Workshop with same name exists. Use different title")

        details = fields.document()
        details["editAccessUsers"] = creator_first(user.username, fields.editAccessUsers)

        workshop_id = self.workshops.insert(title, user.username, details)
        if workshop_id is None:
            raise Conflict("Workshop with same name exists. Use different title")

        if not user.is_admin:
            self.users.increment_workshops_created(user.id)

        logging.info(f"[Workshops] {user.username} created '{title}'")
        return workshop_id

    def update(self, user: User, title: str, patch: WorkshopPatch) -> Dict[str, Any]:
        """
        Shallow-merge the supplied fields into a workshop.

        Returns:
            dict: The workshop after the update.

        Raises:
            NotFound, Forbidden: See `_load_owned`.
            NotModified: The patch changes nothing.
        """
        workshop = self._load_owned(user, title, "edit")

        changes = patch.changes()
        if "editAccessUsers" in changes:
            changes["editAccessUsers"] = creator_first(workshop["createdBy"], changes["editAccessUsers"])

        current = {k: v for k, v in workshop.items() if k not in RECORD_KEYS}
        merged = {**current, **changes}
        if merged == current:
            raise NotModified()

        if not self.workshops.replace_details(title, merged):
            raise NotFound("Workshop not found")

        logging.info(f"[Workshops] {user.username} edited '{title}'")
        return {**merged, **{k: workshop[k] for k in RECORD_KEYS}}

    def delete(self, user: User, title: str) -> None:
        """
        Raises:
            NotFound, Forbidden: See `_load_owned`.
            ServerError: The row vanished between the check and the delete.
        """
        self._load_owned(user, title, "delete")

        if not self.workshops.delete(title):
            raise ServerError("Failed to delete workshop")

        logging.info(f"[Workshops] {user.username} deleted '{title}'")

    # --- READ ---

    def list_all(self) -> List[Dict[str, Any]]:
        return self.workshops.list_all()

    def list_sorted(self) -> List[Dict[str, Any]]:
        return self.workshops.list_sorted()

    def list_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self.workshops.list_sorted(category=category)

    def list_by_owner(self, user: User) -> List[Dict[str, Any]]:
        return self.workshops.list_by_creator(user.username)

    def get(self, title: str) -> Dict[str, Any]:
        workshop = self.workshops.find_by_title(title)
        if workshop is None:
            raise NotFound("Workshop not found")
        return workshop
