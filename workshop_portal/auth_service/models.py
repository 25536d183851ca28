"""
User record and the request schemas of the user API.

Rows come out of the `users` table in snake_case; the API speaks the
camelCase field names the web client was written against.
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def parse_flag(value: Any) -> bool:
    """
    Interpret a legacy flag value.

    Older records and clients send "true"/"false" strings; only True or the
    string "true" (any case) count as set.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def _iso(value: Any) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass
class User:
    """A user account as stored in the credential store."""

    id: int
    username: str
    password_hash: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    bio: Optional[str] = None
    is_admin: bool = False
    is_blocked: bool = False
    has_create_access: bool = False
    create_access_expiry: Optional[str] = None
    workshops_created: int = 0
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "User":
        return cls(
            id=row["user_id"],
            username=row["username"],
            password_hash=row["password_hash"],
            full_name=row.get("full_name"),
            email=row.get("email"),
            department=row.get("department"),
            designation=row.get("designation"),
            bio=row.get("bio"),
            is_admin=parse_flag(row.get("is_admin")),
            is_blocked=parse_flag(row.get("is_blocked")),
            has_create_access=parse_flag(row.get("has_create_access")),
            create_access_expiry=_iso(row.get("create_access_expiry")),
            workshops_created=row.get("workshops_created") or 0,
            created_at=_iso(row.get("created_at")),
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize for API responses. The password hash is never included."""
        return {
            "id": self.id,
            "username": self.username,
            "fullName": self.full_name,
            "email": self.email,
            "department": self.department,
            "designation": self.designation,
            "bio": self.bio,
            "isAdmin": self.is_admin,
            "isBlocked": self.is_blocked,
            "hasCreateAccess": self.has_create_access,
            "createAccessExpiry": self.create_access_expiry,
            "workshopsCreated": self.workshops_created,
            "createdAt": self.created_at,
        }

    def copy(self, **changes) -> "User":
        data = asdict(self)
        data.update(changes)
        return User(**data)


# Profile fields a user may change on their own record, API name -> column.
PROFILE_FIELDS = {
    "fullName": "full_name",
    "email": "email",
    "department": "department",
    "designation": "designation",
    "bio": "bio",
}


class ProfileFields(BaseModel):
    """Optional profile strings accepted at signup and on profile update."""

    model_config = ConfigDict(extra="ignore")

    fullName: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    bio: Optional[str] = None

    def to_columns(self) -> Dict[str, str]:
        """Non-empty values keyed by column name."""
        return {
            PROFILE_FIELDS[key]: value
            for key, value in self.model_dump().items()
            if value
        }


class SignupRequest(ProfileFields):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SigninRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = ""
    password: str = ""


class PasswordChangeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    currentPassword: str = ""
    newPassword: str = ""


class DeleteAccountRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    password: str = ""
