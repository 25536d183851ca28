"""
Workshop request schemas.

Only the keys declared here are stored; anything else in a request body is
dropped. `WorkshopPatch` has no `eventTitle` or `createdBy`, so a patch can
never touch the key or the owner.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PersonDetail(BaseModel):
    """An organiser or resource person."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    designation: str = ""
    department: Optional[str] = None


class WorkshopPatch(BaseModel):
    """Every patchable workshop field; unset fields are left untouched."""

    model_config = ConfigDict(extra="ignore")

    eventStDate: Optional[str] = None
    eventEndDate: Optional[str] = None
    eventStTime: Optional[str] = None
    category: Optional[List[str]] = None

    eventOrganiserDetails: Optional[List[PersonDetail]] = None
    resourcePersonDetails: Optional[List[PersonDetail]] = None
    editAccessUsers: Optional[List[str]] = None

    eventPosterLinks: Optional[List[str]] = None
    brochureLinks: Optional[List[str]] = None
    circularLinks: Optional[List[str]] = None
    scheduleLinks: Optional[List[str]] = None
    photosLinks: Optional[List[str]] = None
    permissionLetterLinks: Optional[List[str]] = None
    budgetDataLinks: Optional[List[str]] = None
    participantsLinks: Optional[List[str]] = None
    certificateLinks: Optional[List[str]] = None
    resourcePersonDocLinks: Optional[List[str]] = None
    attendanceSheetLinks: Optional[List[str]] = None
    participantInfo: Optional[List[str]] = None

    thumbnail: Optional[str] = None
    feedbackLink: Optional[str] = None
    registrationLink: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """The fields the client actually sent, as plain JSON values."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class WorkshopCreate(WorkshopPatch):
    """A new workshop. The title is the unique key and cannot change later."""

    eventTitle: str = Field(default="")

    def document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"eventTitle"})
