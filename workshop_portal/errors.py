"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these at the point of detection; the gateway turns them into
a JSON `{"message": ...}` response with the matching status code.
"""


class PortalError(Exception):
    """Base class for every failure that maps onto an HTTP response."""

    status_code = 500
    default_message = "Error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"message": self.message}


class InvalidToken(PortalError):
    status_code = 401
    default_message = "Invalid token, authentication failed"


class Unauthenticated(PortalError):
    status_code = 401
    default_message = "No token provided, access denied"


class InvalidCredentials(PortalError):
    status_code = 401
    default_message = "Invalid Credentials"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Permission denied"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class Conflict(PortalError):
    status_code = 409
    default_message = "Already exists"


class BadRequest(PortalError):
    status_code = 400
    default_message = "Bad request"


class NoChange(BadRequest):
    default_message = "No changes made"


class NotModified(PortalError):
    status_code = 304
    default_message = "No changes made to the workshop"


class ServerError(PortalError):
    status_code = 500
    default_message = "Internal Server Error"
