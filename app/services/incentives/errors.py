from typing import Any, Dict, Optional
from fastapi import status


class IncentiveError(Exception):
    """Base class for failures of the daily metrics operation.

    Each subclass knows its HTTP status and how its response body looks.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An internal server error occurred"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message}: {detail}")

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.detail is not None:
            body["error"] = self.detail
        return body


class Unauthenticated(IncentiveError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required."

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class Forbidden(IncentiveError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have permission to perform this action."

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class MissingField(IncentiveError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Staff ID and date are required."


class NotFound(IncentiveError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Staff not found."


class ValidationFailed(IncentiveError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation Error"


class InternalError(IncentiveError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An internal server error occurred"


class StoreUnavailable(InternalError):
    """The database timed out or could not be reached. Safe for the caller to retry."""
