"""Tagged result returned by every mutation."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel


class ErrorKind(str, Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    REQUIRES_ONBOARDING = "requires_onboarding"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_INPUT = "invalid_input"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.NOT_AUTHENTICATED: 401,
    ErrorKind.REQUIRES_ONBOARDING: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.INVALID_INPUT: 400,
}


class ActionResult(BaseModel):
    """
    Ok(value) | Err(kind, detail).

    Callers branch on `success` / `error` instead of catching exceptions, so a
    UI can render "complete onboarding first" rather than a generic failure.
    """
    success: bool
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    data: Optional[Any] = None
    redirect: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None, redirect: Optional[str] = None) -> "ActionResult":
        return cls(success=True, data=data, message=message, redirect=redirect)

    @classmethod
    def err(cls, kind: ErrorKind, message: Optional[str] = None) -> "ActionResult":
        return cls(success=False, error=kind, message=message)

    @property
    def requires_onboarding(self) -> bool:
        return self.error is ErrorKind.REQUIRES_ONBOARDING

    @property
    def http_status(self) -> int:
        if self.success:
            return 303 if self.redirect else 200
        return self.error.http_status

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: {success, requiresOnboarding?, message?, error?, data?, redirect?}."""
        body: dict[str, Any] = {"success": self.success}
        if self.requires_onboarding:
            body["requiresOnboarding"] = True
        if self.error is not None:
            body["error"] = self.error.value
        if self.message is not None:
            body["message"] = self.message
        if self.data is not None:
            body["data"] = self.data
        if self.redirect is not None:
            body["redirect"] = self.redirect
        return body
