from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    NOT_AUTHORIZED = 100
    USER_NOT_FOUND = 101
    MILESTONE_NOT_FOUND = 102
    # Also returned for a duplicate registration
    MILESTONE_ALREADY_EXISTS = 103
    FOREST_NOT_FOUND = 104
    # Reserved, no operation raises it yet
    FOREST_ALREADY_EXISTS = 105
    PARENT_MILESTONE_NOT_FOUND = 106
    MILESTONE_ALREADY_COMPLETED = 107
    PREREQUISITES_NOT_COMPLETED = 108
    INVALID_PARAMETERS = 109
    INVALID_USER_ROLE = 110
    CHILD_NOT_REGISTERED = 111
    DUPLICATE_RELATIONSHIP = 112

    @property
    def label(self) -> str:
        """CamelCase name used on the wire, e.g. ``NotAuthorized``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


HTTP_STATUS_BY_CODE = {
    ErrorCode.NOT_AUTHORIZED: 403,
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.MILESTONE_NOT_FOUND: 404,
    ErrorCode.MILESTONE_ALREADY_EXISTS: 409,
    ErrorCode.FOREST_NOT_FOUND: 404,
    ErrorCode.FOREST_ALREADY_EXISTS: 409,
    ErrorCode.PARENT_MILESTONE_NOT_FOUND: 404,
    ErrorCode.MILESTONE_ALREADY_COMPLETED: 409,
    ErrorCode.PREREQUISITES_NOT_COMPLETED: 409,
    ErrorCode.INVALID_PARAMETERS: 400,
    ErrorCode.INVALID_USER_ROLE: 400,
    ErrorCode.CHILD_NOT_REGISTERED: 404,
    ErrorCode.DUPLICATE_RELATIONSHIP: 409,
}


class LedgerError(Exception):
    """A rejected ledger operation. Carries exactly one ``ErrorCode``."""

    def __init__(self, code: ErrorCode):
        self.code = ErrorCode(code)
        super().__init__(self.code.label)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_CODE[self.code]

    def to_dict(self) -> dict:
        return {"error": self.code.label, "code": int(self.code)}
