import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ErrorKind(str, enum.Enum):
    MISSING_FIELD = "MISSING_FIELD"
    PAST_DATE = "PAST_DATE"
    INVALID_RANGE = "INVALID_RANGE"
    UNKNOWN_LEAVE_TYPE = "UNKNOWN_LEAVE_TYPE"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    NON_COMBINABLE_OVERLAP = "NON_COMBINABLE_OVERLAP"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_DECIDED = "ALREADY_DECIDED"


class ValidationIssue(BaseModel):
    """One rejected aspect of a leave request candidate."""
    kind: ErrorKind
    message: str
    field: Optional[str] = None
    available: Optional[int] = None
    requested: Optional[int] = None

    def to_error(self) -> Dict[str, Any]:
        error = {"code": self.kind.value, "msg": self.message}
        if self.field is not None:
            error["field"] = self.field
        if self.kind == ErrorKind.INSUFFICIENT_BALANCE:
            error["available"] = self.available
            error["requested"] = self.requested
        return error


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

    def errors(self) -> List[Dict[str, Any]]:
        return [{"msg": self.message, "code": self.error_code}]


class LeaveValidationError(AppException):
    """Raised when a submission fails one or more eligibility checks."""
    def __init__(self, issues: List[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(
            message="; ".join(issue.message for issue in self.issues),
            status_code=422,
            error_code="LEAVE_VALIDATION_FAILED",
            details={"kinds": [issue.kind.value for issue in self.issues]}
        )

    @property
    def kinds(self) -> List[ErrorKind]:
        return [issue.kind for issue in self.issues]

    def errors(self) -> List[Dict[str, Any]]:
        return [issue.to_error() for issue in self.issues]


class UnknownLeaveTypeError(AppException):
    def __init__(self, code: str):
        self.code = code
        super().__init__(
            message=f"Unknown leave type: {code}",
            status_code=422,
            error_code=ErrorKind.UNKNOWN_LEAVE_TYPE.value,
            details={"leave_type": code}
        )


class LeaveRequestNotFoundError(AppException):
    def __init__(self, request_id: int):
        super().__init__(
            message=f"Leave request {request_id} not found",
            status_code=404,
            error_code=ErrorKind.NOT_FOUND.value,
            details={"request_id": request_id}
        )


class LeaveAlreadyDecidedError(AppException):
    def __init__(self, request_id: int, status: str):
        super().__init__(
            message=f"Leave request {request_id} was already {status}",
            status_code=409,
            error_code=ErrorKind.ALREADY_DECIDED.value,
            details={"request_id": request_id, "status": status}
        )
