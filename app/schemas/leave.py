from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import Dict, List, Optional
import enum

# Wire format is camelCase; field names are accepted on input too
_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DecisionAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"


class LeaveCandidate(BaseModel):
    """Submission body. Presence is checked by the validator, not here."""
    model_config = _camel

    from_date: Optional[date] = None
    to_date: Optional[date] = None
    leave_type: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, value):
        # Form fields left empty arrive as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LeaveRequestResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    employee_id: str
    from_date: date
    to_date: date
    days_count: int
    leave_type: str
    reason: str
    status: str
    applied_date: date
    admin_remarks: Optional[str] = None
    decided_at: Optional[datetime] = None


class LeaveDecisionRequest(BaseModel):
    model_config = _camel

    action: DecisionAction
    remarks: Optional[str] = None


class LeaveHistoryResponse(BaseModel):
    model_config = _camel

    employee_id: str
    requests: List[LeaveRequestResponse]
    balances: Dict[str, int]


class LeaveTypeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    code: str
    display_name: str
    annual_limit: int
    combinable: bool
    notes: str


class LeaveBalanceResponse(BaseModel):
    model_config = _camel

    leave_type: str
    display_name: str
    total_days: int
    used_days: int
    remaining_days: int


class LeaveSummaryResponse(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
