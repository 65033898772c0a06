"""
Eligibility checks for a leave request candidate.

Every check runs; the result lists all violations so the caller can report
them per field, the way the application form does.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional

from app.core.exceptions import ErrorKind, ValidationIssue
from app.models.leave_request import LeaveStatus
from app.schemas.leave import LeaveCandidate
from app.services.leave_balance import compute_balances, leave_duration
from app.services.leave_catalog import LeaveCatalog

REQUIRED_FIELDS = ("from_date", "to_date", "leave_type", "reason")

FIELD_LABELS = {
    "from_date": "From date",
    "to_date": "To date",
    "leave_type": "Leave type",
    "reason": "Reason",
}


class ValidationResult:
    def __init__(self, issues: Optional[List[ValidationIssue]] = None):
        self.issues = issues or []

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def kinds(self) -> List[ErrorKind]:
        return [issue.kind for issue in self.issues]

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self):
        return "ValidationResult(ok)" if self.ok else f"ValidationResult({[k.value for k in self.kinds]})"


def _ranges_overlap(a_from: date, a_to: date, b_from: date, b_to: date) -> bool:
    return a_from <= b_to and b_from <= a_to


def _is_missing(candidate: LeaveCandidate, field: str) -> bool:
    value = getattr(candidate, field)
    if isinstance(value, str):
        return not value.strip()
    return value is None


def validate(
    candidate: LeaveCandidate,
    history: Iterable,
    catalog: LeaveCatalog,
    balances: Optional[Dict[str, int]] = None,
    today: Optional[date] = None,
) -> ValidationResult:
    """
    Check a candidate against the employee's history.

    `history` must not contain the candidate. `balances` may be passed when
    the caller already computed them over the same history.
    """
    history = list(history)
    today = today or date.today()
    issues: List[ValidationIssue] = []

    # 1. Required fields
    for field in REQUIRED_FIELDS:
        if _is_missing(candidate, field):
            issues.append(ValidationIssue(
                kind=ErrorKind.MISSING_FIELD,
                field=field,
                message=f"{FIELD_LABELS[field]} is required",
            ))

    from_date, to_date = candidate.from_date, candidate.to_date

    # 2. Start date in the past
    if from_date is not None and from_date < today:
        issues.append(ValidationIssue(
            kind=ErrorKind.PAST_DATE,
            field="from_date",
            message="From date cannot be in the past",
        ))

    # 3. Range order
    range_valid = from_date is not None and to_date is not None
    if range_valid and to_date < from_date:
        range_valid = False
        issues.append(ValidationIssue(
            kind=ErrorKind.INVALID_RANGE,
            field="to_date",
            message="To date must not be before from date",
        ))

    # 4. Catalog membership
    leave_type = None
    if not _is_missing(candidate, "leave_type"):
        if candidate.leave_type in catalog:
            leave_type = catalog.get(candidate.leave_type)
        else:
            issues.append(ValidationIssue(
                kind=ErrorKind.UNKNOWN_LEAVE_TYPE,
                field="leave_type",
                message=f"Unknown leave type: {candidate.leave_type}",
            ))

    # Balance and overlap need a usable range and a known type
    if not range_valid or leave_type is None:
        return ValidationResult(issues)

    # 5. Balance sufficiency
    if balances is None or leave_type.code.value not in balances:
        balances = compute_balances(history, catalog)
    available = balances[leave_type.code.value]
    requested = leave_duration(from_date, to_date)
    if requested > available:
        issues.append(ValidationIssue(
            kind=ErrorKind.INSUFFICIENT_BALANCE,
            field="leave_type",
            available=available,
            requested=requested,
            message=f"Insufficient {leave_type.display_name} balance. Requested: {requested}, Available: {available}",
        ))

    # 6. Non-combinable types may not overlap any live request
    if not leave_type.combinable:
        for existing in history:
            if existing.status == LeaveStatus.REJECTED:
                continue
            if _ranges_overlap(from_date, to_date, existing.from_date, existing.to_date):
                issues.append(ValidationIssue(
                    kind=ErrorKind.NON_COMBINABLE_OVERLAP,
                    field="from_date",
                    message=(
                        f"{leave_type.display_name} cannot be combined with other leave; "
                        f"overlaps {existing.leave_type} {existing.from_date}..{existing.to_date}"
                    ),
                ))
                break

    return ValidationResult(issues)
