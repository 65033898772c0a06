"""
Per-employee leave ledger.

The ledger is the only write path for leave requests: submissions are
validated and admitted as pending, and decisions move a pending request to a
terminal state exactly once. Writes for one employee are serialized by a
process-wide lock so a balance check and the insert it guards cannot
interleave with another submission for the same employee.
"""
import threading
import weakref
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import (
    LeaveAlreadyDecidedError,
    LeaveRequestNotFoundError,
    LeaveValidationError,
)
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.schemas.leave import DecisionAction, LeaveCandidate
from app.services.base import BaseService
from app.services.leave_balance import compute_balances, compute_used
from app.services.leave_catalog import LeaveCatalog, get_catalog
from app.services.leave_validator import validate

_registry_lock = threading.Lock()
# Entries vanish once no thread holds a reference to the lock
_employee_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()


def employee_lock(employee_id: str) -> threading.Lock:
    with _registry_lock:
        lock = _employee_locks.get(employee_id)
        if lock is None:
            lock = _employee_locks[employee_id] = threading.Lock()
        return lock


class LeaveLedger(BaseService):

    def __init__(
        self,
        db: Session,
        catalog: Optional[LeaveCatalog] = None,
        clock: Callable[[], date] = date.today,
    ):
        super().__init__(db)
        self.catalog = catalog or get_catalog()
        self.clock = clock

    # --- Reads ---

    def history(self, employee_id: str, status: Optional[Union[str, LeaveStatus]] = None) -> List[LeaveRequest]:
        """Newest first."""
        query = self.db.query(LeaveRequest).filter(LeaveRequest.employee_id == employee_id)
        if status:
            query = query.filter(LeaveRequest.status == LeaveStatus(status).value)
        return query.order_by(LeaveRequest.id.desc()).all()

    def get(self, request_id: int) -> LeaveRequest:
        request = self.db.get(LeaveRequest, request_id)
        if request is None:
            raise LeaveRequestNotFoundError(request_id)
        return request

    def pending_requests(self) -> List[LeaveRequest]:
        """Admin review queue across all employees, oldest first."""
        return (
            self.db.query(LeaveRequest)
            .filter(LeaveRequest.status == LeaveStatus.PENDING.value)
            .order_by(LeaveRequest.id.asc())
            .all()
        )

    def compute_balances(self, employee_id: str) -> Dict[str, int]:
        return compute_balances(self.history(employee_id), self.catalog)

    def balance_report(self, employee_id: str) -> List[dict]:
        used = compute_used(self.history(employee_id), self.catalog)
        return [
            {
                "leave_type": leave_type.code.value,
                "display_name": leave_type.display_name,
                "total_days": leave_type.annual_limit,
                "used_days": used[leave_type.code.value],
                "remaining_days": leave_type.annual_limit - used[leave_type.code.value],
            }
            for leave_type in self.catalog
        ]

    def summary(self, employee_id: Optional[str] = None) -> Dict[str, int]:
        query = self.db.query(LeaveRequest.status, func.count(LeaveRequest.id))
        if employee_id:
            query = query.filter(LeaveRequest.employee_id == employee_id)
        counts = {status.value: 0 for status in LeaveStatus}
        for status, count in query.group_by(LeaveRequest.status).all():
            counts[status] = count
        return {"total": sum(counts.values()), **counts}

    # --- Writes ---

    def submit(self, employee_id: str, candidate: LeaveCandidate) -> LeaveRequest:
        """
        Validate and admit a new pending request.
        Raises LeaveValidationError listing every failed check.
        """
        with employee_lock(employee_id):
            history = self.history(employee_id)
            today = self.clock()
            result = validate(candidate, history, self.catalog, today=today)
            if not result.ok:
                self.log_warning(
                    f"Leave request rejected for {employee_id}: {[kind.value for kind in result.kinds]}",
                    employee_id=employee_id,
                )
                raise LeaveValidationError(result.issues)

            leave = LeaveRequest(
                employee_id=employee_id,
                leave_type=self.catalog.get(candidate.leave_type).code.value,
                from_date=candidate.from_date,
                to_date=candidate.to_date,
                reason=candidate.reason.strip(),
                status=LeaveStatus.PENDING.value,
                applied_date=today,
            )
            self.db.add(leave)
            self.commit()
            self.db.refresh(leave)

        self.log_info(
            f"Leave request {leave.id} submitted: {leave.leave_type} {leave.from_date}..{leave.to_date}",
            employee_id=employee_id,
        )
        return leave

    def decide(
        self,
        request_id: int,
        action: Union[str, DecisionAction],
        remarks: Optional[str] = None,
    ) -> LeaveRequest:
        """
        Move a pending request to approved or rejected.
        Raises LeaveRequestNotFoundError or LeaveAlreadyDecidedError.
        """
        action = DecisionAction(action)
        employee_id = self.get(request_id).employee_id

        with employee_lock(employee_id):
            # Re-read under the lock; another decision may have landed
            leave = (
                self.db.query(LeaveRequest)
                .populate_existing()
                .filter(LeaveRequest.id == request_id)
                .first()
            )
            if leave.status != LeaveStatus.PENDING.value:
                raise LeaveAlreadyDecidedError(request_id, leave.status)

            leave.status = (
                LeaveStatus.APPROVED.value if action == DecisionAction.APPROVE else LeaveStatus.REJECTED.value
            )
            leave.admin_remarks = remarks or ""
            leave.decided_at = datetime.now(timezone.utc)
            self.commit()
            self.db.refresh(leave)

        self.log_info(f"Leave request {request_id} {leave.status}", employee_id=employee_id)
        return leave
