from typing import List, Optional
from fastapi import APIRouter, Depends, Request, status
from app.core.limiter import limiter, SUBMIT_RATE_LIMIT
from app.dependencies import get_employee_id, get_leave_catalog, get_ledger
from app.models.leave_request import LeaveStatus
from app.schemas.leave import (
    LeaveBalanceResponse,
    LeaveCandidate,
    LeaveDecisionRequest,
    LeaveHistoryResponse,
    LeaveRequestResponse,
    LeaveSummaryResponse,
    LeaveTypeResponse,
)
from app.services.leave_catalog import LeaveCatalog
from app.services.leave_ledger import LeaveLedger

router = APIRouter(tags=["leave"])


@router.get("/leave-types", response_model=List[LeaveTypeResponse])
def list_leave_types(catalog: LeaveCatalog = Depends(get_leave_catalog)):
    return [
        LeaveTypeResponse(
            code=leave_type.code.value,
            display_name=leave_type.display_name,
            annual_limit=leave_type.annual_limit,
            combinable=leave_type.combinable,
            notes=leave_type.notes,
        )
        for leave_type in catalog
    ]


@router.post("/leave-requests", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SUBMIT_RATE_LIMIT)
def submit_leave_request(
    request: Request,
    candidate: LeaveCandidate,
    employee_id: str = Depends(get_employee_id),
    ledger: LeaveLedger = Depends(get_ledger),
):
    return ledger.submit(employee_id, candidate)


@router.get("/leave-requests", response_model=LeaveHistoryResponse)
def list_leave_requests(
    status: Optional[LeaveStatus] = None,
    employee_id: str = Depends(get_employee_id),
    ledger: LeaveLedger = Depends(get_ledger),
):
    # Balances always cover the full history, not the filtered view
    return LeaveHistoryResponse(
        employee_id=employee_id,
        requests=[LeaveRequestResponse.model_validate(r) for r in ledger.history(employee_id, status)],
        balances=ledger.compute_balances(employee_id),
    )


@router.get("/leave-requests/pending", response_model=List[LeaveRequestResponse])
def list_pending_requests(ledger: LeaveLedger = Depends(get_ledger)):
    return ledger.pending_requests()


@router.get("/leave-requests/summary", response_model=LeaveSummaryResponse)
def leave_summary(employee_id: Optional[str] = None, ledger: LeaveLedger = Depends(get_ledger)):
    """
    Admin dashboard counts. Organisation-wide unless the employee_id query
    parameter narrows it; the X-Employee-ID caller identity is not used here.
    """
    return ledger.summary(employee_id)


@router.post("/leave-requests/{request_id}/decision", response_model=LeaveRequestResponse)
def decide_leave_request(
    request_id: int,
    decision: LeaveDecisionRequest,
    ledger: LeaveLedger = Depends(get_ledger),
):
    return ledger.decide(request_id, decision.action, decision.remarks)


@router.get("/leave-balances", response_model=List[LeaveBalanceResponse])
def get_leave_balances(
    employee_id: str = Depends(get_employee_id),
    ledger: LeaveLedger = Depends(get_ledger),
):
    return [LeaveBalanceResponse(**row) for row in ledger.balance_report(employee_id)]
