from datetime import date
from typing import Dict, Iterable

from app.models.leave_request import LeaveStatus
from app.services.leave_catalog import LeaveCatalog


def leave_duration(from_date: date, to_date: date) -> int:
    """Inclusive day count; 2025-01-15..2025-01-17 is 3 days."""
    return (to_date - from_date).days + 1


def compute_used(history: Iterable, catalog: LeaveCatalog) -> Dict[str, int]:
    """
    Approved days per leave code. Pending and rejected entries are ignored.
    """
    used = {code: 0 for code in catalog.codes()}
    for request in history:
        if request.status != LeaveStatus.APPROVED:
            continue
        # History is only ever admitted through the validator
        assert request.leave_type in used, f"Ledger holds uncatalogued leave type {request.leave_type!r}"
        used[request.leave_type] += leave_duration(request.from_date, request.to_date)
    return used


def compute_balances(history: Iterable, catalog: LeaveCatalog) -> Dict[str, int]:
    """
    Remaining days per leave code: annual limit minus approved days.
    Can go negative after an administrative override; callers report it as-is.
    """
    used = compute_used(history, catalog)
    return {
        leave_type.code.value: leave_type.annual_limit - used[leave_type.code.value]
        for leave_type in catalog
    }
