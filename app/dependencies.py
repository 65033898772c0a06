"""
Request-scoped dependencies shared by the routers.

Authentication is out of scope: the caller's employee identity is taken
from the X-Employee-ID header, falling back to the configured default.
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.config import settings
from app.database import get_db
from app.services.leave_catalog import LeaveCatalog, get_catalog
from app.services.leave_ledger import LeaveLedger


def get_employee_id(x_employee_id: Optional[str] = Header(default=None)) -> str:
    if x_employee_id and x_employee_id.strip():
        return x_employee_id.strip()
    return settings.default_employee_id


def get_leave_catalog() -> LeaveCatalog:
    return get_catalog()


def get_ledger(
    db: Session = Depends(get_db),
    catalog: LeaveCatalog = Depends(get_leave_catalog),
) -> LeaveLedger:
    return LeaveLedger(db, catalog)


__all__ = [
    "get_employee_id",
    "get_leave_catalog",
    "get_ledger",
]
