import logging
from datetime import date
from app.core.config import settings
from app.database import SessionLocal
from app.models.leave_request import LeaveRequest, LeaveStatus

logger = logging.getLogger(__name__)

# Historical entries are inserted directly; they predate today and would
# never pass submission validation.
DEMO_HISTORY = [
    {
        "leave_type": "SCL",
        "from_date": date(2024, 1, 5),
        "to_date": date(2024, 1, 7),
        "reason": "Examination",
        "status": LeaveStatus.APPROVED.value,
        "applied_date": date(2024, 1, 1),
        "admin_remarks": "Approved for examination purpose",
    },
    {
        "leave_type": "EL",
        "from_date": date(2024, 1, 15),
        "to_date": date(2024, 1, 17),
        "reason": "Family function",
        "status": LeaveStatus.APPROVED.value,
        "applied_date": date(2024, 1, 10),
        "admin_remarks": "Approved for family function",
    },
    {
        "leave_type": "CL",
        "from_date": date(2024, 2, 20),
        "to_date": date(2024, 2, 22),
        "reason": "Personal work",
        "status": LeaveStatus.PENDING.value,
        "applied_date": date(2024, 2, 18),
    },
]

def init_system_data(session_factory=SessionLocal):
    """
    Seeds the default employee's ledger with demo history when
    SEED_DEMO_DATA is enabled and the ledger is empty.
    """
    if not settings.seed_demo_data:
        return
    db = session_factory()
    try:
        employee_id = settings.default_employee_id
        existing = db.query(LeaveRequest).filter(LeaveRequest.employee_id == employee_id).count()
        if existing:
            return
        logger.info(f"Seeding demo leave history for {employee_id}")
        for entry in DEMO_HISTORY:
            db.add(LeaveRequest(employee_id=employee_id, **entry))
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
