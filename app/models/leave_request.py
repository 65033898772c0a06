from sqlalchemy import Column, Integer, String, Date, DateTime, Text
from sqlalchemy.sql import func
from app.database import Base
import enum

class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String, index=True, nullable=False) # Ledger key
    leave_type = Column(String, index=True, nullable=False) # Catalog code, e.g. "CL"
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String, default=LeaveStatus.PENDING.value, nullable=False, index=True) # Enum value stored as string for SQLite
    applied_date = Column(Date, nullable=False)
    admin_remarks = Column(Text, nullable=True) # Only set by the decision
    decided_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def days_count(self) -> int:
        return (self.to_date - self.from_date).days + 1

    def __repr__(self):
        return f"<LeaveRequest {self.id} {self.employee_id} {self.leave_type} {self.from_date}..{self.to_date} {self.status}>"
