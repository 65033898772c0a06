"""
Leave type catalog.

The set of leave codes is closed (LeaveTypeCode). The catalog maps each
configured code to its definition and is read-only once built. It is loaded
once per process, either from the built-in defaults or from a JSON file
named by LEAVE_CATALOG_PATH.
"""
import enum
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import settings
from app.core.exceptions import UnknownLeaveTypeError

logger = logging.getLogger(__name__)


class LeaveTypeCode(str, enum.Enum):
    CL = "CL"
    EL = "EL"
    HPL = "HPL"
    SCL = "SCL"
    PL = "PL"
    ML = "ML"
    IL = "IL"
    CCL = "CCL"


class LeaveType(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: LeaveTypeCode
    display_name: str
    annual_limit: int = Field(ge=0)
    combinable: bool = True
    notes: str = ""


DEFAULT_LEAVE_TYPES: List[LeaveType] = [
    LeaveType(code=LeaveTypeCode.CL, display_name="Casual Leave", annual_limit=10, combinable=False,
              notes="Cannot overlap any other leave."),
    LeaveType(code=LeaveTypeCode.EL, display_name="Earned Leave", annual_limit=30),
    LeaveType(code=LeaveTypeCode.HPL, display_name="Half Pay Leave", annual_limit=20),
    LeaveType(code=LeaveTypeCode.SCL, display_name="Special Casual Leave", annual_limit=3, combinable=False,
              notes="Casual leave class; cannot overlap any other leave."),
    LeaveType(code=LeaveTypeCode.PL, display_name="Paternity Leave", annual_limit=15),
    LeaveType(code=LeaveTypeCode.ML, display_name="Maternity Leave", annual_limit=180),
    LeaveType(code=LeaveTypeCode.IL, display_name="Injury Leave", annual_limit=999,
              notes="As per rules; effectively unbounded."),
    LeaveType(code=LeaveTypeCode.CCL, display_name="Child Care Leave", annual_limit=730,
              notes="Limit covers the total service period."),
]


def _coerce_code(code: Union[str, LeaveTypeCode]) -> LeaveTypeCode:
    if isinstance(code, LeaveTypeCode):
        return code
    try:
        return LeaveTypeCode(code)
    except ValueError:
        raise UnknownLeaveTypeError(str(code))


class LeaveCatalog:
    """Read-only mapping from leave code to LeaveType."""

    def __init__(self, leave_types: Iterable[LeaveType]):
        entries: Dict[LeaveTypeCode, LeaveType] = {}
        for leave_type in leave_types:
            if leave_type.code in entries:
                raise ValueError(f"Duplicate leave type code in catalog: {leave_type.code.value}")
            entries[leave_type.code] = leave_type
        self._entries = entries

    def get(self, code: Union[str, LeaveTypeCode]) -> LeaveType:
        leave_code = _coerce_code(code)
        leave_type = self._entries.get(leave_code)
        if leave_type is None:
            raise UnknownLeaveTypeError(leave_code.value)
        return leave_type

    def codes(self) -> List[str]:
        return [code.value for code in self._entries]

    def types(self) -> List[LeaveType]:
        return list(self._entries.values())

    def __contains__(self, code) -> bool:
        try:
            return _coerce_code(code) in self._entries
        except UnknownLeaveTypeError:
            return False

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def load_catalog(path: Optional[Union[str, Path]] = None) -> LeaveCatalog:
    """
    Build a catalog from a JSON file holding a list of leave type objects.
    Without a path the built-in defaults are used.
    """
    if not path:
        return LeaveCatalog(DEFAULT_LEAVE_TYPES)

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    leave_types = []
    for entry in raw:
        # Reject codes outside the closed set before model validation
        code = _coerce_code(entry.get("code", ""))
        leave_types.append(LeaveType(**{**entry, "code": code}))

    logger.info(f"Loaded {len(leave_types)} leave types from {path}")
    return LeaveCatalog(leave_types)


@lru_cache
def get_catalog() -> LeaveCatalog:
    """Process-wide catalog, loaded once from settings."""
    return load_catalog(settings.leave_catalog_path)
