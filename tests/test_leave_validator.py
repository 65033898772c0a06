import pytest
from datetime import date, timedelta
from app.core.exceptions import ErrorKind
from app.models.leave_request import LeaveStatus
from app.schemas.leave import LeaveCandidate
from app.services.leave_validator import validate


def _candidate(leave_type="EL", from_date=date(2025, 3, 2), to_date=date(2025, 3, 4), reason="Family function"):
    return LeaveCandidate(from_date=from_date, to_date=to_date, leave_type=leave_type, reason=reason)


def test_valid_candidate_passes(catalog, today):
    result = validate(_candidate(), [], catalog, today=today)
    assert result.ok
    assert result.issues == []

def test_every_missing_field_is_reported(catalog, today):
    result = validate(LeaveCandidate(reason="   "), [], catalog, today=today)
    assert result.kinds == [ErrorKind.MISSING_FIELD] * 4
    assert [issue.field for issue in result.issues] == ["from_date", "to_date", "leave_type", "reason"]

def test_past_start_date_rejected(catalog, today):
    """A start date before today fails regardless of the other fields."""
    yesterday = today - timedelta(days=1)
    result = validate(_candidate(from_date=yesterday, to_date=yesterday), [], catalog, today=today)
    assert result.kinds == [ErrorKind.PAST_DATE]

def test_past_start_date_reported_alongside_other_errors(catalog, today):
    yesterday = today - timedelta(days=1)
    result = validate(
        LeaveCandidate(from_date=yesterday, leave_type="CL"), [], catalog, today=today
    )
    assert ErrorKind.PAST_DATE in result.kinds
    assert ErrorKind.MISSING_FIELD in result.kinds

def test_start_date_today_is_allowed(catalog, today):
    assert validate(_candidate(from_date=today, to_date=today), [], catalog, today=today).ok

def test_inverted_range_rejected(catalog, today):
    result = validate(_candidate(from_date=date(2025, 3, 5), to_date=date(2025, 3, 4)), [], catalog, today=today)
    assert result.kinds == [ErrorKind.INVALID_RANGE]

def test_unknown_leave_type_rejected(catalog, today):
    result = validate(_candidate(leave_type="**"), [], catalog, today=today)
    assert result.kinds == [ErrorKind.UNKNOWN_LEAVE_TYPE]

def test_insufficient_balance(catalog, today, make_request):
    """Ten approved CL days exhaust the balance; one more day is refused."""
    history = [make_request("CL", date(2025, 1, 6), date(2025, 1, 15), LeaveStatus.APPROVED)]
    result = validate(
        _candidate(leave_type="CL", from_date=date(2025, 3, 2), to_date=date(2025, 3, 2)),
        history, catalog, today=today,
    )
    assert result.kinds == [ErrorKind.INSUFFICIENT_BALANCE]
    issue = result.issues[0]
    assert issue.available == 0
    assert issue.requested == 1

def test_request_exactly_matching_balance_passes(catalog, today):
    result = validate(
        _candidate(leave_type="SCL", from_date=date(2025, 3, 2), to_date=date(2025, 3, 4)),
        [], catalog, today=today,
    )
    assert result.ok

def test_precomputed_balances_are_used(catalog, today):
    balances = {code: 0 for code in catalog.codes()}
    result = validate(_candidate(), [], catalog, balances=balances, today=today)
    assert result.kinds == [ErrorKind.INSUFFICIENT_BALANCE]

def test_balances_missing_the_code_are_recomputed(catalog, today, make_request):
    history = [make_request("SCL", date(2025, 1, 6), date(2025, 1, 8), LeaveStatus.APPROVED)]
    candidate = _candidate(leave_type="SCL", from_date=date(2025, 3, 2), to_date=date(2025, 3, 2))
    result = validate(candidate, history, catalog, balances={"EL": 30}, today=today)
    assert result.kinds == [ErrorKind.INSUFFICIENT_BALANCE]
    assert result.issues[0].available == 0

def test_pending_requests_do_not_reserve_balance(catalog, today, make_request):
    history = [make_request("SCL", date(2025, 2, 1), date(2025, 2, 3), LeaveStatus.PENDING)]
    result = validate(
        _candidate(leave_type="SCL", from_date=date(2025, 3, 2), to_date=date(2025, 3, 4)),
        history, catalog, today=today,
    )
    assert result.ok

def test_non_combinable_overlap_with_other_type(catalog, today, make_request):
    history = [make_request("EL", date(2025, 3, 1), date(2025, 3, 3), LeaveStatus.PENDING)]
    result = validate(_candidate(leave_type="CL"), history, catalog, today=today)
    assert result.kinds == [ErrorKind.NON_COMBINABLE_OVERLAP]

def test_rejected_entries_do_not_block_non_combinable(catalog, today, make_request):
    history = [make_request("EL", date(2025, 3, 1), date(2025, 3, 3), LeaveStatus.REJECTED)]
    assert validate(_candidate(leave_type="CL"), history, catalog, today=today).ok

def test_overlap_is_inclusive_at_the_edges(catalog, today, make_request):
    history = [make_request("EL", date(2025, 3, 4), date(2025, 3, 6), LeaveStatus.APPROVED)]
    result = validate(_candidate(leave_type="CL"), history, catalog, today=today)
    assert result.kinds == [ErrorKind.NON_COMBINABLE_OVERLAP]

def test_adjacent_ranges_do_not_overlap(catalog, today, make_request):
    history = [make_request("EL", date(2025, 3, 5), date(2025, 3, 6), LeaveStatus.APPROVED)]
    assert validate(_candidate(leave_type="CL"), history, catalog, today=today).ok

def test_combinable_type_may_overlap(catalog, today, make_request):
    history = [make_request("CL", date(2025, 3, 1), date(2025, 3, 3), LeaveStatus.APPROVED)]
    assert validate(_candidate(leave_type="EL"), history, catalog, today=today).ok

def test_all_violations_collected(catalog, today, make_request):
    history = [
        make_request("CL", date(2025, 1, 6), date(2025, 1, 15), LeaveStatus.APPROVED),
        make_request("EL", date(2025, 3, 1), date(2025, 3, 3), LeaveStatus.PENDING),
    ]
    result = validate(_candidate(leave_type="CL", reason=""), history, catalog, today=today)
    assert set(result.kinds) == {
        ErrorKind.MISSING_FIELD,
        ErrorKind.INSUFFICIENT_BALANCE,
        ErrorKind.NON_COMBINABLE_OVERLAP,
    }

@pytest.mark.parametrize("leave_type", ["", "  ", None])
def test_blank_leave_type_is_missing_not_unknown(catalog, today, leave_type):
    result = validate(_candidate(leave_type=leave_type), [], catalog, today=today)
    assert result.kinds == [ErrorKind.MISSING_FIELD]
