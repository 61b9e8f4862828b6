"""Quantity reconciliation rules, exercised without a database."""
from types import SimpleNamespace

import pytest

from washline.core.errors import ConflictError
from washline.services import reconciliation as rc


def assignment(quantity, status="In Progress", return_quantity=None):
    return SimpleNamespace(quantity=quantity, status=status, return_quantity=return_quantity)


def record(quantity, status="Pending"):
    return SimpleNamespace(quantity=quantity, status=status)


def test_order_capacity_names_remaining_quantity():
    assert rc.check_order_capacity(100, 60, 40) == 40
    with pytest.raises(ConflictError) as exc:
        rc.check_order_capacity(100, 60, 50)
    assert "(40)" in exc.value.message


def test_record_capacity_names_remaining_quantity():
    with pytest.raises(ConflictError) as exc:
        rc.check_record_capacity(50, 30, 25)
    assert exc.value.message == "Quantity cannot exceed remaining quantity (20)"


def test_cancelled_assignments_hold_no_capacity():
    assignments = [assignment(30), assignment(20, "Cancelled"), assignment(10, "Completed")]
    assert rc.assigned_quantity(assignments) == 40


def test_record_complete_requires_full_coverage():
    assert not rc.is_record_complete(50, [])
    assert not rc.is_record_complete(50, [assignment(30, "Completed")])
    assert not rc.is_record_complete(50, [assignment(30, "Completed"), assignment(20)])
    assert rc.is_record_complete(50, [assignment(30, "Completed"), assignment(20, "Completed")])
    assert rc.is_record_complete(
        50, [assignment(30, "Completed"), assignment(20, "Completed"), assignment(5, "Cancelled")]
    )


def test_order_complete_when_all_records_complete_and_quantity_covered():
    records = [record(60, "Complete"), record(40, "Complete")]
    assert rc.derive_order_status("Pending", 100, records) == "Complete"
    # Records complete but the order still has unallocated quantity
    assert rc.derive_order_status("Pending", 120, records) == "Pending"
    assert rc.derive_order_status("Pending", 100, [record(60, "Complete"), record(40)]) == "Pending"
    assert rc.derive_order_status("Pending", 100, []) == "Pending"


def test_order_derivation_keeps_in_progress_and_holds_qc_and_delivered():
    records = [record(100)]
    assert rc.derive_order_status("In Progress", 100, records) == "In Progress"
    assert rc.derive_order_status("Complete", 100, records) == "Pending"
    assert rc.derive_order_status("QC", 100, [record(100, "Complete")]) == "QC"
    assert rc.derive_order_status("Delivered", 100, records) == "Delivered"


@pytest.mark.parametrize("current", ["Pending", "In Progress", "QC", "Complete", "Delivered"])
def test_order_derivation_is_idempotent(current):
    for records in ([record(100, "Complete")], [record(50, "Complete")], [record(100)]):
        once = rc.derive_order_status(current, 100, records)
        assert rc.derive_order_status(once, 100, records) == once


def test_completion_percentage_rounds_and_handles_zero():
    assert rc.completion_percentage(1, 3) == 33
    assert rc.completion_percentage(2, 3) == 67
    assert rc.completion_percentage(50, 50) == 100
    assert rc.completion_percentage(0, 0) == 0


def test_record_stats():
    stats = rc.record_stats(
        100, [assignment(30, "Completed"), assignment(20), assignment(40, "Cancelled")]
    )
    assert stats == {
        "total_quantity": 100,
        "assigned_quantity": 50,
        "remaining_quantity": 50,
        "total_assignments": 2,
        "completed_assignments": 1,
        "in_progress_assignments": 1,
        "completion_percentage": 50,
    }


def test_actual_output_never_negative():
    assert rc.return_quantity([assignment(30, "Completed", 28), assignment(20)]) == 28
    assert rc.actual_output(28, 3) == 25
    assert rc.actual_output(2, 5) == 0


def test_damage_forces_qc_only_on_complete_orders():
    assert rc.damage_forces_qc("Complete", [0, 2])
    assert not rc.damage_forces_qc("Complete", [0, 0])
    assert not rc.damage_forces_qc("Pending", [5])
