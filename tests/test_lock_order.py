"""Row-lock ordering of assignment writes, checked on the statements they issue."""
import asyncio
from types import SimpleNamespace

from sqlalchemy.dialects import postgresql

from washline.services.assignment_service import _lock_order_and_record


class Result:
    def __init__(self, row):
        self.row = row

    def scalar_one_or_none(self):
        return self.row


class RecordingSession:
    """Stand-in session that keeps every statement and returns one row per query."""

    def __init__(self):
        self.statements = []

    async def execute(self, stmt):
        self.statements.append(stmt)
        return Result(SimpleNamespace(id=11, order_id=5))


def compiled(stmt):
    return str(stmt.compile(dialect=postgresql.dialect()))


def test_order_row_is_locked_before_record_row():
    session = RecordingSession()
    _, record = asyncio.run(_lock_order_and_record(session, 11))

    assert record.order_id == 5
    sql = [compiled(s) for s in session.statements]
    assert len(sql) == 3
    # The unlocked read only finds the owning order
    assert "FROM order_records" in sql[0] and "FOR UPDATE" not in sql[0]
    assert "FROM orders" in sql[1] and sql[1].endswith("FOR UPDATE")
    assert "FROM order_records" in sql[2] and sql[2].endswith("FOR UPDATE")
