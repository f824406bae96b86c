import sys
import types

import pytest

from sqlrun.errors import StatementExecutionError


class FakeSession:
    """Records every statement; raises for those matching *fail_on*."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.executed = []

    def execute(self, sql):
        self.executed.append(sql)
        if sql in self.fail_on:
            raise StatementExecutionError(f"syntax error near {sql!r}")


class FakeDriverError(Exception):
    pass


class FakeCursor:
    def __init__(self, conn, **kwargs):
        self.conn = conn
        self.kwargs = kwargs
        self.closed = False

    def execute(self, sql):
        self.conn.executed.append(sql)
        if "BAD" in sql:
            raise FakeDriverError(f"You have an error in your SQL syntax: {sql}")

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.autocommit = False
        self.executed = []
        self.cursors = []
        self.closed = False
        self.cursor_error = None

    def cursor(self, **kwargs):
        if self.cursor_error:
            raise self.cursor_error
        cur = FakeCursor(self, **kwargs)
        self.cursors.append(cur)
        return cur

    def close(self):
        self.closed = True


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def fake_driver(monkeypatch):
    """
    Register an in‑memory DB‑API module named ``fakedb``.  ``connections``
    keeps every connection it handed out; set ``refuse`` to make connect fail
    and ``cursor_error`` to make opening a cursor fail.
    """
    mod = types.ModuleType("fakedb")
    mod.Error = FakeDriverError
    mod.connections = []
    mod.refuse = False
    mod.cursor_error = None

    def connect(**kwargs):
        if mod.refuse:
            raise FakeDriverError("Connection refused")
        conn = FakeConnection(**kwargs)
        conn.cursor_error = mod.cursor_error
        mod.connections.append(conn)
        return conn

    mod.connect = connect
    monkeypatch.setitem(sys.modules, "fakedb", mod)
    return mod
