from sqlrun.executor import ExecutionResult, StatementFailure, run
from sqlrun.splitter import split


def test_all_statements_succeed(make_session):
    session = make_session()
    result = run(["SELECT 1", "SELECT 2"], session)
    assert result == ExecutionResult(total=2, succeeded=2, failed=0, failures=())
    assert session.executed == ["SELECT 1", "SELECT 2"]


def test_failure_is_isolated(make_session):
    stmts = [f"INSERT INTO t VALUES ({i})" for i in range(1, 8)]
    session = make_session(fail_on={stmts[3]})

    result = run(stmts, session)

    assert result.total == 7
    assert result.succeeded == 6
    assert result.failed == 1
    assert [f.position for f in result.failures] == [4]
    assert result.failures[0].sql == stmts[3]
    assert "syntax error" in result.failures[0].error
    # statements after the failing one still ran, in order
    assert session.executed == stmts


def test_example_script_run(make_session):
    stmts = split(
        "-- seed data\n"
        "INSERT INTO t VALUES (1);\n"
        "INSERT INTO t VALUES (2)\n"
        ";\n"
        "BAD SYNTAX HERE\n"
        "SELECT 1;\n"
    )
    session = make_session(fail_on={"BAD SYNTAX HERE\nSELECT 1"})

    result = run(stmts, session)

    assert (result.total, result.succeeded, result.failed) == (3, 2, 1)
    assert result.failures[0].position == 3


def test_blank_statements_are_skipped_but_keep_positions(make_session):
    session = make_session(fail_on={"BAD"})
    result = run(["SELECT 1", "   ", "BAD"], session)
    assert result.total == 2
    assert session.executed == ["SELECT 1", "BAD"]
    assert result.failures == (StatementFailure(3, "BAD", "syntax error near 'BAD'"),)


def test_progress_cadence(make_session):
    calls = []
    stmts = [f"SELECT {i}" for i in range(1, 26)]
    session = make_session(fail_on={"SELECT 5", "SELECT 15"})

    run(stmts, session, on_progress=lambda n, ok: calls.append((n, ok)))

    assert calls == [(10, 9), (20, 18)]


def test_progress_reported_on_failing_tenth_statement(make_session):
    calls = []
    stmts = [f"SELECT {i}" for i in range(1, 11)]
    run(stmts, make_session(fail_on={"SELECT 10"}), on_progress=lambda n, ok: calls.append((n, ok)))
    assert calls == [(10, 9)]


def test_on_failure_called_in_order(make_session):
    seen = []
    run(["A", "B", "C"], make_session(fail_on={"A", "C"}), on_failure=seen.append)
    assert [f.position for f in seen] == [1, 3]


def test_empty_run(make_session):
    assert run([], make_session()) == ExecutionResult(0, 0, 0)
