from __future__ import annotations
import dataclasses
import typing as t

from sqlrun.constants import PROGRESS_EVERY
from sqlrun.errors import StatementExecutionError


class SupportsExecute(t.Protocol):
    def execute(self, sql: str) -> None: ...


@dataclasses.dataclass(frozen=True)
class StatementFailure:
    position: int
    sql: str
    error: str


@dataclasses.dataclass(frozen=True)
class ExecutionResult:
    total: int
    succeeded: int
    failed: int
    failures: tuple[StatementFailure, ...] = ()


def run(
    statements: t.Sequence[str],
    session: SupportsExecute,
    *,
    on_progress: t.Callable[[int, int], None] | None = None,
    on_failure: t.Callable[[StatementFailure], None] | None = None,
) -> ExecutionResult:
    """
    Execute *statements* in order on *session*.

    A statement rejected by the database is recorded as a
    :class:`StatementFailure` and the run carries on with the next one;
    :class:`StatementExecutionError` never leaves this function.  Positions
    are 1‑based.  *on_progress* receives ``(processed, succeeded)`` after
    every tenth position.
    """
    succeeded = 0
    failures: list[StatementFailure] = []

    for position, sql in enumerate(statements, start=1):
        if not sql.strip():
            continue

        try:
            session.execute(sql)
            succeeded += 1
        except StatementExecutionError as exc:
            failure = StatementFailure(position, sql, str(exc))
            failures.append(failure)
            if on_failure:
                on_failure(failure)

        if on_progress and position % PROGRESS_EVERY == 0:
            on_progress(position, succeeded)

    return ExecutionResult(
        total=succeeded + len(failures),
        succeeded=succeeded,
        failed=len(failures),
        failures=tuple(failures),
    )
