from __future__ import annotations
import importlib
import types
import typing as t
from contextlib import contextmanager

import click

from sqlrun.config import DEFAULT_DRIVERS, DataSource
from sqlrun.errors import ResourceAcquisitionError, StatementExecutionError


class Session:
    """
    One open cursor on one connection.  Statements go through :meth:`execute`
    one at a time; the caller owns the lifetime via :func:`open_session`.
    """

    def __init__(self, cursor, driver: types.ModuleType) -> None:
        self.cursor = cursor
        self.driver = driver

    def execute(self, sql: str) -> None:
        try:
            self.cursor.execute(sql)
        except self.driver.Error as exc:
            raise StatementExecutionError(str(exc)) from exc


def load_driver(name: str) -> types.ModuleType:
    """Import the DB‑API module called *name*."""
    try:
        driver = importlib.import_module(name)
    except ImportError as exc:
        raise ResourceAcquisitionError(f"Driver {name!r} is not available: {exc}") from exc

    if not callable(getattr(driver, "connect", None)) or not isinstance(
        getattr(driver, "Error", None), type
    ):
        raise ResourceAcquisitionError(f"Driver {name!r} is not a DB-API module")
    return driver


def _cursor_kwargs(driver_name: str) -> dict[str, t.Any]:
    # Unread SELECT results would otherwise block the next execute()
    if driver_name == "mysql.connector":
        return {"buffered": True}
    return {}


@contextmanager
def open_session(
    source: DataSource,
    *,
    drivers: t.Mapping[str, str] = DEFAULT_DRIVERS,
) -> t.Iterator[Session]:
    """
    Context‑manager that loads the driver, connects and yields a
    :class:`Session`.  Every statement is committed on its own (autocommit);
    cursor and connection are closed however the block is left.

    *drivers* supplies the module name when *source* names none.
    """
    driver_name = source.driver or drivers.get(source.dialect or "")
    if not driver_name:
        raise ResourceAcquisitionError(f"No driver known for dialect {source.dialect!r}")

    click.echo(f"Loading driver: {driver_name}")
    driver = load_driver(driver_name)

    click.echo(f"Connecting to {source.dialect} database: {source.url}")
    try:
        conn = driver.connect(**source.dsn())
    except driver.Error as exc:
        raise ResourceAcquisitionError(f"Cannot connect to {source.url}: {exc}") from exc

    try:
        try:
            conn.autocommit = True
            cur = conn.cursor(**_cursor_kwargs(driver_name))
        except driver.Error as exc:
            raise ResourceAcquisitionError(
                f"Cannot prepare session on {source.url}: {exc}"
            ) from exc
        try:
            yield Session(cur, driver)
        finally:
            cur.close()
    finally:
        conn.close()
        click.echo("Database connection closed")
