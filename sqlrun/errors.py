from __future__ import annotations


class SetupError(RuntimeError):
    """Anything that stops the run before the first statement is executed."""


class ConfigError(SetupError):
    """Raised for any user‑visible configuration problem."""


class ResourceAcquisitionError(SetupError):
    """Script file, driver module or database connection is unavailable."""


class StatementExecutionError(RuntimeError):
    """A single statement was rejected by the database."""
