from __future__ import annotations
import os
import pathlib
import types
import typing as t
import urllib.parse

import yaml

try:
    import tomllib as _toml
except ModuleNotFoundError:
    import tomli as _toml

from sqlrun.constants import DEFAULT_DELIMITER
from sqlrun.errors import ConfigError

DEFAULT_DRIVERS: t.Mapping[str, str] = types.MappingProxyType(
    {
        "mysql": "mysql.connector",
        "mysql5": "mysql.connector",
        "mysql8": "mysql.connector",
        "pgsql": "psycopg2",
    }
)

_DEFAULT_PORTS = {"mysql": 3306, "pgsql": 5432}


class DataSource:
    """
    A thin value‑object holding everything needed to open a session and find
    the script.  Nothing here talks to the database.
    """

    def __init__(
        self,
        d: dict[str, t.Any],
        *,
        drivers: t.Mapping[str, str] = DEFAULT_DRIVERS,
    ) -> None:
        self.drivers = drivers
        self.dialect: str | None = _opt_str(d.get("dialect"))
        if self.dialect:
            self.dialect = self.dialect.lower()
        self.url: str | None = _opt_str(d.get("url"))
        self.username: str | None = _opt_str(d.get("username"))

        # Allow `${ENV_VAR}` syntax for secrets
        raw_pwd = "" if d.get("password") is None else str(d["password"])
        self.password: str = (
            os.getenv(raw_pwd[2:-1], "") if raw_pwd.startswith("${") else raw_pwd
        )

        self.driver: str | None = _opt_str(d.get("driver"))
        if not self.driver and self.dialect:
            self.driver = drivers.get(self.dialect)

        self.script_path: str | None = _opt_str(d.get("scriptPath"))
        delimiter = d.get("delimiter")
        self.delimiter: str = DEFAULT_DELIMITER if delimiter is None else str(delimiter)

    def __repr__(self) -> str:
        return (
            "DataSource(\n"
            f"  dialect={self.dialect!r}\n"
            f"  url={self.url!r}\n"
            f"  username={self.username!r}\n"
            f"  password={'***' if self.password else ''!r}\n"
            f"  driver={self.driver!r}\n"
            f"  scriptPath={self.script_path!r}\n"
            f"  delimiter={self.delimiter!r}\n"
            ")"
        )

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    @property
    def family(self) -> str:
        return "pgsql" if self.dialect == "pgsql" else "mysql"

    def validate(self) -> None:
        """Raise :class:`ConfigError` for the first missing or unsupported field."""
        if self.dialect and self.dialect not in self.drivers:
            supported = ", ".join(sorted(self.drivers))
            raise ConfigError(
                f"Unsupported dialect {self.dialect!r} (supported: {supported})"
            )

        required = {
            "dialect": self.dialect,
            "url": self.url,
            "username": self.username,
            "driver": self.driver,
            "scriptPath": self.script_path,
        }
        for name, value in required.items():
            if not value:
                raise ConfigError(f"Missing required field {name!r}")
        if not self.delimiter:
            raise ConfigError("Statement delimiter must not be empty")
        self.dsn()

    def dsn(self) -> dict[str, t.Any]:
        """Return DB‑API connect kwargs parsed from the connection URL."""
        url = self.url or ""
        if url.lower().startswith("jdbc:"):
            url = url[5:]
        parts = urllib.parse.urlsplit(url)
        if not parts.netloc or not parts.hostname:
            raise ConfigError(f"Malformed connection URL {self.url!r}")

        try:
            port = parts.port or _DEFAULT_PORTS[self.family]
        except ValueError as exc:
            raise ConfigError(f"Malformed port in connection URL {self.url!r}") from exc

        db_key = "dbname" if self.family == "pgsql" else "database"
        dsn: dict[str, t.Any] = {
            "host": parts.hostname,
            "port": port,
            "user": self.username,
            "password": self.password,
        }
        database = parts.path.lstrip("/")
        if database:
            dsn[db_key] = urllib.parse.unquote(database)
        return dsn


def _opt_str(value: t.Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def from_args(
    argv: t.Sequence[str],
    *,
    drivers: t.Mapping[str, str] = DEFAULT_DRIVERS,
) -> DataSource:
    """
    Build a :class:`DataSource` from ``dialect url username password script``.
    The driver is looked up from *drivers*.
    """
    if len(argv) != 5:
        raise ConfigError(f"Expected 5 positional arguments, got {len(argv)}")
    dialect, url, username, password, script_path = argv
    return DataSource(
        {
            "dialect": dialect,
            "url": url,
            "username": username,
            "password": password,
            "scriptPath": script_path,
        },
        drivers=drivers,
    )


def _read_file(cfg_file: pathlib.Path) -> dict[str, t.Any]:
    try:
        if cfg_file.suffix.lower() == ".toml":
            with cfg_file.open("rb") as fh:
                return _toml.load(fh)
        with cfg_file.open(encoding="utf-8") as fh:
            return yaml.safe_load(fh) or {}
    except (yaml.YAMLError, _toml.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot parse config file {cfg_file}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {cfg_file}: {exc}") from exc


def load(
    path: pathlib.Path | str,
    *,
    script_path: str | None = None,
    drivers: t.Mapping[str, str] = DEFAULT_DRIVERS,
) -> DataSource:
    """
    Parse the ``datasource`` section of *path* (YAML or TOML) and return a
    :class:`DataSource`.  *script_path*, when given, wins over the file's
    ``scriptPath``.
    """
    cfg_file = pathlib.Path(path)
    if not cfg_file.exists():
        raise ConfigError(f"Config file {cfg_file} not found")

    raw = _read_file(cfg_file)
    section = raw.get("datasource") if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"No `datasource` section defined in {cfg_file}")

    fields = dict(section)
    if script_path:
        fields["scriptPath"] = script_path
    return DataSource(fields, drivers=drivers)
