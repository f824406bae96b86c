"""
Line‑oriented statement splitting.

A statement ends on the first line whose stripped text ends with the
delimiter.  Blank lines and lines starting with ``--`` are dropped.  This is
not a SQL tokenizer: a delimiter inside a string literal is removed along with
the terminator, and a delimiter in the middle of a line does not end the
statement.
"""
from __future__ import annotations
import pathlib
import re

from sqlrun.constants import COMMENT_PREFIX, DEFAULT_DELIMITER
from sqlrun.errors import ResourceAcquisitionError

# Only real line endings; str.splitlines() also breaks on \f, \x85, \u2028 ...
_LINE_END_RE = re.compile(r"\r\n|\r|\n")


def _close(buf: list[str], delimiter: str) -> str:
    return "".join(buf).replace(delimiter, "").strip()


def split(raw_text: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Return the statements of *raw_text* in source order, delimiters removed."""
    statements: list[str] = []
    buf: list[str] = []

    for line in _LINE_END_RE.split(raw_text):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue

        buf.append(line + "\n")

        if stripped.endswith(delimiter):
            stmt = _close(buf, delimiter)
            if stmt:
                statements.append(stmt)
            buf.clear()

    # Trailing statement without a terminator
    if buf:
        stmt = _close(buf, delimiter)
        if stmt:
            statements.append(stmt)

    return statements


def read_script(path: pathlib.Path | str) -> str:
    try:
        return pathlib.Path(path).read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise ResourceAcquisitionError(f"Cannot read SQL script {path}: {exc}") from exc
