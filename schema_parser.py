"""Parse a single CREATE TABLE statement into columns and table-level constraints."""

from __future__ import annotations

import dataclasses
import re

UNKNOWN_TABLE = "unknown"

# Checked before the column pattern: `KEY idx (col)` would otherwise parse as a column named KEY.
CONSTRAINT_KEYWORDS: tuple[str, ...] = (
    "PRIMARY KEY",
    "UNIQUE",
    "KEY",
    "INDEX",
    "FOREIGN KEY",
    "CONSTRAINT",
)

_TABLE_NAME_RE = re.compile(r"CREATE\s+TABLE\s+`?(\w+)`?\s*\(", flags=re.I | re.A)
_COLUMN_RE = re.compile(r"^`?(\w+)`?\s+(.+)$", flags=re.A | re.S)


@dataclasses.dataclass
class TableSchema:
    table_name: str = UNKNOWN_TABLE
    # column name -> definition text, in source order
    columns: dict[str, str] = dataclasses.field(default_factory=dict)
    constraints: list[str] = dataclasses.field(default_factory=list)


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def extract_table_name(text: str) -> str:
    m = _TABLE_NAME_RE.search(text)
    return m.group(1) if m else UNKNOWN_TABLE


def extract_table_body(text: str) -> str | None:
    """Return the text inside the column-list parentheses, or None when there is none.

    The list opens at the parenthesis following the table name (or the first
    parenthesis at all when no table name matched) and closes at its matching
    parenthesis. Unbalanced input falls back to the last closing parenthesis.
    """
    m = _TABLE_NAME_RE.search(text)
    open_idx = m.end() - 1 if m else text.find("(")
    if open_idx < 0:
        return None

    depth = 0
    for idx in range(open_idx, len(text)):
        ch = text[idx]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[open_idx + 1 : idx]

    close_idx = text.rfind(")")
    if close_idx <= open_idx:
        return None
    return text[open_idx + 1 : close_idx]


def split_table_body(body: str) -> list[str]:
    """Split on commas outside parentheses, so `DECIMAL(10,2)` stays in one clause."""
    out: list[str] = []
    buf: list[str] = []
    depth = 0
    for ch in body:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        if ch == "," and depth == 0:
            out.append("".join(buf).strip())
            buf = []
            continue
        buf.append(ch)

    out.append("".join(buf).strip())
    return out


def is_constraint(clause: str) -> bool:
    return clause.upper().startswith(CONSTRAINT_KEYWORDS)


def parse_column_definition(clause: str) -> tuple[str, str] | None:
    m = _COLUMN_RE.match(clause)
    if not m:
        return None
    return m.group(1), m.group(2)


def parse_create_table(text: str) -> TableSchema:
    """Parse ``CREATE TABLE name (...)`` text into a :class:`TableSchema`.

    Never raises. A missing table name becomes ``"unknown"``, a missing column
    list yields an empty schema, and clauses that are neither a constraint nor
    a ``name definition`` pair are dropped.
    """
    text = normalize_whitespace(text)
    schema = TableSchema(table_name=extract_table_name(text))

    body = extract_table_body(text)
    if body is None:
        return schema

    for clause in split_table_body(body):
        clause = clause.strip()
        if not clause:
            continue
        if is_constraint(clause):
            schema.constraints.append(clause)
            continue
        parsed = parse_column_definition(clause)
        if parsed is None:
            continue
        name, definition = parsed
        schema.columns[name] = definition

    return schema
