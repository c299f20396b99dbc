"""Derive column-level ALTER TABLE statements from two parsed table schemas."""

from __future__ import annotations

import dataclasses
from collections import Counter

from schema_parser import TableSchema

ADD = "ADD"
MODIFY = "MODIFY"
DROP = "DROP"

NO_CHANGES_SQL = "-- No changes detected\n-- Both tables have identical structure"
NO_CHANGES_SUMMARY = "Analysis complete! No changes found between the two schemas."


class SchemaMismatch(ValueError):
    """Raised when the old and new statements define different tables."""

    def __init__(self, old_name: str, new_name: str) -> None:
        super().__init__(f"Table names don't match: {old_name} vs {new_name}")
        self.old_name = old_name
        self.new_name = new_name


@dataclasses.dataclass
class AlterStatement:
    kind: str
    column: str
    definition: str | None
    statement: str


def render_statement(table_name: str, kind: str, column: str, definition: str | None = None) -> str:
    if kind == DROP:
        return f"ALTER TABLE `{table_name}` DROP COLUMN `{column}`;"
    if kind not in (ADD, MODIFY):
        raise ValueError(f"Unsupported change kind: {kind}")
    return f"ALTER TABLE `{table_name}` {kind} COLUMN `{column}` {definition};"


def generate_alter_statements(old: TableSchema, new: TableSchema) -> list[AlterStatement]:
    """Compare two schemas of the same table.

    ADD and MODIFY statements come first, in the new schema's column order,
    followed by DROP statements in the old schema's column order. Definitions
    are compared as exact strings.
    """
    if old.table_name != new.table_name:
        raise SchemaMismatch(old.table_name, new.table_name)

    table = old.table_name
    out: list[AlterStatement] = []

    for name, new_def in new.columns.items():
        if name not in old.columns:
            kind = ADD
        elif old.columns[name] != new_def:
            kind = MODIFY
        else:
            continue
        out.append(AlterStatement(kind, name, new_def, render_statement(table, kind, name, new_def)))

    for name in old.columns:
        if name in new.columns:
            continue
        out.append(AlterStatement(DROP, name, None, render_statement(table, DROP, name)))

    return out


def format_statements(statements: list[AlterStatement]) -> str:
    if not statements:
        return NO_CHANGES_SQL
    return "\n\n".join(s.statement for s in statements)


def count_changes(statements: list[AlterStatement]) -> Counter:
    return Counter(s.kind for s in statements)


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def changes_summary(statements: list[AlterStatement]) -> str:
    if not statements:
        return NO_CHANGES_SUMMARY

    counts = count_changes(statements)
    parts: list[str] = []
    for kind, verb in ((ADD, "added"), (MODIFY, "modified"), (DROP, "dropped")):
        if counts[kind]:
            parts.append(f"{pluralize(counts[kind], 'column')} {verb}")

    total = pluralize(len(statements), "ALTER TABLE statement")
    return f"Successfully generated {total}! ({', '.join(parts)})"
