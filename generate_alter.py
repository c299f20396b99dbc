#!/usr/bin/env python3
"""Generate ALTER TABLE statements + summary markdown from an old and a new CREATE TABLE statement."""

from __future__ import annotations

import argparse
import dataclasses
import difflib
import sys
from pathlib import Path

try:
    import yaml
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required. Install with: pip install pyyaml") from exc

from alter_generator import (
    DROP,
    AlterStatement,
    changes_summary,
    format_statements,
    generate_alter_statements,
)
from schema_parser import TableSchema, parse_create_table

DEFAULT_OLD = "old.sql"
DEFAULT_NEW = "new.sql"
DEFAULT_OUT_SQL = "alter.sql"
BLANK_INPUT_MESSAGE = "Please provide both original and new CREATE TABLE scripts"
CONFIG_SECTIONS = ("inputs", "outputs", "rendering")
MAX_DIFF_LINES = 80


@dataclasses.dataclass
class Comparison:
    old: TableSchema
    new: TableSchema
    statements: list[AlterStatement]
    sql: str
    summary: str


def compare_schemas(old_text: str, new_text: str) -> Comparison:
    if not old_text.strip() or not new_text.strip():
        raise ValueError(BLANK_INPUT_MESSAGE)

    old = parse_create_table(old_text)
    new = parse_create_table(new_text)
    statements = generate_alter_statements(old, new)
    return Comparison(
        old=old,
        new=new,
        statements=statements,
        sql=format_statements(statements),
        summary=changes_summary(statements),
    )


def load_config(path: Path | None) -> dict:
    if path is None:
        return {}
    config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config must be a YAML mapping: {path}")
    for section in CONFIG_SECTIONS:
        value = config.get(section)
        if value is None:
            config[section] = {}
        elif not isinstance(value, dict):
            raise ValueError(f"Config section '{section}' must be a mapping: {path}")
    return config


def generate_sql(comparison: Comparison, config: dict) -> str:
    header = ((config.get("rendering") or {}).get("header_comment") or "").strip()
    lines: list[str] = []
    if header:
        lines.append(header)
        lines.append("")
    lines.append(comparison.sql)
    lines.append("")
    return "\n".join(lines)


def escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def generate_markdown(comparison: Comparison) -> str:
    lines: list[str] = []
    lines.append(f"# ALTER TABLE plan: `{comparison.new.table_name}`")
    lines.append("")
    lines.append(comparison.summary)
    lines.append("")

    lines.append("## Column changes")
    lines.append("")
    if comparison.statements:
        lines.append("| Change | Column | Definition |")
        lines.append("|--------|--------|------------|")
        for stmt in comparison.statements:
            definition = "-" if stmt.kind == DROP else f"`{escape_cell(stmt.definition or '')}`"
            lines.append(f"| {stmt.kind} | `{stmt.column}` | {definition} |")
    else:
        lines.append("No column changes.")
    lines.append("")

    lines.append("## Constraints")
    lines.append("")
    lines.append(f"- Old schema: {len(comparison.old.constraints)} table-level constraint(s)")
    lines.append(f"- New schema: {len(comparison.new.constraints)} table-level constraint(s)")
    lines.append("- Constraint and index changes are not compared; review them by hand.")
    lines.append("")
    return "\n".join(lines)


def generate_outputs(old_path: Path, new_path: Path, config: dict) -> tuple[str, str, Comparison]:
    comparison = compare_schemas(
        old_path.read_text(encoding="utf-8"),
        new_path.read_text(encoding="utf-8"),
    )
    return generate_sql(comparison, config), generate_markdown(comparison), comparison


def write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def check_up_to_date(path: Path, generated: str) -> bool:
    """Compare ``generated`` with the file on disk, printing any drift to stderr."""
    if not path.exists():
        print(f"[check] {path} does not exist; run without --check to create it", file=sys.stderr)
        return False

    existing = path.read_text(encoding="utf-8")
    if existing == generated:
        return True

    print(f"[check] {path} is out of date", file=sys.stderr)
    diff = list(
        difflib.unified_diff(
            existing.splitlines(),
            generated.splitlines(),
            fromfile=str(path),
            tofile="regenerated",
            lineterm="",
        )
    )
    for line in diff[:MAX_DIFF_LINES]:
        print(line, file=sys.stderr)
    if len(diff) > MAX_DIFF_LINES:
        print(f"... {len(diff) - MAX_DIFF_LINES} more diff lines", file=sys.stderr)
    return False


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate ALTER TABLE statements from two CREATE TABLE statements")
    parser.add_argument("--old", help=f"Original CREATE TABLE file (default: {DEFAULT_OLD})")
    parser.add_argument("--new", help=f"New CREATE TABLE file (default: {DEFAULT_NEW})")
    parser.add_argument("--config", help="Optional YAML config")
    parser.add_argument("--out-sql", help=f"Output SQL file, '-' for stdout (default: {DEFAULT_OUT_SQL})")
    parser.add_argument("--out-md", help="Optional output markdown report")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify output files are up-to-date without writing (needs a file for --out-sql)",
    )
    return parser.parse_args(argv)


def resolve_paths(args: argparse.Namespace, config: dict) -> tuple[Path, Path, str, str | None]:
    inputs = config.get("inputs") or {}
    outputs = config.get("outputs") or {}
    old_path = Path(args.old or inputs.get("old") or DEFAULT_OLD)
    new_path = Path(args.new or inputs.get("new") or DEFAULT_NEW)
    out_sql = args.out_sql or outputs.get("sql") or DEFAULT_OUT_SQL
    out_md = args.out_md or outputs.get("markdown")
    return old_path, new_path, out_sql, out_md


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
        old_path, new_path, out_sql, out_md = resolve_paths(args, config)
        if args.check and out_sql == "-":
            raise ValueError("--check compares against files; --out-sql - has nothing to check")
        sql_output, md_output, comparison = generate_outputs(old_path, new_path, config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.check:
        ok = check_up_to_date(Path(out_sql), sql_output)
        if out_md:
            ok = check_up_to_date(Path(out_md), md_output) and ok
        return 0 if ok else 1

    # stdout carries only SQL when it is the SQL destination
    to_stdout = out_sql == "-"
    progress = sys.stderr if to_stdout else sys.stdout
    if to_stdout:
        print(sql_output, end="")
    else:
        write_output(Path(out_sql), sql_output)
        print(f"Generated {out_sql}", file=progress)
    if out_md:
        write_output(Path(out_md), md_output)
        print(f"Generated {out_md}", file=progress)
    print(comparison.summary, file=progress)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
