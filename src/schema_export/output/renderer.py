"""
Report Renderer - Serializes a Table into the descriptive text format.

The format favors clarity and context for language models: a banner, the
table description, one block per column, then primary key, foreign keys and
a summary. Output is byte-for-byte reproducible for a given Table.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from schema_export.models import Column, ForeignKey, RuleAction, Table

BANNER = "=============================================="
RULE = "------------------"


def bare_type_name(column: Column) -> str:
    """Default type formatter: the declared type name."""
    return column.type_name


def display_default(default_value: str) -> str:
    """Strip surrounding single quotes from a default for readability."""
    value = default_value.strip()
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        value = value[1:-1]
    return value


def format_rules(fk: ForeignKey) -> Optional[str]:
    """Describe non-default referential actions, or None if both are NO ACTION."""
    parts = []
    if fk.on_delete != RuleAction.NO_ACTION:
        parts.append(f"ON DELETE {fk.on_delete}")
    if fk.on_update != RuleAction.NO_ACTION:
        parts.append(f"ON UPDATE {fk.on_update}")
    return ", ".join(parts) if parts else None


class ReportRenderer:
    """
    Renders Table records as text documents.

    Output Structure:
        TABLE banner
        TABLE DESCRIPTION   (if commented)
        COLUMNS
        PRIMARY KEY         (if any)
        FOREIGN KEYS        (if any)
        SUMMARY
    """

    def __init__(self, type_formatter: Optional[Callable[[Column], str]] = None):
        """
        Initialize the renderer.

        Args:
            type_formatter: Engine-specific column type formatter,
                typically MetadataExtractor.format_type
        """
        self.type_formatter = type_formatter or bare_type_name

    def render(self, table: Table) -> str:
        """Render a table description."""
        lines: List[str] = []

        lines.extend(self._render_header(table))
        lines.extend(self._render_columns(table))
        if table.has_primary_key:
            lines.extend(self._render_primary_key(table))
        if table.foreign_keys:
            lines.extend(self._render_foreign_keys(table))
        lines.extend(self._render_summary(table))

        return "\n".join(lines) + "\n"

    def _render_header(self, table: Table) -> List[str]:
        lines = [BANNER, f"TABLE: {table.name}", BANNER, ""]

        if table.comment and table.comment.strip():
            lines.append("TABLE DESCRIPTION:")
            lines.append(table.comment.strip())
            lines.append("")

        return lines

    def _render_columns(self, table: Table) -> List[str]:
        lines = ["COLUMNS:", RULE]

        for number, col in enumerate(table.columns, start=1):
            lines.append(f"{number}. {col.name}")
            lines.append(f"   - Type: {self.type_formatter(col)}")
            lines.append(f"   - Nullable: {'YES' if col.nullable else 'NO'}")

            if col.has_default:
                lines.append(f"   - Default value: {display_default(col.default_value)}")

            if col.name in table.primary_key_columns:
                constraint = "   - Constraint: PRIMARY KEY"
                if table.is_composite_key:
                    constraint += " (part of composite key)"
                lines.append(constraint)

            for fk in table.foreign_keys:
                for source, target in fk.column_pairs:
                    if source != col.name:
                        continue
                    reference = f"   - Foreign Key: references {fk.target_table}.{target}"
                    if fk.on_delete != RuleAction.NO_ACTION:
                        reference += f" (ON DELETE {fk.on_delete})"
                    lines.append(reference)

            if col.comment and col.comment.strip():
                lines.append(f"   - Description: {col.comment.strip()}")

            lines.append("")

        return lines

    def _render_primary_key(self, table: Table) -> List[str]:
        return [
            "PRIMARY KEY:",
            RULE,
            f"- Constraint name: {table.primary_key_name or '[Unnamed]'}",
            f"- Columns: {', '.join(table.primary_key_columns)}",
            f"- Type: {'Composite key' if table.is_composite_key else 'Simple key'}",
            "",
        ]

    def _render_foreign_keys(self, table: Table) -> List[str]:
        lines = ["FOREIGN KEYS:", RULE]

        for number, fk in enumerate(table.foreign_keys, start=1):
            lines.append(f"{number}. {fk.name}")
            lines.append(f"   - Source columns: {', '.join(fk.source_columns)}")
            lines.append(f"   - Target table: {fk.target_table}")
            lines.append(f"   - Target columns: {', '.join(fk.target_columns)}")

            rules = format_rules(fk)
            if rules:
                lines.append(f"   - Rules: {rules}")
            lines.append("")

        return lines

    def _render_summary(self, table: Table) -> List[str]:
        lines = [
            "SUMMARY:",
            RULE,
            f"- Total columns: {len(table.columns)}",
            f"- Has primary key: {'YES' if table.has_primary_key else 'NO'}",
        ]
        if table.has_primary_key:
            lines.append(f"- Primary key type: {'Composite' if table.is_composite_key else 'Simple'}")
        lines.append(f"- Number of foreign keys: {len(table.foreign_keys)}")
        lines.append(f"- Required columns (NOT NULL): {table.required_column_count}")
        lines.append(f"- Columns with default values: {table.default_value_count}")
        return lines
