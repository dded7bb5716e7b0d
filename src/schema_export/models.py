"""
Core data models for the schema_export package.

Defines the structural records extracted from a database catalog (columns,
foreign keys, tables) and the configuration of an export run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple


class RuleAction:
    """Referential actions a foreign key can enforce."""
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    NO_ACTION = "NO ACTION"

    ALL = (CASCADE, RESTRICT, SET_NULL, NO_ACTION)


@dataclass(frozen=True)
class Column:
    """Metadata for a single column, in catalog syntax."""
    name: str
    type_name: str
    length: Optional[int] = None
    scale: Optional[int] = None
    nullable: bool = True
    default_value: Optional[str] = None  # Raw engine syntax, possibly quoted
    comment: Optional[str] = None

    @property
    def has_default(self) -> bool:
        """Whether the column declares a non-blank default value."""
        return bool(self.default_value and self.default_value.strip())


@dataclass(frozen=True)
class ForeignKey:
    """
    A foreign key constraint, possibly spanning several columns.

    ``source_columns[i]`` references ``target_columns[i]``.
    """
    name: str
    source_columns: Tuple[str, ...]
    target_table: str
    target_columns: Tuple[str, ...]
    on_delete: str = RuleAction.NO_ACTION
    on_update: str = RuleAction.NO_ACTION

    def __post_init__(self):
        # Accept lists from callers but store tuples
        object.__setattr__(self, "source_columns", tuple(self.source_columns))
        object.__setattr__(self, "target_columns", tuple(self.target_columns))
        if not self.source_columns:
            raise ValueError(f"Foreign key {self.name} has no columns")
        if len(self.source_columns) != len(self.target_columns):
            raise ValueError(
                f"Foreign key {self.name} pairs {len(self.source_columns)} source "
                f"columns with {len(self.target_columns)} target columns"
            )

    @property
    def column_pairs(self) -> List[Tuple[str, str]]:
        """Return (source, target) column pairs in key order."""
        return list(zip(self.source_columns, self.target_columns))


@dataclass(frozen=True)
class Table:
    """Structural description of a database table."""
    name: str
    schema: Optional[str] = None
    comment: Optional[str] = None
    columns: Tuple[Column, ...] = ()
    primary_key_columns: Tuple[str, ...] = ()
    primary_key_name: Optional[str] = None
    foreign_keys: Tuple[ForeignKey, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "primary_key_columns", tuple(self.primary_key_columns))
        object.__setattr__(self, "foreign_keys", tuple(self.foreign_keys))

    @property
    def full_name(self) -> str:
        """Return schema-qualified table name."""
        return f"{self.schema}.{self.name}" if self.schema else self.name

    @property
    def has_primary_key(self) -> bool:
        return len(self.primary_key_columns) > 0

    @property
    def is_composite_key(self) -> bool:
        """Whether the primary key spans more than one column."""
        return len(self.primary_key_columns) > 1

    @property
    def required_column_count(self) -> int:
        """Number of NOT NULL columns."""
        return sum(1 for c in self.columns if not c.nullable)

    @property
    def default_value_count(self) -> int:
        """Number of columns declaring a default value."""
        return sum(1 for c in self.columns if c.has_default)

    def foreign_keys_for(self, column_name: str) -> List[ForeignKey]:
        """Get foreign keys whose source columns include the given column."""
        return [fk for fk in self.foreign_keys if column_name in fk.source_columns]


@dataclass
class ExportConfig:
    """Configuration for an export run."""
    schema: str
    engine: str = "db2"
    connection_string: Optional[str] = None
    output_dir: Path = field(default_factory=lambda: Path("output"))
    include_foreign_keys: bool = True

    def __post_init__(self):
        # Catalog names are stored upper-cased
        self.schema = self.schema.strip().upper()
        self.engine = self.engine.strip().lower()
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
