"""
Foreign key assembly from flat catalog rows.

Catalog queries return one row per (constraint, column) pair. This module
groups those rows back into one ForeignKey per constraint and maps the
engine's rule codes to referential actions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from schema_export.models import ForeignKey, RuleAction

logger = logging.getLogger(__name__)


# DB2 SYSCAT.REFERENCES rule codes
DB2_DELETE_RULES = {
    "C": RuleAction.CASCADE,
    "N": RuleAction.NO_ACTION,
    "R": RuleAction.RESTRICT,
    "A": RuleAction.SET_NULL,
}

DB2_UPDATE_RULES = {
    "A": RuleAction.NO_ACTION,
    "R": RuleAction.RESTRICT,
}


@dataclass
class ForeignKeyRow:
    """One row of a foreign key catalog query."""
    constraint_name: str
    source_column: str
    target_table: str
    target_column: str
    delete_rule_code: Optional[str] = None
    update_rule_code: Optional[str] = None
    sequence_number: int = 1


@dataclass
class _ForeignKeyGroup:
    """Accumulates the rows of a single constraint."""
    name: str
    target_table: str = ""
    on_delete: str = RuleAction.NO_ACTION
    on_update: str = RuleAction.NO_ACTION
    pairs: List[Tuple[int, str, str]] = field(default_factory=list)  # (sequence, source, target)


def map_rule(code: Optional[str], rules: Mapping[str, str]) -> str:
    """Map a catalog rule code, falling back to NO ACTION."""
    if code is None:
        return RuleAction.NO_ACTION
    return rules.get(code.strip(), RuleAction.NO_ACTION)


def map_delete_rule(code: Optional[str]) -> str:
    """Map a DB2 delete rule code."""
    return map_rule(code, DB2_DELETE_RULES)


def map_update_rule(code: Optional[str]) -> str:
    """Map a DB2 update rule code."""
    return map_rule(code, DB2_UPDATE_RULES)


def assemble_foreign_keys(
    rows: Iterable[ForeignKeyRow],
    delete_rules: Mapping[str, str] = DB2_DELETE_RULES,
    update_rules: Mapping[str, str] = DB2_UPDATE_RULES,
) -> List[ForeignKey]:
    """
    Group flat catalog rows into foreign keys.

    Columns of each constraint are ordered by sequence_number, so pairing
    does not depend on the order rows arrive in. Ties keep row order.

    Args:
        rows: Catalog rows, one per constraint column
        delete_rules: Mapping of delete rule codes to actions
        update_rules: Mapping of update rule codes to actions

    Returns:
        One ForeignKey per distinct constraint name
    """
    groups: Dict[str, _ForeignKeyGroup] = {}

    for row in rows:
        name = row.constraint_name.strip()
        group = groups.get(name)
        if group is None:
            group = groups[name] = _ForeignKeyGroup(name=name)

        group.target_table = row.target_table.strip()
        # Last row wins
        group.on_delete = map_rule(row.delete_rule_code, delete_rules)
        group.on_update = map_rule(row.update_rule_code, update_rules)
        group.pairs.append((row.sequence_number, row.source_column.strip(), row.target_column.strip()))

    foreign_keys = []
    for group in groups.values():
        pairs = sorted(group.pairs, key=lambda pair: pair[0])
        foreign_keys.append(ForeignKey(
            name=group.name,
            source_columns=[source for _, source, _ in pairs],
            target_table=group.target_table,
            target_columns=[target for _, _, target in pairs],
            on_delete=group.on_delete,
            on_update=group.on_update,
        ))

    logger.debug(f"Assembled {len(foreign_keys)} foreign keys")
    return foreign_keys
