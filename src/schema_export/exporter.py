"""
Export orchestration: one descriptive document per table in a schema.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from schema_export.descriptor import TableDescriptorBuilder
from schema_export.metadata.base import MetadataExtractor
from schema_export.models import ExportConfig
from schema_export.output import ReportRenderer, ReportWriter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class ExportResult:
    """Outcome of an export run."""
    schema: str
    output_dir: Path
    exported: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)  # table -> error message

    @property
    def total(self) -> int:
        return len(self.exported) + len(self.failed)

    @property
    def success_count(self) -> int:
        return len(self.exported)

    @property
    def error_count(self) -> int:
        return len(self.failed)


class SchemaExporter:
    """
    Exports every table of a schema to a text file.

    Tables are processed sequentially in catalog order. A failure on one
    table is logged and recorded, and the run moves on to the next table.
    """

    def __init__(
        self,
        extractor: MetadataExtractor,
        config: ExportConfig,
        renderer: Optional[ReportRenderer] = None,
        writer: Optional[ReportWriter] = None,
        builder: Optional[TableDescriptorBuilder] = None,
    ):
        self.extractor = extractor
        self.config = config
        self.renderer = renderer or ReportRenderer(type_formatter=extractor.format_type)
        self.writer = writer or ReportWriter(config.output_dir)
        self.builder = builder or TableDescriptorBuilder(
            extractor,
            include_foreign_keys=config.include_foreign_keys,
        )

    def export_all(self, progress_callback: Optional[ProgressCallback] = None) -> ExportResult:
        """
        Export all tables of the configured schema.

        Args:
            progress_callback: Called with (index, total, table_name) before each table

        Returns:
            ExportResult with exported and failed tables
        """
        output_dir = self.writer.prepare()
        schema = self.config.schema

        tables = self.extractor.list_tables(schema)
        logger.info(f"Found {len(tables)} tables in schema {schema}")

        result = ExportResult(schema=schema, output_dir=output_dir)

        for index, table_name in enumerate(tables, start=1):
            if progress_callback:
                progress_callback(index, len(tables), table_name)
            logger.info(f"Processing table {index}/{len(tables)}: {table_name}")

            try:
                self.export_table(table_name)
                result.exported.append(table_name)
            except Exception as e:
                logger.error(f"Error processing table {table_name}: {e}")
                result.failed[table_name] = str(e)

        logger.info(
            f"Export completed: {result.success_count} tables exported, "
            f"{result.error_count} errors, output in {output_dir.resolve()}"
        )
        return result

    def export_table(self, table_name: str) -> Path:
        """Describe, render and write a single table."""
        table = self.builder.build(self.config.schema, table_name)
        content = self.renderer.render(table)
        output_path = self.writer.write(table_name, content)

        logger.debug(
            f"Created {output_path.name} ({len(table.columns)} columns, "
            f"{len(table.primary_key_columns)} PKs, {len(table.foreign_keys)} FKs)"
        )
        return output_path
