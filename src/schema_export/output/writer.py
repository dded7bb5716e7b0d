"""
Report Writer - Writes rendered table documents to the output directory.

Output Structure:
    <output_dir>/
    ├── CUSTOMER.txt
    ├── REGION.txt
    └── ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class ReportWriter:
    """Writes one UTF-8 text file per table."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def prepare(self) -> Path:
        """Create the output directory. Raises OSError if it cannot be created."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Output directory: {self.output_dir.resolve()}")
        return self.output_dir

    def path_for(self, table_name: str) -> Path:
        """Return the output path for a table."""
        return self.output_dir / f"{table_name}.txt"

    def write(self, table_name: str, content: str) -> Path:
        """Write a rendered document and return its path."""
        output_path = self.path_for(table_name)
        output_path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {output_path}")
        return output_path
