"""
Output module for rendering and writing table documents.

Components:
- ReportRenderer: Table -> descriptive text
- ReportWriter: one <table>.txt file per table
"""

from schema_export.output.renderer import ReportRenderer
from schema_export.output.writer import ReportWriter

__all__ = [
    "ReportRenderer",
    "ReportWriter",
]
