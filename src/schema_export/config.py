"""
Configuration loading for export runs.

Example config file:

    database:
      engine: db2
      connection: "DATABASE=SAMPLE;HOSTNAME=localhost;PORT=50000;PROTOCOL=TCPIP;UID=db2inst1;PWD=secret;"
    schema: GST
    output:
      directory: ./output
    include_foreign_keys: true
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from schema_export.metadata import EXTRACTORS
from schema_export.models import ExportConfig

logger = logging.getLogger(__name__)


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML config file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    logger.info(f"Loaded configuration from {path}")
    return data


def build_config(
    config_file: Optional[Union[str, Path]] = None,
    engine: Optional[str] = None,
    connection_string: Optional[str] = None,
    schema: Optional[str] = None,
    output_dir: Optional[Union[str, Path]] = None,
    include_foreign_keys: Optional[bool] = None,
) -> ExportConfig:
    """
    Build an ExportConfig from a config file and explicit overrides.

    Overrides that are not None take precedence over file values.
    """
    data = load_config(config_file) if config_file else {}
    database = data.get("database") or {}
    output = data.get("output") or {}

    schema = schema or data.get("schema")
    if not schema:
        raise ValueError("No schema configured. Use --schema or set 'schema' in the config file")

    engine = str(engine or database.get("engine", "db2")).strip().lower()
    if engine not in EXTRACTORS:
        supported = ", ".join(sorted(EXTRACTORS))
        raise ValueError(f"Unsupported database engine: {engine} (supported: {supported})")

    if include_foreign_keys is None:
        include_foreign_keys = data.get("include_foreign_keys", True)
        if not isinstance(include_foreign_keys, bool):
            raise ValueError(
                f"include_foreign_keys must be true or false, got {include_foreign_keys!r}"
            )

    return ExportConfig(
        schema=str(schema),
        engine=engine,
        connection_string=connection_string or database.get("connection"),
        output_dir=Path(output_dir or output.get("directory", "output")),
        include_foreign_keys=include_foreign_keys,
    )
