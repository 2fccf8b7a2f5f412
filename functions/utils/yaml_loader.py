"""
functions/utils/yaml_loader.py

Cached loader for the YAML files under parameters/.

A missing, unreadable or non-mapping file is logged and read as {}, so
callers decide whether an absent section is an error.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=None)
def load_yaml_mapping(path: Path) -> Dict[str, Any]:
    """Read `path` once per process. Callers must not mutate the result."""
    if not path.exists():
        logger.warning("yaml_file_missing", path=str(path))
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning("yaml_file_not_dict", path=str(path), type=type(data).__name__)
            return {}
        logger.info("yaml_file_loaded", path=str(path))
        return data
    except Exception as exc:  # noqa: BLE001
        logger.error("yaml_file_load_error", path=str(path), error=str(exc))
        return {}
