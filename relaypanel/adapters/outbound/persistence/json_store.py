# relaypanel/adapters/outbound/persistence/json_store.py

"""
Atomic JSON file storage.

Every write goes to a temporary file in the target directory which then
replaces the target with os.replace, so readers never observe a partially
written file.
"""

import json
import logging
import os
import tempfile
from typing import Any

# Configure logger
logger = logging.getLogger(__name__)


def ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def atomic_write_text(path: str, content: str) -> None:
    """
    Write text to path via a temporary file and an atomic replace.

    Args:
        path: Target file path
        content: Full file content

    Raises:
        OSError: If the file cannot be written or replaced
    """
    directory = os.path.dirname(os.path.abspath(path))
    ensure_dir(directory)

    fd, tmp_path = tempfile.mkstemp(prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_json(path: str, value: Any) -> None:
    atomic_write_text(path, json.dumps(value, indent=2, ensure_ascii=False) + "\n")


def read_json(path: str, default: Any) -> Any:
    """
    Read a JSON document.

    Returns:
        The parsed document, or default when the file does not exist

    Raises:
        OSError: If the file exists but cannot be read
        ValueError: If the file is not valid JSON
    """
    if not os.path.exists(path):
        return default

    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()

    if not raw.strip():
        logger.warning(f"Empty JSON file treated as default: {path}")
        return default
    return json.loads(raw)
