"""JSON file helpers shared by the file-backed adapters."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def load_json(file_path: Path, default: Any) -> Any:
    if not file_path.exists():
        logger.debug("JSON file does not exist: %s", file_path)
        return default
    return json.loads(file_path.read_text(encoding="utf-8"))


def atomic_write_json(file_path: Path, data: Any) -> None:
    """Write ``data`` through a temp file and an atomic replace.

    Readers see either the previous content or the new content, never a
    partial file. Each write gets its own temp file in the target
    directory, so concurrent writers never rename each other's output.
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(data, indent=2) + "\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
