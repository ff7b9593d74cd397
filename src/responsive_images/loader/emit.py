"""File emission — where assembled artifacts are written."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class FileEmitter(Protocol):
    """Build-output collaborator that persists one file per call."""

    def emit(self, output_path: str, data: bytes) -> None:
        """Persist *data* at *output_path*."""
        ...


class DirectoryEmitter:
    """Write emitted files below a root directory.

    Args:
        root: Directory that output paths are relative to.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def emit(self, output_path: str, data: bytes) -> None:
        """Write *data* to ``root / output_path``, creating parent directories."""
        target = self.root / output_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), target)


class MemoryEmitter:
    """Keep emitted files in memory, in emission order."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    def emit(self, output_path: str, data: bytes) -> None:
        """Record *data* under *output_path*."""
        self.files[output_path] = data
