"""
Atomic file writer for rendered output.

Rendered templates are written to a temporary file next to the target and
moved into place, so an interrupted run never leaves a partial output file.
"""

from __future__ import annotations

import tempfile
from pathlib import Path


class AtomicWriter:
    """Writes files atomically.

    Content goes to a temporary file in the target directory, which then
    replaces the target.
    """

    def write(self, path: Path, content: str) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write

        Raises:
            OSError: If file operations fail
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory so the final rename stays on one filesystem.
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(self, path: Path, content: str) -> None:
        """Write content only if the file doesn't exist.

        Used by the CLI unless overwriting was requested.

        Raises:
            FileExistsError: If the file already exists
        """
        path = Path(path)
        if path.exists():
            raise FileExistsError(f"target exists: {path}")
        self.write(path, content)
