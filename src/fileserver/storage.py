"""
=============================================================================
DOCUMENT ROOT ACCESS
=============================================================================

The filesystem side of the server: given a resolved relative path, produce
the file's bytes, or nothing.

    FileStore("/var/www").read("css/site.css")
        → b"body { ... }"          file exists and is readable
        → None                     anything else

"Anything else" covers: no such file, a directory, a permission error, a
name the OS refuses (embedded NUL), and any path that resolves OUTSIDE the
document root, e.g. through a symlink or an absolute path smuggled in as
"%2Fetc/passwd".

The caller turns None into 404. It never learns WHY the read failed; a
forbidden file and a missing file look the same from the outside.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


class FileStore:
    """
    Read-only view of a document root.

    Safe to share between threads: it holds no mutable state after
    construction.
    """

    def __init__(self, root_dir: str | Path):
        """
        Args:
            root_dir: Directory to serve files from. Must exist.

        Raises:
            ValueError: If root_dir is not a directory.
        """
        # Resolve to absolute path; containment checks compare against it
        self.root_dir = Path(root_dir).resolve()

        if not self.root_dir.is_dir():
            raise ValueError(f"Document root does not exist: {root_dir}")

    def _resolve(self, relative_path: str) -> Optional[Path]:
        """Map a relative path to an absolute one inside the root, or None."""
        try:
            full_path = (self.root_dir / relative_path).resolve()
            full_path.relative_to(self.root_dir)
        except (ValueError, OSError):
            logger.warning(f"Refusing path outside document root: {relative_path!r}")
            return None
        return full_path

    def read(self, relative_path: str) -> Optional[bytes]:
        """
        Read a file below the document root.

        Args:
            relative_path: Decoded, normalized path relative to the root.

        Returns:
            The file contents, or None if the file is missing, unreadable,
            not a regular file, or outside the root.
        """
        full_path = self._resolve(relative_path)
        if full_path is None:
            return None

        try:
            if not full_path.is_file():
                return None
            return full_path.read_bytes()
        except (ValueError, OSError) as e:
            logger.debug(f"Cannot read {full_path}: {e}")
            return None
