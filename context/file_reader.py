"""
File reading for context selection.

Reads a selected file's full text in one attempt. Any failure is raised as
FileReadError with a message that can be shown to the user as is.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileReadError(Exception):
    """Raised when a file cannot be read as text."""

    pass


class FileReader:
    """
    Text file reader with a size limit.

    Usage:
        reader = FileReader(max_file_size_mb=5)
        content = reader.read("/project/src/main.py")
    """

    def __init__(self, max_file_size_mb: float = 5.0, encoding: str = "utf-8"):
        """
        Args:
            max_file_size_mb: Files larger than this are rejected
            encoding: Text encoding used to decode file bytes
        """
        self.max_file_size_mb = max_file_size_mb
        self.encoding = encoding

    def __call__(self, path: str) -> str:
        return self.read(path)

    def read(self, path: str) -> str:
        """
        Read the full text content of a file.

        Raises:
            FileReadError: If the file is missing, not a regular file,
                too large, unreadable, or not valid text
        """
        file_path = Path(path)

        try:
            if not file_path.exists():
                raise FileReadError(f"Failed to read file: not found: {path}")
            if not file_path.is_file():
                raise FileReadError(f"Failed to read file: not a file: {path}")

            size_mb = file_path.stat().st_size / (1024 * 1024)
            if size_mb > self.max_file_size_mb:
                raise FileReadError(
                    f"Failed to read file: too large ({size_mb:.1f}MB): {path}"
                )
            data = file_path.read_bytes()
        except PermissionError:
            raise FileReadError(f"Failed to read file: permission denied: {path}")
        except OSError as e:
            raise FileReadError(f"Failed to read file: {e}")

        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError:
            raise FileReadError(f"Failed to read file: not a text file: {path}")
