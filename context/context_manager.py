"""
Multi-file context manager.

Tracks the files a user selected as context, caches their contents and
assembles them into a single prompt-ready string under a character budget.

Usage:
    manager = ContextManager(budget=ContextBudget(max_tokens=8000))
    manager.on_change(lambda stats: print(stats.percentage))

    result = manager.add_file("/project/src/app.py")
    if not result.success:
        print(result.message)

    text = manager.build_context()
"""

import asyncio
import logging
import os
import threading
from typing import Callable, Dict, List, Optional, Tuple

from .context_budgeting import MIN_TRUNCATED_CHARS, TRUNCATION_MARKER, ContextBudget
from .file_reader import FileReader, FileReadError
from .results import AddedFile, AddFailure, AddResult, ContextErrorKind, ContextStats

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ContextStats], None]


class ContextManager:
    """
    Ordered set of selected files plus their cached contents.

    The file list and the content cache always hold the same members.
    Mutations are serialized behind one lock; listeners are notified after
    every mutation that changed state.
    """

    def __init__(
        self,
        budget: Optional[ContextBudget] = None,
        reader: Optional[Callable[[str], str]] = None,
        project_root: Optional[Callable[[], Optional[str]]] = None,
    ):
        """
        Args:
            budget: Token/character budget (defaults to 8000 tokens)
            reader: Callable returning a file's text, raising FileReadError
            project_root: Callable returning the project root, or None
        """
        self.budget = budget or ContextBudget()
        self._reader = reader or FileReader()
        self._project_root = project_root
        self._files: List[str] = []
        self._contents: Dict[str, str] = {}
        self._listeners: List[ChangeListener] = []
        self._lock = threading.RLock()

    def add_file(self, path: str) -> AddResult:
        """Read a file and append it to the context."""
        with self._lock:
            if path in self._contents:
                return self._duplicate(path)

            try:
                content = self._reader(path)
            except (FileReadError, OSError) as e:
                return self._read_failure(path, e)

            self._commit(path, content)
            stats = self.get_stats()

        self._notify_change(stats)
        return AddedFile(path=path, char_count=len(content))

    async def add_file_async(self, path: str, timeout: Optional[float] = None) -> AddResult:
        """
        Add a file without blocking the event loop.

        The read runs in a worker thread and can be cancelled or timed out.
        State is only touched after the read completes.
        """
        with self._lock:
            if path in self._contents:
                return self._duplicate(path)

        try:
            content = await asyncio.wait_for(
                asyncio.to_thread(self._reader, path), timeout=timeout
            )
        except (FileReadError, OSError) as e:
            return self._read_failure(path, e)
        except asyncio.TimeoutError:
            message = f"Failed to read file: timed out after {timeout}s"
            logger.warning(f"Could not add {path} to context: {message}")
            return AddFailure(ContextErrorKind.READ_ERROR, message, path)

        with self._lock:
            # Another add may have committed the same path while reading
            if path in self._contents:
                return self._duplicate(path)
            self._commit(path, content)
            stats = self.get_stats()

        self._notify_change(stats)
        return AddedFile(path=path, char_count=len(content))

    def add_current_file(self, active_path: Optional[str]) -> AddResult:
        """Add the editor's active file, if there is one."""
        if not active_path:
            return AddFailure(ContextErrorKind.NO_ACTIVE_FILE, "No active file")
        return self.add_file(active_path)

    def remove_file(self, path: str) -> bool:
        """Remove a file from the context. Returns False if it was not present."""
        with self._lock:
            if path not in self._contents:
                return False
            self._files.remove(path)
            del self._contents[path]
            stats = self.get_stats()

        self._notify_change(stats)
        return True

    def clear_all(self) -> None:
        """Remove every file from the context."""
        with self._lock:
            self._files = []
            self._contents.clear()
            stats = self.get_stats()

        self._notify_change(stats)

    def reset(self) -> None:
        """Clear all files and drop registered listeners."""
        with self._lock:
            self._files = []
            self._contents.clear()
            self._listeners = []

    def get_files(self) -> List[str]:
        """Snapshot of selected files in insertion order."""
        with self._lock:
            return list(self._files)

    def build_context(self) -> str:
        """
        Concatenate file blocks in selection order under the character budget.

        The first block that does not fit is cut to the remaining room and
        followed by a truncation marker (only if more than
        MIN_TRUNCATED_CHARS remain); no later file is considered.
        """
        with self._lock:
            return self._assemble()

    def get_stats(self) -> ContextStats:
        """Usage statistics for the current context."""
        return self.snapshot()[1]

    def snapshot(self) -> Tuple[str, ContextStats]:
        """Assembled context and its stats, taken under one lock."""
        with self._lock:
            context = self._assemble()
            file_count = len(self._files)
        return context, self._stats(file_count, len(context))

    def empty_stats(self) -> ContextStats:
        """Stats for a prompt that carries no file context."""
        return self._stats(0, 0)

    def _stats(self, file_count: int, char_count: int) -> ContextStats:
        return ContextStats(
            file_count=file_count,
            char_count=char_count,
            estimated_tokens=self.budget.estimate_tokens(char_count),
            max_tokens=self.budget.max_tokens,
            percentage=self.budget.percentage_used(char_count),
        )

    def _assemble(self) -> str:
        max_chars = self.budget.max_chars
        parts: List[str] = []
        total_chars = 0

        for path in self._files:
            content = self._contents.get(path)
            if content is None:
                continue

            block = f"\n\n--- File: {self.display_label(path)} ---\n{content}\n"

            if total_chars + len(block) > max_chars:
                remaining = max_chars - total_chars
                if remaining > MIN_TRUNCATED_CHARS:
                    parts.append(block[:remaining] + TRUNCATION_MARKER)
                break

            parts.append(block)
            total_chars += len(block)

        return "".join(parts)

    def on_change(self, callback: ChangeListener) -> None:
        """Register a listener called with fresh stats after each change."""
        with self._lock:
            self._listeners.append(callback)

    def display_label(self, path: str) -> str:
        """Path relative to the project root, or the path itself outside it."""
        root = self._project_root() if self._project_root else None
        if not root:
            return path

        root = os.path.normpath(root)
        normalized = os.path.normpath(path)
        try:
            if normalized == root or os.path.commonpath([root, normalized]) != root:
                return path
        except ValueError:
            # Mixed absolute/relative paths or different drives
            return path
        return os.path.relpath(normalized, root)

    def _commit(self, path: str, content: str) -> None:
        self._contents[path] = content
        self._files.append(path)
        logger.debug(f"Added {path} to context ({len(content)} chars)")

    def _read_failure(self, path: str, error: Exception) -> AddFailure:
        message = str(error)
        if not isinstance(error, FileReadError):
            message = f"Failed to read file: {error}"
        logger.warning(f"Could not add {path} to context: {message}")
        return AddFailure(ContextErrorKind.READ_ERROR, message, path)

    def _duplicate(self, path: str) -> AddFailure:
        return AddFailure(ContextErrorKind.DUPLICATE_ENTRY, "File already in context", path)

    def _notify_change(self, stats: ContextStats) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for callback in listeners:
            try:
                callback(stats)
            except Exception:
                logger.exception("Error in context change listener")


def fixed_project_root(root: Optional[str]) -> Callable[[], Optional[str]]:
    """Project-root resolver for a root known up front."""

    def resolve() -> Optional[str]:
        return root

    return resolve
