"""
Context Assembly Module.

Treat prompt context as a resource with a budget.

This module handles:
- Tracking the files selected as context, in selection order
- Reading and caching file contents
- Assembling a bounded prompt-ready string
- Usage statistics and change notifications

Usage:
    from context import ContextManager, ContextBudget

    manager = ContextManager(budget=ContextBudget(max_tokens=8000))
    manager.add_file("/project/src/app.py")
    text = manager.build_context()
    stats = manager.get_stats()
"""

from .context_budgeting import (
    CHARS_PER_TOKEN,
    MAX_CONTEXT_TOKENS,
    TRUNCATION_MARKER,
    ContextBudget,
    count_tokens,
)
from .context_manager import ContextManager, fixed_project_root
from .file_reader import FileReader, FileReadError
from .results import AddedFile, AddFailure, AddResult, ContextErrorKind, ContextStats

__all__ = [
    "ContextManager",
    "ContextBudget",
    "ContextStats",
    "ContextErrorKind",
    "AddedFile",
    "AddFailure",
    "AddResult",
    "FileReader",
    "FileReadError",
    "fixed_project_root",
    "count_tokens",
    "MAX_CONTEXT_TOKENS",
    "CHARS_PER_TOKEN",
    "TRUNCATION_MARKER",
]
