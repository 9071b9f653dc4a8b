"""
Result types for context operations.

Adding a file never raises for expected failures; it returns either
AddedFile or AddFailure so callers can show the message directly.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Union


class ContextErrorKind(str, Enum):
    DUPLICATE_ENTRY = "duplicate_entry"
    READ_ERROR = "read_error"
    NO_ACTIVE_FILE = "no_active_file"


@dataclass(frozen=True)
class AddedFile:
    """A file was read and appended to the context."""

    path: str
    char_count: int

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class AddFailure:
    """A file could not be added; context is unchanged."""

    kind: ContextErrorKind
    message: str
    path: str = ""

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> Dict:
        return {"kind": self.kind.value, "message": self.message, "path": self.path}


AddResult = Union[AddedFile, AddFailure]


@dataclass(frozen=True)
class ContextStats:
    """Usage snapshot of the assembled context."""

    file_count: int
    char_count: int
    estimated_tokens: int
    max_tokens: int
    percentage: int

    def to_dict(self) -> Dict:
        return asdict(self)
