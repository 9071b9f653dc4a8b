"""
Chat transcript shown in the assistant sidebar.
"""

import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional


@dataclass(frozen=True)
class ChatMessage:
    """One entry of the transcript."""

    role: str  # "user" or "assistant"
    content: str
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class Conversation:
    """
    Ordered chat transcript.

    When max_messages is set, the oldest messages are dropped first.
    """

    def __init__(self, max_messages: Optional[int] = None):
        self._messages: Deque[ChatMessage] = deque(maxlen=max_messages)
        self._lock = threading.Lock()

    def add(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        with self._lock:
            self._messages.append(message)
        return message

    def messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
