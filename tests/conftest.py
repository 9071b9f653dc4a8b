from types import SimpleNamespace
from typing import Dict, List

import pytest

from context import FileReadError
from llm import LLMClient


class MemoryReader:
    """Reader over an in-memory file table; unknown paths fail like missing files."""

    def __init__(self, files: Dict[str, str]):
        self.files = dict(files)
        self.calls: List[str] = []

    def __call__(self, path: str) -> str:
        self.calls.append(path)
        if path not in self.files:
            raise FileReadError(f"Failed to read file: not found: {path}")
        return self.files[path]


class FakeCompletions:
    """Stands in for openai's client.chat.completions."""

    def __init__(self, content: str = "ok", error: Exception = None):
        self.content = content
        self.error = error
        self.requests: List[dict] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            model=kwargs["model"],
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )


def make_llm_client(completions: FakeCompletions, **kwargs) -> LLMClient:
    kwargs.setdefault("api_key", "test-key")
    client = LLMClient(**kwargs)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client


@pytest.fixture
def memory_reader():
    return MemoryReader(
        {
            "/proj/a.py": "print('a')\n",
            "/proj/b.py": "print('b')\n",
            "/proj/c.py": "print('c')\n",
        }
    )


@pytest.fixture
def completions():
    return FakeCompletions(content="Here is the answer.")


@pytest.fixture
def llm_client(completions):
    return make_llm_client(completions)
