"""
Assistant service: ties the selected file context to chat requests.

Flow for every request:
1. Assemble the file context from the context manager
2. Build messages
3. Call the chat-completion provider
4. Record the exchange in the transcript and latency metrics
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from context import ContextManager, ContextStats, count_tokens
from monitoring.latency_metrics import LatencyCollector, LatencyMetrics

from .conversation import Conversation
from .llm_client import LLMClient
from .prompts import build_chat_messages, build_completion_prompt, build_refactor_prompt

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    """Answer plus the context and token usage that produced it."""

    answer: str
    model: str
    context_stats: ContextStats
    prompt_tokens: int
    usage: Dict[str, int] = field(default_factory=dict)


class AssistantService:
    """
    Chat, completion and refactoring on top of the selected file context.

    Usage:
        service = AssistantService(manager, LLMClient.from_settings(settings))
        result = service.chat("What does main() do?")
    """

    def __init__(
        self,
        context_manager: ContextManager,
        llm_client: LLMClient,
        conversation: Optional[Conversation] = None,
        metrics: Optional[LatencyCollector] = None,
        token_counter: Callable[[str], int] = count_tokens,
    ):
        self.context_manager = context_manager
        self.llm_client = llm_client
        self.conversation = conversation or Conversation()
        self.metrics = metrics or LatencyCollector()
        self.token_counter = token_counter

    def chat(
        self,
        message: str,
        selected_text: Optional[str] = None,
        language: Optional[str] = None,
        include_files: bool = True,
    ) -> ChatResult:
        """Ask a free-form question, with selected text and file context attached."""
        return self._run(
            "chat",
            message,
            selected_text=selected_text,
            language=language,
            include_files=include_files,
        )

    def complete(self, code: str, language: Optional[str] = None) -> ChatResult:
        """Ask for a completion of the given code."""
        prompt = build_completion_prompt(code, language)
        return self._run("complete", prompt)

    def refactor(self, selected_text: str, language: Optional[str] = None) -> ChatResult:
        """Ask for a refactored version of the selected code."""
        if not selected_text or not selected_text.strip():
            raise ValueError("No text selected")
        prompt = build_refactor_prompt(selected_text, language)
        return self._run("refactor", prompt)

    def _run(
        self,
        kind: str,
        message: str,
        selected_text: Optional[str] = None,
        language: Optional[str] = None,
        include_files: bool = True,
    ) -> ChatResult:
        start_time = time.time()

        if include_files:
            file_context, stats = self.context_manager.snapshot()
        else:
            file_context, stats = "", self.context_manager.empty_stats()
        if file_context:
            logger.info(
                f"Context includes {stats.file_count} files "
                f"({stats.estimated_tokens} tokens)"
            )

        messages = build_chat_messages(
            message,
            selected_text=selected_text,
            language=language,
            file_context=file_context,
        )
        prompt_tokens = sum(self.token_counter(m["content"]) for m in messages)

        self.conversation.add("user", message)

        llm_start = time.time()
        try:
            response = self.llm_client.generate(messages)
        except Exception:
            self.metrics.record(
                LatencyMetrics(
                    kind=kind,
                    total_ms=(time.time() - start_time) * 1000,
                    llm_ms=(time.time() - llm_start) * 1000,
                    failed=True,
                )
            )
            raise
        llm_ms = (time.time() - llm_start) * 1000

        self.conversation.add("assistant", response.content)
        self.metrics.record(
            LatencyMetrics(kind=kind, total_ms=(time.time() - start_time) * 1000, llm_ms=llm_ms)
        )

        return ChatResult(
            answer=response.content,
            model=response.model,
            context_stats=stats,
            prompt_tokens=prompt_tokens,
            usage=response.usage,
        )
