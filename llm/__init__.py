"""
LLM Module.

Chat-completion access for the editor assistant:
- Provider registry and OpenAI-compatible client
- Prompt templates for chat, completion and refactoring
- Chat transcript
- Assistant service combining file context with requests

Usage:
    from llm import AssistantService, LLMClient

    service = AssistantService(context_manager, LLMClient(api_key="..."))
    result = service.chat("Explain this module")
"""

from .assistant import AssistantService, ChatResult
from .conversation import ChatMessage, Conversation
from .llm_client import (
    PROVIDERS,
    LLMClient,
    LLMConfigurationError,
    LLMError,
    LLMRequestError,
    LLMResponse,
    get_providers,
)
from .prompts import (
    SYSTEM_PROMPT,
    build_chat_messages,
    build_completion_prompt,
    build_refactor_prompt,
)

__all__ = [
    "AssistantService",
    "ChatResult",
    "ChatMessage",
    "Conversation",
    "LLMClient",
    "LLMResponse",
    "LLMError",
    "LLMConfigurationError",
    "LLMRequestError",
    "PROVIDERS",
    "get_providers",
    "SYSTEM_PROMPT",
    "build_chat_messages",
    "build_completion_prompt",
    "build_refactor_prompt",
]
