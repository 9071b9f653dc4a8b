"""
Prompt construction for chat, completion and refactoring requests.
"""

from typing import Dict, List, Optional

SYSTEM_PROMPT = (
    "You are an AI coding assistant integrated into the code editor. "
    "Help users with code questions, completions, and refactoring. "
    "Be concise and practical."
)

COMPLETION_PROMPT = """Complete the following code. Only return the completion, no explanations:

```{language}
{code}
```"""

REFACTOR_PROMPT = """Refactor this code to be cleaner, more efficient, and follow best practices. Return only the refactored code:

```{language}
{code}
```"""


def build_chat_messages(
    user_message: str,
    selected_text: Optional[str] = None,
    language: Optional[str] = None,
    file_context: str = "",
) -> List[Dict[str, str]]:
    """
    Build the message list for a chat request.

    Example user content with a selection and two files in context:

        How do I fix this?

        Context:
        ```python
        x = 1
        ```

        Files in context:

        --- File: src/a.py ---
        ...
    """
    content = user_message

    if selected_text:
        content += f"\n\nContext:\n```{language or ''}\n{selected_text}\n```"

    if file_context:
        content += f"\n\nFiles in context:{file_context}"

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]


def build_completion_prompt(code: str, language: Optional[str] = None) -> str:
    return COMPLETION_PROMPT.format(language=language or "", code=code)


def build_refactor_prompt(code: str, language: Optional[str] = None) -> str:
    return REFACTOR_PROMPT.format(language=language or "", code=code)
