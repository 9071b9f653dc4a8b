from llm import SYSTEM_PROMPT, build_chat_messages, build_completion_prompt, build_refactor_prompt


def test_plain_chat_message():
    messages = build_chat_messages("What is a closure?")

    assert messages == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "What is a closure?"},
    ]


def test_selection_is_fenced_with_language():
    messages = build_chat_messages("Explain", selected_text="x = 1", language="python")

    assert messages[1]["content"] == "Explain\n\nContext:\n```python\nx = 1\n```"


def test_file_context_is_appended_after_selection():
    file_context = "\n\n--- File: a.py ---\nprint('a')\n"

    content = build_chat_messages("Explain", selected_text="x", file_context=file_context)[1][
        "content"
    ]

    assert content.index("Context:") < content.index("Files in context:")
    assert content.endswith(file_context)


def test_completion_and_refactor_prompts():
    completion = build_completion_prompt("def f(", "python")
    refactor = build_refactor_prompt("a=1;b=2", None)

    assert completion.startswith("Complete the following code.")
    assert "```python\ndef f(\n```" in completion
    assert refactor.startswith("Refactor this code")
    assert "```\na=1;b=2\n```" in refactor
