"""
Context window budget management.

Treat prompt context as a resource with a budget.

The budget is expressed in tokens but enforced in characters, using an
average characters-per-token ratio. Exact counts for outgoing prompts use
tiktoken.
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache

import tiktoken

logger = logging.getLogger(__name__)

MAX_CONTEXT_TOKENS = 8000
CHARS_PER_TOKEN = 4

# Minimum room left in the budget for a truncated block to be worth including
MIN_TRUNCATED_CHARS = 100
TRUNCATION_MARKER = "\n... [truncated]"


@dataclass(frozen=True)
class ContextBudget:
    """Token ceiling and the character ceiling derived from it."""

    max_tokens: int = MAX_CONTEXT_TOKENS
    chars_per_token: int = CHARS_PER_TOKEN

    def __post_init__(self):
        if self.max_tokens < 1:
            raise ValueError("max_tokens must be a positive integer")
        if self.chars_per_token < 1:
            raise ValueError("chars_per_token must be a positive integer")

    @property
    def max_chars(self) -> int:
        """Hard upper bound on assembled context length."""
        return self.max_tokens * self.chars_per_token

    def estimate_tokens(self, char_count: int) -> int:
        """Approximate token count for a character count."""
        return math.ceil(char_count / self.chars_per_token)

    def percentage_used(self, char_count: int) -> int:
        """Share of the character ceiling consumed, rounded to a whole percent."""
        return _round_half_up(char_count / self.max_chars * 100)


def _round_half_up(value: float) -> int:
    # round() uses banker's rounding; usage percentages round .5 upwards
    return int(math.floor(value + 0.5))


@lru_cache()
def _get_encoding(name: str = "cl100k_base"):
    return tiktoken.get_encoding(name)


def count_tokens(text: str) -> int:
    """Count tokens in text with the cl100k_base encoding."""
    return len(_get_encoding().encode(text))
