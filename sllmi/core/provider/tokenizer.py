"""Token counting capability used by generation clients."""

from typing import Protocol


class Tokenizer(Protocol):
    """Counts tokens for one model family. Must not need credentials."""

    def count_tokens(self, text: str) -> int: ...


class EstimatingTokenizer:
    """Character-based token estimate.

    Uses the common rough rule of about four characters per token. Empty
    text has zero tokens; any other text has at least one.
    """

    def __init__(self, chars_per_token: int = 4) -> None:
        if chars_per_token < 1:
            raise ValueError(f"chars_per_token must be positive, got {chars_per_token}")
        self.chars_per_token = chars_per_token

    def count_tokens(self, text: str) -> int:
        if not isinstance(text, str):
            raise TypeError(f"expected str, got {type(text).__name__}")
        if not text:
            return 0
        return max(1, len(text) // self.chars_per_token)
