"""
Character-based token estimation.

MiniMax does not publish a local tokenizer, so counts are approximated at
roughly four characters per token.
"""

from __future__ import annotations

import math

from minimax_lm.types import HostMessage, TextPart


class TokenCounter:
    """Estimate token counts for text and host messages."""

    chars_per_token = 4

    def estimate_tokens(self, text: str) -> int:
        """Return ``ceil(len(text) / 4)``, or 0 for empty input."""
        if not text:
            return 0
        return math.ceil(len(text) / self.chars_per_token)

    def count_message(self, message: HostMessage) -> int:
        """Estimate a host message from the text of its ``TextPart``s."""
        text = "".join(
            part.value for part in message.parts if isinstance(part, TextPart)
        )
        return self.estimate_tokens(text)
