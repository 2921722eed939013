"""MiniMax chat-completion adapter for chat-UI hosts."""

__version__ = "0.1.0"
