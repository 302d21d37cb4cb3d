"""Errors raised while turning formula text into a height function."""

from typing import Optional


class CompileError(ValueError):
    """Formula text could not be turned into a usable height function."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.message = message
        self.position = position
        if position is not None:
            super().__init__(f"{message} (at position {position})")
        else:
            super().__init__(message)
