"""Balanced-parentheses checker."""

from pathlib import Path
from typing import Optional, Sequence

from .errors import IOFailureError, InvalidArgumentError
from .logger import StructuredLogger

OPEN = "("
CLOSE = ")"


class ParenthesesChecker:
    """Checks that every ')' closes an earlier '(' and nothing is left open."""

    def __init__(self, text: Optional[str], logger: Optional[StructuredLogger] = None):
        if text is None:
            raise InvalidArgumentError("Input string cannot be None")
        self.text = text
        self.logger = logger

    def is_balanced(self) -> bool:
        """
        Empty input, or input without parentheses, is balanced.
        Characters other than '(' and ')' are ignored.
        """
        if self.logger:
            self.logger.debug("Checking balanced parentheses", text=self.text)
        stack = []

        for ch in self.text:
            if ch == OPEN:
                stack.append(ch)
            elif ch == CLOSE:
                if not stack or stack.pop() != OPEN:
                    return False
        return not stack


def resolve_checker_input(args: Sequence[str], encoding: str = "utf-8") -> Optional[str]:
    """
    Turn CLI arguments into the text to check.

    One argument is the literal text. Two arguments are a mode and a value:
    "string" uses the value as-is, "file" reads the file, strips every line
    and joins them. Any other shape returns None.

    Raises:
        IOFailureError: The file in "file" mode cannot be read
    """
    if len(args) == 1:
        return args[0]
    if len(args) != 2:
        return None

    mode, value = args
    if mode == "string":
        return value
    if mode == "file":
        path = Path(value)
        try:
            with path.open("r", encoding=encoding) as f:
                return "".join(line.strip() for line in f)
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailureError(f"Unable to read file: {path}", path=path) from e
    return None
