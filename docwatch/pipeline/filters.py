"""
Noise-path suppression.

Paths matching any ignore pattern are dropped before identity derivation or
any store access.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional

from docwatch.errors import SetupError

# Editor lock/temp files such as ``.#notes.md``
DEFAULT_IGNORE_PATTERNS = [r"\.#.*"]


class ChangeFilter:
    """Regex-based filter over changed paths."""

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        """
        Compile ignore patterns.

        Args:
            patterns: Regular expressions searched against the path text.
                Defaults to ``DEFAULT_IGNORE_PATTERNS``.

        Raises:
            SetupError: If a pattern is not a valid regular expression
        """
        if patterns is None:
            patterns = DEFAULT_IGNORE_PATTERNS

        self.patterns: List[re.Pattern] = []
        for pattern in patterns:
            try:
                self.patterns.append(re.compile(pattern))
            except re.error as e:
                raise SetupError(f"Invalid ignore pattern '{pattern}': {e}") from e

    def should_ignore(self, path: Path) -> bool:
        """True if any pattern matches the path's textual form."""
        path_str = str(path)
        return any(pattern.search(path_str) for pattern in self.patterns)
