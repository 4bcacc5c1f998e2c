"""Exception types raised by planetmesh."""

from __future__ import annotations

from typing import Iterable


class ConfigurationError(ValueError):
    """Invalid generation settings, rejected before any work starts.

    *problems* holds every individual message that was found, so callers
    can report them all at once.
    """

    def __init__(self, problems: Iterable[str] | str) -> None:
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")


class SeamMismatchError(AssertionError):
    """Two faces disagree about a shared edge vertex.

    Indicates an edge-walk ordering bug, never a recoverable condition.
    """
