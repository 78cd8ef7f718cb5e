"""Errors raised while discovering and rewriting marker blocks."""

from __future__ import annotations

from pathlib import Path


class RewriteError(Exception):
    """Base class for every fatal rewrite failure."""

    kind = "RewriteError"


class MarkerError(RewriteError):
    """A problem with one named marker block."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class MarkerNotFound(MarkerError):
    kind = "MarkerNotFound"

    def __init__(self, name: str) -> None:
        super().__init__(name, f"marker '{name}' not found")


class DuplicateMarker(MarkerError):
    kind = "DuplicateMarker"

    def __init__(self, name: str, lines: list[int]) -> None:
        where = ", ".join(str(n) for n in lines)
        super().__init__(name, f"marker '{name}' starts more than once (lines {where})")
        self.lines = lines


class UnterminatedMarker(MarkerError):
    kind = "UnterminatedMarker"

    def __init__(self, name: str, line: int) -> None:
        super().__init__(name, f"marker '{name}' opened on line {line} is never closed")
        self.line = line


class OverlappingMarkers(MarkerError):
    kind = "OverlappingMarkers"

    def __init__(self, name: str, other: str) -> None:
        super().__init__(name, f"markers '{name}' and '{other}' overlap")
        self.other = other


class IOReadFailure(RewriteError):
    kind = "IOReadFailure"

    def __init__(self, path: Path | str, error: OSError) -> None:
        super().__init__(f"cannot read {path}: {error}")
        self.path = Path(path)
        self.error = error


class IOWriteFailure(RewriteError):
    kind = "IOWriteFailure"

    def __init__(self, path: Path | str, error: OSError) -> None:
        super().__init__(f"cannot write {path}: {error}")
        self.path = Path(path)
        self.error = error


class PlanError(ValueError):
    """A rewrite plan file or rule table is malformed."""

    kind = "PlanError"


class UnusedRuleWarning(UserWarning):
    """A rule's marker is absent from the file and the plan is not strict."""

    def __init__(self, name: str) -> None:
        super().__init__(f"rule '{name}' matched no marker; skipped")
        self.name = name
