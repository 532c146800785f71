"""Error types raised by the analysis passes."""
from pathlib import Path


class RefAuditError(Exception):
    """Base class for failures that abort an analysis pass."""


class WalkError(RefAuditError):
    """A root could not be traversed (I/O failure somewhere beneath it)."""

    def __init__(self, root: str | Path, cause: BaseException):
        self.root = str(root)
        self.cause = cause
        super().__init__(f"could not walk {self.root}: {cause}")


class ParseError(RefAuditError):
    """A candidate source file could not be read or does not parse cleanly."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"could not parse {self.path}: {reason}")


class PassError(RefAuditError):
    """One extraction pass failed; the underlying error is chained as __cause__."""

    def __init__(self, description: str, cause: BaseException):
        self.description = description
        self.cause = cause
        super().__init__(f"failed to {description}: {cause}")


class AnalysisCancelled(RefAuditError):
    """The cancellation event was set while a pass was running."""

    def __init__(self, message: str = "analysis cancelled"):
        super().__init__(message)
