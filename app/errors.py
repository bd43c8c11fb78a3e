"""Exceptions raised by the scoring engine."""

from typing import Optional


class EngineError(Exception):
    """Base class for scoring engine errors."""


class InvalidConfigurationError(EngineError):
    """Scoring criteria or industry multiples failed validation."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class MalformedRecordError(EngineError):
    """A provider record could not be parsed (usually a missing CCN)."""

    def __init__(self, message: str, ccn: Optional[str] = None):
        self.ccn = ccn
        super().__init__(message)
