"""Pipeline error hierarchy.

Every stage raises a subclass of `PipelineError`; the orchestrator is the
single place that catches them and reports to the operator.
"""

from __future__ import annotations

from typing import Sequence


class PipelineError(Exception):
    """Base error for any stage failure."""

    stage: str = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ReadError(PipelineError):
    """The breed file could not be read or decoded."""

    stage = "read"


class WriteError(PipelineError):
    """The output file could not be written."""

    stage = "write"


class FetchError(PipelineError):
    """Transport failure, non-2xx status or unexpected response body."""

    stage = "fetch"


class InvalidBreedError(FetchError):
    """The breed cannot be turned into a safe URL path."""


class BatchFetchError(FetchError):
    """At least one request of an all-or-nothing batch failed."""

    def __init__(self, errors: Sequence[BaseException], total: int) -> None:
        self.errors = list(errors)
        self.total = total
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{len(self.errors)} of {total} requests failed: {details}")


class UnexpectedPipelineError(PipelineError):
    """Catch-all wrapper for failures outside the known kinds."""
