"""Enumerations shared by the CLI and the service layer.

Keeping them in the domain layer lets both sides share a single source of
truth without circular imports with adapters.
"""

from __future__ import annotations

from enum import Enum


class BreedPolicy(str, Enum):
    """What to do with characters that are unsafe in a URL path segment."""

    ENCODE = "encode"
    REJECT = "reject"

    @classmethod
    def default(cls) -> "BreedPolicy":
        return cls.ENCODE


class PipelineStyle(str, Enum):
    """Sequencing mechanism used to chain the pipeline stages."""

    AWAIT = "await"
    CALLBACKS = "callbacks"

    @classmethod
    def default(cls) -> "PipelineStyle":
        """Return the style used when none is requested."""

        return cls.AWAIT

    def label(self) -> str:
        """Human readable label for output and logging."""

        return "async/await" if self is PipelineStyle.AWAIT else "done-callbacks"
