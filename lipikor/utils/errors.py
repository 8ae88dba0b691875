"""
Exception types raised by the export core.

Malformed formatting metadata never raises; it degrades to a documented
default. Only structural violations and packaging failures reach the caller.
"""

from typing import Optional


class LipikorError(Exception):
    """Base class for export errors."""


class StructureError(LipikorError):
    """A block, row or cell does not have the shape the pipeline requires."""

    def __init__(self, message: str, block_id: Optional[str] = None):
        self.block_id = block_id
        if block_id:
            message = f"{message} (block '{block_id}')"
        super().__init__(message)


class PackagingError(LipikorError):
    """Serializing the assembled document into a DOCX container failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
