"""Per-file failure taxonomy for the render pipeline."""

from __future__ import annotations

from pathlib import Path


class RenderError(Exception):
    """Raised when one source file cannot be rendered; never fatal to a session."""

    code = "RENDER_ERROR"

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class CompileError(RenderError):
    """Raised when the stylesheet compiler rejects a source file."""

    code = "COMPILE_ERROR"


class PostProcessError(RenderError):
    """Raised when compiled CSS cannot be vendor-prefixed."""

    code = "POSTPROCESS_ERROR"


class MarkerNotFound(RenderError):
    """Raised when an existing output file has no start marker."""

    code = "MARKER_NOT_FOUND"


class TemplateMalformed(RenderError):
    """Raised when the fallback template lacks its content placeholder."""

    code = "TEMPLATE_MALFORMED"


class InvalidDestination(RenderError):
    """Raised when the destination directory cannot be created."""

    code = "INVALID_DESTINATION"


class WriteFailure(RenderError):
    """Raised when final content cannot be written to disk."""

    code = "WRITE_FAILED"


class DeleteFailure(RenderError):
    """Raised when a stale output file cannot be removed."""

    code = "DELETE_FAILED"
