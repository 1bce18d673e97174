"""
Error types raised by the panorama pipeline.

Every stage fails fast. Errors travel upward unchanged apart from the context
attached on the way out: the pipeline stage that was running and, where one
tile is to blame, its (x, y) grid coordinate.
"""
from typing import Optional, Tuple


class PanoError(Exception):
    """Base class for every failure raised by panostitch."""

    def __init__(self, message: str, stage: Optional[str] = None, tile: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.tile = tile

    def add_context(self, stage: Optional[str] = None, tile: Optional[Tuple[int, int]] = None) -> "PanoError":
        """Fill in stage/tile if they are not already known. Returns self for re-raising."""
        if self.stage is None:
            self.stage = stage
        if self.tile is None:
            self.tile = tile
        return self

    def __str__(self) -> str:
        parts = []
        if self.stage is not None:
            parts.append(f"[{self.stage}]")
        if self.tile is not None:
            parts.append(f"tile ({self.tile[0]},{self.tile[1]})")
        parts.append(self.message)
        return " ".join(parts)


class CancellationError(PanoError):
    """The rate limiter wait was aborted through the cancel event."""


class NetworkError(PanoError):
    """Transport failure or non-2xx response from the tile endpoint."""

    def __init__(self, message: str, status: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status = status


class DecodeError(PanoError):
    """Tile bytes are not a decodable image."""


class CompositionError(PanoError):
    """A tile would land outside the canvas."""


class EmptyImageError(PanoError):
    """Nothing in the stitched canvas differs from the background."""


class EncodeError(PanoError):
    """The final image could not be serialized or written."""


class InvalidZoomError(PanoError, ValueError):
    """Zoom levels below 1 have no rows."""
