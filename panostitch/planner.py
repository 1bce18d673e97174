"""
Tile grid addressing.

A panorama at zoom `z` is served as a grid of 2**z columns by 2**(z-1) rows.
Descriptors are produced column by column (outer loop over x, inner over y);
that order drives fetching and progress output only, placement is keyed by
coordinates.
"""
from dataclasses import dataclass

from .constants import TILE_ENDPOINT
from .errors import InvalidZoomError


@dataclass(frozen=True)
class GridDimensions:
    width: int
    height: int

    @property
    def count(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class TileDescriptor:
    x: int
    y: int
    url: str


def grid_dimensions(zoom: int) -> GridDimensions:
    """
    Grid size, in tiles, for a zoom level.

    Raises:
        InvalidZoomError: zoom is below 1.
    """
    if zoom < 1:
        raise InvalidZoomError(f"zoom must be >= 1, got {zoom}", stage="planning")
    return GridDimensions(width=1 << zoom, height=1 << (zoom - 1))


def make_tile_url(panoid: str, zoom: int, x: int, y: int, endpoint: str = TILE_ENDPOINT) -> str:
    return f"{endpoint}?output=tile&panoid={panoid}&zoom={zoom}&x={x}&y={y}"


def plan_grid(panoid: str, zoom: int, endpoint: str = TILE_ENDPOINT) -> list[TileDescriptor]:
    """
    List every tile of a panorama in fetch order.

    Args:
        panoid (str): Panorama ID.
        zoom (int): Zoom level (>= 1).
        endpoint (str): Tile endpoint, without query string.

    Returns:
        list[TileDescriptor]: 2**zoom * 2**(zoom-1) descriptors, column-major.
    """
    dim = grid_dimensions(zoom)
    return [
        TileDescriptor(x, y, make_tile_url(panoid, zoom, x, y, endpoint))
        for x in range(dim.width)
        for y in range(dim.height)
    ]
