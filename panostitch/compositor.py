"""
Stitch downloaded tiles into one panorama and trim the padding around it.

The canvas is sized to the full grid for the zoom level and starts black.
Each tile is pasted at (tile_size * x, tile_size * y). Panoramas that do not
fill the whole grid leave uniform padding on the right and bottom edges,
which is removed by cropping to the bounding box of non-background pixels.
"""
from typing import Any, Iterable, Optional

from .constants import BLACK, JPEG_QUALITY, TILE_SIZE, TRIM_THRESHOLD
from .downloader import TileData
from .errors import CompositionError, EmptyImageError, PanoError
from .imaging import ImageBackend, PillowBackend
from .planner import grid_dimensions


def stitch_tiles(
    tiles: Iterable[TileData],
    zoom: int,
    backend: Optional[ImageBackend] = None,
    tile_size: int = TILE_SIZE,
    background: tuple = BLACK,
) -> Any:
    """
    Paste every tile into a blank canvas sized to the zoom level's grid.

    Args:
        tiles (Iterable[TileData]): Downloaded tiles, in any order.
        zoom (int): Zoom level the tiles were fetched at.
        backend (ImageBackend | None): Imaging backend (default: Pillow).
        tile_size (int): Tile edge length in pixels.
        background (tuple): Canvas fill colour.

    Returns:
        The untrimmed canvas, as a backend image.

    Raises:
        DecodeError: a tile's bytes are not an image.
        CompositionError: a tile's offset falls outside the canvas.
    """
    backend = backend or PillowBackend()
    dim = grid_dimensions(zoom)
    width, height = tile_size * dim.width, tile_size * dim.height
    canvas = backend.new_canvas(width, height, background)

    for tile in tiles:
        left, top = tile_size * tile.x, tile_size * tile.y
        if not (0 <= left < width and 0 <= top < height):
            raise CompositionError(
                f"offset ({left},{top}) outside {width}x{height} canvas",
                tile=(tile.x, tile.y),
            )

        try:
            image = backend.decode(tile.data)
        except PanoError as error:
            raise error.add_context(tile=(tile.x, tile.y))

        backend.paste(canvas, image, left, top)

    return canvas


def trim_pano(
    canvas: Any,
    backend: Optional[ImageBackend] = None,
    threshold: int = TRIM_THRESHOLD,
    background: tuple = BLACK,
) -> Any:
    """
    Crop `canvas` to the smallest box holding every non-background pixel.

    Trimming an image that has no background border returns it unchanged.

    Raises:
        EmptyImageError: every pixel is within `threshold` of the background.
    """
    backend = backend or PillowBackend()
    box = backend.find_trim(canvas, threshold, background)
    if box is None:
        width, height = backend.size(canvas)
        raise EmptyImageError(f"no content above threshold {threshold} in {width}x{height} canvas")
    return backend.crop(canvas, box)


def composite_pano(
    tiles: Iterable[TileData],
    zoom: int,
    backend: Optional[ImageBackend] = None,
    tile_size: int = TILE_SIZE,
    threshold: int = TRIM_THRESHOLD,
) -> Any:
    """Stitch then trim. Returns the final image, ready for encoding."""
    backend = backend or PillowBackend()
    canvas = stitch_tiles(tiles, zoom, backend, tile_size)
    return trim_pano(canvas, backend, threshold)


def compose(
    tiles: Iterable[TileData],
    zoom: int,
    backend: Optional[ImageBackend] = None,
    tile_size: int = TILE_SIZE,
    threshold: int = TRIM_THRESHOLD,
    quality: int = JPEG_QUALITY,
) -> bytes:
    """Stitch, trim and encode the panorama as JPEG bytes."""
    backend = backend or PillowBackend()
    pano = composite_pano(tiles, zoom, backend, tile_size, threshold)
    return backend.encode(pano, quality)
