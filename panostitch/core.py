"""
Core module for downloading and stitching Google Street View panoramas.

This module ties the pieces together:

- Plan the tile grid of a panorama (`plan_grid`).
- Download every tile, one request at a time, through a shared rate limiter
  (`download_all`).
- Stitch the tiles, trim the black padding and encode the result as JPEG
  (`stitch_tiles`, `trim_pano`).
- Process a single panorama end to end and save it (`process_panoid`).
- Process a list of panoramas, one after another, with a single HTTP
  session and limiter (`fetch_panos`).

Each panorama moves through the steps planning -> fetching -> composing ->
trimming -> encoding. The first error at any step stops that panorama and
carries the name of the step that was running.

Dependencies:
- aiohttp for HTTP requests
- PIL/Pillow (through `imaging.PillowBackend`) for image processing
- rich for colored logging
"""
import asyncio
import os
from enum import Enum
from typing import Optional, Union

import aiohttp
from rich import print
from rich.markup import escape

from .compositor import stitch_tiles, trim_pano
from .config import PanoConfig
from .downloader import ProgressCallback, download_all, print_progress
from .errors import CancellationError, EncodeError, PanoError
from .fetcher import RateLimitedFetcher
from .imaging import ImageBackend, PillowBackend
from .limiter import RateLimiter
from .my_utils import save_img
from .planner import grid_dimensions, plan_grid


class Stage(str, Enum):
    PLANNING = "planning"
    FETCHING = "fetching"
    COMPOSING = "composing"
    TRIMMING = "trimming"
    ENCODING = "encoding"


async def process_panoid(
    fetcher: RateLimitedFetcher,
    panoid: str,
    config: PanoConfig,
    output_dir: str,
    cancel: Optional[asyncio.Event] = None,
    backend: Optional[ImageBackend] = None,
    progress: Optional[ProgressCallback] = print_progress,
) -> dict:
    """
    Download, stitch, trim and save a single panorama.

    Steps:
        1. Plan the tile grid for the configured zoom level.
        2. Fetch every tile sequentially; any failure aborts.
        3. Paste the tiles into a black canvas.
        4. Trim the canvas to its non-background content.
        5. Encode to JPEG and write it under `output_dir/panos_z<zoom>/`.

    Args:
        fetcher (RateLimitedFetcher): Fetcher shared by the whole run.
        panoid (str): Panorama ID to fetch.
        config (PanoConfig): Zoom, tile size, threshold and JPEG settings.
        output_dir (str): Directory to save the panorama image in.
        cancel (asyncio.Event | None): Aborts a pending rate limiter wait.
        backend (ImageBackend | None): Imaging backend (default: Pillow).
        progress (callable | None): Tile progress callback.

    Returns:
        dict: Metadata containing:
            - "panoid" (str): Panorama ID.
            - "zoom" (int): Zoom level used.
            - "size" (tuple[int, int]): Trimmed image width and height in pixels.
            - "tiles" (tuple[int, int]): Grid size in tiles (x_tiles, y_tiles).
            - "file_size" (str): Human-readable size of the saved image.

    Raises:
        PanoError: the first failure, with `stage` set to where it happened.
    """
    backend = backend or PillowBackend()
    stage = Stage.PLANNING

    try:
        dim = grid_dimensions(config.zoom)
        descriptors = plan_grid(panoid, config.zoom, config.endpoint)

        stage = Stage.FETCHING
        tiles = await download_all(descriptors, fetcher, cancel, progress)

        stage = Stage.COMPOSING
        canvas = stitch_tiles(tiles, config.zoom, backend, config.tile_size)

        stage = Stage.TRIMMING
        pano = trim_pano(canvas, backend, config.trim_threshold)
        img_size = backend.size(pano)

        stage = Stage.ENCODING
        data = backend.encode(pano, config.quality)
        try:
            img_file_size = save_img(data, output_dir, panoid, config.zoom)
        except OSError as error:
            raise EncodeError(f"could not write `{panoid}`: {error}") from error

    except PanoError as error:
        raise error.add_context(stage=stage.value)

    print(
        f"[green][OK] Panoid `{escape(panoid)}` | zoom {config.zoom} "
        f"| w*h {img_size[0]}x{img_size[1]} "
        f"| tiles: {dim.width}x{dim.height} "
        f"| size {img_file_size}[/]"
    )
    return {
        "panoid": panoid,
        "zoom": config.zoom,
        "size": img_size,
        "tiles": (dim.width, dim.height),
        "file_size": img_file_size,
    }


async def fetch_panos(
    panoids: list[str],
    config: PanoConfig,
    output_dir: Union[str, None] = None,
    connector: Optional[aiohttp.TCPConnector] = None,
    cancel: Optional[asyncio.Event] = None,
    progress: Optional[ProgressCallback] = print_progress,
) -> tuple[int, int, str]:
    """
    Download and stitch several panoramas, one after another.

    All panoramas share one HTTP session and one rate limiter, so the request
    rate holds across the whole batch. A failed panorama is reported and
    skipped; cancellation stops the batch.

    Args:
        panoids (list[str]): Panorama IDs to fetch.
        config (PanoConfig): Run configuration.
        output_dir (str | None): Output directory (default: cwd).
        connector (aiohttp.TCPConnector | None): Connector for the session.
        cancel (asyncio.Event | None): Set to abort the run.
        progress (callable | None): Tile progress callback.

    Returns:
        tuple[int, int, str]: A tuple containing:
            - total_panos (int): Number of panorama IDs processed.
            - successful_panos (int): Number of panoramas saved.
            - output_dir (str): Output directory where the panoramas are saved.

    Raises:
        CancellationError: `cancel` was set during the run.
    """
    print("[green]| Running Scraper..[/]\n")

    if output_dir is None: output_dir = os.getcwd()

    limiter = RateLimiter(config.interval, config.burst)
    backend = PillowBackend()
    successful = 0

    async with aiohttp.ClientSession(connector=connector) as session:
        fetcher = RateLimitedFetcher(session, limiter, config.timeout)

        for panoid in panoids:
            try:
                await process_panoid(fetcher, panoid, config, output_dir, cancel, backend, progress)
            except CancellationError:
                print(f"[red][CANCELLED] Panoid `{escape(panoid)}`[/]")
                raise
            except PanoError as error:
                print(f"[red][PROCESSING ERROR] Panoid `{escape(panoid)}`: {escape(str(error))}[/]")
            else:
                successful += 1

    return len(panoids), successful, output_dir
