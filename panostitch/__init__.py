"""
panostitch - Google Street View Panorama Downloader and Stitcher

This module downloads the tile grid of a Street View panorama and stitches it
into a single trimmed JPEG.

Key features:
- Fetch tiles one at a time through a token bucket rate limiter (aiohttp).
- Abort on the first failed tile; a panorama is either complete or not saved.
- Stitch tiles into a black canvas and trim the padding around the content.
- Cancel a long download through an `asyncio.Event`.
- Supports any zoom level >= 1 (grid of 2**zoom x 2**(zoom-1) tiles).

Example usage::

    import asyncio
    from panostitch import PanoConfig, fetch_panos, timer
    from rich import print

    async def main():
        config = PanoConfig(zoom=2)
        return await fetch_panos(["KGt-9AaQ7UTn_PgwRqtTOg"], config)

    with timer() as t:
        total_panos, successful_panos, output_dir = asyncio.run(main())
        print(f"Processed {successful_panos}/{total_panos} panos in {t.time_elapsed}")
        print(f"Saved at {output_dir}")
"""
from .constants import *
from .errors import *
from .config import *
from .limiter import *
from .fetcher import *
from .planner import *
from .downloader import *
from .imaging import *
from .compositor import *
from .core import *
from .my_utils import *
