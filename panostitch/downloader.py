"""
Sequential tile download.

Tiles are fetched one at a time in descriptor order through a single
`RateLimitedFetcher`. The first failure aborts the download; callers get
either every tile or an exception, never a partial grid.
"""
import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from rich import print

from .errors import PanoError
from .fetcher import RateLimitedFetcher
from .planner import TileDescriptor


@dataclass(frozen=True)
class TileData:
    x: int
    y: int
    data: bytes


ProgressCallback = Callable[[str, TileDescriptor, int, int], None]


def print_progress(event: str, tile: TileDescriptor, index: int, total: int) -> None:
    if event == "fetching":
        print(f"[grey50][Fetching] tile ({tile.x},{tile.y}) {index}/{total}[/]")
    else:
        print(f"[cyan][Done] tile ({tile.x},{tile.y}) {index}/{total}[/]")


async def download_all(
    descriptors: Sequence[TileDescriptor],
    fetcher: RateLimitedFetcher,
    cancel: Optional[asyncio.Event] = None,
    progress: Optional[ProgressCallback] = print_progress,
) -> list[TileData]:
    """
    Fetch every descriptor in order and pair each body with its coordinates.

    Args:
        descriptors (Sequence[TileDescriptor]): Tiles to fetch, in order.
        fetcher (RateLimitedFetcher): Fetcher shared by the whole run.
        cancel (asyncio.Event | None): Aborts a pending rate limiter wait.
        progress (callable | None): Called with ("fetching" | "done", tile,
            1-based index, total) around each fetch. None disables it.

    Returns:
        list[TileData]: One entry per descriptor, in descriptor order.

    Raises:
        PanoError: the first fetch failure, tagged with the tile coordinates.
    """
    total = len(descriptors)
    results = []

    for index, tile in enumerate(descriptors, start=1):
        if progress is not None:
            progress("fetching", tile, index, total)

        try:
            data = await fetcher.fetch(tile.url, cancel)
        except PanoError as error:
            raise error.add_context(stage="fetching", tile=(tile.x, tile.y))

        if progress is not None:
            progress("done", tile, index, total)

        results.append(TileData(tile.x, tile.y, data))

    return results
