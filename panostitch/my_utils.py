"""
Utility module for the panorama downloader.

This module provides helper functions and classes for:

- Timing code execution (`timer` context manager).
- Loading datasets of panorama IDs (`open_dataset`).
- Parsing command-line arguments (`parse_args`).
- Saving encoded panoramas and formatting file sizes (`save_img`, `format_size`).

Dependencies:
- argparse for CLI argument parsing
- json and os for dataset management and file handling
"""
import argparse
import json
import os
import time

from .constants import (
    DEFAULT_ZOOM,
    JPEG_QUALITY,
    RATE_BURST,
    RATE_INTERVAL,
    REQUEST_TIMEOUT,
    TILE_ENDPOINT,
    TILE_SIZE,
    TRIM_THRESHOLD,
)


class timer:
    """
    Context manager to measure elapsed execution time.

    >>> with timer() as t:
    ...     time.sleep(2)
    >>> print(t.time_elapsed)
    '0h 0m 2.00s'
    """

    def __enter__(self):
        self.start = time.time()
        self.time_elapsed = None
        return self

    def __exit__(self, *args):
        self.end = time.time()
        self.interval = self.end - self.start
        hrs, rem = divmod(self.interval, 3600)
        mins, secs = divmod(rem, 60)
        self.time_elapsed = f"{int(hrs)}h {int(mins)}m {secs:.2f}s"
        return False


def open_dataset(dataset_location: str) -> list[str]:
    """
    Load a JSON file holding a list of panorama IDs.

    Raises:
        ValueError: the file does not hold a JSON list of strings.
    """
    with open(dataset_location) as dataset:
        panoids = json.load(dataset)

    if not isinstance(panoids, list) or not all(isinstance(p, str) for p in panoids):
        raise ValueError(f"{dataset_location} must contain a JSON list of panorama IDs")
    return panoids


def parse_args(argv=None):
    """
    Parse command-line arguments for the panorama downloader.

    Arguments:
        --panoid (str, repeatable): Panorama ID to download.
        --dataset (str): Path to a JSON list of panorama IDs.
        --zoom (int, optional): Zoom level, >= 1. (Default: 4)
        --tile-size (int, optional): Tile edge in pixels. (Default: 512)
        --trim-threshold (int, optional): Background tolerance. (Default: 6)
        --interval (float, optional): Seconds between requests. (Default: 0.2)
        --burst (int, optional): Requests admitted back to back. (Default: 1)
        --timeout (float, optional): Per-request timeout in seconds. (Default: 30)
        --deadline (float, optional): Cancel the run after this many seconds.
        --quality (int, optional): JPEG quality. (Default: 95)
        --limit (int, optional): Limit panoids for testing. (Default: None)
        --output (str, optional): Output directory. (Default: cwd)
        --conn-limit (int, optional): Maximum TCP connections. (Default: 10)

    Returns:
        argparse.Namespace: Parsed arguments object.
    """
    parser = argparse.ArgumentParser(
        description="Google Street View Panorama Downloader and Stitcher"
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--panoid", action="append", help="Panorama ID (repeatable)")
    source.add_argument("--dataset", type=str, help="Path to dataset.json (list of panorama IDs)")

    parser.add_argument("--zoom", type=int, default=DEFAULT_ZOOM, help="Zoom level (>= 1)")
    parser.add_argument("--tile-size", type=int, default=TILE_SIZE, help="Tile edge length in pixels")
    parser.add_argument("--trim-threshold", type=int, default=TRIM_THRESHOLD, help="Background tolerance used when trimming")
    parser.add_argument("--interval", type=float, default=RATE_INTERVAL, help="Seconds between tile requests")
    parser.add_argument("--burst", type=int, default=RATE_BURST, help="Requests admitted back to back")
    parser.add_argument("--endpoint", type=str, default=TILE_ENDPOINT, help="Tile endpoint URL")
    parser.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT, help="Per-request timeout in seconds")
    parser.add_argument("--deadline", type=float, default=None, help="Cancel the download after this many seconds")
    parser.add_argument("--quality", type=int, default=JPEG_QUALITY, help="JPEG quality (1-100)")
    parser.add_argument("--limit", type=int, default=None, help="Limit panoids")
    parser.add_argument("--output", type=str, default=os.getcwd(), help="Output directory (default: current working directory)")
    parser.add_argument("--conn-limit", type=int, default=10, help="Maximum TCP connections (default: 10)")

    return parser.parse_args(argv)


def format_size(num_bytes: int) -> str:
    """
    Convert a file size in bytes into a human-readable string.

    Args:
        num_bytes (int): File size in bytes.

    Returns:
        str: Formatted size (e.g., '512.00 KB', '384.00 MB').
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if num_bytes < 1024:
            return f"{num_bytes:.2f} {unit}"
        num_bytes /= 1024
    return f"{num_bytes:.2f} PB"


def save_img(data: bytes, output_dir: str, panoid: str, zoom_level: int) -> str:
    """
    Write encoded panorama bytes to `<output_dir>/panos_z<zoom>/<panoid>.jpg`.

    Args:
        data (bytes): JPEG-encoded panorama.
        output_dir (str): Base directory where the image should be stored.
        panoid (str): Panorama identifier, used as the file name.
        zoom_level (int): Zoom level, used to name the subdirectory.

    Returns:
        str: Human-readable size of the written file (e.g. "1.23 MB").
    """
    zoom_output_folder = os.path.join(output_dir, f"panos_z{zoom_level}")
    os.makedirs(zoom_output_folder, exist_ok=True)
    out_path = os.path.join(zoom_output_folder, f"{panoid}.jpg")

    with open(out_path, "wb") as out:
        out.write(data)

    return format_size(os.path.getsize(out_path))
