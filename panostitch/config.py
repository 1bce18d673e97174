"""
Run configuration.

`PanoConfig` gathers the tunables of one run. Defaults come from
`constants`; the CLI builds one with `PanoConfig.from_args`.
"""
import argparse
from dataclasses import dataclass

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


@dataclass(frozen=True)
class PanoConfig:
    zoom: int = DEFAULT_ZOOM
    tile_size: int = TILE_SIZE
    trim_threshold: int = TRIM_THRESHOLD
    interval: float = RATE_INTERVAL
    burst: int = RATE_BURST
    endpoint: str = TILE_ENDPOINT
    timeout: float = REQUEST_TIMEOUT
    quality: int = JPEG_QUALITY

    def __post_init__(self):
        if self.zoom < 1:
            raise ValueError(f"zoom must be >= 1, got {self.zoom}")
        if self.tile_size < 1:
            raise ValueError(f"tile size must be positive, got {self.tile_size}")
        if self.trim_threshold < 0:
            raise ValueError(f"trim threshold must be >= 0, got {self.trim_threshold}")
        if self.interval <= 0:
            raise ValueError(f"rate interval must be positive, got {self.interval}")
        if self.burst < 1:
            raise ValueError(f"burst must be >= 1, got {self.burst}")
        if not 1 <= self.quality <= 100:
            raise ValueError(f"JPEG quality must be within 1-100, got {self.quality}")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "PanoConfig":
        return cls(
            zoom=args.zoom,
            tile_size=args.tile_size,
            trim_threshold=args.trim_threshold,
            interval=args.interval,
            burst=args.burst,
            endpoint=args.endpoint,
            timeout=args.timeout,
            quality=args.quality,
        )
