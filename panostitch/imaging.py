"""
Imaging primitives used by the compositor.

`ImageBackend` is the small set of operations stitching needs: make a blank
canvas, decode a tile, paste it opaquely, find the content bounding box,
crop and encode. `PillowBackend` implements them with PIL/Pillow, using
numpy for the bounding box scan.

Dependencies:
- PIL/Pillow for decode, paste, crop and JPEG encoding
- numpy for the background difference scan
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Optional, Tuple

import numpy as np
from PIL import Image, ImageFilter, UnidentifiedImageError

from .constants import BLACK, JPEG_QUALITY
from .errors import DecodeError, EncodeError


@dataclass(frozen=True)
class TrimBox:
    left: int
    top: int
    width: int
    height: int

    def as_crop(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower), the box form Pillow expects."""
        return (self.left, self.top, self.left + self.width, self.top + self.height)


class ImageBackend(ABC):
    """Operations the compositor needs from an imaging library."""

    @abstractmethod
    def new_canvas(self, width: int, height: int, background: Tuple[int, int, int]) -> Any: ...

    @abstractmethod
    def size(self, image: Any) -> Tuple[int, int]: ...

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Raises DecodeError when `data` is not an image."""

    @abstractmethod
    def paste(self, canvas: Any, tile: Any, left: int, top: int) -> None:
        """Overwrite the canvas region at (left, top) with `tile`. No blending."""

    @abstractmethod
    def find_trim(self, image: Any, threshold: int, background: Tuple[int, int, int]) -> Optional[TrimBox]:
        """Bounding box of non-background content, or None if there is none."""

    @abstractmethod
    def crop(self, image: Any, box: TrimBox) -> Any: ...

    @abstractmethod
    def encode(self, image: Any, quality: int = JPEG_QUALITY) -> bytes:
        """Raises EncodeError when the image cannot be serialized."""


class PillowBackend(ImageBackend):
    """
    ImageBackend on top of Pillow.

    Args:
        median_size (int): Size of the median filter applied before the trim
            scan so isolated JPEG noise in the padding is ignored. 0 or 1
            disables filtering.
    """

    def __init__(self, median_size: int = 3):
        self.median_size = median_size

    def new_canvas(self, width: int, height: int, background: Tuple[int, int, int] = BLACK) -> Image.Image:
        return Image.new("RGB", (width, height), background)

    def size(self, image: Image.Image) -> Tuple[int, int]:
        return image.size

    def decode(self, data: bytes) -> Image.Image:
        try:
            tile = Image.open(BytesIO(data))
            tile.load()
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as error:
            raise DecodeError(f"could not decode tile ({len(data)} bytes): {error}") from error

        if tile.mode != "RGB":
            tile = tile.convert("RGB")
        return tile

    def paste(self, canvas: Image.Image, tile: Image.Image, left: int, top: int) -> None:
        canvas.paste(tile, (left, top))

    def find_trim(self, image: Image.Image, threshold: int, background: Tuple[int, int, int] = BLACK) -> Optional[TrimBox]:
        if self.median_size > 1:
            image = image.filter(ImageFilter.MedianFilter(self.median_size))

        arr = np.asarray(image.convert("RGB"))

        # A pixel is content if any channel strays past the threshold.
        # Compared band by band in uint8 to keep the mask at one byte per pixel.
        content = np.zeros(arr.shape[:2], dtype=bool)
        for band, value in enumerate(background):
            channel = arr[..., band]
            if value + threshold < 255:
                content |= channel > np.uint8(value + threshold)
            if value - threshold > 0:
                content |= channel < np.uint8(value - threshold)

        rows = np.flatnonzero(content.any(axis=1))
        cols = np.flatnonzero(content.any(axis=0))

        if rows.size == 0:
            return None

        top, bottom = int(rows[0]), int(rows[-1])
        left, right = int(cols[0]), int(cols[-1])
        return TrimBox(left, top, right - left + 1, bottom - top + 1)

    def crop(self, image: Image.Image, box: TrimBox) -> Image.Image:
        if box.as_crop() == (0, 0) + image.size:
            return image
        return image.crop(box.as_crop())

    def encode(self, image: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
        buf = BytesIO()
        try:
            image.save(buf, format="JPEG", quality=quality)
        except (OSError, ValueError) as error:
            raise EncodeError(f"could not encode panorama as JPEG: {error}") from error
        return buf.getvalue()
