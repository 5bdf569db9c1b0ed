"""
Loading of raster image files into canonical RGB buffers.

PNG and BMP images, either true-color (24 bpp) or indexed with an RGB palette,
are normalized into one flat ``uint8`` buffer holding three bytes (R, G, B)
per pixel in row-major order. Grayscale images are promoted to RGB by channel
replication. Everything else (alpha, 16-bit samples, exotic BMP depths) is
rejected.

Dimensions are validated from the header, before any pixel data is decoded,
so an oversized file never causes the full buffer to be allocated.
"""

import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Tuple, Union

import numpy as np
import structlog
from PIL import Image, UnidentifiedImageError

from .tiles import MAX_MAP_SIZE

logger = structlog.get_logger()

# An image may be at most twice as long as the longest possible map side.
MAX_RASTER_SIDE_LENGTH_IN_PIXELS = 2 * MAX_MAP_SIZE

# ~256 million pixels. At 4 bytes per pixel while decoding this stays well
# inside what a 32-bit process can allocate.
MAX_RASTER_SIZE_PIXELS = 256 << 20

assert MAX_RASTER_SIZE_PIXELS < 0xFFFFFFFF // 8

# Pillow refuses images above twice this limit; keep it in line with
# is_valid_raster_dimension so the validator decides.
Image.MAX_IMAGE_PIXELS = MAX_RASTER_SIZE_PIXELS

# Pillow modes accepted as-is or promoted to RGB.
_PALETTE_MODES = ("P",)
_GRAYSCALE_MODES = ("1", "L")
_TRUECOLOR_MODES = ("RGB",)

_BMP_SUPPORTED_BPP = (1, 4, 8, 24)


class ImageFileType(Enum):
    """Container formats that can be imported."""

    PNG = "PNG"
    BMP = "BMP"


class RasterImportError(Exception):
    """Base class for user-reportable raster loading failures."""

    reason = "Raster error"

    def __init__(self, file_type: ImageFileType, message: Optional[str] = None):
        self.file_type = file_type
        self.message = message or self.reason
        super().__init__(f"{self.title}: {self.message}")

    @property
    def title(self) -> str:
        return f"{self.file_type.value} map error"


class RasterFileNotFoundError(RasterImportError):
    reason = "Could not find the file"


class UnsupportedImageFormatError(RasterImportError):
    reason = "Could not convert image type, 8 or 24-bit image needed"


class ImageTooLargeError(RasterImportError):
    reason = "Image too large"


class RasterDecodeError(RasterImportError):
    reason = "Image data is corrupt"


@dataclass
class RasterImage:
    """Decoded raster: size and canonical RGB buffer (``None`` when size-only)."""

    width: int
    height: int
    pixels: Optional[np.ndarray] = None

    def pixel(self, row: int, col: int) -> Tuple[int, int, int]:
        """Return the (R, G, B) triple at ``row``, ``col``."""
        offset = (row * self.width + col) * 3
        r, g, b = self.pixels[offset:offset + 3]
        return int(r), int(g), int(b)


def is_valid_raster_dimension(width: int, height: int) -> bool:
    """
    Check whether an image of the given size may be loaded.

    Both sides must lie in ``[1, MAX_RASTER_SIDE_LENGTH_IN_PIXELS]`` and the
    pixel count must not exceed ``MAX_RASTER_SIZE_PIXELS``.
    """
    return (
        width * height <= MAX_RASTER_SIZE_PIXELS
        and 0 < width <= MAX_RASTER_SIDE_LENGTH_IN_PIXELS
        and 0 < height <= MAX_RASTER_SIDE_LENGTH_IN_PIXELS
    )


def find_raster_file(
    filename: Union[str, Path],
    subdir: str,
    search_paths: Iterable[Union[str, Path]],
    file_type: ImageFileType,
) -> Path:
    """
    Resolve ``filename`` against the search paths.

    An existing path is used as-is; otherwise ``<search_path>/<subdir>/<filename>``
    and then ``<search_path>/<filename>`` are tried for each search path in order.
    """
    path = Path(filename)
    if path.is_file():
        return path

    for search_path in search_paths:
        for candidate in (Path(search_path) / subdir / path, Path(search_path) / path):
            if candidate.is_file():
                return candidate

    logger.error("Raster file not found", filename=str(filename), subdir=subdir)
    raise RasterFileNotFoundError(file_type)


def _bmp_bits_per_pixel(fp: BinaryIO) -> int:
    """Read the bit depth from a BMP header without consuming the stream."""
    start = fp.tell()
    header = fp.read(30)
    fp.seek(start)
    if len(header) < 26 or header[:2] != b"BM":
        return 0

    (info_size,) = struct.unpack_from("<I", header, 14)
    # OS/2 1.x headers store 16-bit sizes, so the depth field sits earlier.
    if info_size == 12:
        (bpp,) = struct.unpack_from("<H", header, 24)
    elif len(header) >= 30:
        (bpp,) = struct.unpack_from("<H", header, 28)
    else:
        return 0
    return bpp


def _image_to_rgb(image: Image.Image) -> np.ndarray:
    """Convert a loaded Pillow image into the canonical flat RGB buffer."""
    if image.mode in _PALETTE_MODES:
        indices = np.asarray(image, dtype=np.uint8)
        palette = np.zeros((256, 3), dtype=np.uint8)
        entries = np.asarray(image.getpalette() or [], dtype=np.uint8).reshape(-1, 3)[:256]
        palette[: len(entries)] = entries
        rgb = palette[indices]
    elif image.mode in _GRAYSCALE_MODES:
        gray = np.asarray(image.convert("L"), dtype=np.uint8)
        rgb = np.repeat(gray[:, :, np.newaxis], 3, axis=2)
    else:
        rgb = np.asarray(image, dtype=np.uint8)

    return np.ascontiguousarray(rgb, dtype=np.uint8).reshape(-1)


def read_raster_stream(
    fp: BinaryIO, file_type: ImageFileType, read_pixels: bool = True
) -> RasterImage:
    """
    Decode a raster from an open binary stream.

    Args:
        fp: Readable binary stream positioned at the start of the image
        file_type: Expected container format
        read_pixels: When False only the header is parsed

    Returns:
        RasterImage with ``pixels`` set when ``read_pixels`` is True

    Raises:
        UnsupportedImageFormatError: Wrong container, mode or bit depth
        ImageTooLargeError: Dimensions rejected by ``is_valid_raster_dimension``
        RasterDecodeError: Pixel data could not be decoded
    """
    if file_type == ImageFileType.BMP:
        bpp = _bmp_bits_per_pixel(fp)
        if bpp not in _BMP_SUPPORTED_BPP:
            logger.warning("Unsupported BMP bit depth", bpp=bpp)
            raise UnsupportedImageFormatError(file_type)

    try:
        image = Image.open(fp, formats=[file_type.value])
    except Image.DecompressionBombError as e:
        logger.warning("Raster rejected by decoder size guard", error=str(e))
        raise ImageTooLargeError(file_type) from e
    except (UnidentifiedImageError, SyntaxError, struct.error) as e:
        logger.warning("Unidentified raster", file_type=file_type.value, error=str(e))
        raise UnsupportedImageFormatError(file_type) from e

    with image:
        if image.mode not in _PALETTE_MODES + _GRAYSCALE_MODES + _TRUECOLOR_MODES:
            logger.warning("Unsupported raster mode", mode=image.mode)
            raise UnsupportedImageFormatError(file_type)

        width, height = image.size
        if not is_valid_raster_dimension(width, height):
            logger.warning("Raster too large", width=width, height=height)
            raise ImageTooLargeError(file_type)

        if not read_pixels:
            return RasterImage(width, height)

        try:
            image.load()
            pixels = _image_to_rgb(image)
        except (OSError, SyntaxError, ValueError) as e:
            logger.error("Raster decode failed", file_type=file_type.value, error=str(e))
            raise RasterDecodeError(file_type) from e

        logger.debug(
            "Decoded raster",
            file_type=file_type.value,
            mode=image.mode,
            width=width,
            height=height,
        )
    return RasterImage(width, height, pixels)


def _read_raster(
    file_type: ImageFileType,
    filename: Union[str, Path],
    subdir: str,
    search_paths: Iterable[Union[str, Path]],
    read_pixels: bool,
) -> RasterImage:
    path = find_raster_file(filename, subdir, search_paths, file_type)
    try:
        fp = path.open("rb")
    except OSError as e:
        logger.error("Raster file could not be opened", path=str(path), error=str(e))
        raise RasterFileNotFoundError(file_type) from e

    with fp:
        return read_raster_stream(fp, file_type, read_pixels=read_pixels)


def read_raster_file(
    file_type: ImageFileType,
    filename: Union[str, Path],
    subdir: str = "heightmap",
    search_paths: Iterable[Union[str, Path]] = (".",),
) -> RasterImage:
    """Read size and canonical RGB buffer of a raster file."""
    return _read_raster(file_type, filename, subdir, search_paths, read_pixels=True)


def read_raster_size(
    file_type: ImageFileType,
    filename: Union[str, Path],
    subdir: str = "heightmap",
    search_paths: Iterable[Union[str, Path]] = (".",),
) -> Tuple[int, int]:
    """Read only the (width, height) of a raster file."""
    raster = _read_raster(file_type, filename, subdir, search_paths, read_pixels=False)
    return raster.width, raster.height
