import base64
import binascii
import logging
from io import BytesIO
from typing import List

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_PALETTE = 8
# fraction of pixels a palette entry needs before it counts as a print color
MIN_COVERAGE = 0.01
# larger embedded images are skipped rather than decoded
MAX_DECODE_PIXELS = 25_000_000


def decode_data_url(src: str) -> bytes:
    """Return the bytes of a base64 `data:` URL, or b"" for anything else."""
    if not src or not src.startswith("data:") or "," not in src:
        return b""
    header, payload = src.split(",", 1)
    if ";base64" not in header:
        return b""
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        return b""


def image_palette(content: bytes, max_colors: int = MAX_PALETTE) -> List[str]:
    """Dominant colors of an image as lower-case hex, most common first.

    Transparent pixels are ignored. Returns [] if the bytes aren't an image
    or the image is too large to decode.
    """
    if not content:
        return []
    try:
        img = Image.open(BytesIO(content))
        width, height = img.size
        if width * height > MAX_DECODE_PIXELS:
            logger.info("Skipping palette for %dx%d embedded image", width, height)
            return []
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.debug("Could not read embedded image: %s", e)
        return []

    rgba = img.convert("RGBA")
    rgba.thumbnail((128, 128))
    # one spare slot for the transparent background
    quantized = rgba.quantize(colors=max_colors + 1, method=Image.Quantize.FASTOCTREE)
    palette = quantized.getpalette("RGBA") or []

    entries = []
    for count, index in quantized.getcolors() or []:
        r, g, b, a = palette[index * 4:index * 4 + 4]
        if a < 128:
            continue
        entries.append((count, f"#{r:02x}{g:02x}{b:02x}"))

    opaque = sum(count for count, _ in entries)
    if not opaque:
        return []
    entries.sort(key=lambda e: e[0], reverse=True)
    return [color for count, color in entries if count / opaque >= MIN_COVERAGE][:max_colors]


def data_url_palette(src: str, max_colors: int = MAX_PALETTE) -> List[str]:
    return image_palette(decode_data_url(src), max_colors)
