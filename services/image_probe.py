"""
Image loading for stickers and task photos.

Stickers need the intrinsic size of their image to fix the aspect ratio.
Local files are embedded as data URLs; web images keep their URL.
"""

import base64
import io
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

import requests
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


DOWNLOAD_TIMEOUT = 15


class ImageLoadError(RuntimeError):
    """The image could not be fetched or decoded."""


@dataclass(frozen=True)
class ProbedImage:
    """An image reference, its intrinsic pixel size and its encoded bytes."""
    url: str
    width: int
    height: int
    data: bytes = field(default=b"", repr=False, compare=False)


def image_size(data: bytes) -> tuple:
    """Intrinsic (width, height) of encoded image bytes."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(f"Not a readable image: {e}") from e
    if width <= 0 or height <= 0:
        raise ImageLoadError("Image has no pixels")
    return width, height


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> bytes:
    """Bytes of a base64 ``data:`` URL."""
    try:
        header, encoded = url.split(",", 1)
        if not header.endswith(";base64"):
            raise ValueError("only base64 data URLs are supported")
        return base64.b64decode(encoded)
    except ValueError as e:
        raise ImageLoadError(f"Malformed data URL: {e}") from e


def load_image_file(path: Path) -> ProbedImage:
    """Read a local image and embed it as a data URL."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageLoadError(f"Could not read {path.name}: {e}") from e
    width, height = image_size(data)
    mime_type, _ = mimetypes.guess_type(path.name)
    return ProbedImage(to_data_url(data, mime_type or "image/png"), width, height, data)


def fetch_image_bytes(url: str) -> bytes:
    """Download an image, or decode it when ``url`` is a data URL."""
    if url.startswith("data:"):
        return decode_data_url(url)
    try:
        response = requests.get(url, timeout=DOWNLOAD_TIMEOUT)
    except requests.RequestException as e:
        raise ImageLoadError(f"Could not fetch {url}: {e}") from e
    if response.status_code >= 300:
        raise ImageLoadError(f"Could not fetch {url}: HTTP {response.status_code}")
    return response.content


def load_image_url(url: str) -> ProbedImage:
    """Fetch a web image to learn its size. The sticker keeps the URL itself."""
    url = url.strip()
    if not url:
        raise ImageLoadError("No URL given")
    data = fetch_image_bytes(url)
    width, height = image_size(data)
    logger.debug(f"Probed {url[:60]}: {width}x{height}")
    return ProbedImage(url, width, height, data)
