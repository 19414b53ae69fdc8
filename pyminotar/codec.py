# pyminotar/codec.py
import io
from dataclasses import dataclass
from enum import Enum

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError

SKIN_WIDTH = 64


class SkinLayout(str, Enum):
    LEGACY = "legacy"  # 64x32, pre-1.8 skins without second-layer body parts
    MODERN = "modern"  # 64x64


LAYOUT_BY_HEIGHT = {
    32: SkinLayout.LEGACY,
    64: SkinLayout.MODERN,
}


@dataclass
class SkinBitmap:
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def layout(self) -> SkinLayout:
        return LAYOUT_BY_HEIGHT[self.image.height]


def _open_rgba(data: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e


def decode_skin(data: bytes) -> SkinBitmap:
    """Decodes skin bytes, accepting only the 64x32 and 64x64 layouts."""
    img = _open_rgba(data)
    if img.width != SKIN_WIDTH or img.height not in LAYOUT_BY_HEIGHT:
        raise DecodeError(
            f"Unsupported skin size {img.width}x{img.height}",
            details={"width": img.width, "height": img.height},
        )
    return SkinBitmap(img)


def decode_image(data: bytes) -> Image.Image:
    # Derived renders (heads, resized output) have arbitrary sizes.
    return _open_rgba(data)


def encode_png(image: Image.Image) -> bytes:
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
