from enum import Enum
from functools import lru_cache

from PIL import Image

from .codec import SkinBitmap, SkinLayout, decode_skin, encode_png
from .exceptions import InvalidDimensionsError

# --- Minecraft Skin Layout Coordinates ---
# (left, upper, right, lower) crop boxes, identical for both layouts.
FACE_FRONT = (8, 8, 16, 16)
# The hat layer only exists on 64x64 skins; 64x32 skins are treated as bare heads.
HELMET_FRONT = {
    SkinLayout.MODERN: (40, 8, 48, 16),
}


class ViewKind(str, Enum):
    RAW = "raw"
    AVATAR = "avatar"
    HELM = "helm"


def resize(width: int, height: int, image: Image.Image) -> Image.Image:
    """
    Point-sampled resize that keeps the pixel-art look.

    Destination pixel (x, y) takes the source pixel
    (x * src_width // width, y * src_height // height); nothing is blended.
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"Cannot resize to {width}x{height}",
            details={"width": width, "height": height},
        )

    src = image if image.mode == "RGBA" else image.convert("RGBA")
    src_width, src_height = src.size
    pixels = src.load()

    columns = [x * src_width // width for x in range(width)]
    rows = [y * src_height // height for y in range(height)]

    resized = Image.new("RGBA", (width, height))
    resized.putdata([pixels[sx, sy] for sy in rows for sx in columns])
    return resized


def get_head(skin: SkinBitmap) -> Image.Image:
    return skin.image.crop(FACE_FRONT)


def get_helm(skin: SkinBitmap) -> Image.Image:
    head = get_head(skin)
    helmet_box = HELMET_FRONT.get(skin.layout)
    if helmet_box is None:
        return head
    # Source-over: transparent hat pixels keep the face, opaque ones replace it.
    return Image.alpha_composite(head, skin.image.crop(helmet_box))


def extract_view(view: ViewKind, skin: SkinBitmap) -> Image.Image:
    if view is ViewKind.AVATAR:
        return get_head(skin)
    if view is ViewKind.HELM:
        return get_helm(skin)
    if view is ViewKind.RAW:
        return skin.image
    raise ValueError(f"Unknown view {view!r}")


# --- Built-in fallback skin ---
# Drawn rather than shipped as a file so the fallback never depends on disk state.

SKIN_TONE = (188, 130, 104, 255)
HAIR = (60, 40, 20, 255)
EYE_WHITE = (255, 255, 255, 255)
IRIS = (73, 70, 151, 255)
MOUTH = (105, 64, 48, 255)
SHIRT = (0, 168, 168, 255)
PANTS = (60, 60, 160, 255)
SHOES = (100, 100, 100, 255)

_DEFAULT_SKIN_REGIONS = [
    # Head: top, bottom, then the four sides
    (HAIR, (8, 0, 16, 8)),
    (SKIN_TONE, (16, 0, 24, 8)),
    (SKIN_TONE, (0, 8, 32, 16)),
    (HAIR, (0, 8, 32, 10)),
    # Face details, drawn over the front side
    (EYE_WHITE, (9, 12, 10, 13)),
    (IRIS, (10, 12, 11, 13)),
    (IRIS, (13, 12, 14, 13)),
    (EYE_WHITE, (14, 12, 15, 13)),
    (MOUTH, (11, 14, 13, 15)),
    # Right leg, body, right arm
    (PANTS, (0, 16, 16, 32)),
    (SHOES, (0, 30, 16, 32)),
    (SHIRT, (16, 16, 40, 32)),
    (SHIRT, (40, 16, 56, 24)),
    (SKIN_TONE, (40, 24, 56, 32)),
    # Left leg and left arm (64x64 only)
    (PANTS, (16, 48, 32, 64)),
    (SHOES, (16, 62, 32, 64)),
    (SHIRT, (32, 48, 48, 56)),
    (SKIN_TONE, (32, 56, 48, 64)),
]


@lru_cache(maxsize=1)
def _default_skin_png() -> bytes:
    img = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    for color, box in _DEFAULT_SKIN_REGIONS:
        img.paste(color, box)
    return encode_png(img)


def default_skin() -> SkinBitmap:
    """Returns a fresh copy of the fallback skin served for unknown players."""
    return decode_skin(_default_skin_png())
