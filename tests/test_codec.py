import io

import pytest
from PIL import Image

from pyminotar.codec import SkinLayout, decode_skin, encode_png
from pyminotar.exceptions import DecodeError, ErrorKind


def test_decode_accepts_modern_and_legacy(modern_skin_bytes, legacy_skin_bytes):
    modern = decode_skin(modern_skin_bytes)
    legacy = decode_skin(legacy_skin_bytes)

    assert (modern.width, modern.height, modern.layout) == (64, 64, SkinLayout.MODERN)
    assert (legacy.width, legacy.height, legacy.layout) == (64, 32, SkinLayout.LEGACY)
    assert modern.image.mode == "RGBA"


@pytest.mark.parametrize("size", [(64, 48), (32, 32), (128, 128), (8, 8)])
def test_decode_rejects_other_sizes(size):
    with pytest.raises(DecodeError) as exc_info:
        decode_skin(encode_png(Image.new("RGBA", size)))
    assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FORMAT


def test_decode_rejects_garbage():
    with pytest.raises(DecodeError):
        decode_skin(b"definitely not a png")


def test_decode_converts_palette_images_to_rgba():
    buf = io.BytesIO()
    Image.new("P", (64, 32)).save(buf, format="PNG")
    skin = decode_skin(buf.getvalue())
    assert skin.image.mode == "RGBA"


def test_encode_preserves_alpha():
    img = Image.new("RGBA", (64, 64), (10, 20, 30, 40))
    assert decode_skin(encode_png(img)).image.getpixel((5, 5)) == (10, 20, 30, 40)
