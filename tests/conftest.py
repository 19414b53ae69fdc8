"""
Shared fixtures: generated skins and a scripted stand-in for the Mojang APIs.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pyminotar.codec import encode_png  # noqa: E402
from pyminotar.exceptions import SkinNotFound, UserNotFound  # noqa: E402
from pyminotar.mojang import CanonicalUser  # noqa: E402

FACE_COLOR = (200, 50, 50, 255)
HAT_COLOR = (20, 20, 220, 128)


def make_skin(height: int = 64, with_hat: bool = True) -> bytes:
    """A skin with a solid face and a half-transparent hat over the top half of the head."""
    img = Image.new("RGBA", (64, height), (0, 0, 0, 0))
    img.paste(FACE_COLOR, (8, 8, 16, 16))
    if with_hat:
        img.paste(HAT_COLOR, (40, 8, 48, 12))
    return encode_png(img)


class FakeRemote:
    """Answers from dictionaries and counts every call."""

    def __init__(self, skins=None, users=None):
        self.skins = dict(skins or {})
        self.users = dict(users or {})
        self.fetch_skin_bytes = AsyncMock(side_effect=self._fetch)
        self.resolve_canonical_user = AsyncMock(side_effect=self._resolve)

    async def _fetch(self, identifier):
        if identifier not in self.skins:
            raise SkinNotFound(f"no skin for {identifier}")
        return self.skins[identifier]

    async def _resolve(self, name):
        if name not in self.users:
            raise UserNotFound(f"no user {name}")
        return self.users[name]

    @property
    def call_count(self) -> int:
        return self.fetch_skin_bytes.await_count + self.resolve_canonical_user.await_count


@pytest.fixture
def modern_skin_bytes() -> bytes:
    return make_skin(64)


@pytest.fixture
def legacy_skin_bytes() -> bytes:
    return make_skin(32)


@pytest.fixture
def notch():
    return CanonicalUser(name="Notch", canonical_id="069a79f444e94726a5befca90e38aaf5")
