# pyminotar/pipeline.py
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from .codec import SkinBitmap, encode_png
from .disk_cache import DiskCache
from .exceptions import DerivationFailedError
from .resolver import ResolutionOutcome, SkinResolver
from .settings import MinotarConfig
from .skins_render import ViewKind, extract_view, resize

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 180
MAX_SIZE = 300
MIN_SIZE = 8

MINUTES = 60
HOURS = 60 * MINUTES
DAYS = 24 * HOURS
TIMEOUT_ACTUAL_SKIN = 2 * DAYS
TIMEOUT_FAILED_FETCH = 15 * MINUTES


def rationalize_size(value: Union[str, int, None]) -> int:
    """
    Maps whatever the client sent as a size onto [MIN_SIZE, MAX_SIZE].

    Only unsigned decimal integers count; anything else gets DEFAULT_SIZE.
    """
    if isinstance(value, bool):
        return DEFAULT_SIZE
    if isinstance(value, int):
        size = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        size = int(value)
    else:
        return DEFAULT_SIZE
    return max(MIN_SIZE, min(MAX_SIZE, size))


@dataclass(frozen=True)
class RenderRequest:
    identifier: str
    view: ViewKind
    size: int = DEFAULT_SIZE

    def __post_init__(self):
        object.__setattr__(self, "size", rationalize_size(self.size))


def _millis(start: int, end: int) -> int:
    return abs(end - start) // 1_000_000


@dataclass(frozen=True)
class Timing:
    # perf_counter_ns readings
    started: int
    fetched: int
    processed: int
    resized: int

    @property
    def fetch_ms(self) -> int:
        return _millis(self.started, self.fetched)

    @property
    def process_ms(self) -> int:
        return _millis(self.fetched, self.processed)

    @property
    def resize_ms(self) -> int:
        return _millis(self.processed, self.resized)

    @property
    def total_ms(self) -> int:
        return _millis(self.started, self.resized)

    def header(self) -> str:
        return f"{self.fetch_ms}+{self.process_ms}+{self.resize_ms}={self.total_ms}ms"


@dataclass
class RenderResult:
    image: bytes
    outcome: ResolutionOutcome
    timing: Timing
    view: ViewKind

    @property
    def cache_timeout(self) -> int:
        if self.outcome is ResolutionOutcome.RESOLVED:
            return TIMEOUT_ACTUAL_SKIN
        return TIMEOUT_FAILED_FETCH

    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "image/png",
            "X-Requested": "skin" if self.view is ViewKind.RAW else "processed",
            "X-Result": "ok" if self.outcome is ResolutionOutcome.RESOLVED else "failed",
            "X-Timing": self.timing.header(),
            "Cache-Control": f"max-age={self.cache_timeout}",
        }


class RenderPipeline:
    """Resolve, derive the requested view, resize, encode."""

    def __init__(self, remote, config: MinotarConfig, cache: Optional[DiskCache] = None):
        self.config = config
        self.resolver = SkinResolver(remote, config, cache)

    async def render(self, request: RenderRequest) -> RenderResult:
        started = time.perf_counter_ns()

        resolved = await self.resolver.resolve(request.identifier)
        fetched = time.perf_counter_ns()

        # Pillow work is CPU bound, keep it off the event loop
        image, processed, resized = await asyncio.to_thread(self._derive, request, resolved.skin)

        timing = Timing(started, fetched, processed, resized)
        logger.debug(
            "Rendered %s for %s (%s via %s) in %s",
            request.view.value, request.identifier, resolved.outcome.value,
            resolved.source.value, timing.header(),
        )
        return RenderResult(image, resolved.outcome, timing, request.view)

    def _derive(self, request: RenderRequest, skin: SkinBitmap) -> Tuple[bytes, int, int]:
        """Extracts and resizes the view, returning the PNG and the two stage timestamps."""
        try:
            image = extract_view(request.view, skin)
        except Exception as e:
            raise DerivationFailedError(
                f"Could not derive {request.view.value} for {request.identifier}: {e}",
                details={"identifier": request.identifier, "view": request.view.value},
            ) from e
        processed = time.perf_counter_ns()

        # Raw skins are served at their native size
        if request.view is not ViewKind.RAW:
            image = resize(request.size, request.size, image)
        resized = time.perf_counter_ns()

        return encode_png(image), processed, resized
