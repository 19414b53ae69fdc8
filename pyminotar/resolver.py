# pyminotar/resolver.py
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .codec import SkinBitmap, decode_skin
from .disk_cache import DiskCache
from .exceptions import DecodeError, RemoteError, SkinNotFound, UserNotFound
from .mojang import CanonicalUser
from .settings import MinotarConfig
from .skins_render import default_skin

logger = logging.getLogger(__name__)


class ResolutionOutcome(str, Enum):
    RESOLVED = "resolved"
    FALLBACK = "fallback"


class SkinSource(str, Enum):
    DISK_CACHE = "disk_cache"
    SKIN_STORE = "skin_store"
    IDENTITY_LOOKUP = "identity_lookup"
    DEFAULT = "default"


class ResolutionState(Enum):
    CHECK_CACHE = "check_cache"
    FETCH_SKIN = "fetch_skin"
    RESOLVE_USER = "resolve_user"
    FETCH_CANONICAL_SKIN = "fetch_canonical_skin"
    PERSIST = "persist"
    RESOLVED = "resolved"
    FALLBACK = "fallback"


TERMINAL_STATES = (ResolutionState.RESOLVED, ResolutionState.FALLBACK)


@dataclass
class ResolvedSkin:
    skin: SkinBitmap
    outcome: ResolutionOutcome
    source: SkinSource


@dataclass
class _Attempt:
    identifier: str
    skin: Optional[SkinBitmap] = None
    raw: Optional[bytes] = None
    cache_key: Optional[str] = None
    user: Optional[CanonicalUser] = None
    source: SkinSource = SkinSource.DEFAULT


class SkinResolver:
    """
    Turns a player identifier into a skin, never failing.

    Order: disk cache, skin store by identifier, name lookup followed by the
    skin store by canonical id, and finally the built-in default skin.
    Only skins fetched from the network are written to the disk cache.

    `remote` must provide `fetch_skin_bytes(identifier)` and
    `resolve_canonical_user(name)` coroutines raising RemoteError subclasses.
    """

    def __init__(self, remote, config: MinotarConfig, cache: Optional[DiskCache] = None):
        self.remote = remote
        self.config = config
        self.cache = None
        if config.disk_cache:
            self.cache = cache if cache is not None else DiskCache(config.cache_dir)
        self._steps = {
            ResolutionState.CHECK_CACHE: self._check_cache,
            ResolutionState.FETCH_SKIN: self._fetch_skin,
            ResolutionState.RESOLVE_USER: self._resolve_user,
            ResolutionState.FETCH_CANONICAL_SKIN: self._fetch_canonical_skin,
            ResolutionState.PERSIST: self._persist,
        }

    async def resolve(self, identifier: str) -> ResolvedSkin:
        attempt = _Attempt(identifier=identifier)
        state = ResolutionState.CHECK_CACHE
        while state not in TERMINAL_STATES:
            state = await self._steps[state](attempt)

        if state is ResolutionState.FALLBACK:
            skin = await asyncio.to_thread(default_skin)
            return ResolvedSkin(skin, ResolutionOutcome.FALLBACK, SkinSource.DEFAULT)
        return ResolvedSkin(attempt.skin, ResolutionOutcome.RESOLVED, attempt.source)

    # --- States ---
    # Disk and Pillow calls run in worker threads so one request never stalls the others.

    async def _check_cache(self, attempt: _Attempt) -> ResolutionState:
        if self.cache is None:
            return ResolutionState.FETCH_SKIN
        try:
            data = await asyncio.to_thread(self.cache.get, attempt.identifier)
            if data is None:
                return ResolutionState.FETCH_SKIN
            attempt.skin = await asyncio.to_thread(decode_skin, data)
        except (OSError, DecodeError) as e:
            logger.debug("Ignoring unusable cache entry for %s: %s", attempt.identifier, e)
            return ResolutionState.FETCH_SKIN
        attempt.source = SkinSource.DISK_CACHE
        return ResolutionState.RESOLVED

    async def _fetch_skin(self, attempt: _Attempt) -> ResolutionState:
        if await self._accept(attempt, await self._try_fetch(attempt.identifier)):
            attempt.cache_key = attempt.identifier
            attempt.source = SkinSource.SKIN_STORE
            return ResolutionState.PERSIST
        # A miss here may only mean the player is known under another id
        return ResolutionState.RESOLVE_USER

    async def _resolve_user(self, attempt: _Attempt) -> ResolutionState:
        try:
            attempt.user = await self.remote.resolve_canonical_user(attempt.identifier)
        except RemoteError as e:
            self._log_remote_failure("Identity lookup", attempt.identifier, e)
            return ResolutionState.FALLBACK
        return ResolutionState.FETCH_CANONICAL_SKIN

    async def _fetch_canonical_skin(self, attempt: _Attempt) -> ResolutionState:
        if await self._accept(attempt, await self._try_fetch(attempt.user.canonical_id)):
            attempt.cache_key = attempt.user.name
            attempt.source = SkinSource.IDENTITY_LOOKUP
            return ResolutionState.PERSIST
        return ResolutionState.FALLBACK

    async def _persist(self, attempt: _Attempt) -> ResolutionState:
        if self.cache is not None:
            try:
                await asyncio.to_thread(self.cache.put, attempt.cache_key, attempt.raw)
            except (OSError, ValueError) as e:
                logger.debug("Could not cache skin for %s: %s", attempt.cache_key, e)
        return ResolutionState.RESOLVED

    # --- Helpers ---

    async def _try_fetch(self, identifier: str) -> Optional[bytes]:
        try:
            return await self.remote.fetch_skin_bytes(identifier)
        except RemoteError as e:
            self._log_remote_failure("Skin fetch", identifier, e)
            return None

    async def _accept(self, attempt: _Attempt, data: Optional[bytes]) -> bool:
        if data is None:
            return False
        try:
            attempt.skin = await asyncio.to_thread(decode_skin, data)
        except DecodeError as e:
            self._log_remote_failure("Skin decode", attempt.identifier, e)
            return False
        attempt.raw = data
        return True

    def _log_remote_failure(self, what: str, identifier: str, error: Exception) -> None:
        # Unknown players are routine; only outages and bad data are worth a warning
        if self.config.error_logging and not isinstance(error, (SkinNotFound, UserNotFound)):
            logger.warning("%s failed for %s: %s", what, identifier, error)
        else:
            logger.debug("%s failed for %s: %s", what, identifier, error)
