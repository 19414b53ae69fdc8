# pyminotar/mojang.py
import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass

import httpx

from config import PROFILE_API_URL, SESSION_API_URL
from .exceptions import RemoteUnavailable, SkinNotFound, UserNotFound

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}$")

# Mojang answers 204 as well as 404 for names and profiles that do not exist.
NOT_FOUND_STATUSES = (204, 404)


@dataclass(frozen=True)
class CanonicalUser:
    name: str
    canonical_id: str


class MojangClient:
    """
    Talks to the Mojang profile and session servers.

    The skin store is keyed by profile id, so a plain username can never
    be found there directly; the resolver falls through to the name lookup.
    """

    def __init__(self, client: httpx.AsyncClient, profile_url: str = PROFILE_API_URL, session_url: str = SESSION_API_URL):
        self.client = client
        self.profile_url = profile_url
        self.session_url = session_url

    async def _get(self, url: str) -> httpx.Response:
        try:
            return await self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteUnavailable(f"Request to {url} failed: {e}", details={"url": url}) from e

    async def fetch_skin_bytes(self, identifier: str) -> bytes:
        if not UUID_PATTERN.match(identifier):
            raise SkinNotFound(f"{identifier} is not a profile id", details={"identifier": identifier})

        profile_id = identifier.replace("-", "").lower()
        url = self.session_url.format(uuid=profile_id)
        response = await self._get(url)
        if response.status_code in NOT_FOUND_STATUSES:
            raise SkinNotFound(f"No profile {profile_id}", details={"identifier": identifier})
        if response.status_code != 200:
            raise RemoteUnavailable(f"Session server returned {response.status_code}", details={"url": url})

        skin_url = self._skin_url(response, profile_id)

        skin_response = await self._get(skin_url)
        if skin_response.status_code in NOT_FOUND_STATUSES:
            raise SkinNotFound(f"Skin texture missing for {profile_id}", details={"url": skin_url})
        if skin_response.status_code != 200:
            raise RemoteUnavailable(f"Texture server returned {skin_response.status_code}", details={"url": skin_url})
        return skin_response.content

    def _skin_url(self, response: httpx.Response, profile_id: str) -> str:
        # The "textures" property is base64 encoded JSON holding the texture URLs
        try:
            profile = response.json()
            textures_b64 = next(
                (p.get("value") for p in profile.get("properties", []) if p.get("name") == "textures"),
                None,
            )
            if not textures_b64:
                raise SkinNotFound(f"No textures for {profile_id}", details={"identifier": profile_id})
            textures = json.loads(base64.b64decode(textures_b64).decode("utf-8"))
            skin_url = textures.get("textures", {}).get("SKIN", {}).get("url")
        except (ValueError, AttributeError, TypeError, binascii.Error) as e:
            raise RemoteUnavailable(f"Malformed profile for {profile_id}: {e}") from e

        if not skin_url:
            raise SkinNotFound(f"{profile_id} has no skin set", details={"identifier": profile_id})
        if not isinstance(skin_url, str):
            raise RemoteUnavailable(f"Malformed skin url for {profile_id}: {skin_url!r}")
        return skin_url

    async def resolve_canonical_user(self, name: str) -> CanonicalUser:
        url = self.profile_url.format(name=name)
        response = await self._get(url)
        if response.status_code in NOT_FOUND_STATUSES:
            raise UserNotFound(f"No account named {name}", details={"name": name})
        if response.status_code != 200:
            raise RemoteUnavailable(f"Profile API returned {response.status_code}", details={"url": url})

        try:
            data = response.json()
            return CanonicalUser(name=data["name"], canonical_id=data["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteUnavailable(f"Malformed profile lookup for {name}: {e}") from e
