import base64
import json

import httpx
import pytest

from pyminotar.exceptions import RemoteUnavailable, SkinNotFound, UserNotFound
from pyminotar.mojang import CanonicalUser, MojangClient

PROFILE_ID = "069a79f444e94726a5befca90e38aaf5"
SKIN_URL = "http://textures.minecraft.net/texture/abc123"


def _textures_property(skin_url=SKIN_URL):
    textures = {"profileId": PROFILE_ID, "textures": {"SKIN": {"url": skin_url}} if skin_url else {}}
    return base64.b64encode(json.dumps(textures).encode()).decode()


def _client(handler) -> MojangClient:
    return MojangClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _session_handler(profile_status=200, skin_status=200, skin_url=SKIN_URL, profile_body=None):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if request.url.host == "sessionserver.mojang.com":
            if profile_status != 200:
                return httpx.Response(profile_status)
            if profile_body is not None:
                return httpx.Response(200, json=profile_body)
            return httpx.Response(200, json={
                "id": PROFILE_ID,
                "name": "Notch",
                "properties": [{"name": "textures", "value": _textures_property(skin_url)}],
            })
        if str(request.url) == SKIN_URL:
            return httpx.Response(skin_status, content=b"png-bytes")
        return httpx.Response(500)

    handler.seen = seen
    return handler


@pytest.mark.asyncio
async def test_fetch_skin_follows_textures_property():
    handler = _session_handler()
    data = await _client(handler).fetch_skin_bytes("069a79f4-44e9-4726-a5be-fca90e38aaf5")

    assert data == b"png-bytes"
    assert handler.seen == [
        f"https://sessionserver.mojang.com/session/minecraft/profile/{PROFILE_ID}",
        SKIN_URL,
    ]


@pytest.mark.asyncio
async def test_fetch_skin_by_name_is_not_found_without_network():
    handler = _session_handler()
    with pytest.raises(SkinNotFound):
        await _client(handler).fetch_skin_bytes("Notch")
    assert handler.seen == []


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs,error", [
    ({"profile_status": 204}, SkinNotFound),
    ({"profile_status": 404}, SkinNotFound),
    ({"profile_status": 503}, RemoteUnavailable),
    ({"skin_url": None}, SkinNotFound),
    ({"skin_status": 404}, SkinNotFound),
    ({"skin_status": 502}, RemoteUnavailable),
    ({"profile_body": {"id": PROFILE_ID, "properties": None}}, RemoteUnavailable),
    ({"profile_body": {"id": PROFILE_ID, "properties": [{"name": "textures", "value": 5}]}}, RemoteUnavailable),
    ({"profile_body": {"id": PROFILE_ID, "properties": ["textures"]}}, RemoteUnavailable),
    ({"skin_url": 42}, RemoteUnavailable),
    ({"skin_url": "not a url"}, RemoteUnavailable),
])
async def test_fetch_skin_failures(kwargs, error):
    with pytest.raises(error):
        await _client(_session_handler(**kwargs)).fetch_skin_bytes(PROFILE_ID)


@pytest.mark.asyncio
async def test_transport_errors_become_remote_unavailable():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(RemoteUnavailable):
        await _client(handler).fetch_skin_bytes(PROFILE_ID)
    with pytest.raises(RemoteUnavailable):
        await _client(handler).resolve_canonical_user("Notch")


@pytest.mark.asyncio
async def test_resolve_canonical_user():
    def handler(request):
        assert request.url.path == "/users/profiles/minecraft/notch"
        return httpx.Response(200, json={"id": PROFILE_ID, "name": "Notch"})

    user = await _client(handler).resolve_canonical_user("notch")

    assert user == CanonicalUser(name="Notch", canonical_id=PROFILE_ID)


@pytest.mark.asyncio
@pytest.mark.parametrize("status,body,error", [
    (204, None, UserNotFound),
    (404, {"error": "NOT_FOUND"}, UserNotFound),
    (429, None, RemoteUnavailable),
    (200, {"unexpected": True}, RemoteUnavailable),
])
async def test_resolve_canonical_user_failures(status, body, error):
    def handler(request):
        return httpx.Response(status, json=body) if body is not None else httpx.Response(status)

    with pytest.raises(error):
        await _client(handler).resolve_canonical_user("Notch")
