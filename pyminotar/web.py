# pyminotar/web.py

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates

from config import BASE_DIR, VERSION
from .exceptions import MinotarError
from .pipeline import DEFAULT_SIZE, MAX_SIZE, MIN_SIZE, RenderPipeline, RenderRequest
from .skins_render import ViewKind

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=BASE_DIR / "site")

# Player names are at most 16 characters; dashless profile ids are 32
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{1,32}$")


# --- Dependency for getting the render pipeline built at startup ---
def get_pipeline(request: Request) -> RenderPipeline:
    return request.app.state.pipeline


def _strip_extension(value: str) -> str:
    return value[:-len(".png")] if value.endswith(".png") else value


async def render_response(pipeline: RenderPipeline, username: str, view: ViewKind, size: Optional[str] = None) -> Response:
    if not USERNAME_PATTERN.match(username):
        raise HTTPException(status_code=404, detail="Not found")

    try:
        result = await pipeline.render(RenderRequest(username, view, size))
    except MinotarError as e:
        logger.error("Render failed for %s: %s", username, e.to_dict())
        return PlainTextResponse("500 internal server error", status_code=500)

    return Response(content=result.image, media_type="image/png", headers=result.headers())


# --- Rendered heads ---

@router.get("/avatar/{username}")
async def avatar(username: str, pipeline: RenderPipeline = Depends(get_pipeline)):
    return await render_response(pipeline, _strip_extension(username), ViewKind.AVATAR)

@router.get("/avatar/{username}/{size}")
async def avatar_sized(username: str, size: str, pipeline: RenderPipeline = Depends(get_pipeline)):
    return await render_response(pipeline, username, ViewKind.AVATAR, _strip_extension(size))

@router.get("/helm/{username}")
async def helm(username: str, pipeline: RenderPipeline = Depends(get_pipeline)):
    return await render_response(pipeline, _strip_extension(username), ViewKind.HELM)

@router.get("/helm/{username}/{size}")
async def helm_sized(username: str, size: str, pipeline: RenderPipeline = Depends(get_pipeline)):
    return await render_response(pipeline, username, ViewKind.HELM, _strip_extension(size))


# --- Raw skins ---

@router.get("/skin/{username}")
async def skin(username: str, pipeline: RenderPipeline = Depends(get_pipeline)):
    return await render_response(pipeline, _strip_extension(username), ViewKind.RAW)

@router.get("/download/{username}")
async def download(username: str, pipeline: RenderPipeline = Depends(get_pipeline)):
    response = await render_response(pipeline, _strip_extension(username), ViewKind.RAW)
    if response.status_code == 200:
        response.headers["Content-Disposition"] = 'attachment; filename="skin.png"'
    return response


# --- Metadata ---

@router.get("/version")
async def version():
    return PlainTextResponse(VERSION)

@router.get("/", response_class=HTMLResponse)
async def homepage(request: Request):
    return templates.TemplateResponse(request, "index.html", {
        "version": VERSION,
        "default_size": DEFAULT_SIZE,
        "min_size": MIN_SIZE,
        "max_size": MAX_SIZE,
    })
