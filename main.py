import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from config import CONFIG_FILE, HOST, LOG_LEVEL, PORT, REQUEST_TIMEOUT, VERSION
from pyminotar.mojang import MojangClient
from pyminotar.pipeline import RenderPipeline
from pyminotar.settings import load_configuration
from pyminotar.web import router as web_router

logging.basicConfig(level=LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("pyminotar")

CONFIG = load_configuration(CONFIG_FILE)


# --- Lifespan manager for startup events ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting PyMinotar %s (disk cache %s)", VERSION, "on" if CONFIG.disk_cache else "off")

    client = httpx.AsyncClient(
        timeout=REQUEST_TIMEOUT,
        headers={"User-Agent": f"PyMinotar/{VERSION}"},
    )
    app.state.config = CONFIG
    app.state.pipeline = RenderPipeline(MojangClient(client), CONFIG)
    yield
    await client.aclose()

app = FastAPI(lifespan=lifespan)

# --- Include the avatar router ---
app.include_router(web_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL,
        access_log=CONFIG.access_logging,
    )
