"""
Pulse Intercept Engine - FastAPI Service
Main entry point exposing the session to a presentation layer
"""

import base64
import binascii
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, BackgroundTasks
from fastapi.responses import FileResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from config.settings import get_settings
from pulse.errors import ConfigurationError, EngineBusyError
from pulse.generation.key_gate import RequestKeySelector
from pulse.models.content import AssetType
from pulse.models.session import SessionSnapshot, ViewMode
from pulse.orchestrator import ActionDispatcher
from pulse.utils.logger import configure_logging

# Load environment variables
load_dotenv()

logger = logging.getLogger("pulse.api")

# Global dispatcher instance
dispatcher: Optional[ActionDispatcher] = None

# Completed by POST /key while a video job waits for a paid key
key_selector: Optional[RequestKeySelector] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the session on startup and stop streaming on shutdown"""
    global dispatcher, key_selector

    settings = get_settings()
    configure_logging(settings.log_level)

    if dispatcher is None:
        key_selector = RequestKeySelector(timeout=settings.key_selection_timeout_seconds)
        dispatcher = ActionDispatcher.from_settings(settings, key_selector=key_selector)
    await dispatcher.start()
    logger.info("Intercept engine ready")

    yield

    await dispatcher.shutdown()
    logger.info("Intercept engine shut down")


# Create FastAPI app
app = FastAPI(
    title="Pulse Intercept Engine",
    description="One command line for live news, identity intel, image and video synthesis",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class CommandRequest(BaseModel):
    text: str = Field(..., description="Free-text command")


class CommandAccepted(BaseModel):
    status: str
    text: str
    message: str


class ModeRequest(BaseModel):
    mode: ViewMode


class LiveRequest(BaseModel):
    live: bool


class TrackRequest(BaseModel):
    account_handle: str


class KeyRequest(BaseModel):
    api_key: str = Field(..., description="Paid Gemini API key for video generation")


class ScrollRequest(BaseModel):
    offset: float = Field(..., ge=0, allow_inf_nan=False)
    viewport_height: float = Field(..., gt=0, allow_inf_nan=False)


def get_dispatcher() -> ActionDispatcher:
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return dispatcher


# Routes
@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "engine_initialized": dispatcher is not None,
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/state", response_model=SessionSnapshot)
async def get_state():
    """Current collections and view state"""
    return get_dispatcher().snapshot()


@app.post("/command", response_model=CommandAccepted, status_code=202)
async def submit_command(request: CommandRequest, background_tasks: BackgroundTasks):
    """
    Submit a free-text command.

    Classification and the matching workflow run in the background.
    Poll /state for progress, results and errors.
    """
    engine = get_dispatcher()

    if not request.text.strip():
        raise HTTPException(status_code=422, detail="Command text is empty")
    if engine.session.is_busy:
        raise HTTPException(status_code=409, detail="Another action is already running")

    async def run_in_background():
        try:
            await engine.handle_request(request.text)
        except EngineBusyError:
            logger.warning(f"Dropped command '{request.text[:60]}': engine busy")

    background_tasks.add_task(run_in_background)

    return CommandAccepted(
        status="accepted",
        text=request.text,
        message="Command dispatched",
    )


@app.post("/mode", response_model=SessionSnapshot)
async def select_mode(request: ModeRequest):
    engine = get_dispatcher()
    engine.select_mode(request.mode)
    return engine.snapshot()


@app.post("/live", response_model=SessionSnapshot)
async def set_live(request: LiveRequest):
    engine = get_dispatcher()
    engine.set_live(request.live)
    return engine.snapshot()


@app.post("/reel/scroll", response_model=SessionSnapshot)
async def scroll_reel(request: ScrollRequest):
    engine = get_dispatcher()
    engine.update_scroll(request.offset, request.viewport_height)
    return engine.snapshot()


@app.post("/reel/track", response_model=CommandAccepted, status_code=202)
async def track_identity(request: TrackRequest, background_tasks: BackgroundTasks):
    """Look up the author of a reel entry"""
    engine = get_dispatcher()

    if not request.account_handle.strip():
        raise HTTPException(status_code=422, detail="Account handle is empty")
    if engine.session.is_busy:
        raise HTTPException(status_code=409, detail="Another action is already running")

    async def run_in_background():
        try:
            await engine.track_identity(request.account_handle)
        except EngineBusyError:
            logger.warning(f"Dropped lookup for '{request.account_handle}': engine busy")

    background_tasks.add_task(run_in_background)

    return CommandAccepted(
        status="accepted",
        text=request.account_handle,
        message="Identity lookup dispatched",
    )


@app.post("/key")
async def submit_key(request: KeyRequest):
    """
    Provide the paid key for video generation.

    Completes a video job that is waiting for a key, or stores the key
    ahead of the first job.
    """
    engine = get_dispatcher()

    if not request.api_key.strip():
        raise HTTPException(status_code=422, detail="API key is empty")

    if key_selector is not None and key_selector.submit(request.api_key):
        return {"status": "accepted", "completed_pending_selection": True}

    try:
        engine.key_gate.select_key(request.api_key)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"status": "accepted", "completed_pending_selection": False}


@app.get("/assets/{asset_id}")
async def download_asset(asset_id: str):
    """Download a generated image or video"""
    engine = get_dispatcher()

    asset = next((a for a in engine.session.assets if a.id == asset_id), None)
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")

    if asset.type == AssetType.VIDEO:
        if not Path(asset.url).exists():
            raise HTTPException(status_code=404, detail="Video file not found")
        return FileResponse(
            asset.url,
            media_type="video/mp4",
            filename=f"pulse-{asset_id}.mp4",
        )

    header, _, payload = asset.url.partition(",")
    if not header.startswith("data:") or not header.endswith(";base64"):
        raise HTTPException(status_code=404, detail="Image data not found")
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error:
        raise HTTPException(status_code=404, detail="Image data not found")

    media_type = header[len("data:"):-len(";base64")] or "image/png"
    extension = media_type.split("/")[-1]
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="pulse-{asset_id}.{extension}"'},
    )


# CLI entry point
def main():
    """Run the server"""
    import uvicorn

    settings = get_settings()
    host = os.getenv("HOST", settings.host)
    port = int(os.getenv("PORT", str(settings.port)))

    print(f"""
    ╔═══════════════════════════════════════════════════════╗
    ║             PULSE INTERCEPT ENGINE                    ║
    ╠═══════════════════════════════════════════════════════╣
    ║  Server: http://{host}:{port}                         ║
    ║  Docs:   http://{host}:{port}/docs                    ║
    ║  State:  http://{host}:{port}/state                   ║
    ╚═══════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
