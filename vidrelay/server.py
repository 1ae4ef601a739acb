"""FastAPI application exposing the metadata resolver and the stream relay.

Routes:
- GET /api/analyze  : reduced metadata for a URL
- GET /api/download : the chosen rendition streamed as an attachment
- GET /api/health   : extractor version and binary path
- GET /*            : the built front end
"""

from typing import Optional
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from yt_dlp.version import __version__ as yt_dlp_version
from vidrelay.config import Settings
from vidrelay.core.errors import VidRelayError
from vidrelay.core.source import MediaSource
from vidrelay.models.download import DownloadRequest
from vidrelay.models.video import VideoMetadata
from vidrelay.providers.ytdlp import YtDlpSource
from vidrelay.services.relay import StreamRelay
from vidrelay.services.resolver import MetadataResolver
from vidrelay.utils.logger import logger

def create_app(settings: Optional[Settings] = None, source: Optional[MediaSource] = None) -> FastAPI:
    settings = settings or Settings()
    source = source or YtDlpSource(settings)
    resolver = MetadataResolver(source, settings)
    relay = StreamRelay(source, settings)

    app = FastAPI(title="vidrelay")
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    @app.exception_handler(VidRelayError)
    async def handle_error(request: Request, exc: VidRelayError):
        query = f"?{request.url.query}" if request.url.query else ""
        logger.error(f"{request.method} {request.url.path}{query} -> {exc.status_code}: {exc.message}")
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.get("/api/analyze", response_model=VideoMetadata)
    async def analyze(url: Optional[str] = None):
        logger.info(f"[Analyze] Request received for URL: {url}")
        try:
            return await resolver.analyze(url)
        except VidRelayError:
            raise
        except Exception as e:
            logger.exception("[Analyze] Unexpected error")
            raise VidRelayError("Failed to analyze video") from e

    @app.get("/api/download")
    async def download(
        http_request: Request,
        url: Optional[str] = None,
        itag: Optional[str] = None,
        media_type: Optional[str] = Query(None, alias="type"),
        title: Optional[str] = None,
    ):
        logger.info(f"[Download] Request received: URL={url}, itag={itag}, type={media_type}")
        request = DownloadRequest(url=url, itag=itag, type=media_type, title=title)
        try:
            prepared = await relay.open(request, is_disconnected=http_request.is_disconnected)
        except VidRelayError:
            raise
        except Exception as e:
            logger.exception("[Download] Unexpected error")
            raise VidRelayError("Failed to start download") from e

        return StreamingResponse(
            prepared.body,
            media_type=prepared.media_type,
            headers={"Content-Disposition": f'attachment; filename="{prepared.filename}"'},
            background=BackgroundTask(prepared.close),
        )

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "yt_dlp": yt_dlp_version, "binary": settings.ytdlp_binary}

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str):
        static_dir = settings.static_dir.resolve()
        candidate = (static_dir / full_path).resolve()
        if full_path and candidate.is_file() and static_dir in candidate.parents:
            return FileResponse(candidate)
        index = static_dir / "index.html"
        if index.is_file():
            return FileResponse(index)
        return JSONResponse({"error": "Front end not built"}, status_code=404)

    return app
