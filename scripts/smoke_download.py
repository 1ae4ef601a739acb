import asyncio
import sys
from vidrelay.cli import save_download
from vidrelay.config import Settings
from vidrelay.models.download import DownloadRequest
from vidrelay.providers.ytdlp import YtDlpSource
from vidrelay.services.relay import StreamRelay
from vidrelay.utils.logger import setup_logger

if __name__ == "__main__":
    logger = setup_logger("DEBUG")
    url = sys.argv[1] if len(sys.argv) > 1 else "https://www.youtube.com/watch?v=jNQXAC9IVRw"
    itag = sys.argv[2] if len(sys.argv) > 2 else None
    settings = Settings()
    relay = StreamRelay(YtDlpSource(settings), settings)
    try:
        asyncio.run(save_download(relay, DownloadRequest(url=url, itag=itag)))
    except Exception as e:
        logger.error(f"Smoke download failed: {e}")
        raise
