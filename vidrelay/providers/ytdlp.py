import json
import time
from typing import Any, Dict, List
from vidrelay.config import Settings
from vidrelay.core.command import metadata_argv, stream_argv
from vidrelay.core.errors import ExtractorFailure, OutputParseFailure
from vidrelay.core.process import ProcessStream, run_captured
from vidrelay.core.source import MediaSource, MediaStream
from vidrelay.utils.logger import logger

class YtDlpSource(MediaSource):
    """Runs the yt-dlp binary as a child process, one per call."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def fetch_info(self, url: str) -> Dict[str, Any]:
        argv = metadata_argv(self.settings, url)
        logger.debug(f"Spawning yt-dlp with args: {' '.join(argv[1:])}")
        start = time.monotonic()
        try:
            result = await run_captured(argv, timeout=self.settings.ANALYZE_TIMEOUT)
        except OSError as e:
            raise ExtractorFailure(f"Could not run yt-dlp at {argv[0]}: {e}") from e

        if result.returncode != 0:
            raise ExtractorFailure(result.stderr.strip() or None)
        try:
            info = json.loads(result.stdout)
        except ValueError as e:
            raise OutputParseFailure() from e
        if not isinstance(info, dict):
            raise OutputParseFailure()

        logger.info(f"[Analyze] Fetched info in {(time.monotonic() - start) * 1000:.0f}ms")
        return info

    async def open_stream(self, url: str, selector: List[str]) -> MediaStream:
        argv = stream_argv(self.settings, url, selector)
        logger.info(f"[Download] Spawning yt-dlp with args: {' '.join(argv[1:])}")
        stream = await ProcessStream.start(argv)
        logger.debug(f"[Download] yt-dlp running as pid {stream.pid}")
        return stream
