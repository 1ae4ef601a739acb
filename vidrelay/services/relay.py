import asyncio
from typing import AsyncIterator, Awaitable, Callable, Optional
from vidrelay.config import Settings
from vidrelay.core.command import build_selector
from vidrelay.core.errors import ClientDisconnected, DownloadFailure, MissingParameter
from vidrelay.core.source import MediaSource, MediaStream
from vidrelay.models.download import DownloadRequest, PreparedDownload
from vidrelay.utils.filenames import build_filename
from vidrelay.utils.logger import logger

class StreamRelay:
    """Pipes the extractor's stdout to the caller.

    ``open`` waits for the first chunk of output so a failing process can
    still be reported as an error; after that, failures can only truncate the
    transfer.
    """

    def __init__(self, source: MediaSource, settings: Settings):
        self.source = source
        self.settings = settings

    async def open(
        self,
        request: DownloadRequest,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> PreparedDownload:
        """Start the child and wait for its first bytes.

        ``is_disconnected`` is polled every ``DISCONNECT_POLL`` seconds while
        waiting; once it reports true the child is killed and
        ``ClientDisconnected`` is raised.
        """
        if not request.url:
            raise MissingParameter()

        selector = build_selector(request.itag, request.is_audio)
        filename = build_filename(request.title, request.is_audio)
        try:
            stream = await self.source.open_stream(request.url, selector)
        except OSError as e:
            raise DownloadFailure("Failed to start download") from e

        try:
            first = await self._first_chunk(stream, is_disconnected)
            if not first:
                code = await stream.wait()
                if code != 0:
                    logger.error(f"[Download] yt-dlp exited with code {code} before sending data")
                    raise DownloadFailure()
        except BaseException:
            await stream.close()
            raise

        return PreparedDownload(
            filename=filename,
            media_type="audio/mpeg" if request.is_audio else "video/mp4",
            body=self._pipe(stream, first),
            close=stream.close,
        )

    async def _first_chunk(self, stream: MediaStream, is_disconnected) -> bytes:
        if is_disconnected is None:
            return await stream.read(self.settings.CHUNK_SIZE)

        read = asyncio.ensure_future(stream.read(self.settings.CHUNK_SIZE))
        try:
            while True:
                done, _ = await asyncio.wait({read}, timeout=self.settings.DISCONNECT_POLL)
                if done:
                    return read.result()
                if await is_disconnected():
                    logger.info("[Download] Client went away before the first byte")
                    raise ClientDisconnected()
        finally:
            if not read.done():
                read.cancel()

    async def _pipe(self, stream: MediaStream, first: bytes) -> AsyncIterator[bytes]:
        try:
            if first:
                yield first
            while True:
                chunk = await stream.read(self.settings.CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
            code = await stream.wait()
            if code != 0:
                logger.error(f"[Download] yt-dlp exited with code {code} mid-transfer; response truncated")
            else:
                logger.info("[Download] Process finished with code 0")
        finally:
            await stream.close()
