from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Optional
from pydantic import BaseModel

class DownloadRequest(BaseModel):
    url: Optional[str] = None
    itag: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None

    @property
    def is_audio(self) -> bool:
        return self.type == "audio"

@dataclass
class PreparedDownload:
    """A relay whose child process has already produced its first bytes."""
    filename: str
    media_type: str
    body: AsyncIterator[bytes]
    close: Callable[[], Awaitable[None]]
