from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

class RawFormat(BaseModel):
    """One rendition as reported by yt-dlp. Unknown keys are ignored."""
    model_config = ConfigDict(extra="ignore")

    format_id: Optional[Union[int, str]] = None
    format_note: Optional[str] = None
    height: Optional[float] = None
    abr: Optional[float] = None
    ext: Optional[str] = None
    vcodec: Optional[str] = None
    acodec: Optional[str] = None
    filesize: Optional[float] = None
    filesize_approx: Optional[float] = None

class NormalizedFormat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    itag: Union[int, float, str, None] = None
    quality: str
    container: Optional[str] = None
    has_video: bool = Field(False, alias="hasVideo")
    has_audio: bool = Field(False, alias="hasAudio")
    content_length: int = Field(0, alias="contentLength")

class VideoMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    channel: Optional[str] = None
    views: str = "0"
    description: str = ""
    summary: str = "Ready to download"
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    duration: str = "0:00"
    formats: List[NormalizedFormat] = []
