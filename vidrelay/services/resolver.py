from typing import Optional
from vidrelay.config import Settings
from vidrelay.core.errors import MissingParameter
from vidrelay.core.source import MediaSource
from vidrelay.models.video import VideoMetadata
from vidrelay.utils.formats import reduce_formats
from vidrelay.utils.humanize import format_duration, format_views, truncate_description
from vidrelay.utils.logger import logger

class MetadataResolver:
    def __init__(self, source: MediaSource, settings: Settings):
        self.source = source
        self.settings = settings

    async def analyze(self, url: Optional[str]) -> VideoMetadata:
        if not url:
            raise MissingParameter()

        info = await self.source.fetch_info(url)
        formats = reduce_formats(info.get("formats") or [])
        logger.info(f"[Analyze] {len(formats)} formats offered for {info.get('id')}")

        return VideoMetadata(
            id=info.get("id"),
            url=info.get("webpage_url"),
            title=info.get("title"),
            channel=info.get("uploader"),
            views=format_views(info.get("view_count")),
            description=truncate_description(info.get("description"), self.settings.DESCRIPTION_LIMIT),
            thumbnail_url=info.get("thumbnail"),
            duration=format_duration(info.get("duration")),
            formats=formats,
        )
