"""yt-dlp command lines."""

from typing import List, Optional
from vidrelay.config import Settings

def base_flags(settings: Settings) -> List[str]:
    flags = [
        "--no-warnings",
        "--no-playlist",
        "--force-ipv4",
        "--user-agent", settings.USER_AGENT,
    ]
    cookies = settings.cookies_file()
    if cookies:
        flags += ["--cookies", str(cookies)]
    return flags

def metadata_argv(settings: Settings, url: str) -> List[str]:
    return [settings.ytdlp_binary, "--dump-single-json", *base_flags(settings), url]

def stream_argv(settings: Settings, url: str, selector: List[str]) -> List[str]:
    return [settings.ytdlp_binary, url, "-o", "-", *base_flags(settings), *selector]

def build_selector(itag: Optional[str] = None, audio: bool = False) -> List[str]:
    if itag:
        # Merge best audio into the chosen rendition; fall back to it alone
        return ["-f", f"{itag}+bestaudio/{itag}"]
    if audio:
        return ["-f", "bestaudio", "-x", "--audio-format", "mp3"]
    return ["-f", "bestvideo+bestaudio/best", "--merge-output-format", "mp4"]
