"""Reduce yt-dlp's format list to the renditions worth offering for download."""

import math
import re
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Union
from pydantic import ValidationError
from vidrelay.models.video import RawFormat, NormalizedFormat
from vidrelay.utils.logger import logger

VIDEO_CONTAINER = "mp4"
AUDIO_CONTAINERS = ("m4a", "webm")

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

def _present(codec) -> bool:
    return bool(codec) and codec != "none"

def quality_label(raw: RawFormat) -> str:
    if raw.format_note:
        return raw.format_note
    if raw.height:
        return f"{int(raw.height)}p"
    if raw.abr:
        # Half-up, not banker's rounding
        return f"{math.floor(raw.abr + 0.5)}kbps"
    return "Unknown"

def normalize_itag(itag: Any) -> Union[int, float, str, None]:
    if isinstance(itag, (int, float)) or itag is None:
        return itag
    text = str(itag).strip()
    if _NUMBER_RE.match(text):
        return float(text) if "." in text else int(text)
    return itag

def quality_rank(quality: str) -> int:
    m = _LEADING_INT_RE.match(quality or "")
    return int(m.group(1)) if m else 0

def normalize(raw: RawFormat) -> NormalizedFormat:
    return NormalizedFormat(
        itag=raw.format_id,
        quality=quality_label(raw),
        container=raw.ext,
        has_video=_present(raw.vcodec),
        has_audio=_present(raw.acodec),
        content_length=int(raw.filesize or raw.filesize_approx or 0),
    )

def _parse(formats: Iterable[Dict[str, Any]]) -> List[RawFormat]:
    parsed = []
    for f in formats or []:
        try:
            parsed.append(RawFormat.model_validate(f))
        except ValidationError as e:
            logger.debug(f"Skipping malformed format {f.get('format_id') if isinstance(f, dict) else f!r}: {e}")
    return parsed

def reduce_formats(formats: Iterable[Dict[str, Any]]) -> List[NormalizedFormat]:
    """Deduplicate and order the raw ``formats`` array of a yt-dlp info dict.

    Video renditions are keyed by quality label and restricted to mp4; for a
    given label an entry carrying audio replaces one without. Audio-only
    renditions are restricted to m4a/webm and the first one per label wins.
    The result lists video before audio, each descending by the leading
    number of the label.
    """
    candidates = [normalize(raw) for raw in _parse(formats)]
    candidates = [f for f in candidates if f.content_length > 0 or f.has_video or f.has_audio]

    video: "OrderedDict[str, NormalizedFormat]" = OrderedDict()
    audio: "OrderedDict[Any, NormalizedFormat]" = OrderedDict()

    for f in candidates:
        if f.has_video and f.container == VIDEO_CONTAINER:
            if not f.quality:
                continue
            existing = video.get(f.quality)
            if existing is None or (not existing.has_audio and f.has_audio):
                video[f.quality] = f
        elif not f.has_video and f.has_audio and f.container in AUDIO_CONTAINERS:
            key = f.quality or f.itag or "audio"
            if key not in audio:
                audio[key] = f

    selected = [
        f.model_copy(update={"itag": normalize_itag(f.itag)})
        for f in list(video.values()) + list(audio.values())
    ]
    # sorted() is stable, so bucket order survives among equal ranks
    return sorted(selected, key=lambda f: (not f.has_video, -quality_rank(f.quality)))
