"""Process-level tests against shell scripts standing in for the yt-dlp binary."""

import asyncio
import json
import os
import sys
import time
import pytest
from vidrelay.config import Settings
from vidrelay.core.errors import ClientDisconnected, DownloadFailure, ExtractorFailure, ExtractorTimeout, OutputParseFailure
from vidrelay.models.download import DownloadRequest
from vidrelay.providers.ytdlp import YtDlpSource
from vidrelay.services.relay import StreamRelay
from vidrelay.services.resolver import MetadataResolver

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

def make_source(tmp_path, script, **settings):
    binary = tmp_path / "yt-dlp"
    binary.write_text("#!/bin/sh\n" + script)
    binary.chmod(0o755)
    return YtDlpSource(Settings(PROJECT_ROOT=tmp_path, YTDLP_PATH=str(binary), **settings))

def assert_process_gone(pid):
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)

def test_fetch_info_parses_json(tmp_path):
    info = {"id": "abc", "title": "T", "formats": []}
    source = make_source(tmp_path, f"cat <<'EOF'\n{json.dumps(info)}\nEOF\n")
    assert asyncio.run(source.fetch_info(URL)) == info

def test_fetch_info_passes_flags(tmp_path):
    (tmp_path / "cookies.txt").write_text("# Netscape HTTP Cookie File\n")
    source = make_source(tmp_path, 'printf "%s\\n" "$@" > "$(dirname "$0")/args.txt"\necho "{}"\n', USER_AGENT="UA/1.0")
    asyncio.run(source.fetch_info(URL))
    args = (tmp_path / "args.txt").read_text().splitlines()
    assert args == [
        "--dump-single-json", "--no-warnings", "--no-playlist", "--force-ipv4",
        "--user-agent", "UA/1.0", "--cookies", str(tmp_path / "cookies.txt"), URL,
    ]

def test_fetch_info_nonzero_exit_reports_stderr(tmp_path):
    source = make_source(tmp_path, 'echo "ERROR: Unsupported URL" >&2\nexit 1\n')
    with pytest.raises(ExtractorFailure) as exc:
        asyncio.run(source.fetch_info(URL))
    assert exc.value.message == "ERROR: Unsupported URL"

def test_fetch_info_nonzero_exit_without_stderr(tmp_path):
    source = make_source(tmp_path, "exit 2\n")
    with pytest.raises(ExtractorFailure) as exc:
        asyncio.run(source.fetch_info(URL))
    assert exc.value.message == "yt-dlp process failed or timed out"

def test_fetch_info_bad_json(tmp_path):
    source = make_source(tmp_path, "echo 'not json'\n")
    with pytest.raises(OutputParseFailure):
        asyncio.run(source.fetch_info(URL))

def test_fetch_info_missing_binary(tmp_path):
    source = YtDlpSource(Settings(PROJECT_ROOT=tmp_path, YTDLP_PATH=str(tmp_path / "nope")))
    with pytest.raises(ExtractorFailure):
        asyncio.run(source.fetch_info(URL))

def test_fetch_info_timeout_kills_process(tmp_path):
    source = make_source(tmp_path, 'echo $$ > "$(dirname "$0")/pid"\nexec sleep 30\n', ANALYZE_TIMEOUT=1.0)
    start = time.monotonic()
    with pytest.raises(ExtractorTimeout) as exc:
        asyncio.run(source.fetch_info(URL))
    assert time.monotonic() - start < 10
    assert exc.value.message == "Analysis timed out after 1 seconds"
    assert_process_gone(int((tmp_path / "pid").read_text()))

def test_resolver_end_to_end(tmp_path):
    info = {
        "id": "abc",
        "view_count": 950,
        "duration": 3725,
        "formats": [{"format_id": "18", "ext": "mp4", "height": 360, "vcodec": "avc1", "acodec": "mp4a"}],
    }
    source = make_source(tmp_path, f"cat <<'EOF'\n{json.dumps(info)}\nEOF\n")
    metadata = asyncio.run(MetadataResolver(source, source.settings).analyze(URL))
    assert metadata.views == "950"
    assert metadata.duration == "1:02:05"
    assert [f.itag for f in metadata.formats] == [18]

async def _collect(prepared):
    return b"".join([chunk async for chunk in prepared.body])

def test_relay_streams_stdout(tmp_path):
    source = make_source(tmp_path, 'echo "[download] 10%" >&2\nprintf "media-bytes"\n', CHUNK_SIZE=4)
    relay = StreamRelay(source, source.settings)

    async def run():
        prepared = await relay.open(DownloadRequest(url=URL, title="My Clip"))
        return prepared, await _collect(prepared)

    prepared, body = asyncio.run(run())
    assert body == b"media-bytes"
    assert prepared.filename == "My_Clip.mp4"

def test_relay_failure_before_output(tmp_path):
    source = make_source(tmp_path, 'echo "ERROR: Requested format is not available" >&2\nexit 1\n')
    relay = StreamRelay(source, source.settings)
    with pytest.raises(DownloadFailure):
        asyncio.run(relay.open(DownloadRequest(url=URL, itag="999")))

def test_relay_close_kills_process(tmp_path):
    source = make_source(tmp_path, 'echo $$ > "$(dirname "$0")/pid"\nprintf "start"\nexec sleep 30\n')
    relay = StreamRelay(source, source.settings)

    async def run():
        prepared = await relay.open(DownloadRequest(url=URL))
        await prepared.close()

    asyncio.run(run())
    assert_process_gone(int((tmp_path / "pid").read_text()))

def test_relay_kills_silent_process_when_client_leaves(tmp_path):
    source = make_source(tmp_path, 'echo $$ > "$(dirname "$0")/pid"\nexec sleep 30\n', DISCONNECT_POLL=0.1)
    relay = StreamRelay(source, source.settings)
    polls = []

    async def is_disconnected():
        polls.append(1)
        return len(polls) >= 3

    start = time.monotonic()
    with pytest.raises(ClientDisconnected):
        asyncio.run(relay.open(DownloadRequest(url=URL), is_disconnected=is_disconnected))
    assert time.monotonic() - start < 10
    assert_process_gone(int((tmp_path / "pid").read_text()))
