import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from vidrelay.config import Settings
from vidrelay.core.errors import VidRelayError
from vidrelay.models.download import DownloadRequest
from vidrelay.models.video import VideoMetadata
from vidrelay.providers.ytdlp import YtDlpSource
from vidrelay.services.relay import StreamRelay
from vidrelay.services.resolver import MetadataResolver
from vidrelay.utils.logger import setup_logger

console = Console()

def format_size(num_bytes: int) -> str:
    if not num_bytes:
        return "-"
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = num_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"

def render_metadata(metadata: VideoMetadata):
    console.print(Panel(
        f"[bold blue]{metadata.title}[/bold blue]\n[italic]{metadata.channel}[/italic]\n"
        f"{metadata.views} views · {metadata.duration}\n[dim]{metadata.url}[/dim]",
        title="Video Info"
    ))

    table = Table(title="Formats", show_header=True, header_style="bold magenta")
    table.add_column("itag", style="cyan")
    table.add_column("Quality")
    table.add_column("Container")
    table.add_column("Streams")
    table.add_column("Size", justify="right")

    for f in metadata.formats:
        streams = " + ".join(s for s, on in (("video", f.has_video), ("audio", f.has_audio)) if on)
        table.add_row(str(f.itag), f.quality, f.container or "", streams, format_size(f.content_length))

    console.print(table)

def serve(settings: Settings, args):
    import uvicorn
    from vidrelay.server import create_app

    host = args.host or settings.HOST
    port = args.port or settings.PORT
    console.print(f"[green]Server running at[/green] http://localhost:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.LOG_LEVEL.lower())

def analyze(settings: Settings, args) -> int:
    resolver = MetadataResolver(YtDlpSource(settings), settings)
    try:
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), transient=True) as progress:
            progress.add_task(description="Fetching video info...", total=None)
            metadata = asyncio.run(resolver.analyze(args.url.strip()))
    except VidRelayError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        return 1

    if args.json:
        console.print_json(metadata.model_dump_json(by_alias=True))
    else:
        render_metadata(metadata)
    return 0

async def save_download(relay: StreamRelay, request: DownloadRequest, output: Optional[Path] = None) -> Path:
    """Write the relayed stream to ``output`` (default: the attachment filename)."""
    prepared = await relay.open(request)
    path = output or Path(prepared.filename)
    total = 0
    try:
        with open(path, "wb") as f:
            async for chunk in prepared.body:
                f.write(chunk)
                total += len(chunk)
    finally:
        await prepared.close()
    console.print(f"[green]Saved[/green] {path} ({format_size(total)})")
    return path

def download(settings: Settings, args) -> int:
    relay = StreamRelay(YtDlpSource(settings), settings)
    request = DownloadRequest(url=args.url.strip(), itag=args.itag, type=args.type, title=args.title)
    try:
        asyncio.run(save_download(relay, request, args.output))
    except VidRelayError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        return 1
    return 0

def main(argv=None):
    parser = argparse.ArgumentParser(description="Web front end and streaming backend for yt-dlp")
    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve", help="Run the HTTP server")
    p_serve.add_argument("--host", help="Bind address (default: HOST setting)")
    p_serve.add_argument("--port", type=int, help="Listening port (default: PORT setting)")

    p_analyze = sub.add_parser("analyze", help="Print the downloadable formats of a video")
    p_analyze.add_argument("url", help="Video URL")
    p_analyze.add_argument("--json", action="store_true", help="Print the raw API payload")

    p_download = sub.add_parser("download", help="Save a rendition to a file")
    p_download.add_argument("url", help="Video URL")
    p_download.add_argument("--itag", help="Format identifier from `analyze`")
    p_download.add_argument("--type", choices=["video", "audio"], default="video")
    p_download.add_argument("--title", help="Title used for the output filename")
    p_download.add_argument("-o", "--output", type=Path, help="Output path")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(2)

    settings = Settings()
    setup_logger(settings.LOG_LEVEL)

    if args.command == "serve":
        serve(settings, args)
    elif args.command == "download":
        sys.exit(download(settings, args))
    else:
        sys.exit(analyze(settings, args))

if __name__ == "__main__":
    main()
