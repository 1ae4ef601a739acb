"""Child process plumbing for the extractor binary."""

import asyncio
from asyncio.subprocess import PIPE, Process
from dataclasses import dataclass
from typing import List, Optional
from vidrelay.core.errors import ExtractorTimeout
from vidrelay.core.source import MediaStream
from vidrelay.utils.logger import logger

@dataclass
class ProcessResult:
    returncode: int
    stdout: bytes
    stderr: str

async def _kill(proc: Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()

async def run_captured(argv: List[str], timeout: Optional[float] = None) -> ProcessResult:
    """Run ``argv`` to completion, capturing stdout and stderr separately.

    On timeout the child is killed and reaped before ``ExtractorTimeout`` is
    raised. Cancellation of the awaiting task kills the child as well.
    """
    proc = await asyncio.create_subprocess_exec(*argv, stdout=PIPE, stderr=PIPE)
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Killing pid {proc.pid} after {timeout:g}s")
        raise ExtractorTimeout(f"Analysis timed out after {timeout:g} seconds")
    finally:
        await _kill(proc)
    return ProcessResult(
        returncode=proc.returncode,
        stdout=stdout,
        stderr=stderr.decode("utf-8", errors="replace"),
    )

class ProcessStream(MediaStream):
    """Stdout of a running child exposed as a pull-based byte stream.

    Stderr is drained in the background into the log so the child never
    blocks on a full stderr pipe.
    """

    def __init__(self, proc: Process):
        self._proc = proc
        self._stderr_task = asyncio.ensure_future(self._drain_stderr())

    @classmethod
    async def start(cls, argv: List[str]) -> "ProcessStream":
        proc = await asyncio.create_subprocess_exec(*argv, stdout=PIPE, stderr=PIPE)
        return cls(proc)

    @property
    def pid(self) -> int:
        return self._proc.pid

    async def _drain_stderr(self):
        async for line in self._proc.stderr:
            text = line.decode("utf-8", errors="replace").rstrip()
            if text:
                logger.warning(f"[yt-dlp stderr]: {text}")

    async def read(self, size: int) -> bytes:
        return await self._proc.stdout.read(size)

    async def wait(self) -> int:
        code = await self._proc.wait()
        await self._stderr_task
        return code

    async def close(self) -> None:
        if self._proc.returncode is None:
            logger.info(f"Terminating yt-dlp pid {self._proc.pid}")
        await _kill(self._proc)
        if not self._stderr_task.done():
            self._stderr_task.cancel()
