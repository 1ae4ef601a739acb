from abc import ABC, abstractmethod
from typing import Any, Dict, List

class MediaStream(ABC):
    """Raw media bytes coming out of a running extractor process."""

    @abstractmethod
    async def read(self, size: int) -> bytes:
        """Next chunk of at most ``size`` bytes; ``b""`` at end of stream."""
        pass

    @abstractmethod
    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Kill the process if it is still running. Safe to call twice."""
        pass

class MediaSource(ABC):
    @abstractmethod
    async def fetch_info(self, url: str) -> Dict[str, Any]:
        """Extract the raw info dict for a single video."""
        pass

    @abstractmethod
    async def open_stream(self, url: str, selector: List[str]) -> MediaStream:
        """Start streaming the rendition chosen by ``selector`` flags."""
        pass
