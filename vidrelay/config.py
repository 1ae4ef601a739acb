import shutil
from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    CORS_ORIGINS: List[str] = ["*"]

    # System Settings
    LOG_LEVEL: str = "INFO"

    # Extractor
    YTDLP_PATH: Optional[str] = None
    USER_AGENT: str = DEFAULT_USER_AGENT
    ANALYZE_TIMEOUT: float = 20.0
    CHUNK_SIZE: int = 64 * 1024
    DISCONNECT_POLL: float = 0.5
    DESCRIPTION_LIMIT: int = 200

    # Paths
    PROJECT_ROOT: Path = Field(default_factory=Path.cwd)
    COOKIES_PATH: Optional[str] = None
    STATIC_DIR: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ytdlp_binary(self) -> str:
        if self.YTDLP_PATH:
            return self.YTDLP_PATH
        bundled = self.PROJECT_ROOT / "yt-dlp"
        if bundled.is_file():
            return str(bundled)
        return shutil.which("yt-dlp") or "yt-dlp"

    @property
    def static_dir(self) -> Path:
        return Path(self.STATIC_DIR) if self.STATIC_DIR else self.PROJECT_ROOT / "dist"

    def cookies_file(self) -> Optional[Path]:
        """Cookie jar to hand to the extractor, only when it exists on disk."""
        path = Path(self.COOKIES_PATH) if self.COOKIES_PATH else self.PROJECT_ROOT / "cookies.txt"
        return path if path.is_file() else None
