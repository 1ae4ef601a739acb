from vidrelay.config import Settings
from vidrelay.core.source import MediaSource
from vidrelay.providers.ytdlp import YtDlpSource
from vidrelay.server import create_app

def test_imports():
    assert issubclass(YtDlpSource, MediaSource)

def test_settings_defaults(tmp_path):
    settings = Settings(PROJECT_ROOT=tmp_path)
    assert settings.PORT == 3001
    assert settings.ANALYZE_TIMEOUT == 20.0
    assert settings.static_dir == tmp_path / "dist"
    assert settings.cookies_file() is None

def test_cookies_detected_when_present(tmp_path):
    (tmp_path / "cookies.txt").write_text("# Netscape HTTP Cookie File\n")
    settings = Settings(PROJECT_ROOT=tmp_path)
    assert settings.cookies_file() == tmp_path / "cookies.txt"

def test_bundled_binary_preferred(tmp_path):
    (tmp_path / "yt-dlp").write_text("")
    assert Settings(PROJECT_ROOT=tmp_path).ytdlp_binary == str(tmp_path / "yt-dlp")
    assert Settings(PROJECT_ROOT=tmp_path, YTDLP_PATH="/opt/yt-dlp").ytdlp_binary == "/opt/yt-dlp"

def test_app_factory():
    app = create_app(Settings())
    paths = {route.path for route in app.routes}
    assert {"/api/analyze", "/api/download", "/api/health"} <= paths

def test_project_root_is_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cookies.txt").write_text("# Netscape HTTP Cookie File\n")
    settings = Settings()
    assert settings.PROJECT_ROOT.resolve() == tmp_path.resolve()
    assert settings.cookies_file() is not None
